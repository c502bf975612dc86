def main():
    """Launch the markdown context server on stdio."""
    import sys
    from mdcontext.__main__ import main as mdcontext_main

    sys.exit(mdcontext_main(["serve"]))


if __name__ == "__main__":
    main()
