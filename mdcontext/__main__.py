"""Command line entry point for the markdown context server."""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from mdcontext.config import ServerConfig
from mdcontext.errors import ConfigurationError


logger = logging.getLogger("mdcontext")


def configure_logging(level: str) -> None:
    """
    Send diagnostics to stderr.

    stdout carries the protocol, so no handler may ever write there.
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdown-context-server",
        description="Serve payment API guides to AI agents over MCP (stdio)",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "list", "probe", "version"],
        default="serve",
        help="Command to run (default: serve)"
    )

    parser.add_argument(
        "--docs-dir",
        type=Path,
        help="Directory holding the guides (env: MDCONTEXT_DOCS_DIR)"
    )

    parser.add_argument(
        "--read-root",
        type=Path,
        help="Confine read_markdown_file to this directory (env: MDCONTEXT_READ_ROOT)"
    )

    parser.add_argument(
        "--read-timeout",
        type=float,
        help="Seconds allowed per document read (env: MDCONTEXT_READ_TIMEOUT)"
    )

    parser.add_argument(
        "--max-workers",
        type=int,
        help="Concurrent document reads per request (env: MDCONTEXT_MAX_WORKERS)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level for stderr diagnostics (env: MDCONTEXT_LOG_LEVEL)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.  Returns the process exit status."""
    args = build_parser().parse_args(argv)

    if args.command == "version":
        from mdcontext import __version__
        print(f"markdown-context-server version {__version__}")
        return 0

    try:
        config = ServerConfig.from_env().with_overrides(
            docs_dir=args.docs_dir,
            read_root=args.read_root,
            read_timeout=args.read_timeout,
            max_workers=args.max_workers,
            log_level=args.log_level,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.log_level)

    if args.command == "list":
        return _print_catalog()

    if args.command == "probe":
        return _probe(config)

    from mdcontext.mcp.server import MCPServer
    from mdcontext.dispatcher import build_dispatcher

    try:
        dispatcher = build_dispatcher(config)
    except ConfigurationError as e:
        logger.error(f"Startup failed: {e}")
        return 1

    try:
        MCPServer(dispatcher).run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


def _print_catalog() -> int:
    from mdcontext.catalog import build_registry
    from mdcontext.registry import CapabilityKind

    registry = build_registry()
    for kind in CapabilityKind:
        print(f"{kind.value}s:")
        for entry in registry.entries(kind):
            print(f"  {entry.id:<34} {entry.descriptor.description}")
    return 0


def _probe(config: ServerConfig) -> int:
    """Launch a server subprocess and exercise every list operation."""
    from mdcontext.mcp.client import MCPClient, MCPServerError

    command = [sys.executable, "-m", "mdcontext", "serve",
               "--docs-dir", str(config.docs_dir),
               "--log-level", "WARNING"]
    try:
        with MCPClient(command=command) as client:
            tools = client.list_tools()
            prompts = client.list_prompts()
            resources = client.list_resources()
            print(f"tools: {len(tools)}, prompts: {len(prompts)}, resources: {len(resources)}")
            result = client.call_tool("get_payment_context")
            print(f"get_payment_context: {len(result.get_text())} chars")
    except (RuntimeError, MCPServerError) as e:
        print(f"Probe failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
