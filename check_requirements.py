"""Check that the bundled guides and the capability table are deployable."""

import sys


def check_requirements():
    """Check the installation before wiring the server into an agent."""
    checks = []

    # 1. Every guide bound in the catalog exists
    try:
        from mdcontext.config import ServerConfig
        from mdcontext.catalog import DOCUMENTS
        from mdcontext.store import DocumentStore
        config = ServerConfig.from_env()
        DocumentStore(config.docs_dir, DOCUMENTS).verify()
        checks.append(("All five guides present", True))
    except Exception as e:
        checks.append(("All five guides present", False, str(e)))

    # 2. Capability table registers without duplicates
    try:
        from mdcontext.catalog import build_registry
        registry = build_registry()
        checks.append(("Capability table registers cleanly", registry.sealed))
    except Exception as e:
        checks.append(("Capability table registers cleanly", False, str(e)))

    # 3. Every recipe key is bound to a guide
    try:
        from mdcontext.catalog import DOCUMENTS, build_registry
        unbound = [k for k in build_registry().document_keys() if k not in DOCUMENTS]
        checks.append(("Recipes only use bound guides", not unbound, f"unbound: {unbound}"))
    except Exception as e:
        checks.append(("Recipes only use bound guides", False, str(e)))

    # 4. The aggregate tool renders
    try:
        from mdcontext.config import ServerConfig
        from mdcontext.dispatcher import build_dispatcher
        dispatcher = build_dispatcher(ServerConfig.from_env())
        result = dispatcher.call_tool("get_payment_context", {})
        checks.append(("get_payment_context renders", len(result["content"]) == 1))
    except Exception as e:
        checks.append(("get_payment_context renders", False, str(e)))

    # Print results
    print("=" * 60)
    print("Markdown Context Server Installation Check")
    print("=" * 60)

    passed = 0
    failed = 0

    for check in checks:
        name = check[0]
        status = check[1]
        if status:
            print(f"✅ {name}")
            passed += 1
        else:
            error = check[2] if len(check) > 2 else "Not found"
            print(f"❌ {name}: {error}")
            failed += 1

    print("=" * 60)
    print(f"Results: {passed}/{len(checks)} passed")
    print("=" * 60)

    return failed == 0

if __name__ == "__main__":
    success = check_requirements()
    sys.exit(0 if success else 1)
