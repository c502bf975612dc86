"""End-to-end checks of the markdown context server against the bundled guides."""

import sys
import shutil
import tempfile
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from mdcontext.catalog import CONTEXT_ORDER, CONTEXT_PREAMBLE, DOCUMENTS
from mdcontext.config import DEFAULT_DOCS_DIR, ServerConfig
from mdcontext.dispatcher import build_dispatcher
from mdcontext.mcp.client import MCPClient, MCPServerError
from mdcontext.mcp.schema import JSONRPCRequest


def test_payment_context_tool():
    """get_payment_context returns every guide in the documented order."""
    print("\n🧪 Testing get_payment_context...")

    dispatcher = build_dispatcher(ServerConfig())
    result = dispatcher.call_tool("get_payment_context", {})

    assert len(result["content"]) == 1, "Expected exactly one content block"
    text = result["content"][0]["text"]
    assert text.startswith(CONTEXT_PREAMBLE), "Missing preamble"

    positions = []
    for key in CONTEXT_ORDER:
        body = (DEFAULT_DOCS_DIR / DOCUMENTS[key]).read_text(encoding="utf-8")
        assert body in text, f"Section body for {key} missing"
        positions.append(text.index(body))
    assert positions == sorted(positions), "Sections out of order"

    print("✅ get_payment_context: PASSED")
    return True


def test_flow_resource():
    """payment://docs/flow returns the exact file content."""
    print("\n🧪 Testing resources/read payment://docs/flow...")

    dispatcher = build_dispatcher(ServerConfig())
    result = dispatcher.read_resource("payment://docs/flow")

    expected = (DEFAULT_DOCS_DIR / "get_payment_flow.md").read_text(encoding="utf-8")
    assert result == {
        "contents": [{
            "uri": "payment://docs/flow",
            "mimeType": "text/markdown",
            "text": expected,
        }]
    }, "Resource contents mismatch"

    print("✅ payment://docs/flow: PASSED")
    return True


def test_missing_encryption_spec():
    """A missing guide fails the whole tool call with an error naming the file."""
    print("\n🧪 Testing missing encryption specification...")

    with tempfile.TemporaryDirectory() as tmp:
        docs_dir = Path(tmp) / "guides"
        shutil.copytree(DEFAULT_DOCS_DIR, docs_dir)
        dispatcher = build_dispatcher(ServerConfig(docs_dir=docs_dir))
        (docs_dir / "get_encryption_specification.md").unlink()

        response = dispatcher.handle_jsonrpc(JSONRPCRequest(
            method="tools/call",
            params={"name": "get_payment_context", "arguments": {}},
            id=1,
        )).to_dict()

    assert "result" not in response, "No content may be returned"
    assert "get_encryption_specification.md" in response["error"]["message"]
    assert response["error"]["data"]["key"] == "encryption_spec"

    print("✅ Missing guide: PASSED")
    return True


def test_stdio_session():
    """A full stdio session against a server subprocess."""
    print("\n🧪 Testing stdio session...")

    command = [sys.executable, "-m", "mdcontext", "serve", "--log-level", "WARNING"]
    with MCPClient(command=command) as client:
        assert [t.name for t in client.list_tools()] == ["get_payment_context", "read_markdown_file"]
        assert len(client.list_prompts()) == 6
        assert len(client.list_resources()) == 6
        assert client.ping()

        prompt = client.get_prompt("payment-api-context")
        assert prompt["messages"][0]["role"] == "user"

        try:
            client.call_tool("no_such_tool")
        except MCPServerError as e:
            assert e.data["kind"] == "tool"
        else:
            raise AssertionError("Unknown tool should fail")

        # The server keeps serving after an error
        assert client.ping()

    print("✅ stdio session: PASSED")
    return True


def main():
    """Run all tests."""
    print("=" * 60)
    print("Markdown Context Server Integration Tests")
    print("=" * 60)

    tests = [
        test_payment_context_tool,
        test_flow_resource,
        test_missing_encryption_spec,
        test_stdio_session,
    ]

    results = []
    for test in tests:
        try:
            result = test()
            results.append(result)
        except Exception as e:
            print(f"❌ {test.__name__}: FAILED - {e}")
            results.append(False)

    print("\n" + "=" * 60)
    passed = sum(results)
    total = len(results)
    print(f"Tests: {passed}/{total} passed")

    if passed == total:
        print("✅ All end-to-end scenarios verified!")
        return 0
    else:
        print("⚠️ Some tests failed - review implementation")
        return 1


if __name__ == "__main__":
    sys.exit(main())
