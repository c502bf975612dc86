import sys

import pytest

from mdcontext import __version__
from mdcontext.__main__ import main
from mdcontext.mcp.client import MCPClient, MCPServerError


def test_version(capsys):
    assert main(["version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_list_prints_catalog(capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "get_payment_context" in out
    assert "payment-api-context" in out
    assert "payment://docs/all" in out


def test_serve_exits_nonzero_when_guides_missing(tmp_path):
    assert main(["serve", "--docs-dir", str(tmp_path)]) == 1


def test_bad_setting_exits_nonzero(monkeypatch):
    monkeypatch.setenv("MDCONTEXT_MAX_WORKERS", "lots")
    assert main(["list"]) == 1


def test_stdio_round_trip(docs_dir):
    command = [sys.executable, "-m", "mdcontext", "serve",
               "--docs-dir", str(docs_dir), "--log-level", "WARNING"]
    with MCPClient(command=command, timeout=10) as client:
        assert "prompts" in client.server_capabilities
        result = client.call_tool("get_payment_context")
        assert "body of encryption_spec" in result.get_text()

        contents = client.read_resource("payment://docs/flow")
        assert contents[0]["text"] == (docs_dir / "get_payment_flow.md").read_text(encoding="utf-8")

        with pytest.raises(MCPServerError) as exc:
            client.read_resource("payment://docs/refunds")
        assert exc.value.data["kind"] == "resource"
        assert client.ping()
