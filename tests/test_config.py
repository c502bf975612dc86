from pathlib import Path

import pytest

from mdcontext.config import DEFAULT_DOCS_DIR, ServerConfig
from mdcontext.errors import ConfigurationError


def test_defaults():
    config = ServerConfig.from_env({})
    assert config.docs_dir == DEFAULT_DOCS_DIR
    assert config.read_root is None
    assert config.read_timeout is None
    assert config.max_workers == 4
    assert config.log_level == "INFO"


def test_default_docs_dir_ships_with_package():
    assert DEFAULT_DOCS_DIR.is_dir()
    assert DEFAULT_DOCS_DIR.parts[-2:] == ("docs", "payment-api-guides")


def test_from_env(tmp_path):
    config = ServerConfig.from_env({
        "MDCONTEXT_DOCS_DIR": str(tmp_path),
        "MDCONTEXT_READ_ROOT": str(tmp_path / "root"),
        "MDCONTEXT_READ_TIMEOUT": "2.5",
        "MDCONTEXT_MAX_WORKERS": "8",
        "MDCONTEXT_LOG_LEVEL": "debug",
    })
    assert config.docs_dir == tmp_path
    assert config.read_root == tmp_path / "root"
    assert config.read_timeout == 2.5
    assert config.max_workers == 8
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("env", [
    {"MDCONTEXT_MAX_WORKERS": "many"},
    {"MDCONTEXT_MAX_WORKERS": "0"},
    {"MDCONTEXT_READ_TIMEOUT": "-1"},
    {"MDCONTEXT_LOG_LEVEL": "chatty"},
])
def test_invalid_env(env):
    with pytest.raises(ConfigurationError):
        ServerConfig.from_env(env)


def test_overrides_skip_none():
    base = ServerConfig(max_workers=2)
    updated = base.with_overrides(max_workers=None, docs_dir=Path("/srv/guides"))
    assert updated.max_workers == 2
    assert updated.docs_dir == Path("/srv/guides")
    assert base.docs_dir == DEFAULT_DOCS_DIR
