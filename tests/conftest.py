"""Shared fixtures: a throwaway guides directory and a dispatcher over it."""

import pytest

from mdcontext.catalog import DOCUMENTS
from mdcontext.config import ServerConfig
from mdcontext.dispatcher import build_dispatcher
from mdcontext.store import DocumentStore


@pytest.fixture
def docs_dir(tmp_path):
    """One small guide per document key; each body names its key."""
    root = tmp_path / "guides"
    root.mkdir()
    for key, filename in DOCUMENTS.items():
        (root / filename).write_text(f"## {key}\nbody of {key}\n", encoding="utf-8")
    return root


@pytest.fixture
def store(docs_dir):
    return DocumentStore(docs_dir, DOCUMENTS)


@pytest.fixture
def dispatcher(docs_dir):
    return build_dispatcher(ServerConfig(docs_dir=docs_dir))
