import os

import pytest

from mdcontext.catalog import DOCUMENTS
from mdcontext.errors import ConfigurationError, DocumentIOError, NotFound
from mdcontext.store import DocumentStore


def test_fetch_reads_bound_file(store, docs_dir):
    assert store.fetch("flow") == (docs_dir / "get_payment_flow.md").read_text(encoding="utf-8")


def test_fetch_is_never_cached(store, docs_dir):
    assert "body of flow" in store.fetch("flow")
    (docs_dir / "get_payment_flow.md").write_text("rewritten", encoding="utf-8")
    assert store.fetch("flow") == "rewritten"


def test_unknown_key_is_not_found(store):
    with pytest.raises(NotFound) as exc:
        store.fetch("refunds")
    assert exc.value.target == "refunds"


def test_missing_file_is_not_found_with_cause(store, docs_dir):
    (docs_dir / "get_error_codes.md").unlink()
    with pytest.raises(NotFound) as exc:
        store.fetch("error_codes")
    assert "get_error_codes.md" in exc.value.message
    assert isinstance(exc.value.__cause__, FileNotFoundError)


def test_directory_is_not_found(store, docs_dir):
    (docs_dir / "get_error_codes.md").unlink()
    (docs_dir / "get_error_codes.md").mkdir()
    with pytest.raises(NotFound):
        store.fetch("error_codes")


def test_undecodable_file_is_io_error(store, docs_dir):
    (docs_dir / "get_signature_guide.md").write_bytes(b"\xff\xfe\xfa broken")
    with pytest.raises(DocumentIOError) as exc:
        store.fetch("signature_guide")
    assert "utf-8" in exc.value.reason


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_file_is_io_error(store, docs_dir):
    path = docs_dir / "get_api_specification.md"
    path.chmod(0)
    try:
        with pytest.raises(DocumentIOError) as exc:
            store.fetch("api_spec")
        assert exc.value.reason == "permission denied"
    finally:
        path.chmod(0o644)


def test_verify_passes_when_all_present(store):
    store.verify()


def test_verify_names_every_missing_key(store, docs_dir):
    (docs_dir / "get_payment_flow.md").unlink()
    (docs_dir / "get_signature_guide.md").unlink()
    with pytest.raises(ConfigurationError) as exc:
        store.verify()
    assert "flow" in str(exc.value)
    assert "signature_guide" in str(exc.value)


def test_fetch_path_is_unrestricted_by_default(store, tmp_path):
    outside = tmp_path / "notes.md"
    outside.write_text("notes", encoding="utf-8")
    assert store.fetch_path(str(outside)) == "notes"


def test_fetch_path_inside_read_root(docs_dir):
    confined = DocumentStore(docs_dir, DOCUMENTS, read_root=docs_dir)
    assert "body of flow" in confined.fetch_path(str(docs_dir / "get_payment_flow.md"))


def test_fetch_path_rejects_traversal_outside_read_root(docs_dir, tmp_path):
    (tmp_path / "secret.txt").write_text("secret", encoding="utf-8")
    confined = DocumentStore(docs_dir, DOCUMENTS, read_root=docs_dir)
    with pytest.raises(DocumentIOError) as exc:
        confined.fetch_path(str(docs_dir / ".." / "secret.txt"))
    assert "access denied" in exc.value.reason


def test_fetch_path_missing_file(store, tmp_path):
    with pytest.raises(NotFound):
        store.fetch_path(str(tmp_path / "absent.md"))


def test_fetch_path_with_nul_byte_is_io_error(store):
    with pytest.raises(DocumentIOError) as exc:
        store.fetch_path("notes\x00.md")
    assert "invalid path" in exc.value.reason


def test_confined_fetch_path_with_nul_byte_is_io_error(docs_dir):
    confined = DocumentStore(docs_dir, DOCUMENTS, read_root=docs_dir)
    with pytest.raises(DocumentIOError):
        confined.fetch_path(str(docs_dir / "a\x00b.md"))
