"""
Document store accessor.

Resolves document keys to files under the guides directory and reads them.
Nothing is cached: every fetch goes to disk so responses always reflect the
current file contents.
"""

from pathlib import Path
from typing import Dict, Mapping, Optional
import logging

from .errors import ConfigurationError, DocumentIOError, NotFound


logger = logging.getLogger("mdcontext.store")


class DocumentStore:
    """
    Read-only access to the markdown guides.

    Two modes are offered:
    1. `fetch(key)` reads a document bound to a logical key at construction.
    2. `fetch_path(path)` reads a caller-supplied path, optionally confined
       to `read_root`.
    """

    def __init__(
        self,
        docs_dir: Path,
        bindings: Mapping[str, str],
        read_root: Optional[Path] = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize the store.

        Args:
            docs_dir: Directory the bound file names are relative to.
            bindings: Ordered mapping of document key to file name.
            read_root: Confinement directory for `fetch_path`.  None leaves
                       arbitrary reads unrestricted.
            encoding: Text encoding of every document.
        """
        self.docs_dir = Path(docs_dir)
        self._bindings: Dict[str, str] = dict(bindings)
        self.read_root = Path(read_root).resolve() if read_root is not None else None
        self.encoding = encoding

    @property
    def keys(self) -> list[str]:
        return list(self._bindings)

    def path_for(self, key: str) -> Path:
        """Return the file path bound to `key`."""
        if key not in self._bindings:
            raise NotFound(key)
        return self.docs_dir / self._bindings[key]

    def verify(self) -> None:
        """
        Check that every bound key resolves to a regular file.

        Raises:
            ConfigurationError: naming every key whose file is missing.
        """
        missing = []
        for key in self._bindings:
            path = self.path_for(key)
            if not path.is_file():
                missing.append(f"{key} -> {path}")
        if missing:
            raise ConfigurationError(
                "Unresolved document bindings: " + ", ".join(missing)
            )
        logger.info(f"Verified {len(self._bindings)} documents in {self.docs_dir}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch(self, key: str) -> str:
        """Read the document bound to `key`."""
        return self._read(self.path_for(key))

    def fetch_path(self, user_path: str) -> str:
        """
        Read an arbitrary caller-supplied path.

        When `read_root` is set, the fully resolved path (symlinks and `..`
        included) must stay inside it.
        """
        try:
            path = Path(user_path).expanduser()
            resolved = path.resolve() if self.read_root is not None else None
        except (RuntimeError, ValueError) as e:
            # unknown ~user, embedded NUL
            raise DocumentIOError(user_path, f"invalid path: {e}") from e
        if resolved is not None:
            if not resolved.is_relative_to(self.read_root):
                logger.warning(f"Rejected read outside {self.read_root}: {user_path}")
                raise DocumentIOError(user_path, f"access denied outside {self.read_root}")
            path = resolved
        return self._read(path)

    def _read(self, path: Path) -> str:
        logger.debug(f"Reading {path}")
        try:
            return path.read_text(encoding=self.encoding)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFound(str(path)) from e
        except PermissionError as e:
            raise DocumentIOError(str(path), "permission denied") from e
        except UnicodeDecodeError as e:
            raise DocumentIOError(str(path), f"not valid {self.encoding}: {e.reason}") from e
        except ValueError as e:
            raise DocumentIOError(str(path), f"invalid path: {e}") from e
        except OSError as e:
            raise DocumentIOError(str(path), e.strerror or str(e)) from e
