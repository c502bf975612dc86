"""Server configuration loaded from environment variables and CLI flags."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional
import logging
import os

from .errors import ConfigurationError


ENV_PREFIX = "MDCONTEXT_"

DEFAULT_DOCS_DIR = Path(__file__).parent / "docs" / "payment-api-guides"


@dataclass
class ServerConfig:
    """
    Runtime settings for the server.

    Attributes:
        docs_dir: Directory holding the bundled guides.
        read_root: If set, `read_markdown_file` may only read below this
                   directory.  Unset means any path is accepted.
        read_timeout: Seconds allowed for each section read during
                      aggregation.  None disables the bound.
        max_workers: Thread pool size for concurrent section reads.
        log_level: Name of the logging level for stderr diagnostics.
    """
    docs_dir: Path = field(default_factory=lambda: DEFAULT_DOCS_DIR)
    read_root: Optional[Path] = None
    read_timeout: Optional[float] = None
    max_workers: int = 4
    log_level: str = "INFO"

    def __post_init__(self):
        self.docs_dir = Path(self.docs_dir)
        if self.read_root is not None:
            self.read_root = Path(self.read_root)
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ConfigurationError(f"read_timeout must be positive, got {self.read_timeout}")
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build a config from MDCONTEXT_* environment variables."""
        env = os.environ if environ is None else environ
        kwargs: Dict[str, object] = {}

        docs_dir = env.get(ENV_PREFIX + "DOCS_DIR")
        if docs_dir:
            kwargs["docs_dir"] = Path(docs_dir)

        read_root = env.get(ENV_PREFIX + "READ_ROOT")
        if read_root:
            kwargs["read_root"] = Path(read_root)

        read_timeout = env.get(ENV_PREFIX + "READ_TIMEOUT")
        if read_timeout:
            kwargs["read_timeout"] = _parse_number(ENV_PREFIX + "READ_TIMEOUT", read_timeout, float)

        max_workers = env.get(ENV_PREFIX + "MAX_WORKERS")
        if max_workers:
            kwargs["max_workers"] = _parse_number(ENV_PREFIX + "MAX_WORKERS", max_workers, int)

        log_level = env.get(ENV_PREFIX + "LOG_LEVEL")
        if log_level:
            kwargs["log_level"] = log_level

        return cls(**kwargs)

    def with_overrides(self, **overrides) -> "ServerConfig":
        """Return a copy with every non-None override applied."""
        values = {
            "docs_dir": self.docs_dir,
            "read_root": self.read_root,
            "read_timeout": self.read_timeout,
            "max_workers": self.max_workers,
            "log_level": self.log_level,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ServerConfig(**values)


def _parse_number(name: str, raw: str, kind):
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a {kind.__name__}, got {raw!r}") from e
