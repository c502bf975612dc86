"""
Aggregation engine.

Builds one composite markdown text from an ordered list of documents.
Section reads run concurrently on a thread pool, but the rendered order is
always the order declared in the recipe.  A single failing section fails the
whole aggregation; callers never see a composite with sections missing.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from .errors import AggregationFailed, ContextError, DocumentIOError
from .store import DocumentStore


logger = logging.getLogger("mdcontext.aggregator")


@dataclass(frozen=True)
class Section:
    """
    One entry of a recipe.

    A section without a title is emitted as the bare document content, which
    lets a single-section recipe reproduce a file byte for byte.
    """
    title: Optional[str]
    key: str

    def render(self, content: str) -> str:
        if self.title is None:
            return content
        return f"# {self.title}\n{content}\n"


@dataclass(frozen=True)
class AggregationRecipe:
    """Ordered sections plus optional header and footer text."""
    sections: Tuple[Section, ...]
    header: str = ""
    footer: str = ""

    def __post_init__(self):
        # Accept any sequence but store a tuple so the recipe stays immutable
        object.__setattr__(self, "sections", tuple(self.sections))
        if not self.sections:
            raise ValueError("A recipe needs at least one section")

    @property
    def keys(self) -> List[str]:
        return [section.key for section in self.sections]

    @classmethod
    def single(cls, key: str, header: str = "") -> "AggregationRecipe":
        """Recipe for one untitled document, optionally prefixed."""
        return cls(sections=(Section(title=None, key=key),), header=header)


@dataclass
class CompositeDocument:
    """Result of one aggregation.  Never stored."""
    text: str
    keys: List[str] = field(default_factory=list)

    @property
    def section_count(self) -> int:
        return len(self.keys)


class Aggregator:
    """Fetches and renders recipes against a DocumentStore."""

    def __init__(
        self,
        store: DocumentStore,
        max_workers: int = 4,
        read_timeout: Optional[float] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            store: Source of document contents.
            max_workers: Upper bound on concurrent section reads.
            read_timeout: Seconds to wait for each section, or None.
        """
        self.store = store
        self.max_workers = max_workers
        self.read_timeout = read_timeout

    def aggregate(self, recipe: AggregationRecipe) -> CompositeDocument:
        """
        Render `recipe` into a composite document.

        Raises:
            AggregationFailed: for the first section, in recipe order, whose
                               read failed.
        """
        workers = min(self.max_workers, len(recipe.sections))
        executor = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="mdcontext-read"
        )
        try:
            futures = [
                executor.submit(self.store.fetch, section.key)
                for section in recipe.sections
            ]
            blocks = []
            for section, future in zip(recipe.sections, futures):
                content = self._collect(section, future)
                blocks.append(section.render(content))
        finally:
            # Abandon outstanding reads after a failure; nothing waits on them
            executor.shutdown(wait=False, cancel_futures=True)

        text = recipe.header + "\n".join(blocks) + recipe.footer
        logger.debug(f"Aggregated {len(blocks)} sections ({len(text)} chars)")
        return CompositeDocument(text=text, keys=recipe.keys)

    def _collect(self, section: Section, future: Future) -> str:
        try:
            return future.result(timeout=self.read_timeout)
        except FutureTimeoutError:
            path = str(self.store.path_for(section.key))
            cause = DocumentIOError(path, f"read timed out after {self.read_timeout}s")
            logger.error(f"Aggregation aborted at '{section.key}': {cause.message}")
            raise AggregationFailed(section.key, cause) from None
        except ContextError as e:
            logger.error(f"Aggregation aborted at '{section.key}': {e.message}")
            raise AggregationFailed(section.key, e) from e
