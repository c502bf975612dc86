"""
Capability Registry

Maps (kind, id) pairs to what a request should do and how the capability is
advertised.  Entries are registered once from the catalog at startup, then
the registry is sealed and only read.

Each entry carries one action variant:
- Aggregate: render a recipe through the aggregation engine
- ReadFile: read the path passed in a tool argument
- StaticText: return fixed text with no document reads
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple, Union
import logging

from .aggregator import AggregationRecipe
from .errors import ConfigurationError, DuplicateCapability, UnknownCapability
from .mcp.schema import MCPPrompt, MCPResource, MCPTool


logger = logging.getLogger("mdcontext.registry")


class CapabilityKind(str, Enum):
    """The three capability surfaces."""
    TOOL = "tool"
    PROMPT = "prompt"
    RESOURCE = "resource"


@dataclass(frozen=True)
class Aggregate:
    recipe: AggregationRecipe


@dataclass(frozen=True)
class ReadFile:
    """Read the file named by `argument` in the call arguments."""
    argument: str = "file_path"
    header: str = ""


@dataclass(frozen=True)
class StaticText:
    text: str


Action = Union[Aggregate, ReadFile, StaticText]
Descriptor = Union[MCPTool, MCPPrompt, MCPResource]

_DESCRIPTOR_TYPES = {
    CapabilityKind.TOOL: MCPTool,
    CapabilityKind.PROMPT: MCPPrompt,
    CapabilityKind.RESOURCE: MCPResource,
}


@dataclass(frozen=True)
class CapabilityEntry:
    kind: CapabilityKind
    id: str
    action: Action
    descriptor: Descriptor


class CapabilityRegistry:
    """
    Registry of tools, prompts and resources.

    Lookups are pure dictionary reads, so a sealed registry can be shared by
    concurrent requests without locking.
    """

    def __init__(self):
        self._entries: Dict[CapabilityKind, Dict[str, CapabilityEntry]] = {
            kind: {} for kind in CapabilityKind
        }
        self._sealed = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        kind: CapabilityKind,
        capability_id: str,
        action: Action,
        descriptor: Descriptor,
    ) -> CapabilityEntry:
        """
        Register a capability.

        Raises:
            DuplicateCapability: if (kind, id) is already registered.
            ConfigurationError: if the registry is sealed or the descriptor
                                does not match the kind.
        """
        kind = CapabilityKind(kind)
        if self._sealed:
            raise ConfigurationError(
                f"Registry is sealed; cannot register {kind.value} {capability_id}"
            )
        if capability_id in self._entries[kind]:
            raise DuplicateCapability(kind.value, capability_id)
        if not isinstance(descriptor, _DESCRIPTOR_TYPES[kind]):
            raise ConfigurationError(
                f"{kind.value} {capability_id} needs a "
                f"{_DESCRIPTOR_TYPES[kind].__name__} descriptor"
            )

        entry = CapabilityEntry(
            kind=kind, id=capability_id, action=action, descriptor=descriptor
        )
        self._entries[kind][capability_id] = entry
        logger.debug(f"Registered {kind.value}: {capability_id}")
        return entry

    def seal(self) -> "CapabilityRegistry":
        """Refuse further registrations."""
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, kind: CapabilityKind, capability_id: Any) -> CapabilityEntry:
        """
        Look up a capability.

        Raises:
            UnknownCapability: for any (kind, id) that is not registered,
                               including unhashable or non-string ids.
        """
        try:
            kind = CapabilityKind(kind)
        except ValueError:
            raise UnknownCapability(str(kind), str(capability_id)) from None
        entry = None
        if isinstance(capability_id, str):
            entry = self._entries[kind].get(capability_id)
        if entry is None:
            raise UnknownCapability(kind.value, str(capability_id))
        return entry

    def list(self, kind: CapabilityKind) -> List[Descriptor]:
        """Descriptors of one kind, in registration order."""
        return [entry.descriptor for entry in self._entries[CapabilityKind(kind)].values()]

    def entries(self, kind: CapabilityKind) -> Tuple[CapabilityEntry, ...]:
        return tuple(self._entries[CapabilityKind(kind)].values())

    def document_keys(self) -> List[str]:
        """Every document key referenced by a registered recipe, first-seen order."""
        keys: Dict[str, None] = {}
        for kind in CapabilityKind:
            for entry in self._entries[kind].values():
                if isinstance(entry.action, Aggregate):
                    for key in entry.action.recipe.keys:
                        keys.setdefault(key, None)
        return list(keys)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __repr__(self) -> str:
        return (
            f"CapabilityRegistry(tools={len(self._entries[CapabilityKind.TOOL])}, "
            f"prompts={len(self._entries[CapabilityKind.PROMPT])}, "
            f"resources={len(self._entries[CapabilityKind.RESOURCE])})"
        )
