"""
mdcontext - Markdown Context Server.

Serves the payment API markdown guides to AI agents over the Model Context
Protocol (MCP 2025-11-25, JSON-RPC over stdio) as tools, prompts and
resources.

Layers, leaf first:
- store: reads guides from disk (no caching)
- aggregator: concatenates guides into one composite document
- registry / catalog: the fixed tool, prompt and resource table
- dispatcher: runs requests and shapes MCP results and errors
- mcp.server: stdio JSON-RPC transport
"""

__version__ = "1.0.0"

from mdcontext.errors import (
    ContextError,
    NotFound,
    UnknownCapability,
    AggregationFailed,
    DocumentIOError,
    InvalidArguments,
    ConfigurationError,
    DuplicateCapability,
)
from mdcontext.config import ServerConfig
from mdcontext.store import DocumentStore
from mdcontext.aggregator import (
    Aggregator,
    AggregationRecipe,
    CompositeDocument,
    Section,
)
from mdcontext.registry import (
    CapabilityKind,
    CapabilityRegistry,
    CapabilityEntry,
    Aggregate,
    ReadFile,
    StaticText,
)
from mdcontext.catalog import build_registry
from mdcontext.dispatcher import CapabilityDispatcher, build_dispatcher
