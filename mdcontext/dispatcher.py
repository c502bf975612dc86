"""
Capability Dispatcher

Routes the six capability requests to the registry, runs the matching
action and shapes the MCP result for that request kind:

- tools/list      → list_tools()
- tools/call      → call_tool()
- prompts/list    → list_prompts()
- prompts/get     → get_prompt()
- resources/list  → list_resources()
- resources/read  → read_resource()

`handle_jsonrpc()` is the single place where ContextErrors become JSON-RPC
error responses, so every request kind reports failures the same way.
"""

from typing import Any, Dict, Optional
import logging

from .aggregator import Aggregator
from .catalog import DOCUMENTS, build_registry
from .config import ServerConfig
from .errors import ConfigurationError, ContextError, InvalidArguments
from .mcp.schema import (
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    MCPGetPromptResult,
    MCPPromptMessage,
    MCPReadResourceResult,
    MCPResourceContents,
    MCPToolResult,
    TextContent,
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
)
from .store import DocumentStore
from .registry import (
    Aggregate,
    CapabilityEntry,
    CapabilityKind,
    CapabilityRegistry,
    ReadFile,
    StaticText,
)


logger = logging.getLogger("mdcontext.dispatcher")


class CapabilityDispatcher:
    """
    Stateless request handler.

    Holds only the registry and the aggregator; both are safe to share, so
    one dispatcher can serve concurrent requests.
    """

    METHODS = {
        "tools/list": "_rpc_list_tools",
        "tools/call": "_rpc_call_tool",
        "prompts/list": "_rpc_list_prompts",
        "prompts/get": "_rpc_get_prompt",
        "resources/list": "_rpc_list_resources",
        "resources/read": "_rpc_read_resource",
    }

    def __init__(self, registry: CapabilityRegistry, aggregator: Aggregator):
        self.registry = registry
        self.aggregator = aggregator

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def list_tools(self) -> Dict[str, Any]:
        return {"tools": [t.to_dict() for t in self.registry.list(CapabilityKind.TOOL)]}

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a tool and wrap its text as a single content block."""
        logger.info(f"CallTool: {name}")
        entry = self.registry.resolve(CapabilityKind.TOOL, name)
        text = self._render(entry, arguments or {})
        return MCPToolResult(content=[TextContent(text=text)]).to_dict()

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def list_prompts(self) -> Dict[str, Any]:
        return {"prompts": [p.to_dict() for p in self.registry.list(CapabilityKind.PROMPT)]}

    def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Render a prompt template as one user-role message."""
        logger.info(f"GetPrompt: {name}")
        entry = self.registry.resolve(CapabilityKind.PROMPT, name)
        text = self._render(entry, arguments or {})
        return MCPGetPromptResult(
            description=entry.descriptor.description,
            messages=[MCPPromptMessage(content=TextContent(text=text))],
        ).to_dict()

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def list_resources(self) -> Dict[str, Any]:
        return {"resources": [r.to_dict() for r in self.registry.list(CapabilityKind.RESOURCE)]}

    def read_resource(self, uri: str) -> Dict[str, Any]:
        logger.info(f"ReadResource: {uri}")
        entry = self.registry.resolve(CapabilityKind.RESOURCE, uri)
        text = self._render(entry, {})
        return MCPReadResourceResult(contents=[
            MCPResourceContents(uri=uri, text=text, mime_type=entry.descriptor.mime_type),
        ]).to_dict()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _render(self, entry: CapabilityEntry, arguments: Dict[str, Any]) -> str:
        action = entry.action
        if isinstance(action, Aggregate):
            return self.aggregator.aggregate(action.recipe).text
        if isinstance(action, ReadFile):
            path = arguments.get(action.argument)
            if not isinstance(path, str) or not path:
                raise InvalidArguments(
                    f"{entry.kind.value} {entry.id} requires a string '{action.argument}' argument"
                )
            return action.header + self.aggregator.store.fetch_path(path)
        if isinstance(action, StaticText):
            return action.text
        raise TypeError(f"Unsupported action for {entry.id}: {action!r}")

    # ------------------------------------------------------------------
    # JSON-RPC dispatch (for MCP server usage)
    # ------------------------------------------------------------------

    def handles(self, method: str) -> bool:
        return method in self.METHODS

    def handle_jsonrpc(self, request: JSONRPCRequest) -> JSONRPCResponse | JSONRPCError:
        """
        Dispatch a capability request and build the JSON-RPC reply.

        Failures of any kind abort this request only; they never propagate
        out of this method.
        """
        handler_name = self.METHODS.get(request.method)
        if handler_name is None:
            return JSONRPCError(
                code=METHOD_NOT_FOUND,
                message=f"Method not found: {request.method}",
                id=request.id,
            )

        params = request.params or {}
        try:
            if not isinstance(params, dict):
                raise InvalidArguments("params must be an object")
            result = getattr(self, handler_name)(params)
            return JSONRPCResponse(result=result, id=request.id)
        except ContextError as e:
            logger.warning(f"{request.method} failed: {e.message}")
            return JSONRPCError(
                code=e.code,
                message=e.message,
                data=e.data(),
                id=request.id,
            )
        except Exception as e:
            logger.error(f"Internal error handling {request.method}: {e}", exc_info=True)
            return JSONRPCError(
                code=INTERNAL_ERROR,
                message=f"Internal error: {e}",
                id=request.id,
            )

    def _rpc_list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.list_tools()

    def _rpc_call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.call_tool(_require(params, "name"), _arguments(params))

    def _rpc_list_prompts(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.list_prompts()

    def _rpc_get_prompt(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.get_prompt(_require(params, "name"), _arguments(params))

    def _rpc_list_resources(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.list_resources()

    def _rpc_read_resource(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.read_resource(_require(params, "uri"))


def _require(params: Dict[str, Any], name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidArguments(f"Missing required parameter: {name}")
    return value


def _arguments(params: Dict[str, Any]) -> Dict[str, Any]:
    arguments = params.get("arguments") or {}
    if not isinstance(arguments, dict):
        raise InvalidArguments("arguments must be an object")
    return arguments


def build_dispatcher(config: ServerConfig, verify: bool = True) -> CapabilityDispatcher:
    """
    Wire the catalog, store and aggregator for `config`.

    Args:
        config: Server settings.
        verify: Check every document binding up front.

    Raises:
        ConfigurationError: if a bound document is missing and `verify` is set.
    """
    registry = build_registry()
    store = DocumentStore(
        config.docs_dir,
        DOCUMENTS,
        read_root=config.read_root,
    )
    missing = [key for key in registry.document_keys() if key not in DOCUMENTS]
    if missing:
        raise ConfigurationError(f"Recipes reference unbound documents: {', '.join(missing)}")
    if verify:
        store.verify()
    aggregator = Aggregator(
        store,
        max_workers=config.max_workers,
        read_timeout=config.read_timeout,
    )
    logger.info(f"Dispatcher ready: {registry!r}")
    return CapabilityDispatcher(registry, aggregator)
