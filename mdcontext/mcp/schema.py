"""
MCP (Model Context Protocol) Schema Definitions

Implements data structures following the MCP 2025-11-25 specification:
https://modelcontextprotocol.io/specification/2025-11-25

Key MCP concepts implemented:
- JSON-RPC 2.0 message wrappers for protocol transport
- Tool definitions with JSON Schema inputSchema, tool call requests/results
- Prompt definitions and prompts/get message envelopes
- Resource definitions and resources/read contents
- The initialize handshake
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Union
from enum import Enum
import uuid
import json


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 base types (MCP transport layer)
# ---------------------------------------------------------------------------

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2025-11-25"


@dataclass
class JSONRPCRequest:
    """
    JSON-RPC 2.0 request message.

    Per MCP spec, all messages are JSON-RPC 2.0.
    Requests have a string|number `id` and expect a response.
    """
    method: str
    params: Optional[Dict[str, Any]] = None
    id: Optional[Union[str, int]] = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        msg: Dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "method": self.method,
            "id": self.id,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class JSONRPCNotification:
    """
    JSON-RPC 2.0 notification (no id, no response expected).
    """
    method: str
    params: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        msg: Dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class JSONRPCResponse:
    """
    JSON-RPC 2.0 success response.
    """
    result: Any
    id: Optional[Union[str, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jsonrpc": JSONRPC_VERSION,
            "result": self.result,
            "id": self.id,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class JSONRPCError:
    """
    JSON-RPC 2.0 error response.
    """
    code: int
    message: str
    data: Optional[Any] = None
    id: Optional[Union[str, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        error_obj: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error_obj["data"] = self.data
        return {
            "jsonrpc": JSONRPC_VERSION,
            "error": error_obj,
            "id": self.id,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


# ---------------------------------------------------------------------------
# MCP Content types
# ---------------------------------------------------------------------------

class ContentType(str, Enum):
    """Content block types per MCP spec."""
    TEXT = "text"


@dataclass
class TextContent:
    """
    Text content block.

    MCP spec: { type: "text", text: string, annotations?: { ... } }
    """
    text: str
    annotations: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": ContentType.TEXT.value,
            "text": self.text,
        }
        if self.annotations:
            result["annotations"] = self.annotations
        return result


# ---------------------------------------------------------------------------
# MCP Tool definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MCPTool:
    """
    MCP Tool definition following the 2025-11-25 specification.

    A tool has:
    - name: unique identifier
    - description: human-readable description (optional but recommended)
    - inputSchema: JSON Schema object describing the tool's parameters

    This is returned by `tools/list`.
    """
    name: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=lambda: {
        "type": "object",
        "properties": {},
        "required": [],
    })

    def to_dict(self) -> Dict[str, Any]:
        """Convert to MCP tools/list response item format."""
        result: Dict[str, Any] = {
            "name": self.name,
            "inputSchema": self.input_schema,
        }
        if self.description:
            result["description"] = self.description
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MCPTool":
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            input_schema=data.get("inputSchema", {"type": "object", "properties": {}}),
        )


@dataclass
class MCPToolCall:
    """
    Represents a tools/call request per the MCP specification.

    MCP spec `tools/call` params:
    {
        name: string,
        arguments?: { [key: string]: unknown }
    }
    """
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    def to_mcp_params(self) -> Dict[str, Any]:
        """Convert to MCP tools/call request params."""
        result: Dict[str, Any] = {"name": self.name}
        if self.arguments:
            result["arguments"] = self.arguments
        return result


@dataclass
class MCPToolResult:
    """
    Result of a tools/call per the MCP specification.

    MCP spec tools/call result:
    {
        content: TextContent[],
    }

    Failures are not reported here; they travel as JSON-RPC errors so all
    capability kinds share one error shape.
    """
    content: List[TextContent]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to MCP tools/call result format."""
        return {
            "content": [c.to_dict() for c in self.content],
        }

    def get_text(self) -> str:
        """Concatenate all TextContent blocks into a single string."""
        return "\n".join(block.text for block in self.content)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MCPToolResult":
        return cls(content=[
            TextContent(text=block.get("text", ""))
            for block in data.get("content", [])
            if block.get("type", "text") == ContentType.TEXT.value
        ])


# ---------------------------------------------------------------------------
# MCP Prompt definitions
# ---------------------------------------------------------------------------

class Role(str, Enum):
    """Message roles allowed in prompts/get results."""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class MCPPromptArgument:
    """A named argument a prompt template accepts."""
    name: str
    description: str = ""
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "required": self.required}
        if self.description:
            result["description"] = self.description
        return result


@dataclass(frozen=True)
class MCPPrompt:
    """
    MCP Prompt definition returned by `prompts/list`.

    MCP spec: { name: string, description?: string, arguments?: PromptArgument[] }
    """
    name: str
    description: str = ""
    arguments: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "arguments": [arg.to_dict() for arg in self.arguments],
        }
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class MCPPromptMessage:
    """
    One message of a prompts/get result.

    MCP spec: { role: "user" | "assistant", content: TextContent }
    """
    content: TextContent
    role: Role = Role.USER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content.to_dict(),
        }


@dataclass
class MCPGetPromptResult:
    """Result of prompts/get."""
    messages: List[MCPPromptMessage]
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.description:
            result["description"] = self.description
        return result


# ---------------------------------------------------------------------------
# MCP Resource definitions
# ---------------------------------------------------------------------------

MARKDOWN_MIME_TYPE = "text/markdown"


@dataclass(frozen=True)
class MCPResource:
    """
    MCP Resource definition returned by `resources/list`.

    MCP spec: { uri: string, name: string, description?: string, mimeType?: string }
    """
    uri: str
    name: str
    description: str = ""
    mime_type: str = MARKDOWN_MIME_TYPE

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "uri": self.uri,
            "name": self.name,
        }
        if self.description:
            result["description"] = self.description
        result["mimeType"] = self.mime_type
        return result


@dataclass
class MCPResourceContents:
    """
    Text contents of a resource.

    MCP spec: { uri: string, mimeType?: string, text: string }
    """
    uri: str
    text: str
    mime_type: str = MARKDOWN_MIME_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uri": self.uri,
            "mimeType": self.mime_type,
            "text": self.text,
        }


@dataclass
class MCPReadResourceResult:
    """Result of resources/read."""
    contents: List[MCPResourceContents]

    def to_dict(self) -> Dict[str, Any]:
        return {"contents": [c.to_dict() for c in self.contents]}


# ---------------------------------------------------------------------------
# MCP Initialize handshake
# ---------------------------------------------------------------------------

@dataclass
class MCPClientCapabilities:
    """Client capabilities declared during initialize."""
    roots: Optional[Dict[str, Any]] = None
    sampling: Optional[Dict[str, Any]] = None
    experimental: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.roots is not None:
            result["roots"] = self.roots
        if self.sampling is not None:
            result["sampling"] = self.sampling
        if self.experimental is not None:
            result["experimental"] = self.experimental
        return result


@dataclass
class MCPServerCapabilities:
    """Server capabilities declared during initialize."""
    tools: Optional[Dict[str, Any]] = None
    resources: Optional[Dict[str, Any]] = None
    prompts: Optional[Dict[str, Any]] = None
    logging: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.tools is not None:
            result["tools"] = self.tools
        if self.resources is not None:
            result["resources"] = self.resources
        if self.prompts is not None:
            result["prompts"] = self.prompts
        if self.logging is not None:
            result["logging"] = self.logging
        return result


@dataclass
class MCPInitializeParams:
    """Parameters for the initialize request (client → server)."""
    protocol_version: str = MCP_PROTOCOL_VERSION
    capabilities: MCPClientCapabilities = field(default_factory=MCPClientCapabilities)
    client_info: Dict[str, str] = field(default_factory=lambda: {
        "name": "mdcontext-client",
        "version": "1.0.0",
    })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": self.capabilities.to_dict(),
            "clientInfo": self.client_info,
        }


@dataclass
class MCPInitializeResult:
    """Result of the initialize request (server → client)."""
    protocol_version: str = MCP_PROTOCOL_VERSION
    capabilities: MCPServerCapabilities = field(default_factory=MCPServerCapabilities)
    server_info: Dict[str, str] = field(default_factory=lambda: {
        "name": "markdown-context-server",
        "version": "1.0.0",
    })
    instructions: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "protocolVersion": self.protocol_version,
            "capabilities": self.capabilities.to_dict(),
            "serverInfo": self.server_info,
        }
        if self.instructions:
            result["instructions"] = self.instructions
        return result
