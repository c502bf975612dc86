"""
MCP (Model Context Protocol) Integration Module

Implements the MCP 2025-11-25 specification:
https://modelcontextprotocol.io/specification/2025-11-25

Components:
- schema: MCP data types (JSON-RPC messages, content blocks, tools, prompts,
  resources, initialize)
- server: MCP server over JSON-RPC stdio transport
- client: MCP client for talking to a server subprocess

The server module is imported explicitly (`mdcontext.mcp.server`) because it
depends on the dispatcher, which itself builds on these schema types.
"""

from .schema import (
    # JSON-RPC 2.0 transport
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    JSONRPCNotification,
    JSONRPC_VERSION,
    MCP_PROTOCOL_VERSION,
    # JSON-RPC error codes
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    # Content types
    ContentType,
    TextContent,
    # Tools
    MCPTool,
    MCPToolCall,
    MCPToolResult,
    # Prompts
    Role,
    MCPPrompt,
    MCPPromptArgument,
    MCPPromptMessage,
    MCPGetPromptResult,
    # Resources
    MARKDOWN_MIME_TYPE,
    MCPResource,
    MCPResourceContents,
    MCPReadResourceResult,
    # Initialize handshake
    MCPClientCapabilities,
    MCPServerCapabilities,
    MCPInitializeParams,
    MCPInitializeResult,
)

from .client import MCPClient, MCPServerError

__all__ = [
    # JSON-RPC transport
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCError",
    "JSONRPCNotification",
    "JSONRPC_VERSION",
    "MCP_PROTOCOL_VERSION",
    # Error codes
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    # Content types
    "ContentType",
    "TextContent",
    # Tools
    "MCPTool",
    "MCPToolCall",
    "MCPToolResult",
    # Prompts
    "Role",
    "MCPPrompt",
    "MCPPromptArgument",
    "MCPPromptMessage",
    "MCPGetPromptResult",
    # Resources
    "MARKDOWN_MIME_TYPE",
    "MCPResource",
    "MCPResourceContents",
    "MCPReadResourceResult",
    # Initialize
    "MCPClientCapabilities",
    "MCPServerCapabilities",
    "MCPInitializeParams",
    "MCPInitializeResult",
    # Client
    "MCPClient",
    "MCPServerError",
]
