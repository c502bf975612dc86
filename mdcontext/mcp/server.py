"""
MCP Server Implementation

Serves the markdown context capabilities over JSON-RPC 2.0 stdio transport,
following the MCP 2025-11-25 specification:
https://modelcontextprotocol.io/specification/2025-11-25

The server handles the MCP lifecycle:
1. initialize / initialized handshake
2. ping - liveness check
3. notifications/cancelled - cancellation support
and hands tools/*, prompts/* and resources/* requests to the dispatcher.

Transport: Reads newline-delimited JSON-RPC messages from stdin, writes
responses to stdout.  Diagnostics go through `logging`, which the CLI points
at stderr, so nothing but protocol messages ever reaches stdout.
"""

import sys
import json
import logging
from typing import Optional, Dict, Any, TextIO

from .schema import (
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    MCPInitializeResult,
    MCPServerCapabilities,
    JSONRPC_VERSION,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INTERNAL_ERROR,
)
from ..dispatcher import CapabilityDispatcher


logger = logging.getLogger("mdcontext.mcp.server")

SERVER_INSTRUCTIONS = (
    "Payment API guides. Call get_payment_context before implementing or "
    "reviewing payment code."
)


class MCPServer:
    """
    MCP Server that exposes the capability dispatcher over stdio.

    Usage:
        server = MCPServer(dispatcher)
        server.run()  # blocks, reading from stdin

    Or for programmatic use:
        server = MCPServer(dispatcher)
        response = server.handle_message(json_string)
    """

    def __init__(self, dispatcher: CapabilityDispatcher):
        """
        Initialize the MCP server.

        Args:
            dispatcher: Handler for the capability methods.
        """
        self.dispatcher = dispatcher
        self._initialized = False
        self._client_info: Optional[Dict[str, str]] = None

    # ------------------------------------------------------------------
    # Stdio transport
    # ------------------------------------------------------------------

    def run(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        """
        Run the server, reading JSON-RPC messages from stdin and writing
        responses to stdout.  Blocks until stdin is closed or EOF.
        """
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        logger.info("Markdown context server starting on stdio transport")

        for line in stdin:
            line = line.strip()
            if not line:
                continue

            response = self.handle_message(line)
            if response is not None:
                stdout.write(response + "\n")
                stdout.flush()

        logger.info("Markdown context server shutting down (stdin closed)")

    # ------------------------------------------------------------------
    # Message handling
    # ------------------------------------------------------------------

    def handle_message(self, raw: str) -> Optional[str]:
        """
        Parse and dispatch a single JSON-RPC message.

        Args:
            raw: Raw JSON string.

        Returns:
            JSON string response, or None for notifications.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            err = JSONRPCError(
                code=PARSE_ERROR,
                message=f"Parse error: {e}",
            )
            return err.to_json()

        # Validate basic JSON-RPC structure
        if not isinstance(data, dict):
            err = JSONRPCError(
                code=INVALID_REQUEST,
                message="Invalid request: expected JSON object",
            )
            return err.to_json()

        jsonrpc = data.get("jsonrpc")
        if jsonrpc != JSONRPC_VERSION:
            err = JSONRPCError(
                code=INVALID_REQUEST,
                message=f"Invalid JSON-RPC version: {jsonrpc}",
                id=data.get("id"),
            )
            return err.to_json()

        method = data.get("method")
        params = data.get("params") or {}
        msg_id = data.get("id")

        if not isinstance(method, str):
            return JSONRPCError(
                code=INVALID_REQUEST,
                message="Invalid request: missing method",
                id=msg_id,
            ).to_json()

        # Notification (no id) – no response expected
        if msg_id is None:
            self._handle_notification(method, params)
            return None

        # Request (has id) – response required
        return self._handle_request(method, params, msg_id)

    # ------------------------------------------------------------------
    # Request dispatch
    # ------------------------------------------------------------------

    def _handle_request(
        self, method: str, params: Dict[str, Any], msg_id: Any
    ) -> str:
        """Dispatch a JSON-RPC request and return the response JSON."""
        try:
            if method == "initialize":
                return self._handle_initialize(params, msg_id)
            elif method == "ping":
                return JSONRPCResponse(result={}, id=msg_id).to_json()
            elif self.dispatcher.handles(method):
                request = JSONRPCRequest(method=method, params=params, id=msg_id)
                return self.dispatcher.handle_jsonrpc(request).to_json()
            else:
                return JSONRPCError(
                    code=METHOD_NOT_FOUND,
                    message=f"Method not found: {method}",
                    id=msg_id,
                ).to_json()
        except Exception as e:
            logger.error(f"Internal error handling {method}: {e}", exc_info=True)
            return JSONRPCError(
                code=INTERNAL_ERROR,
                message=f"Internal error: {e}",
                id=msg_id,
            ).to_json()

    def _handle_notification(self, method: str, params: Dict[str, Any]) -> None:
        """Handle a JSON-RPC notification (no response)."""
        if not isinstance(params, dict):
            params = {}
        if method == "notifications/initialized":
            logger.info("Client confirmed initialization")
            self._initialized = True
        elif method == "notifications/cancelled":
            # Requests are handled to completion before the next line is
            # read, so a cancellation can only refer to a finished request.
            request_id = params.get("requestId")
            reason = params.get("reason", "unknown")
            logger.info(f"Client cancelled request {request_id}: {reason}")
        else:
            logger.debug(f"Unhandled notification: {method}")

    # ------------------------------------------------------------------
    # MCP method handlers
    # ------------------------------------------------------------------

    def _handle_initialize(
        self, params: Dict[str, Any], msg_id: Any
    ) -> str:
        """Handle the initialize request."""
        if not isinstance(params, dict):
            params = {}
        self._client_info = params.get("clientInfo") or {}
        client_version = params.get("protocolVersion", "unknown")
        logger.info(
            f"Initialize from {self._client_info.get('name', 'unknown')} "
            f"(protocol {client_version})"
        )

        result = MCPInitializeResult(
            capabilities=MCPServerCapabilities(
                tools={"listChanged": False},
                prompts={"listChanged": False},
                resources={"subscribe": False, "listChanged": False},
            ),
            instructions=SERVER_INSTRUCTIONS,
        )
        return JSONRPCResponse(result=result.to_dict(), id=msg_id).to_json()

    @property
    def initialized(self) -> bool:
        return self._initialized
