"""
MCP Client Implementation

Provides an MCP-compliant client that connects to MCP servers over
JSON-RPC 2.0 stdio transport, following the MCP 2025-11-25 specification:
https://modelcontextprotocol.io/specification/2025-11-25

The client handles:
1. initialize / initialized handshake
2. tools/list, tools/call
3. prompts/list, prompts/get
4. resources/list, resources/read
5. ping - liveness check

Used to probe a running markdown context server and by the end-to-end tests.
"""

import subprocess
import json
import logging
import uuid
from typing import Optional, Dict, Any, List

from .schema import (
    JSONRPCRequest,
    JSONRPCNotification,
    MCPInitializeParams,
    MCPTool,
    MCPToolCall,
    MCPToolResult,
)


logger = logging.getLogger("mdcontext.mcp.client")


class MCPServerError(RuntimeError):
    """A JSON-RPC error returned by the server."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        super().__init__(f"MCP server error [{code}]: {message}")
        self.code = code
        self.message = message
        self.data = data


class MCPClient:
    """
    MCP Client that connects to an MCP server over stdio transport.

    Usage:
        client = MCPClient(command=["python", "-m", "mdcontext", "serve"])
        client.connect()
        tools = client.list_tools()
        result = client.call_tool("get_payment_context")
        client.disconnect()

    Or as a context manager:
        with MCPClient(command=["python", "-m", "mdcontext", "serve"]) as client:
            tools = client.list_tools()
    """

    def __init__(
        self,
        command: List[str],
        env: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the MCP client.

        Args:
            command: Command and arguments to launch the MCP server process.
            env: Optional environment variables for the server process.
            timeout: Seconds to wait for the server to exit on disconnect.
        """
        self.command = command
        self.env = env
        self.timeout = timeout
        self._process: Optional[subprocess.Popen] = None
        self._initialized = False
        self._server_info: Optional[Dict[str, str]] = None
        self._server_capabilities: Optional[Dict[str, Any]] = None

    def __enter__(self) -> "MCPClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> Dict[str, Any]:
        """
        Start the server process and perform the MCP initialize handshake.

        Returns:
            The initialize result from the server.

        Raises:
            RuntimeError: If the server fails to start or handshake fails.
        """
        logger.info(f"Starting MCP server: {' '.join(self.command)}")

        try:
            self._process = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                env=self.env,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to start MCP server: {e}") from e

        init_params = MCPInitializeParams()
        result = self._send_request("initialize", init_params.to_dict())

        self._server_info = result.get("serverInfo", {})
        self._server_capabilities = result.get("capabilities", {})
        protocol_version = result.get("protocolVersion", "unknown")

        logger.info(
            f"Connected to {self._server_info.get('name', 'unknown')} "
            f"(protocol {protocol_version})"
        )

        self._send_notification("notifications/initialized")
        self._initialized = True

        return result

    def disconnect(self) -> None:
        """Close stdin and wait for the server to exit."""
        if self._process:
            try:
                if self._process.stdin:
                    self._process.stdin.close()
                self._process.wait(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                logger.warning("MCP server did not exit; killing it")
                self._process.kill()
                self._process.wait()
            finally:
                if self._process.stdout:
                    self._process.stdout.close()
                self._process = None
                self._initialized = False

        logger.info("MCP client disconnected")

    @property
    def is_connected(self) -> bool:
        """Check if the client is connected to a server."""
        return (
            self._process is not None
            and self._process.poll() is None
            and self._initialized
        )

    @property
    def server_capabilities(self) -> Dict[str, Any]:
        return self._server_capabilities or {}

    # ------------------------------------------------------------------
    # MCP operations
    # ------------------------------------------------------------------

    def list_tools(self) -> List[MCPTool]:
        """Discover available tools from the server (tools/list)."""
        self._ensure_connected()
        result = self._send_request("tools/list")
        return [MCPTool.from_dict(t) for t in result.get("tools", [])]

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> MCPToolResult:
        """
        Invoke a tool on the server (tools/call).

        Raises:
            MCPServerError: if the server rejects the call.
        """
        self._ensure_connected()
        call = MCPToolCall(name=name, arguments=arguments or {})
        result = self._send_request("tools/call", call.to_mcp_params())
        return MCPToolResult.from_dict(result)

    def list_prompts(self) -> List[Dict[str, Any]]:
        self._ensure_connected()
        return self._send_request("prompts/list").get("prompts", [])

    def get_prompt(self, name: str, arguments: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        self._ensure_connected()
        params: Dict[str, Any] = {"name": name}
        if arguments:
            params["arguments"] = arguments
        return self._send_request("prompts/get", params)

    def list_resources(self) -> List[Dict[str, Any]]:
        self._ensure_connected()
        return self._send_request("resources/list").get("resources", [])

    def read_resource(self, uri: str) -> List[Dict[str, Any]]:
        """Return the `contents` list of resources/read."""
        self._ensure_connected()
        return self._send_request("resources/read", {"uri": uri}).get("contents", [])

    def ping(self) -> bool:
        """Send a ping to check server liveness."""
        try:
            self._send_request("ping")
            return True
        except RuntimeError:
            return False

    # ------------------------------------------------------------------
    # JSON-RPC transport
    # ------------------------------------------------------------------

    def _send_request(
        self, method: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Send a JSON-RPC request and wait for the response.

        Returns:
            The result field from the JSON-RPC response.

        Raises:
            MCPServerError for JSON-RPC errors, RuntimeError on transport
            failures.
        """
        self._ensure_process()

        request_id = str(uuid.uuid4())
        request = JSONRPCRequest(method=method, params=params, id=request_id)
        message = request.to_json() + "\n"

        try:
            self._process.stdin.write(message)
            self._process.stdin.flush()
        except (BrokenPipeError, OSError) as e:
            raise RuntimeError(f"Failed to send to MCP server: {e}") from e

        try:
            response_line = self._process.stdout.readline()
        except OSError as e:
            raise RuntimeError(f"Failed to read from MCP server: {e}") from e

        if not response_line:
            raise RuntimeError("MCP server closed connection (empty response)")

        try:
            data = json.loads(response_line.strip())
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Invalid JSON from MCP server: {e}") from e

        if "error" in data:
            error = data["error"]
            raise MCPServerError(
                error.get("code", 0),
                error.get("message", "unknown error"),
                error.get("data"),
            )

        return data.get("result", {})

    def _send_notification(
        self, method: str, params: Optional[Dict[str, Any]] = None
    ) -> None:
        """Send a JSON-RPC notification (no response expected)."""
        self._ensure_process()

        notification = JSONRPCNotification(method=method, params=params)
        message = notification.to_json() + "\n"

        try:
            self._process.stdin.write(message)
            self._process.stdin.flush()
        except (BrokenPipeError, OSError) as e:
            logger.warning(f"Failed to send notification: {e}")

    def _ensure_connected(self) -> None:
        """Raise if not connected."""
        if not self.is_connected:
            raise RuntimeError("MCP client is not connected. Call connect() first.")

    def _ensure_process(self) -> None:
        """Raise if process is not running."""
        if self._process is None or self._process.poll() is not None:
            raise RuntimeError("MCP server process is not running")
