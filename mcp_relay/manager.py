"""
Relay Manager — launches and drives MCP relay processes over stdio.

This is the client side of the relay: it speaks to a relay exactly
as an AI agent host would, which makes it the tool for smoke checks
and end-to-end tests.

Usage:
    manager = ToolServerManager()

    # Register a relay
    manager.register_server("datastorm", [sys.executable, "-m", "mcp_relay.servers.datastorm"])

    # Start it (handshake + tool discovery)
    tools = manager.start("datastorm")

    # Call a tool
    result = manager.call("datastorm", "populate-images", {"vehicleId": "v1", "model": "Model 3"})

    # Stop everything
    manager.stop_all()
"""

from __future__ import annotations

import logging
from typing import Any

from mcp_relay.server import DEFAULT_PROTOCOL_VERSION
from mcp_relay.transport import JsonRpcRequest, StdioTransport

logger = logging.getLogger(__name__)

CLIENT_INFO = {"name": "mcp-relay-manager", "version": "1.0.0"}


class ToolServerManager:
    """
    Manages the lifecycle of MCP relay processes.

    Responsibilities:
    - Launch relays as subprocesses (stdio transport)
    - Perform the MCP initialize handshake
    - Route tool calls to the correct relay
    - Graceful shutdown
    """

    def __init__(self):
        self._servers: dict[str, dict] = {}
        # server_id → {
        #   "command": [...],
        #   "transport": StdioTransport | None,
        #   "env": dict | None,
        #   "cwd": str | None,
        #   "server_info": dict (from initialize),
        #   "tools": [schema, ...] (discovered after start),
        # }

    def register_server(
        self,
        server_id: str,
        command: list[str],
        env: dict[str, str] | None = None,
        cwd: str | None = None,
    ) -> None:
        """
        Register a relay (does not start it yet).

        Args:
            server_id: Unique identifier for this relay
            command: Command to launch the relay process
            env: Optional environment variables
            cwd: Optional working directory
        """
        self._servers[server_id] = {
            "command": command,
            "transport": None,
            "env": env,
            "cwd": cwd,
            "server_info": {},
            "tools": [],
        }
        logger.info(f"Registered server: {server_id} ({' '.join(command)})")

    def start(self, server_id: str) -> list[dict]:
        """
        Start a relay, run the handshake and discover its tools.

        Returns:
            List of tool descriptors from the relay.
        """
        server = self._get(server_id)

        transport = StdioTransport(server["command"], server.get("env"), server.get("cwd"))
        transport.start()
        server["transport"] = transport

        response = transport.send(JsonRpcRequest(
            method="initialize",
            params={
                "protocolVersion": DEFAULT_PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": CLIENT_INFO,
            },
            id=transport.next_id(),
        ))
        if response.is_error:
            raise RuntimeError(
                f"Failed to initialize {server_id}: {response.error_message}"
            )
        server["server_info"] = response.result.get("serverInfo", {})

        transport.notify(JsonRpcRequest(method="notifications/initialized", params={}))

        response = transport.send(JsonRpcRequest(
            method="tools/list",
            params={},
            id=transport.next_id(),
        ))
        if response.is_error:
            raise RuntimeError(
                f"Failed to discover tools from {server_id}: {response.error_message}"
            )

        server["tools"] = (response.result or {}).get("tools", [])
        tool_names = [t["name"] for t in server["tools"]]
        logger.info(f"Started {server_id}: tools={tool_names}")

        return server["tools"]

    def stop(self, server_id: str) -> None:
        """Stop a relay."""
        server = self._servers.get(server_id)
        if server and server["transport"]:
            server["transport"].stop()
            server["transport"] = None
            logger.info(f"Stopped {server_id}")

    def stop_all(self) -> None:
        """Stop all running relays."""
        for server_id in list(self._servers.keys()):
            self.stop(server_id)

    def call(
        self,
        server_id: str,
        tool_name: str,
        arguments: dict[str, Any],
    ) -> dict:
        """
        Call a tool through a relay.

        Returns:
            The MCP tool result ({"content": [...], "isError"?: bool}).
        """
        server = self._get(server_id)

        transport = server.get("transport")
        if not transport or not transport.is_alive():
            raise RuntimeError(f"Server {server_id} is not running. Call start() first.")

        response = transport.send(JsonRpcRequest(
            method="tools/call",
            params={"name": tool_name, "arguments": arguments},
            id=transport.next_id(),
        ))

        if response.is_error:
            raise RuntimeError(
                f"Tool call failed ({server_id}/{tool_name}): {response.error_message}"
            )

        return response.result

    def list_tools(self, server_id: str) -> list[dict]:
        """List discovered tools for a relay."""
        server = self._servers.get(server_id)
        return server["tools"] if server else []

    def server_info(self, server_id: str) -> dict:
        """serverInfo reported by the relay during initialize."""
        server = self._servers.get(server_id)
        return server["server_info"] if server else {}

    def is_running(self, server_id: str) -> bool:
        """Check if a specific relay is running."""
        server = self._servers.get(server_id)
        return (
            server is not None
            and server["transport"] is not None
            and server["transport"].is_alive()
        )

    def _get(self, server_id: str) -> dict:
        server = self._servers.get(server_id)
        if not server:
            raise ValueError(f"Unknown server: {server_id}")
        return server
