"""
MCP stdio server that fronts a ToolRelay.

The server:
1. Reads JSON-RPC messages from stdin, one per line
2. Answers the MCP handshake and tool methods, delegating to the relay
3. Writes JSON-RPC responses to stdout

stdout carries protocol messages only; logs go to stderr.

To run a relay:

    from mcp_relay.server import serve

    if __name__ == "__main__":
        serve("datastorm")
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, TextIO

from dotenv import find_dotenv, load_dotenv

from mcp_relay.config import ConfigError, load_config
from mcp_relay.relay import ToolRelay, build_relay

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2024-11-05"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcError(Exception):
    """An error that maps directly onto a JSON-RPC error response."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class StdioToolServer:
    """
    JSON-RPC MCP server that communicates via stdin/stdout.

    Protocol:
    - One JSON-RPC message per line
    - Supports methods:
        - "initialize" → server info and capabilities
        - "ping"       → health check
        - "tools/list" → the relay's static catalog
        - "tools/call" → forwarded through the relay
    - Messages without an id are notifications and get no reply
    """

    def __init__(
        self,
        name: str,
        version: str,
        relay: ToolRelay,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self.name = name
        self.version = version
        self.relay = relay
        self._stdin = stdin
        self._stdout = stdout

    def run(self) -> None:
        """
        Main loop: read messages from stdin, dispatch, write responses to stdout.

        This blocks until stdin is closed (parent process terminates).
        """
        logger.info(f"{self.name} running on stdio with {len(self.relay.tool_names)} tools: "
                    f"{self.relay.tool_names}")

        for line in self._stdin or sys.stdin:
            reply = self.handle_line(line)
            if reply is not None:
                self._write(reply)

        logger.info("stdin closed, shutting down")

    def handle_line(self, line: str) -> dict | None:
        """Handle one raw input line. Returns the reply, or None for notifications."""
        line = line.strip()
        if not line:
            return None

        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            return _error(None, PARSE_ERROR, f"Parse error: {e}")

        return self.handle_message(message)

    def handle_message(self, message: Any) -> dict | None:
        """Handle one decoded JSON-RPC message."""
        if not isinstance(message, dict):
            return _error(None, INVALID_REQUEST, "Invalid Request")

        method = message.get("method")
        is_notification = "id" not in message
        request_id = message.get("id")

        if not isinstance(method, str):
            if is_notification:
                # Responses from the client to requests we never send
                return None
            return _error(request_id, INVALID_REQUEST, "Invalid Request")

        params = message.get("params") or {}

        if is_notification:
            logger.debug(f"Notification: {method}")
            return None

        try:
            result = self._dispatch(method, params)
        except JsonRpcError as e:
            return _error(request_id, e.code, e.message)
        except Exception as e:
            return _error(request_id, INTERNAL_ERROR, str(e))

        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    def _dispatch(self, method: str, params: dict) -> Any:
        """Route a method call to the appropriate handler."""

        if method == "initialize":
            return self._initialize(params)

        if method == "ping":
            return {}

        if method == "tools/list":
            return self.relay.list_tools()

        if method == "tools/call":
            tool_name = params.get("name") if isinstance(params, dict) else None
            if not isinstance(tool_name, str) or not tool_name:
                raise JsonRpcError(INVALID_PARAMS, "Invalid params: tool name is required")

            arguments = params.get("arguments") or {}
            if not isinstance(arguments, dict):
                raise JsonRpcError(INVALID_PARAMS, "Invalid params: arguments must be an object")

            return self.relay.call_tool(tool_name, arguments)

        raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: '{method}'")

    def _initialize(self, params: dict) -> dict:
        requested = params.get("protocolVersion") if isinstance(params, dict) else None
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else DEFAULT_PROTOCOL_VERSION

        client = params.get("clientInfo", {}) if isinstance(params, dict) else {}
        logger.info(f"Initialize from {client.get('name', 'unknown client')} "
                    f"(protocol {version})")

        return {
            "protocolVersion": version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self.name, "version": self.version},
        }

    def _write(self, reply: dict) -> None:
        """Write a JSON-RPC response to stdout."""
        stdout = self._stdout or sys.stdout
        stdout.write(json.dumps(reply) + "\n")
        stdout.flush()


def _error(request_id: Any, code: int, message: str) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def serve(relay_id: str) -> None:
    """
    Process entry point for a relay.

    Exits with status 1, before touching stdin, when the relay's
    credential is missing or startup otherwise fails.
    """
    logging.basicConfig(
        level=os.environ.get("MCP_RELAY_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = load_config(relay_id)
        relay = build_relay(config)
        server = StdioToolServer(config.server_name, config.server_version, relay)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Fatal error starting {relay_id} relay: {e}")
        sys.exit(1)

    # Undecodable bytes must reach the JSON parser as a -32700, not kill the loop
    sys.stdin.reconfigure(encoding="utf-8", errors="replace")
    sys.stdout.reconfigure(encoding="utf-8")

    logger.info(f"Relaying to {config.url}")
    try:
        server.run()
    except KeyboardInterrupt:
        pass
