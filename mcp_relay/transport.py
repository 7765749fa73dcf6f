"""
Transport layer for MCP relay communication.

Implements:
  - HttpTransport: JSON-RPC over a single HTTPS POST (the upstream
    Edge Function leg of the relay)
  - StdioTransport: JSON-RPC over stdin/stdout pipes to a relay
    subprocess (used by the manager and smoke checks)
"""

from __future__ import annotations

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)


class HttpStatusError(RuntimeError):
    """Upstream answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        message = f"HTTP {status_code}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UpstreamError(RuntimeError):
    """Upstream answered, but with a JSON-RPC error or an unusable body."""


@dataclass
class JsonRpcRequest:
    """JSON-RPC 2.0 request. An id of None makes it a notification."""
    method: str
    params: dict[str, Any]
    id: int | str | None = None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": "2.0"}
        if self.id is not None:
            message["id"] = self.id
        message["method"] = self.method
        message["params"] = self.params
        return message

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class JsonRpcResponse:
    """JSON-RPC 2.0 response."""
    id: int | str | None
    result: Any = None
    error: dict | None = None

    @classmethod
    def from_dict(cls, parsed: Any) -> "JsonRpcResponse":
        if not isinstance(parsed, dict):
            raise UpstreamError(
                f"Expected a JSON-RPC object, got {type(parsed).__name__}"
            )
        return cls(
            id=parsed.get("id"),
            result=parsed.get("result"),
            error=parsed.get("error"),
        )

    @classmethod
    def from_json(cls, data: str) -> "JsonRpcResponse":
        return cls.from_dict(json.loads(data))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def error_message(self) -> str:
        if isinstance(self.error, dict):
            return str(self.error.get("message"))
        return str(self.error)


class Transport(ABC):
    """Abstract transport layer for MCP communication."""

    @abstractmethod
    def send(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Send a request and return the response."""
        ...

    def start(self) -> None:
        """Start the transport (e.g., launch subprocess)."""

    def stop(self) -> None:
        """Stop the transport (e.g., terminate subprocess)."""

    def is_alive(self) -> bool:
        """Check if the transport is active."""
        return True


class HttpTransport(Transport):
    """
    JSON-RPC over HTTPS to a remote Edge Function.

    Every send() is exactly one POST carrying the bearer credential.
    The call blocks for as long as requests allows; there is no
    retry and no session reuse between calls.
    """

    def __init__(self, url: str, token: str):
        self.url = url
        self._token = token

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    def send(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """POST the request and decode the JSON-RPC reply."""
        logger.debug(f"POST {self.url} method={request.method}")
        response = requests.post(
            self.url,
            headers=self.headers,
            data=request.to_json(),
        )

        if not 200 <= response.status_code < 300:
            raise HttpStatusError(response.status_code, response.reason or "")

        return JsonRpcResponse.from_dict(response.json())


class StdioTransport(Transport):
    """
    JSON-RPC over stdin/stdout pipes to a subprocess.

    This is MCP's native local transport. The relay runs as
    a child process. We write JSON-RPC requests to its stdin and
    read responses from its stdout. One line = one message.
    """

    def __init__(self, command: list[str], env: dict[str, str] | None = None,
                 cwd: str | None = None):
        """
        Args:
            command: Command to launch the relay process.
                     e.g., ["python", "-m", "mcp_relay.servers.datastorm"]
            env: Optional environment variables for the subprocess.
            cwd: Optional working directory for the subprocess.
        """
        self.command = command
        self.env = env
        self.cwd = cwd
        self._process: subprocess.Popen | None = None
        self._request_id = 0

    def start(self) -> None:
        """Launch the relay subprocess."""
        if self._process and self._process.poll() is None:
            logger.warning("Transport already running, stopping first")
            self.stop()

        logger.info(f"Starting stdio transport: {' '.join(self.command)}")
        self._process = subprocess.Popen(
            self.command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            env=self.env,
            cwd=self.cwd,
            bufsize=1,  # Line-buffered
        )

    def stop(self) -> None:
        """Terminate the relay subprocess."""
        if self._process:
            self._process.terminate()
            try:
                self._process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()
            try:
                self._process.stdin.close()
            except BrokenPipeError:
                # Unflushed request to a process that already exited
                pass
            self._process.stdout.close()
            self._process.stderr.close()
            self._process = None
            logger.info("Stdio transport stopped")

    def is_alive(self) -> bool:
        """Check if the subprocess is running."""
        return self._process is not None and self._process.poll() is None

    def notify(self, request: JsonRpcRequest) -> None:
        """Write a notification; no reply is read."""
        self._write(request)

    def send(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Send JSON-RPC request via stdin, read response from stdout."""
        self._write(request)

        response_line = self._process.stdout.readline()
        if not response_line:
            self._raise_died()

        return JsonRpcResponse.from_json(response_line.strip())

    def next_id(self) -> int:
        """Generate the next request ID."""
        self._request_id += 1
        return self._request_id

    def _write(self, request: JsonRpcRequest) -> None:
        if self._process is None:
            raise RuntimeError("Transport not running. Call start() first.")
        if self._process.poll() is not None:
            self._raise_died()

        try:
            self._process.stdin.write(request.to_json() + "\n")
            self._process.stdin.flush()
        except BrokenPipeError:
            self._raise_died()

    def _raise_died(self) -> None:
        # Process exited; its stderr says why
        self._process.wait()
        stderr = self._process.stderr.read() if self._process.stderr else ""
        raise RuntimeError(
            f"Relay process died (exit code {self._process.returncode}). stderr: {stderr[:500]}"
        )
