"""
Tool relay: a fixed tool catalog in front of one upstream JSON-RPC endpoint.

    ┌──────────────┐   stdio    ┌───────────┐   HTTPS    ┌───────────────┐
    │   AI agent   │ ─────────▶ │ ToolRelay │ ─────────▶ │ Edge Function │
    └──────────────┘  MCP JSON  └───────────┘  JSON-RPC  └───────────────┘

ToolRelay forwards calls and passes upstream content through.
SearchToolRelay renders search payloads as text and reports every
failure as an isError result instead of raising.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from mcp_relay.config import RelayConfig
from mcp_relay.formatting import format_search_results, normalize_content
from mcp_relay.transport import HttpTransport, JsonRpcRequest, Transport, UpstreamError

logger = logging.getLogger(__name__)

# Upstream handles one call per POST; the id only has to be well-formed.
UPSTREAM_REQUEST_ID = 1


class ToolRelay:
    """Forward tool calls to upstream and relay its content."""

    def __init__(self, transport: Transport, tools: Mapping[str, dict]):
        self.transport = transport
        self._tools = dict(tools)

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    def get_tool(self, name: str) -> dict | None:
        return self._tools.get(name)

    def list_tools(self) -> dict[str, Any]:
        """Return the static catalog. Never calls upstream."""
        return {"tools": list(self._tools.values())}

    def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Forward one invocation upstream.

        The name is not checked against the catalog; upstream decides
        what it accepts.

        Raises:
            HttpStatusError: upstream returned a non-2xx status
            UpstreamError: upstream returned a JSON-RPC error or no result
            requests.RequestException / ValueError: network or decode failure
        """
        try:
            content = self.forward(name, arguments)
            return {"content": self.render(content)}
        except Exception as e:
            logger.error(f"Error calling tool {name}: {e}")
            raise

    def forward(self, name: str, arguments: dict[str, Any] | None) -> list[Any]:
        """Send tools/call upstream and return its raw content list."""
        request = JsonRpcRequest(
            method="tools/call",
            params={"name": name, "arguments": arguments or {}},
            id=UPSTREAM_REQUEST_ID,
        )
        logger.info(f"Relaying tool call: {name}")
        response = self.transport.send(request)

        if response.is_error:
            raise UpstreamError(f"MCP Server Error: {response.error_message}")

        if not isinstance(response.result, dict):
            raise UpstreamError("MCP Server Error: response has no result")

        content = response.result.get("content") or []
        if not isinstance(content, list):
            raise UpstreamError(
                f"MCP Server Error: content must be a list, got {type(content).__name__}"
            )
        return content

    def render(self, content: list[Any]) -> list[dict[str, Any]]:
        return normalize_content(content)


class SearchToolRelay(ToolRelay):
    """
    Relay for the search Edge Function.

    Upstream puts a JSON-encoded search payload in the first content
    item's text. Any failure along the way becomes a readable isError
    result rather than a protocol error.
    """

    def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            content = self.forward(name, arguments)
            return {"content": self.render(content)}
        except Exception as e:
            logger.error(f"Error performing search with {name}: {e}")
            return {
                "content": [{"type": "text", "text": f"Error performing search: {e}"}],
                "isError": True,
            }

    def render(self, content: list[Any]) -> list[dict[str, Any]]:
        if not content:
            raise UpstreamError("Search response has no content")

        result = json.loads(content[0]["text"])
        return [{"type": "text", "text": format_search_results(result)}]


def build_relay(config: RelayConfig, transport: Transport | None = None) -> ToolRelay:
    """Create the relay variant a config asks for."""
    transport = transport or HttpTransport(config.url, config.token)
    relay_cls = SearchToolRelay if config.format_search else ToolRelay
    return relay_cls(transport, config.tools)
