"""
MCP Tool Relays — stdio MCP servers in front of Supabase Edge Functions.

Architecture:
    ┌──────────────┐     stdio      ┌──────────────┐     HTTPS     ┌───────────────┐
    │ AI agent host │ ──────────── │  Tool Relay   │ ──────────── │ Edge Function │
    │ (MCP client)  │  JSON-RPC    │ (this process)│   JSON-RPC   │   (upstream)  │
    └──────────────┘     pipes     └──────────────┘  bearer auth  └───────────────┘

Each relay advertises a static tool catalog and forwards every
tools/call as one POST to its Edge Function, reshaping the reply into
MCP content items.

The StdioToolServer handles the MCP side.
ToolRelay / SearchToolRelay handle the upstream side.

The ToolServerManager launches relay processes and talks to them the
way an agent host does; the bridge exposes relay tools to LangChain.
"""

from mcp_relay.config import ConfigError, RelayConfig, load_config
from mcp_relay.relay import SearchToolRelay, ToolRelay, build_relay
from mcp_relay.server import StdioToolServer, serve
from mcp_relay.manager import ToolServerManager

# Bridge requires langchain — lazy import to keep relays standalone
def relay_to_langchain_tool(*args, **kwargs):
    from mcp_relay.bridge import relay_to_langchain_tool as _impl
    return _impl(*args, **kwargs)

def relay_langchain_tools(*args, **kwargs):
    from mcp_relay.bridge import relay_langchain_tools as _impl
    return _impl(*args, **kwargs)

__all__ = [
    "ConfigError",
    "RelayConfig",
    "load_config",
    "ToolRelay",
    "SearchToolRelay",
    "build_relay",
    "StdioToolServer",
    "serve",
    "ToolServerManager",
    "relay_to_langchain_tool",
    "relay_langchain_tools",
]
