"""
Bridge between relay catalogs and LangChain.

Wraps each relay tool as a LangChain StructuredTool that calls the
relay in-process, so a LangChain agent can use the Edge Functions
without going through stdio.

Usage:
    from mcp_relay.bridge import relay_langchain_tools

    relay = build_relay(load_config("google-search"))
    tools = relay_langchain_tools(relay)
"""

from __future__ import annotations

from typing import Any

from langchain_core.tools import StructuredTool

from mcp_relay.relay import ToolRelay


def relay_to_langchain_tool(
    relay: ToolRelay,
    tool_name: str,
    description_override: str | None = None,
) -> StructuredTool:
    """
    Create a LangChain StructuredTool that proxies one relay tool.

    Args:
        relay: The relay that owns the tool
        tool_name: The tool name as listed in the relay's catalog
        description_override: Optional override for the tool description

    Returns:
        A StructuredTool whose input schema is the catalog's inputSchema.
    """
    descriptor = relay.get_tool(tool_name)
    if descriptor is None:
        raise ValueError(
            f"Unknown tool: '{tool_name}'. Available: {relay.tool_names}"
        )

    def _call_relay(**kwargs: Any) -> str:
        """Proxy call through the relay."""
        try:
            result = relay.call_tool(tool_name, kwargs)
        except Exception as e:
            return f"Error calling {tool_name}: {e}"
        return "\n".join(item.get("text", "") for item in result.get("content", []))

    return StructuredTool.from_function(
        func=_call_relay,
        name=tool_name,
        description=description_override or descriptor.get("description", tool_name),
        args_schema=descriptor["inputSchema"],
    )


def relay_langchain_tools(relay: ToolRelay) -> list[StructuredTool]:
    """Wrap every tool in the relay's catalog."""
    return [relay_to_langchain_tool(relay, name) for name in relay.tool_names]
