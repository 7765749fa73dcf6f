"""Shaping upstream tool content into MCP content items."""

from __future__ import annotations

import json
from typing import Any


def normalize_content(items: list[Any]) -> list[dict[str, Any]]:
    """
    Fill in the fields MCP clients expect on each content item.

    A missing type becomes "text"; a missing or empty text becomes a
    pretty-printed dump of the whole item.
    """
    normalized = []
    for item in items:
        if isinstance(item, dict):
            normalized.append({
                **item,
                "type": item.get("type") or "text",
                "text": item.get("text") or json.dumps(item, indent=2, ensure_ascii=False),
            })
        else:
            normalized.append({"type": "text", "text": json.dumps(item, indent=2, ensure_ascii=False)})
    return normalized


def _display(value: Any) -> str:
    """Render a payload field the way the search Edge Function's clients print it."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_search_results(result: dict[str, Any]) -> str:
    """
    Render a search Edge Function payload as a readable text block.

    Missing fields print as "undefined" rather than failing, so a
    partial payload still reads as a normal result.
    """
    if not result.get("success"):
        return f"Search failed: {_display(result.get('error'))}"

    output = f'🔍 Search Results for: "{_display(result.get("query"))}"\n'
    output += f"📊 Total Results: {_display(result.get('totalResults'))}\n"
    output += f"⏱️ Search Time: {_display(result.get('searchTime'))}s\n\n"

    for index, item in enumerate(result.get("results") or [], start=1):
        output += f"**{index}. {_display(item.get('title'))}**\n"
        output += f"🔗 {_display(item.get('link'))}\n"
        output += f"📝 {_display(item.get('snippet'))}\n"
        output += f"🌐 {_display(item.get('displayLink'))}\n\n"

    return output
