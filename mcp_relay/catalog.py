"""
Static tool catalogs advertised by each relay.

MCP clients validate call arguments against these schemas, so they
mirror the upstream Edge Functions field for field. The relays never
ask upstream for its tool list; discovery there needs credentials we
don't want to re-expose.
"""

from __future__ import annotations

import copy

# ============================================================
# DATASTORM (functions/v1/mcp-server)
# ============================================================

DATASTORM_TOOLS: dict[str, dict] = {
    "populate-images": {
        "name": "populate-images",
        "description": (
            "Populate vehicle image galleries by searching for and downloading "
            "images from Google Search via mcp-server edge function. "
            "Requires admin privileges."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "vehicleId": {
                    "type": "string",
                    "description": "Vehicle ID to populate images for",
                },
                "model": {
                    "type": "string",
                    "description": "Vehicle model name",
                },
                "trim": {
                    "type": "string",
                    "description": "Vehicle trim level (optional)",
                },
                "manufacturer": {
                    "type": "string",
                    "description": "Vehicle manufacturer (optional)",
                },
                "maxImages": {
                    "type": "number",
                    "description": "Maximum number of images to download (default: 8)",
                    "minimum": 1,
                    "maximum": 20,
                },
            },
            "required": ["vehicleId", "model"],
        },
    },
    "update-vehicle-details": {
        "name": "update-vehicle-details",
        "description": (
            "Refresh manufacturer, vehicle, specification and news records for a "
            "vehicle model using grounded web research via mcp-server edge function. "
            "Requires admin privileges."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "manufacturer": {
                    "type": "string",
                    "description": "Vehicle manufacturer name",
                },
                "model": {
                    "type": "string",
                    "description": "Vehicle model name",
                },
                "trim": {
                    "type": "string",
                    "description": "Vehicle trim level (optional)",
                },
                "year": {
                    "type": "number",
                    "description": "Model year (optional)",
                },
            },
            "required": ["manufacturer", "model"],
        },
    },
}

# ============================================================
# GOOGLE SEARCH (functions/v1/google-search-mcp)
# ============================================================

_SEARCH_PROPERTIES = {
    "query": {
        "type": "string",
        "description": "The search query string",
    },
    "num_results": {
        "type": "number",
        "description": "Number of results to return (default: 10, max: 100)",
        "minimum": 1,
        "maximum": 100,
    },
    "site_restriction": {
        "type": "string",
        "description": 'Restrict search to a specific site (e.g., "example.com")',
    },
    "language": {
        "type": "string",
        "description": 'Search language preference (e.g., "en", "es", "fr")',
    },
    "start_index": {
        "type": "number",
        "description": "Starting index for pagination (default: 1)",
        "minimum": 1,
    },
}

_IMAGE_PROPERTIES = {
    "image_size": {
        "type": "string",
        "enum": ["huge", "icon", "large", "medium", "small", "xlarge", "xxlarge"],
        "description": "Filter by image size",
    },
    "image_type": {
        "type": "string",
        "enum": ["clipart", "face", "lineart", "stock", "photo", "animated"],
        "description": "Filter by image type",
    },
    "image_color_type": {
        "type": "string",
        "enum": ["color", "gray", "trans"],
        "description": "Filter by color type",
    },
    "safe": {
        "type": "string",
        "enum": ["active", "off"],
        "description": "Safe search setting",
    },
}

SEARCH_TOOLS: dict[str, dict] = {
    "web_search": {
        "name": "web_search",
        "description": "Perform web searches using Google's Programmable Search Engine",
        "inputSchema": {
            "type": "object",
            "properties": copy.deepcopy(_SEARCH_PROPERTIES),
            "required": ["query"],
        },
    },
    "image_search": {
        "name": "image_search",
        "description": "Search for images using Google's Programmable Search Engine",
        "inputSchema": {
            "type": "object",
            "properties": {
                **copy.deepcopy(_SEARCH_PROPERTIES),
                **copy.deepcopy(_IMAGE_PROPERTIES),
            },
            "required": ["query"],
        },
    },
}

CATALOGS: dict[str, dict[str, dict]] = {
    "datastorm": DATASTORM_TOOLS,
    "google-search": SEARCH_TOOLS,
}


def get_catalog(relay_id: str) -> dict[str, dict]:
    """Return the tool table for a relay, keyed by tool name."""
    try:
        return CATALOGS[relay_id]
    except KeyError:
        raise ValueError(
            f"Unknown relay: '{relay_id}'. Available: {list(CATALOGS.keys())}"
        ) from None
