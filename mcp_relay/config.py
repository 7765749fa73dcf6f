"""
Relay configuration.

Each relay is one row in RELAYS: where upstream lives, which
environment variables may carry its bearer credential (first hit
wins), and whether results go through search formatting.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from mcp_relay.catalog import get_catalog

SUPABASE_FUNCTIONS_URL = "https://duiakhiloobwkgvfrcnl.supabase.co/functions/v1"

# ============================================================
# RELAY DEFINITIONS
# ============================================================
# relay_id → defaults. Add new Edge Function relays here.

RELAYS = {
    "datastorm": {
        "server_name": "datastorm-mcp-wrapper",
        "url": f"{SUPABASE_FUNCTIONS_URL}/mcp-server",
        "url_env": "DATASTORM_MCP_URL",
        "token_env": ["SUPABASE_ACCESS_TOKEN"],
        "format_search": False,
    },
    "google-search": {
        "server_name": "google-search-mcp-server",
        "url": f"{SUPABASE_FUNCTIONS_URL}/google-search-mcp",
        "url_env": "GOOGLE_SEARCH_MCP_URL",
        "token_env": ["SUPABASE_ANON_KEY", "ANON_KEY"],
        "format_search": True,
    },
}

SERVER_VERSION = "1.0.0"


class ConfigError(Exception):
    """Required relay configuration is missing or invalid."""


@dataclass(frozen=True)
class RelayConfig:
    relay_id: str
    server_name: str
    url: str
    token: str = field(repr=False)
    tools: Mapping[str, dict] = field(repr=False)
    format_search: bool = False
    server_version: str = SERVER_VERSION


def load_config(relay_id: str, env: Mapping[str, str] | None = None) -> RelayConfig:
    """
    Build the config for a relay from its defaults and the environment.

    Raises:
        ConfigError: unknown relay, or no credential variable is set.
    """
    env = os.environ if env is None else env

    defaults = RELAYS.get(relay_id)
    if not defaults:
        raise ConfigError(
            f"Unknown relay: '{relay_id}'. Available: {list(RELAYS.keys())}"
        )

    token = next(
        (env[name] for name in defaults["token_env"] if env.get(name)),
        None,
    )
    if not token:
        names = " or ".join(defaults["token_env"])
        raise ConfigError(f"{names} environment variable is required")

    return RelayConfig(
        relay_id=relay_id,
        server_name=defaults["server_name"],
        url=env.get(defaults["url_env"]) or defaults["url"],
        token=token,
        tools=get_catalog(relay_id),
        format_search=defaults["format_search"],
    )
