"""
Google Search MCP relay.

Forwards web_search / image_search to the google-search-mcp Edge
Function and renders results as text. Requires SUPABASE_ANON_KEY
(or ANON_KEY).

Launch:
    python -m mcp_relay.servers.google_search

Test manually:
    echo '{"jsonrpc":"2.0","method":"tools/call","params":{"name":"web_search","arguments":{"query":"tesla"}},"id":2}' | python -m mcp_relay.servers.google_search
"""

from mcp_relay.server import serve

RELAY_ID = "google-search"


def main() -> None:
    serve(RELAY_ID)


if __name__ == "__main__":
    main()
