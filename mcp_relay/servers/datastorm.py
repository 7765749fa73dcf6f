"""
Datastorm MCP relay.

Forwards tool calls to the deployed mcp-server Edge Function.
Requires SUPABASE_ACCESS_TOKEN.

Launch:
    python -m mcp_relay.servers.datastorm

Test manually:
    echo '{"jsonrpc":"2.0","method":"tools/list","params":{},"id":1}' | python -m mcp_relay.servers.datastorm
"""

from mcp_relay.server import serve

RELAY_ID = "datastorm"


def main() -> None:
    serve(RELAY_ID)


if __name__ == "__main__":
    main()
