"""
Check Relay — end-to-end smoke check for an MCP relay.

This script drives a relay the way an agent host does. It:
1. Launches the relay as a stdio subprocess
2. Runs the MCP initialize handshake
3. Lists the advertised tools
4. Optionally calls one tool and prints the content
5. Stops the relay

Usage:
    # List tools exposed by the datastorm relay
    python check_relay.py datastorm

    # Run a search through the Google Search relay
    python check_relay.py google-search --call web_search --args '{"query": "tesla model 3"}'

Credentials are read from the environment or a .env file, exactly as
the relay itself reads them.
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys

from dotenv import find_dotenv, load_dotenv

from mcp_relay.config import RELAYS
from mcp_relay.manager import ToolServerManager

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


# ============================================================
# RELAY LAUNCH COMMANDS
# ============================================================

RELAY_MODULES = {
    "datastorm": "mcp_relay.servers.datastorm",
    "google-search": "mcp_relay.servers.google_search",
}


def relay_command(relay_id: str) -> list[str]:
    return [sys.executable, "-m", RELAY_MODULES[relay_id]]


def print_tools(tools: list[dict]) -> None:
    print(f"\nAvailable tools ({len(tools)}):\n")
    for tool in tools:
        schema = tool.get("inputSchema", {})
        required = set(schema.get("required", []))
        print(f"  {tool['name']}")
        print(f"    {tool.get('description', '')}")
        for pname, pinfo in schema.get("properties", {}).items():
            marker = "*" if pname in required else " "
            print(f"    {marker} {pname} ({pinfo.get('type', 'any')})")
        print()


def print_result(result: dict) -> None:
    status = "ERROR" if result.get("isError") else "OK"
    print(f"{'=' * 60}\n  Tool result: {status}\n{'=' * 60}")
    for item in result.get("content", []):
        print(item.get("text", json.dumps(item, indent=2)))
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="Smoke-check an MCP relay over stdio.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python check_relay.py datastorm
  python check_relay.py google-search --call image_search --args '{"query": "ioniq 5", "image_size": "large"}'
        """,
    )
    parser.add_argument("relay", choices=sorted(RELAYS.keys()), help="Relay to launch")
    parser.add_argument("--call", "-c", type=str, default=None, help="Tool to call after listing")
    parser.add_argument("--args", "-a", type=str, default="{}", help="Tool arguments as a JSON object")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as e:
        parser.error(f"--args is not valid JSON: {e}")
    if not isinstance(arguments, dict):
        parser.error("--args must be a JSON object")

    load_dotenv(find_dotenv(usecwd=True))
    manager = ToolServerManager()

    # Graceful shutdown on Ctrl+C
    def shutdown(sig, frame):
        print("\nStopping relay...")
        manager.stop_all()
        sys.exit(0)
    signal.signal(signal.SIGINT, shutdown)

    manager.register_server(args.relay, relay_command(args.relay))

    try:
        tools = manager.start(args.relay)
    except RuntimeError as e:
        print(f"Error: relay failed to start: {e}")
        manager.stop_all()
        sys.exit(1)

    info = manager.server_info(args.relay)
    print(f"Connected to {info.get('name', args.relay)} {info.get('version', '')}".rstrip())
    print_tools(tools)

    if not args.call:
        manager.stop_all()
        return

    print(f"Calling {args.call} with {json.dumps(arguments)}\n")
    try:
        result = manager.call(args.relay, args.call, arguments)
        print_result(result)
    except RuntimeError as e:
        print(f"Tool call failed: {e}")
        sys.exit(1)
    finally:
        manager.stop_all()
        print("\nRelay stopped.")


if __name__ == "__main__":
    main()
