"""Shared fixtures for relay tests. No test touches the network."""
import json
import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from mcp_relay.catalog import DATASTORM_TOOLS, SEARCH_TOOLS
from mcp_relay.relay import SearchToolRelay, ToolRelay
from mcp_relay.transport import HttpTransport

PROJECT_ROOT = Path(__file__).resolve().parent.parent

UPSTREAM_URL = "https://example.supabase.co/functions/v1/mcp-server"
TOKEN = "test-token-123"

CREDENTIAL_VARS = ("SUPABASE_ACCESS_TOKEN", "SUPABASE_ANON_KEY", "ANON_KEY")
PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")

TESLA_PAYLOAD = {
    "success": True,
    "query": "tesla",
    "totalResults": 2,
    "searchTime": 0.3,
    "results": [
        {"title": "A", "link": "http://a", "snippet": "s1", "displayLink": "a.com"},
        {"title": "B", "link": "http://b", "snippet": "s2", "displayLink": "b.com"},
    ],
}


def http_response(body=None, status_code=200, reason="OK", text=None):
    """Build a stand-in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if text is not None:
        response.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    else:
        response.json.return_value = body
    return response


def upstream_result(content):
    return {"jsonrpc": "2.0", "id": 1, "result": {"content": content}}


def search_payload_result(payload):
    return upstream_result([{"type": "text", "text": json.dumps(payload, indent=2)}])


@pytest.fixture
def mock_post():
    """Patch the single outbound POST used by HttpTransport."""
    with patch("mcp_relay.transport.requests.post") as post:
        yield post


@pytest.fixture
def datastorm_relay():
    return ToolRelay(HttpTransport(UPSTREAM_URL, TOKEN), DATASTORM_TOOLS)


@pytest.fixture
def search_relay():
    return SearchToolRelay(HttpTransport(UPSTREAM_URL, TOKEN), SEARCH_TOOLS)


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without any relay credentials."""
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def subprocess_env(**overrides):
    """Copy of os.environ for relay subprocesses, credentials removed."""
    env = {
        k: v for k, v in os.environ.items()
        if k not in CREDENTIAL_VARS and k not in PROXY_VARS
    }
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(PROJECT_ROOT), env.get("PYTHONPATH")) if p
    )
    env.update(overrides)
    return env
