"""
Tests for relay configuration and the fail-fast startup path.
"""
import io
from unittest.mock import patch

import pytest

from mcp_relay.catalog import DATASTORM_TOOLS, SEARCH_TOOLS, get_catalog
from mcp_relay.config import RELAYS, ConfigError, load_config
from mcp_relay.servers import datastorm, google_search


class TestLoadConfig:

    def test_datastorm_config(self):
        config = load_config("datastorm", env={"SUPABASE_ACCESS_TOKEN": "tok"})

        assert config.token == "tok"
        assert config.url == RELAYS["datastorm"]["url"]
        assert config.url.endswith("/functions/v1/mcp-server")
        assert config.server_name == "datastorm-mcp-wrapper"
        assert config.format_search is False
        assert dict(config.tools) == DATASTORM_TOOLS

    def test_search_config_prefers_supabase_anon_key(self):
        config = load_config("google-search", env={"SUPABASE_ANON_KEY": "a", "ANON_KEY": "b"})

        assert config.token == "a"
        assert config.format_search is True
        assert dict(config.tools) == SEARCH_TOOLS

    def test_search_config_falls_back_to_anon_key(self):
        assert load_config("google-search", env={"ANON_KEY": "b"}).token == "b"

    def test_empty_credential_counts_as_missing(self):
        with pytest.raises(ConfigError):
            load_config("datastorm", env={"SUPABASE_ACCESS_TOKEN": ""})

    def test_missing_credential(self):
        with pytest.raises(ConfigError, match="SUPABASE_ACCESS_TOKEN"):
            load_config("datastorm", env={})

    def test_missing_search_credential_names_both_variables(self):
        with pytest.raises(ConfigError, match="SUPABASE_ANON_KEY or ANON_KEY"):
            load_config("google-search", env={})

    def test_url_override(self):
        config = load_config("datastorm", env={
            "SUPABASE_ACCESS_TOKEN": "tok",
            "DATASTORM_MCP_URL": "http://localhost:54321/functions/v1/mcp-server",
        })

        assert config.url == "http://localhost:54321/functions/v1/mcp-server"

    def test_unknown_relay(self):
        with pytest.raises(ConfigError, match="Unknown relay"):
            load_config("nope", env={"SUPABASE_ACCESS_TOKEN": "tok"})

    def test_token_not_in_repr(self):
        config = load_config("datastorm", env={"SUPABASE_ACCESS_TOKEN": "secret-value"})

        assert "secret-value" not in repr(config)

    def test_unknown_catalog(self):
        with pytest.raises(ValueError):
            get_catalog("nope")


class TestStartup:

    @pytest.mark.parametrize("entry, expected", [
        (datastorm.main, "SUPABASE_ACCESS_TOKEN"),
        (google_search.main, "SUPABASE_ANON_KEY or ANON_KEY"),
    ])
    def test_missing_credential_exits_before_reading_stdin(self, clean_env, capsys, entry, expected):
        stdin = io.StringIO()
        clean_env.setattr("sys.stdin", stdin)

        with patch("mcp_relay.server.load_dotenv"), pytest.raises(SystemExit) as exc_info:
            entry()

        assert exc_info.value.code == 1
        assert expected in capsys.readouterr().err
        assert stdin.tell() == 0

    def test_unexpected_startup_failure_exits_1(self, clean_env):
        clean_env.setenv("SUPABASE_ACCESS_TOKEN", "tok")

        with patch("mcp_relay.server.load_dotenv"), \
                patch("mcp_relay.server.build_relay", side_effect=RuntimeError("boom")), \
                pytest.raises(SystemExit) as exc_info:
            datastorm.main()

        assert exc_info.value.code == 1
