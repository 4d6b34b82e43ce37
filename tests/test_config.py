"""Tests for settings, context construction and the CLI's startup checks."""
import pytest

from canvas_core.config import DEFAULT_CORS_ORIGINS, Settings, get_settings
from canvas_core.context import ConfigurationError, build_context, build_gateway
from canvas_core.rest_gateway import RestGateway
from canvas_core.sql_gateway import SqlGateway
from canvas_mcp import __main__ as cli

from conftest import run

ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "DATABASE_URL",
    "DEFAULT_WORKSPACE_ID",
    "CORS_ORIGINS",
    "PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.host == "0.0.0.0"
        assert settings.port == 3000
        assert settings.cors_origins == DEFAULT_CORS_ORIGINS
        assert settings.default_workspace_id is None

    def test_reads_environment(self, clean_env):
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("DEFAULT_WORKSPACE_ID", "ws-1")
        clean_env.setenv("CORS_ORIGINS", '["https://canvas.test"]')

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.default_workspace_id == "ws-1"
        assert settings.cors_origins == ["https://canvas.test"]

    def test_comma_separated_origins(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", "https://a.test, https://b.test")

        assert Settings(_env_file=None).cors_origins == ["https://a.test", "https://b.test"]

    def test_blank_workspace_is_unset(self, clean_env):
        clean_env.setenv("DEFAULT_WORKSPACE_ID", "  ")

        assert Settings(_env_file=None).default_workspace_id is None


class TestBuildContext:

    def test_missing_credentials(self, clean_env):
        with pytest.raises(ConfigurationError) as excinfo:
            build_gateway(Settings(_env_file=None))

        assert "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY" in str(excinfo.value)

    def test_missing_key_only(self, clean_env):
        with pytest.raises(ConfigurationError) as excinfo:
            build_gateway(Settings(_env_file=None, supabase_url="https://x.supabase.test"))

        message = str(excinfo.value)
        assert "SUPABASE_SERVICE_ROLE_KEY" in message
        assert "SUPABASE_URL " not in message

    def test_supabase_settings_select_rest_gateway(self, clean_env):
        gateway = build_gateway(Settings(
            _env_file=None,
            supabase_url="https://x.supabase.test",
            supabase_service_role_key="key",
        ))

        assert isinstance(gateway, RestGateway)
        run(gateway.aclose())

    def test_database_url_selects_sql_gateway(self, clean_env):
        ctx = build_context(Settings(
            _env_file=None, database_url="sqlite://", default_workspace_id="ws-1"
        ))

        assert isinstance(ctx.gateway, SqlGateway)
        assert ctx.default_workspace_id == "ws-1"
        run(ctx.gateway.aclose())


class TestCli:

    def test_exits_with_error_without_credentials(self, clean_env, capsys):
        clean_env.setattr(cli, "configure_logging", lambda level: None)

        assert cli.main(["--stdio"]) == 1
        assert "SUPABASE_URL" in capsys.readouterr().err
