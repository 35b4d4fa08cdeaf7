"""Tests for environment selection and the fatal startup check."""

import pytest

import whatsdish_gateway.main as main_module
from whatsdish_gateway.core.config import EnvironmentMode, Settings
from whatsdish_gateway.core.exceptions import ConfigurationError


def make_settings(**overrides) -> Settings:
    values = {
        "dev_supabase_url": "https://dev.supabase.test/",
        "dev_supabase_anon_key": "dev-key",
        "dev_whats_dish_base_url": "https://dev.whatsdish.test/",
        "prod_supabase_url": "https://prod.supabase.test",
        "prod_supabase_anon_key": "prod-key",
        "prod_whats_dish_base_url": "https://prod.whatsdish.test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_development_selects_dev_pair():
    config = make_settings(node_env="development").resolve_gateway_config()

    assert config.environment == EnvironmentMode.DEVELOPMENT
    assert config.is_development
    assert config.whats_dish_base_url == "https://dev.whatsdish.test"
    assert config.supabase_url == "https://dev.supabase.test"
    assert config.supabase_anon_key == "dev-key"


@pytest.mark.parametrize("node_env", ["production", "test", "staging", ""])
def test_anything_else_selects_prod_pair(node_env):
    config = make_settings(node_env=node_env).resolve_gateway_config()

    assert config.environment == EnvironmentMode.PRODUCTION
    assert config.whats_dish_base_url == "https://prod.whatsdish.test"
    assert config.supabase_anon_key == "prod-key"


def test_node_env_is_case_insensitive():
    assert make_settings(node_env="Development").is_development


def test_missing_values_are_all_reported():
    settings = make_settings(
        node_env="production",
        prod_supabase_anon_key=None,
        prod_whats_dish_base_url="   ",
    )

    with pytest.raises(ConfigurationError) as exc_info:
        settings.resolve_gateway_config()

    assert exc_info.value.missing == ["PROD_SUPABASE_ANON_KEY", "PROD_WHATS_DISH_BASE_URL"]
    assert "PROD_SUPABASE_ANON_KEY" in str(exc_info.value)


def test_dev_values_do_not_satisfy_production():
    settings = Settings(
        _env_file=None,
        node_env="production",
        dev_supabase_url="https://dev.supabase.test",
        dev_supabase_anon_key="dev-key",
        dev_whats_dish_base_url="https://dev.whatsdish.test",
        prod_supabase_url=None,
        prod_supabase_anon_key=None,
        prod_whats_dish_base_url=None,
    )

    assert settings.validate_upstream_config() == [
        "PROD_SUPABASE_URL",
        "PROD_SUPABASE_ANON_KEY",
        "PROD_WHATS_DISH_BASE_URL",
    ]


def test_config_is_immutable():
    config = make_settings(node_env="development").resolve_gateway_config()

    with pytest.raises(AttributeError):
        config.whats_dish_base_url = "https://elsewhere.test"


def test_run_exits_before_serving_when_config_missing(monkeypatch):
    settings = make_settings(node_env="production", prod_supabase_url=None)
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)

    def fail_if_called(*args, **kwargs):
        raise AssertionError("uvicorn must not start")

    monkeypatch.setattr(main_module.uvicorn, "run", fail_if_called)

    with pytest.raises(SystemExit) as exc_info:
        main_module.run()

    assert exc_info.value.code == 1


def test_run_starts_server_with_configured_port(monkeypatch):
    settings = make_settings(node_env="development", host="0.0.0.0", port=5055)
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)

    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

    main_module.run()

    assert calls == [(("whatsdish_gateway.main:app",), {"host": "0.0.0.0", "port": 5055})]
