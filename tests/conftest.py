"""Shared fixtures for the gateway tests.

Outbound traffic is mocked with respx; the app is driven through FastAPI's
TestClient used as a context manager so the lifespan runs.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from whatsdish_gateway.core.config import GatewayConfig, Settings
from whatsdish_gateway.main import create_app

WHATS_DISH_URL = "https://api.whatsdish.test"
SUPABASE_URL = "https://project.supabase.test"
SUPABASE_ANON_KEY = "anon-key-0123456789"
IP_LOOKUP_URL = "https://checkip.test/"
TOKEN = "tok_abcdef123456"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        node_env="development",
        dev_supabase_url=SUPABASE_URL,
        dev_supabase_anon_key=SUPABASE_ANON_KEY,
        dev_whats_dish_base_url=WHATS_DISH_URL,
        ip_lookup_url=IP_LOOKUP_URL,
    )


@pytest.fixture
def gateway_config(settings: Settings) -> GatewayConfig:
    return settings.resolve_gateway_config()


@pytest.fixture
async def http():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def client(settings: Settings, respx_mock):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TOKEN}"}
