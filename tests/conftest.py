import json

import httpx
import pytest
from fastapi.testclient import TestClient

from opsboard.config import Settings, get_settings
from opsboard.main import create_app

GASOGES_URL = "https://gasoges.test/v1"
MUNDOSMS_URL = "https://mundosms.test/APIV3"
PROVIDER_URL = "https://provider.test"


class FakeUpstream:
    """Routes requests by path to canned responses and records every call."""

    def __init__(self, routes: dict | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(answer):
            return answer(request)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, content=json.dumps(answer), headers={"content-type": "application/json"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def make_settings(**overrides) -> Settings:
    values = {
        "gasoges_api_url": GASOGES_URL,
        "gasoges_api_user": "user",
        "gasoges_api_pass": "secret",
        "mundosms_api_url": MUNDOSMS_URL,
        "provider_api_base": PROVIDER_URL,
        "provider_api_token": "token-123",
        "pbx_ids": ("PBX-1", "PBX-2", "PBX-3"),
        "flow_id_day": "FLOW-DAY",
        "flow_id_night": "FLOW-NIGHT",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def fake_upstream():
    return FakeUpstream


@pytest.fixture
def client_for():
    def _build(config: Settings) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_settings] = lambda: config
        return TestClient(app)

    return _build
