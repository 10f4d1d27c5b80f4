from datetime import datetime, timedelta

import httpx
import pytest

from opsboard.api.routes import calls as calls_routes
from opsboard.services.mundosms.client import MundoSmsClient

CALLS_PATH = "/APIV3/list_voipcalls"


@pytest.fixture
def upstream(fake_upstream, monkeypatch):
    fake = fake_upstream({CALLS_PATH: {"data": {"calls": []}}})
    monkeypatch.setattr(
        calls_routes, "MundoSmsClient", lambda config, **kwargs: MundoSmsClient(config, transport=fake.transport)
    )
    return fake


def test_calls_relay_json_and_forward_query(upstream, settings_factory, client_for):
    upstream.routes[CALLS_PATH] = {"data": {"calls": [{"status": "1"}]}}

    response = client_for(settings_factory()).get("/api/calls", params={"type": "in", "showall": "0"})

    assert response.status_code == 200
    assert response.json() == {"data": {"calls": [{"status": "1"}]}}
    request = upstream.requests[0]
    assert request.url.params["type"] == "in"
    assert request.url.params["showall"] == "0"
    assert request.headers["Authorization"] == "Bearer token-123"


def test_calls_relay_text_bodies(upstream, settings_factory, client_for):
    upstream.routes[CALLS_PATH] = httpx.Response(200, text="no calls today", headers={"content-type": "text/plain"})

    response = client_for(settings_factory()).get("/api/calls")

    assert response.status_code == 200
    assert response.text == "no calls today"
    assert response.headers["content-type"].startswith("text/plain")


def test_calls_without_token_fail_before_upstream(upstream, settings_factory, client_for):
    response = client_for(settings_factory(provider_api_token=None)).get("/api/calls")

    assert response.status_code == 500
    assert response.json() == {"error": "Missing PROVIDER_API_TOKEN"}
    assert upstream.requests == []


def test_calls_upstream_error_status_is_propagated(upstream, settings_factory, client_for):
    upstream.routes[CALLS_PATH] = httpx.Response(403, text="forbidden")

    response = client_for(settings_factory()).get("/api/calls")

    assert response.status_code == 403
    assert response.json() == {"error": "MundoSMS API error: 403"}


def test_call_kpis_from_inbound_listing(upstream, settings_factory, client_for):
    now = datetime.now()
    stamp = "%Y-%m-%d %H:%M:%S"
    upstream.routes[CALLS_PATH] = {
        "data": {
            "calls": [
                {"status": "0", "date_start": now.strftime(stamp)},
                {"status": "1", "date_start": "2020-01-01 09:00:00", "date_answer": "2020-01-01 09:00:10"},
                {
                    "status": "1",
                    "date_start": (now - timedelta(minutes=2)).strftime(stamp),
                    "date_answer": (now - timedelta(minutes=1)).strftime(stamp),
                    "agent_id": "A1",
                },
            ]
        }
    }

    response = client_for(settings_factory()).get("/api/kpis/calls")

    assert response.status_code == 200
    payload = response.json()
    assert payload["waiting_now"] == 1
    assert payload["answered_today"] == 2
    assert payload["agents_online"] == 1
    assert "updated_at" in payload
    assert upstream.requests[0].url.params["type"] == "in"


def test_call_kpis_reject_text_listing(upstream, settings_factory, client_for):
    upstream.routes[CALLS_PATH] = httpx.Response(200, text="maintenance")

    response = client_for(settings_factory()).get("/api/kpis/calls")

    assert response.status_code == 500
    assert "error" in response.json()
