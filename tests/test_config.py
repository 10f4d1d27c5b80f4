from opsboard.config import Settings


def _settings(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


def test_pbx_ids_accept_comma_separated_values(monkeypatch):
    config = _settings(monkeypatch, PBX_IDS="PBX-1, PBX-2,,PBX-3")
    assert config.pbx_ids == ("PBX-1", "PBX-2", "PBX-3")


def test_pbx_ids_accept_json_arrays(monkeypatch):
    config = _settings(monkeypatch, PBX_IDS='["PBX-1", "PBX-2"]')
    assert config.pbx_ids == ("PBX-1", "PBX-2")


def test_pbx_targets_prefer_single_line(monkeypatch):
    config = _settings(monkeypatch, PBX_IDS="PBX-1,PBX-2")
    assert config.pbx_targets("  PBX-9 ") == ("PBX-9",)
    assert config.pbx_targets("") == ("PBX-1", "PBX-2")


def test_depot_mappings_parse_json(monkeypatch):
    config = _settings(monkeypatch, DEPOT_CAPACITIES='{"2": 5000, "3": "2500.5", "4": "lots"}')
    assert config.depot_capacities == {"2": 5000.0, "3": 2500.5}


def test_invalid_depot_mapping_is_ignored(monkeypatch):
    config = _settings(monkeypatch, DEPOT_INITIAL_STOCK="not json")
    assert config.depot_initial_stock == {}


def test_gasoges_configuration_requires_all_credentials(monkeypatch):
    monkeypatch.delenv("GASOGES_API_PASS", raising=False)
    config = _settings(monkeypatch, GASOGES_API_URL="https://gasoges.test/v1", GASOGES_API_USER="user")
    assert not config.gasoges_configured

    monkeypatch.setenv("GASOGES_API_PASS", "secret")
    assert Settings(_env_file=None).gasoges_configured


def test_contacts_collection_path(monkeypatch):
    config = _settings(monkeypatch, FIREBASE_APP_ID="eurosur")
    assert config.contacts_collection_path == "artifacts/eurosur/public/data/contacts"


def test_health_reports_configuration(settings_factory, client_for, tmp_path):
    client = client_for(settings_factory(firebase_key_base64=None, phonebook_file=tmp_path / "none.xml"))

    assert client.get("/api/health").json() == {"status": "ok"}
    upstreams = client.get("/api/health/upstreams").json()
    assert upstreams["gasoges"] == {"configured": True}
    assert upstreams["flow_switch"] == {"configured": True, "pbx_count": 3}
    assert upstreams["contacts"] == {"configured": False}
    assert upstreams["phonebook"] == {"available": False}
