from __future__ import annotations

import json
from pathlib import Path

from dimhome.core.config import ConfigStore
from dimhome.core.services import CoreServices
from dimhome.home.banner import DEFAULT_IMAGE_TYPES
from dimhome.home.settings import SECTION, HomeSettings


def test_config_store_reads_sections_case_insensitively(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"Home": {"library_id": 4}, "ignored": [1, 2]}))

    store = ConfigStore(config_path)

    assert store.section("home") == {"library_id": 4}
    assert store.section("ignored") == {}
    assert store.section("missing") == {}


def test_config_store_section_is_a_copy(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"home": {"library_id": 4}}))
    store = ConfigStore(config_path)

    store.section("home")["library_id"] = 9

    assert store.section("home") == {"library_id": 4}


def test_seed_section_writes_defaults_once(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "config.json"
    store = ConfigStore(config_path)

    assert store.seed_section(SECTION, HomeSettings().to_config()) is True
    assert store.seed_section(SECTION, {"library_id": 99}) is False

    on_disk = json.loads(config_path.read_text())
    assert on_disk["home"]["library_id"] == 1
    assert on_disk["home"]["banner_path"] == "/banner1.jpg"
    assert HomeSettings.from_config(ConfigStore(config_path).section(SECTION), environ={}) == HomeSettings()


def test_seed_section_keeps_existing_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"home": {"library_id": 5}}))
    store = ConfigStore(config_path)

    assert store.seed_section("home", {"library_id": 1}) is False
    assert store.seed_section("player", {"volume": 3}) is True

    assert json.loads(config_path.read_text()) == {"home": {"library_id": 5}, "player": {"volume": 3}}


def test_config_store_handles_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "broken.json"
    config_path.write_text("{ invalid json")

    store = ConfigStore(config_path)

    assert store.section("home") == {}
    assert store.seed_section("home", {"library_id": 1}) is False
    assert config_path.read_text() == "{ invalid json"


def test_home_settings_defaults() -> None:
    settings = HomeSettings.from_config({}, environ={})

    assert settings.catalog_endpoint == "http://localhost:8000/api/v1/library/1/media"
    assert settings.banner_base_url == "http://localhost:8000"
    assert settings.banner_path == "/banner1.jpg"
    assert settings.accepted_banner_types == DEFAULT_IMAGE_TYPES
    assert settings.resume_progress == 0


def test_home_settings_from_values_and_environment() -> None:
    values = {
        "server_url": "http://stored:8000",
        "static_url": "http://cdn.test",
        "library_id": "7",
        "request_timeout": "2.5",
        "accepted_banner_types": ["IMAGE/PNG"],
        "resume_progress": 250,
        "theme": "dark",
    }

    settings = HomeSettings.from_config(values, environ={"DIMHOME_SERVER_URL": "http://env:9000"})

    assert settings.server_url == "http://env:9000"
    assert settings.banner_base_url == "http://cdn.test"
    assert settings.catalog_endpoint == "http://env:9000/api/v1/library/7/media"
    assert settings.request_timeout == 2.5
    assert settings.accepted_banner_types == ("image/png",)
    assert settings.resume_progress == 100
    assert settings.extra == {"theme": "dark"}


def test_home_settings_invalid_numbers_fall_back() -> None:
    settings = HomeSettings.from_config({"library_id": "abc", "request_timeout": None}, environ={})

    assert settings.library_id == 1
    assert settings.request_timeout == 10.0


def test_core_services_reads_config_from_data_dir(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(json.dumps({"home": {"library_id": 3}}))

    services = CoreServices(data_dir=tmp_path)

    assert services.get_config("home")["library_id"] == 3
    assert services.seed_config("home", {"library_id": 1}) is False
    assert services.seed_config("player", {"volume": 3}) is True
    assert services.get_logger("App").name == "DimHome.App"
