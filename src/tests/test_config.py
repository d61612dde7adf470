from __future__ import annotations

import json

from radar_tui.config import (
    DEFAULT_SETTINGS,
    load_config,
    read_json_slot,
    save_config,
    settings_from_config,
    write_json_slot,
)


def test_load_config_missing_and_corrupt(tmp_path):
    path = tmp_path / "config.json"
    assert load_config(str(path)) == {}

    path.write_text("{broken")
    assert load_config(str(path)) == {}

    path.write_text("[1]")
    assert load_config(str(path)) == {}


def test_save_then_load_config(tmp_path):
    path = str(tmp_path / "nested" / "config.json")
    save_config({"page_size": 20}, path)
    assert load_config(path) == {"page_size": 20}


def test_settings_merge_and_validation():
    settings = settings_from_config(
        {"page_size": 20, "fetch_top": -1, "max_visible_pages": True, "api_base": "  "}
    )
    assert settings["page_size"] == 20
    assert settings["fetch_top"] == DEFAULT_SETTINGS["fetch_top"]
    assert settings["max_visible_pages"] == DEFAULT_SETTINGS["max_visible_pages"]
    assert settings["api_base"] == DEFAULT_SETTINGS["api_base"]


def test_json_slots(tmp_path):
    path = str(tmp_path / "slot.json")
    assert read_json_slot(path) == (None, None)

    assert write_json_slot(path, {"a": 1})
    assert read_json_slot(path) == ({"a": 1}, None)

    with open(path, "w") as f:
        f.write("{")
    value, problem = read_json_slot(path)
    assert value is None
    assert problem.startswith("unreadable JSON")

    assert not write_json_slot(path, {"bad": object()})
    assert json.loads(json.dumps(DEFAULT_SETTINGS)) == DEFAULT_SETTINGS
