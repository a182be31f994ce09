import json

import pytest

from json_field_filter.config import (
    CONFIG_ENV_VAR,
    DEFAULT_SIMPLE_FIELD_THRESHOLD,
    Preset,
    Settings,
    load_settings,
    settings_from_dict,
)


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_defaults_without_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    settings = load_settings()
    assert settings == Settings()
    assert settings.simple_field_threshold == DEFAULT_SIMPLE_FIELD_THRESHOLD


def test_load_camel_case_file(tmp_path):
    path = write_config(tmp_path, {
        "presets": [{"name": "Hide noise", "fields": ["metadata", "tags"]}],
        "simpleFieldThreshold": 0,
        "largeFileBytes": 1024,
    })
    settings = load_settings(path)
    assert settings.presets == [Preset("Hide noise", ["metadata", "tags"])]
    assert settings.simple_field_threshold == 0
    assert settings.large_file_bytes == 1024
    assert settings.find_preset("Hide noise").fields == ["metadata", "tags"]
    assert settings.find_preset("other") is None


def test_env_var_points_at_config(tmp_path, monkeypatch):
    path = write_config(tmp_path, {"simple_field_threshold": 3})
    monkeypatch.setenv(CONFIG_ENV_VAR, path)
    assert load_settings().simple_field_threshold == 3


def test_invalid_presets_are_skipped():
    settings = settings_from_dict({
        "presets": [
            {"name": "ok", "fields": ["a"]},
            {"fields": ["b"]},
            {"name": "bad fields", "fields": "c"},
            "not a preset",
        ]
    })
    assert settings.preset_names == ["ok"]


@pytest.mark.parametrize("raw", [
    {"simpleFieldThreshold": -1},
    {"largeFileBytes": "big"},
    {"chunkSize": 0},
])
def test_invalid_numbers_raise(raw):
    with pytest.raises(ValueError):
        settings_from_dict(raw)


def test_config_must_be_an_object(tmp_path):
    with pytest.raises(ValueError):
        load_settings(write_config(tmp_path, ["not", "an", "object"]))
