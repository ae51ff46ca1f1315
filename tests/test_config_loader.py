import pytest

from shiftroster import create_app
from shiftroster.adapters.config_loader import load_config


def test_load_yaml_and_json(tmp_path):
    yaml_path = tmp_path / "settings.yaml"
    yaml_path.write_text("min_daily_manpower: 5\nrotation_pattern: [A, OFF, B]\n", encoding="utf-8")
    json_path = tmp_path / "settings.json"
    json_path.write_text('{"log_level": "DEBUG"}', encoding="utf-8")

    assert load_config(yaml_path) == {"min_daily_manpower": 5, "rotation_pattern": ["A", "OFF", "B"]}
    assert load_config(json_path) == {"log_level": "DEBUG"}
    assert load_config(None) == {}


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_settings_file_feeds_app_config(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text("min_daily_manpower: 3\n", encoding="utf-8")
    monkeypatch.setenv("SHIFTROSTER_SETTINGS", str(path))

    app = create_app({"TESTING": True, "DATABASE": str(tmp_path / "db.sqlite"), "LOG_LEVEL": "WARNING"})
    assert app.config["MIN_DAILY_MANPOWER"] == 3


def test_bad_rotation_pattern_fails_at_startup(tmp_path):
    with pytest.raises(ValueError):
        create_app({"DATABASE": str(tmp_path / "db.sqlite"), "ROTATION_PATTERN": ["A", "Z"]})


def test_unknown_log_level_fails_at_startup(tmp_path):
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        create_app({"DATABASE": str(tmp_path / "db.sqlite"), "LOG_LEVEL": "chatty"})
