import json
from pathlib import Path

import pytest

from temperature_trend.settings import DEFAULT_QUERY_TIMES, Settings, load_settings


def test_load_settings_defaults_when_missing(tmp_path: Path) -> None:
    assert load_settings(None) == Settings()
    assert load_settings(tmp_path / "absent.json") == Settings()


def test_load_settings_overrides(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"fallback_slope": 1.5, "default_query_times": [1, 2], "time_range": [0, 48]}),
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.fallback_slope == 1.5
    assert settings.default_query_times == (1.0, 2.0)
    assert settings.time_range == (0.0, 48.0)
    assert settings.fallback_intercept == Settings().fallback_intercept


def test_load_settings_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"colour": "red"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Unknown settings keys"):
        load_settings(path)


def test_load_settings_rejects_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Failed to parse"):
        load_settings(path)


def test_settings_validate_ranges() -> None:
    with pytest.raises(ValueError):
        Settings.from_mapping({"temperature_range": [10, -10]})
    assert Settings().default_query_times == DEFAULT_QUERY_TIMES
