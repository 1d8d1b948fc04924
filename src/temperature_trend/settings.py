"""Tunable constants for fitting, validation and table layout."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Tuple

from temperature_trend.models import DEGENERATE_DENOMINATOR_EPS

LOGGER = logging.getLogger(__name__)

FALLBACK_SLOPE = 0.8904
FALLBACK_INTERCEPT = 1.6644
DEFAULT_QUERY_TIMES: Tuple[float, ...] = (9.0, 12.5, 15.25)
DEFAULT_SHEET_NAME = "All points"


@dataclass
class Settings:
    """Defaults used by the session, the table loader and the scripts."""

    degenerate_eps: float = DEGENERATE_DENOMINATOR_EPS
    fallback_slope: float = FALLBACK_SLOPE
    fallback_intercept: float = FALLBACK_INTERCEPT
    default_query_times: Tuple[float, ...] = DEFAULT_QUERY_TIMES
    time_range: Tuple[float, float] = (0.0, 24.0)
    temperature_range: Tuple[float, float] = (-50.0, 100.0)
    import_temperature_range: Tuple[float, float] = (-100.0, 100.0)
    equation_decimals: int = 4
    value_decimals: int = 2
    sheet_name: str = DEFAULT_SHEET_NAME

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Settings":
        known = {item.name for item in fields(cls)}
        unknown = set(payload).difference(known)
        if unknown:
            raise ValueError(f"Unknown settings keys: {sorted(unknown)}")

        values: dict = dict(payload)
        for key in ("default_query_times", "time_range", "temperature_range", "import_temperature_range"):
            if key in values:
                values[key] = tuple(float(item) for item in values[key])
        for key in ("time_range", "temperature_range", "import_temperature_range"):
            if key in values:
                bounds = values[key]
                if len(bounds) != 2 or bounds[0] > bounds[1]:
                    raise ValueError(f"{key} must be [lower, upper], got: {list(bounds)}")
        return cls(**values)


def load_settings(path: Path | None) -> Settings:
    """Read settings from a JSON file, falling back to defaults when it is absent."""

    if path is None:
        return Settings()
    if not path.exists():
        LOGGER.warning("Settings file missing: %s (using defaults)", path)
        return Settings()
    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    LOGGER.debug("Loaded settings from %s", path)
    return Settings.from_mapping(payload)
