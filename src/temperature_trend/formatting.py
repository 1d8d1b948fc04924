"""Parsing and formatting helpers used at the table and console boundary."""

from __future__ import annotations

import math
import re

import pandas as pd

from temperature_trend.models import FitResult, LinearTrendRegressor

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_EQUATION = re.compile(
    r"T\s*=\s*(?P<slope>[-+]?\d+(?:[.,]\d+)?)\s*\*\s*t\s*(?P<sign>[-+])\s*(?P<intercept>[-+]?\d+(?:[.,]\d+)?)"
)


def parse_number(value: object) -> float:
    """Convert a cell value to float, accepting a comma as decimal separator.

    Units and other stray characters in string cells are dropped, so
    ``"12,5 h"`` becomes ``12.5``.
    """

    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
        if math.isnan(number):
            raise ValueError("Empty cell")
        return number
    if value is None:
        raise ValueError("Empty cell")
    text = str(value).strip()
    if not text:
        raise ValueError("Empty string")
    cleaned = _NON_NUMERIC.sub("", text.replace(",", "."))
    if not cleaned:
        raise ValueError(f"Not a number: {text!r}")
    try:
        return float(cleaned)
    except ValueError as exc:
        raise ValueError(f"Not a number: {text!r}") from exc


def format_value(value: float, decimals: int = 2) -> str:
    """Fixed-point label for a single time or temperature."""

    return f"{value:.{decimals}f}"


def format_equation(slope: float, intercept: float, decimals: int = 4) -> str:
    """Label such as ``"T = 0.8904 * t + 1.6644"``."""

    return FitResult(slope=slope, intercept=intercept).equation(decimals)


def format_point(time: float, temperature: float, decimals: int = 2) -> str:
    """Chart annotation such as ``"(9.00; 9.68)"``."""

    return f"({time:.{decimals}f}; {temperature:.{decimals}f})"


def parse_equation(text: str | None) -> FitResult | None:
    """Recover coefficients from an ``"T = a * t + b"`` label, if present."""

    if not text:
        return None
    match = _EQUATION.search(str(text))
    if not match:
        return None
    slope = float(match.group("slope").replace(",", "."))
    intercept = float(match.group("intercept").replace(",", "."))
    if match.group("sign") == "-":
        intercept = -intercept
    return FitResult(slope=slope, intercept=intercept)


def add_predicted_temperature(frame: pd.DataFrame, time_col: str, result: FitResult) -> pd.DataFrame:
    """Return a copy with a ``predicted_temperature`` column from the fitted line."""

    df = frame.copy()
    model = LinearTrendRegressor(slope=result.slope, intercept=result.intercept)
    df["predicted_temperature"] = model.predict(df[time_col].to_numpy(dtype=float))
    return df
