"""Read and write point tables (experimental, interpolation and user points)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from temperature_trend.formatting import format_equation, parse_equation, parse_number
from temperature_trend.models import FitResult, Sample
from temperature_trend.settings import Settings

LOGGER = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xlsx", ".csv")
HEADER_SEARCH_ROWS = 11
COLUMN_LABELS: Tuple[str, str, str] = ("Point kind", "Time (h)", "Temperature (°C)")
TIDY_COLUMNS = ["kind", "time", "temperature"]
EQUATION_PREFIX = "Equation: "

KIND_KEYWORDS = ("kind", "type")
TIME_KEYWORDS = ("time", "hour")
TEMPERATURE_KEYWORDS = ("temperature", "°c")


class PointKind(str, Enum):
    EXPERIMENTAL = "experimental"
    INTERPOLATION = "interpolation"
    USER = "user"


KIND_LABELS: Dict[PointKind, str] = {
    PointKind.EXPERIMENTAL: "Experimental",
    PointKind.INTERPOLATION: "Interpolation",
    PointKind.USER: "User",
}
KIND_MATCHERS: Sequence[Tuple[PointKind, Tuple[str, ...]]] = (
    (PointKind.EXPERIMENTAL, ("experiment", "observed", "source")),
    (PointKind.INTERPOLATION, ("interpolat", "predict", "calculat")),
    (PointKind.USER, ("user",)),
)


@dataclass
class PointTable:
    """Points grouped by kind, plus the fitted line they were exported with."""

    experimental: List[Sample] = field(default_factory=list)
    interpolation: List[Sample] = field(default_factory=list)
    user: List[Sample] = field(default_factory=list)
    fit: FitResult | None = None

    def has_data(self) -> bool:
        return bool(self.experimental or self.interpolation or self.user)

    def points(self, kind: PointKind) -> List[Sample]:
        return getattr(self, kind.value)


def ensure_expected_columns(frame: pd.DataFrame, required: set[str]) -> None:
    """Raise ``ValueError`` if required columns are missing from the given frame."""

    missing = required.difference(frame.columns)
    if missing:
        raise ValueError(f"Missing columns: {sorted(missing)}")


def points_to_frame(table: PointTable) -> pd.DataFrame:
    """Flatten a table into ``kind, time, temperature`` rows (experimental first)."""

    records = [
        {"kind": kind.value, "time": point.time, "temperature": point.temperature}
        for kind in PointKind
        for point in table.points(kind)
    ]
    return pd.DataFrame.from_records(records, columns=TIDY_COLUMNS)


def frame_to_points(frame: pd.DataFrame, fit: FitResult | None = None) -> PointTable:
    """Group a tidy ``kind, time, temperature`` frame back into a ``PointTable``."""

    ensure_expected_columns(frame, set(TIDY_COLUMNS))
    table = PointTable(fit=fit)
    for row in frame.itertuples(index=False):
        kind = PointKind(row.kind)
        table.points(kind).append(Sample(float(row.time), float(row.temperature)))
    return table


def save_point_table(table: PointTable, path: Path, settings: Settings | None = None) -> Path:
    """Write the table as a single sheet: equation, blank row, header, points.

    A path without a supported suffix gets ``.xlsx`` appended. Returns the
    path actually written.
    """

    settings = settings or Settings()
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        path = path.with_name(path.name + ".xlsx")

    rows: List[List[object]] = []
    if table.fit is not None:
        equation = format_equation(table.fit.slope, table.fit.intercept, settings.equation_decimals)
        rows.append([EQUATION_PREFIX + equation, None, None])
    else:
        rows.append([None, None, None])
    rows.append([None, None, None])
    rows.append(list(COLUMN_LABELS))
    tidy = points_to_frame(table)
    for row in tidy.itertuples(index=False):
        rows.append([KIND_LABELS[PointKind(row.kind)], float(row.time), float(row.temperature)])

    sheet = pd.DataFrame(rows)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        sheet.to_csv(path, header=False, index=False, encoding="utf-8")
    else:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            sheet.to_excel(writer, sheet_name=settings.sheet_name, header=False, index=False)
    LOGGER.info("Wrote %d points to %s", len(tidy), path)
    return path


def load_point_table(path: Path, settings: Settings | None = None) -> PointTable:
    """Read a table written by ``save_point_table`` (or a hand-made one like it).

    Rows that are empty, unparsable, outside the accepted time/temperature
    ranges or of an unknown kind are skipped.
    """

    settings = settings or Settings()
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file format: {path.name}")
    if not path.exists():
        raise FileNotFoundError(f"Table file not found: {path}")

    grid = _read_grid(path, settings.sheet_name)
    header_index = find_header_row(grid)
    if header_index is None:
        raise ValueError(f"No header row with point kind, time and temperature columns in {path}")

    header = grid.iloc[header_index].tolist()
    kind_col = _find_column(header, KIND_KEYWORDS)
    time_col = _find_column(header, TIME_KEYWORDS)
    temp_col = _find_column(header, TEMPERATURE_KEYWORDS)
    if kind_col is None or time_col is None or temp_col is None:
        raise ValueError(f"Table in {path} is missing required columns")

    fit = None
    for row_index in range(header_index):
        for cell in grid.iloc[row_index].tolist():
            fit = fit or parse_equation(_cell_text(cell))

    time_low, time_high = settings.time_range
    temp_low, temp_high = settings.import_temperature_range
    records = []
    for row_index in range(header_index + 1, len(grid)):
        row = grid.iloc[row_index].tolist()
        if all(not _cell_text(cell) for cell in row):
            continue
        kind_text = _cell_text(row[kind_col]).lower()
        if not kind_text or _is_missing(row[time_col]) or _is_missing(row[temp_col]):
            continue
        try:
            time = parse_number(row[time_col])
            temperature = parse_number(row[temp_col])
        except ValueError as exc:
            LOGGER.debug("Skipping row %d: %s", row_index + 1, exc)
            continue
        if not (time_low <= time <= time_high and temp_low <= temperature <= temp_high):
            LOGGER.debug("Skipping row %d: values out of range (%s, %s)", row_index + 1, time, temperature)
            continue
        kind = match_kind(kind_text)
        if kind is None:
            LOGGER.debug("Skipping row %d: unknown point kind %r", row_index + 1, kind_text)
            continue
        records.append({"kind": kind.value, "time": time, "temperature": temperature})

    table = frame_to_points(pd.DataFrame.from_records(records, columns=TIDY_COLUMNS), fit=fit)
    LOGGER.info(
        "Loaded %d experimental, %d interpolation and %d user points from %s",
        len(table.experimental),
        len(table.interpolation),
        len(table.user),
        path,
    )
    return table


def find_header_row(grid: pd.DataFrame) -> int | None:
    """Index of the first row naming the kind, time and temperature columns."""

    for row_index in range(min(HEADER_SEARCH_ROWS, len(grid))):
        values = [_cell_text(cell).lower() for cell in grid.iloc[row_index].tolist()]
        has_kind = any(_contains(value, KIND_KEYWORDS) for value in values)
        has_time = any(_contains(value, TIME_KEYWORDS) for value in values)
        has_temp = any(_contains(value, TEMPERATURE_KEYWORDS) for value in values)
        if has_kind and has_time and has_temp:
            return row_index
    return None


def match_kind(text: str) -> PointKind | None:
    """Map a free-text kind cell ('Observed', 'Calculated', ...) to a ``PointKind``."""

    lowered = text.strip().lower()
    for kind, keywords in KIND_MATCHERS:
        if _contains(lowered, keywords):
            return kind
    return None


def _read_grid(path: Path, sheet_name: str) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path, header=None, dtype=object, skip_blank_lines=False, encoding="utf-8")
    with pd.ExcelFile(path, engine="openpyxl") as workbook:
        if sheet_name not in workbook.sheet_names:
            raise ValueError(f"Sheet {sheet_name!r} not found in {path.name}")
        return workbook.parse(sheet_name, header=None)


def _find_column(header: Sequence[object], keywords: Tuple[str, ...]) -> int | None:
    for index, cell in enumerate(header):
        if _contains(_cell_text(cell).lower(), keywords):
            return index
    return None


def _contains(value: str, keywords: Tuple[str, ...]) -> bool:
    return any(keyword in value for keyword in keywords)


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _cell_text(value: object) -> str:
    if _is_missing(value):
        return ""
    return str(value).strip()
