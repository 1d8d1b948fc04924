from pathlib import Path

import pandas as pd
import pytest

from temperature_trend import data_loading
from temperature_trend.data_loading import PointKind, PointTable
from temperature_trend.models import FitResult, Sample


def _table() -> PointTable:
    return PointTable(
        experimental=[Sample(8.0, 7.0), Sample(10.0, 10.0), Sample(13.0, 15.0)],
        interpolation=[Sample(9.0, 9.68), Sample(12.5, 12.79)],
        user=[Sample(15.0, 14.5)],
        fit=FitResult(0.8904, 1.6644),
    )


def test_ensure_expected_columns_passes() -> None:
    frame = pd.DataFrame({"A": [1], "B": [2]})
    data_loading.ensure_expected_columns(frame, {"A"})


def test_ensure_expected_columns_fails() -> None:
    frame = pd.DataFrame({"A": [1]})
    with pytest.raises(ValueError, match="Missing columns"):
        data_loading.ensure_expected_columns(frame, {"B"})


def test_points_to_frame_orders_kinds() -> None:
    frame = data_loading.points_to_frame(_table())
    assert list(frame.columns) == ["kind", "time", "temperature"]
    assert frame["kind"].tolist() == ["experimental"] * 3 + ["interpolation"] * 2 + ["user"]


def test_frame_to_points_groups_rows_by_kind() -> None:
    frame = pd.DataFrame(
        {
            "kind": ["user", "experimental", "interpolation", "experimental"],
            "time": [15.0, 8.0, 9.0, 10.0],
            "temperature": [14.5, 7.0, 9.68, 10.0],
        }
    )
    table = data_loading.frame_to_points(frame, FitResult(0.8904, 1.6644))
    assert table.experimental == [Sample(8.0, 7.0), Sample(10.0, 10.0)]
    assert table.interpolation == [Sample(9.0, 9.68)]
    assert table.user == [Sample(15.0, 14.5)]
    assert table.fit == FitResult(0.8904, 1.6644)
    with pytest.raises(ValueError):
        data_loading.frame_to_points(frame.drop(columns=["kind"]))


@pytest.mark.parametrize("suffix", [".xlsx", ".csv"])
def test_saved_table_loads_back(tmp_path: Path, suffix: str) -> None:
    path = data_loading.save_point_table(_table(), tmp_path / f"points{suffix}")
    loaded = data_loading.load_point_table(path)
    assert loaded.experimental == _table().experimental
    assert loaded.interpolation == _table().interpolation
    assert loaded.user == _table().user
    assert loaded.fit == FitResult(0.8904, 1.6644)


def test_save_appends_xlsx_suffix(tmp_path: Path) -> None:
    path = data_loading.save_point_table(_table(), tmp_path / "points")
    assert path.name == "points.xlsx"
    assert path.exists()


def test_load_skips_bad_rows_and_reads_comma_decimals(tmp_path: Path) -> None:
    path = tmp_path / "manual.csv"
    path.write_text(
        "Measurements,,\n"
        "Type,Time (hour),Temperature (°C)\n"
        "Experimental,\"8,5\",7\n"
        ",,\n"
        "Experimental,30,10\n"
        "Experimental,12,abc\n"
        "Observed,14 h,16 °C\n"
        "Something else,15,15\n"
        "Calculated,9,9.5\n",
        encoding="utf-8",
    )
    loaded = data_loading.load_point_table(path)
    assert loaded.experimental == [Sample(8.5, 7.0), Sample(14.0, 16.0)]
    assert loaded.interpolation == [Sample(9.0, 9.5)]
    assert loaded.user == []
    assert loaded.fit is None


def test_load_rejects_unsupported_suffix(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported"):
        data_loading.load_point_table(tmp_path / "points.ods")


def test_load_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        data_loading.load_point_table(tmp_path / "missing.xlsx")


def test_load_requires_header(tmp_path: Path) -> None:
    path = tmp_path / "noheader.csv"
    path.write_text("a,b,c\n1,2,3\n", encoding="utf-8")
    with pytest.raises(ValueError, match="header"):
        data_loading.load_point_table(path)


def test_load_requires_sheet(tmp_path: Path) -> None:
    path = tmp_path / "other.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"x": [1]}).to_excel(writer, sheet_name="Sheet1", index=False)
    with pytest.raises(ValueError, match="not found"):
        data_loading.load_point_table(path)


def test_match_kind() -> None:
    assert data_loading.match_kind("Experimental") is PointKind.EXPERIMENTAL
    assert data_loading.match_kind("interpolation") is PointKind.INTERPOLATION
    assert data_loading.match_kind("User") is PointKind.USER
    assert data_loading.match_kind("misc") is None
