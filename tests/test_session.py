import logging

import pytest

from temperature_trend.data_loading import PointTable
from temperature_trend.models import FitResult, InvalidInputError, Sample
from temperature_trend.session import REFERENCE_SAMPLES, TrendSession
from temperature_trend.settings import Settings


def test_default_session_fits_reference_samples() -> None:
    session = TrendSession.default()
    assert session.last_error is None
    assert session.current.slope == pytest.approx(0.890411, abs=1e-6)
    assert [point.time for point in session.predictions()] == [9.0, 12.5, 15.25]
    assert session.range_label() == "8.0 - 20.0 h"


def test_refit_falls_back_on_degenerate_samples(caplog: pytest.LogCaptureFixture) -> None:
    session = TrendSession(samples=[Sample(5.0, 1.0), Sample(5.0, 3.0)])
    with caplog.at_level(logging.WARNING):
        result = session.refit()
    assert result == FitResult(0.8904, 1.6644)
    assert "equal" in session.last_error
    assert "Fit failed" in caplog.text


def test_refit_falls_back_on_too_few_samples() -> None:
    settings = Settings(fallback_slope=1.0, fallback_intercept=0.0)
    session = TrendSession(samples=[Sample(5.0, 1.0)], settings=settings)
    assert session.refit() == FitResult(1.0, 0.0)
    assert session.last_error is not None


def test_predictions_restore_default_query_times() -> None:
    session = TrendSession(samples=list(REFERENCE_SAMPLES))
    session.refit()
    predictions = session.predictions()
    assert [point.time for point in predictions] == [9.0, 12.5, 15.25]
    assert predictions[0].temperature == pytest.approx(0.890411 * 9 + 1.664384, abs=1e-5)


def test_add_sample_validates_and_refits() -> None:
    session = TrendSession(samples=[Sample(0.0, 0.0)])
    session.add_sample(10.0, 20.0)
    assert session.current == FitResult(2.0, 0.0)
    with pytest.raises(InvalidInputError):
        session.add_sample(25.0, 10.0)
    with pytest.raises(InvalidInputError):
        session.add_sample(10.0, -60.0)
    with pytest.raises(InvalidInputError):
        session.add_user_point(float("nan"), 10.0)


def test_add_query_time_returns_prediction() -> None:
    session = TrendSession.default()
    point = session.add_query_time(22.0)
    assert point.time == 22.0
    assert session.extrapolated_times() == [22.0]


def test_replace_samples_rejects_out_of_range() -> None:
    session = TrendSession.default()
    with pytest.raises(InvalidInputError):
        session.replace_samples([Sample(1.0, 1.0), Sample(30.0, 1.0)])
    assert session.samples == list(REFERENCE_SAMPLES)


def test_clear_resets_to_fallback() -> None:
    session = TrendSession.default()
    session.add_user_point(11.0, 12.0)
    session.clear()
    assert session.samples == []
    assert session.user_points == []
    assert session.current == session.fallback
    assert session.range_label() == "no data"


def test_table_round_trip_keeps_query_times() -> None:
    session = TrendSession.default()
    session.add_user_point(11.0, 12.0)
    table = session.to_table()
    assert table.fit == session.current
    assert len(table.interpolation) == 3
    restored = TrendSession.from_table(table)
    assert restored.samples == session.samples
    assert restored.query_times == session.query_times
    assert restored.user_points == [Sample(11.0, 12.0)]


def test_from_empty_table_uses_fallback() -> None:
    session = TrendSession.from_table(PointTable())
    assert session.current == session.fallback
