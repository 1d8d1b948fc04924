"""Working set of samples and query times that drives the fit and its predictions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from temperature_trend.data_loading import PointTable
from temperature_trend.models import (
    FitResult,
    InvalidInputError,
    Sample,
    TrendError,
    evaluate,
    fit,
    is_within_range,
    range_description,
)
from temperature_trend.settings import Settings

LOGGER = logging.getLogger(__name__)

REFERENCE_SAMPLES: Tuple[Sample, ...] = (
    Sample(8.0, 7.0),
    Sample(10.0, 10.0),
    Sample(13.0, 15.0),
    Sample(14.0, 16.0),
    Sample(17.0, 18.0),
    Sample(20.0, 17.0),
)


@dataclass
class TrendSession:
    """Samples, query times and user points, plus the line currently in use.

    A failed fit never propagates out of ``refit``: the error is logged and
    kept in ``last_error`` and the configured fallback coefficients are used.
    """

    samples: List[Sample] = field(default_factory=list)
    query_times: List[float] = field(default_factory=list)
    user_points: List[Sample] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    result: FitResult | None = None
    last_error: str | None = None

    @classmethod
    def default(cls, settings: Settings | None = None) -> "TrendSession":
        """Session over the reference samples and the default query times."""

        settings = settings or Settings()
        session = cls(
            samples=list(REFERENCE_SAMPLES),
            query_times=list(settings.default_query_times),
            settings=settings,
        )
        session.refit()
        return session

    @classmethod
    def from_table(cls, table: PointTable, settings: Settings | None = None) -> "TrendSession":
        """Session whose query times are the times of the table's interpolation points."""

        settings = settings or Settings()
        session = cls(
            samples=list(table.experimental),
            query_times=[point.time for point in table.interpolation],
            user_points=list(table.user),
            settings=settings,
        )
        session.refit()
        return session

    @property
    def fallback(self) -> FitResult:
        """Coefficients used when the samples cannot be fitted."""

        return FitResult(slope=self.settings.fallback_slope, intercept=self.settings.fallback_intercept)

    @property
    def current(self) -> FitResult:
        """The line in use, fitting on first access."""

        return self.result if self.result is not None else self.refit()

    def refit(self) -> FitResult:
        """Fit the current samples, or fall back to the default coefficients."""

        try:
            self.result = fit(self.samples, eps=self.settings.degenerate_eps)
            self.last_error = None
        except TrendError as exc:
            LOGGER.warning("Fit failed (%s); using fallback %s", exc, self.fallback.equation())
            self.result = self.fallback
            self.last_error = str(exc)
        return self.result

    def predictions(self) -> List[Sample]:
        """Evaluate the current line at every query time."""

        if not self.query_times:
            self.query_times.extend(self.settings.default_query_times)
        slope, intercept = self.current
        return [Sample(time, evaluate(time, slope, intercept)) for time in self.query_times]

    def extrapolated_times(self) -> List[float]:
        """Query times outside the observed sample time range."""

        return [time for time in self.query_times if not is_within_range(time, self.samples)]

    def range_label(self) -> str:
        """Time range of the samples, for display."""

        return range_description(self.samples)

    def add_sample(self, time: float, temperature: float) -> Sample:
        """Validate and append a sample, then refit."""

        self._check_time(time)
        self._check_temperature(temperature)
        sample = Sample(float(time), float(temperature))
        self.samples.append(sample)
        self.refit()
        return sample

    def replace_samples(self, samples: Iterable[Sample]) -> FitResult:
        """Swap in a new sample set (all or nothing) and refit."""

        updated = list(samples)
        for sample in updated:
            self._check_time(sample.time)
            self._check_temperature(sample.temperature)
        self.samples = updated
        return self.refit()

    def add_query_time(self, time: float) -> Sample:
        """Validate and append a query time; returns its prediction."""

        self._check_time(time)
        self.query_times.append(float(time))
        slope, intercept = self.current
        return Sample(float(time), evaluate(time, slope, intercept))

    def add_user_point(self, time: float, temperature: float) -> Sample:
        """Validate and append a user point (not used in the fit)."""

        self._check_time(time)
        self._check_temperature(temperature)
        point = Sample(float(time), float(temperature))
        self.user_points.append(point)
        return point

    def clear(self) -> None:
        """Drop all points and query times and reset to the fallback line."""

        self.samples.clear()
        self.query_times.clear()
        self.user_points.clear()
        self.result = self.fallback
        self.last_error = None
        LOGGER.info("Cleared all data; coefficients reset to %s", self.result.equation())

    def to_table(self) -> PointTable:
        """Snapshot of samples, predictions, user points and the current line."""

        return PointTable(
            experimental=list(self.samples),
            interpolation=self.predictions(),
            user=list(self.user_points),
            fit=self.current,
        )

    def _check_time(self, time: float) -> None:
        low, high = self.settings.time_range
        if not low <= time <= high:
            raise InvalidInputError(f"Time must be between {low:g} and {high:g} h (got {time})")

    def _check_temperature(self, temperature: float) -> None:
        low, high = self.settings.temperature_range
        if not low <= temperature <= high:
            raise InvalidInputError(f"Temperature must be between {low:g} and {high:g} °C (got {temperature})")
