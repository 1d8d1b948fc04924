"""Least-squares line fit for (time, temperature) samples."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple, Union

import numpy as np

DEGENERATE_DENOMINATOR_EPS = 1e-10
NO_DATA_LABEL = "no data"


class TrendError(Exception):
    """Base class for failures reported by the regression engine."""


class InvalidInputError(TrendError, ValueError):
    """Too few samples or a non-finite value in the input."""


class DegenerateFitError(TrendError, ArithmeticError):
    """The samples do not define a line (all times equal) or the fit blew up."""


class NumericOverflowError(TrendError, ArithmeticError):
    """Evaluating the line produced a non-finite temperature."""


@dataclass(frozen=True)
class Sample:
    """One observed point. Equality is exact on both fields."""

    time: float
    temperature: float

    def __str__(self) -> str:
        return f"({self.time:.1f} h, {self.temperature:.1f}°C)"


@dataclass(frozen=True)
class FitResult:
    """Coefficients of ``temperature = slope * time + intercept``."""

    slope: float
    intercept: float

    def __iter__(self) -> Iterator[float]:
        yield self.slope
        yield self.intercept

    def equation(self, decimals: int = 4) -> str:
        return f"T = {self.slope:.{decimals}f} * t + {self.intercept:.{decimals}f}"


SampleLike = Union[Sample, Tuple[float, float]]


def fit(samples: Sequence[SampleLike] | None, *, eps: float = DEGENERATE_DENOMINATOR_EPS) -> FitResult:
    """Fit slope and intercept by ordinary least squares.

    The sums are accumulated once and plugged into the closed-form normal
    equations; no centering is applied, so precision degrades for large or
    badly conditioned inputs.

    Raises ``InvalidInputError`` for fewer than two samples or non-finite
    values, and ``DegenerateFitError`` when the time variance vanishes
    (``|n*sum(x^2) - sum(x)^2| < eps``) or the coefficients are not finite.
    """

    if samples is None:
        raise InvalidInputError("Sample list must not be None")
    points = [_as_sample(item) for item in samples]
    if not points:
        raise InvalidInputError("Sample list must not be empty")
    if len(points) < 2:
        raise InvalidInputError("At least 2 samples are required for a fit")

    for point in points:
        if not math.isfinite(point.time):
            raise InvalidInputError(f"Invalid time value: {point.time}")
        if not math.isfinite(point.temperature):
            raise InvalidInputError(f"Invalid temperature value: {point.temperature}")

    x = np.fromiter((point.time for point in points), dtype=float, count=len(points))
    y = np.fromiter((point.temperature for point in points), dtype=float, count=len(points))
    n = len(points)
    with np.errstate(over="ignore", invalid="ignore"):
        sum_x = float(np.sum(x))
        sum_y = float(np.sum(y))
        sum_xy = float(np.sum(x * y))
        sum_xx = float(np.sum(x * x))

    denominator = n * sum_xx - sum_x * sum_x
    if abs(denominator) < eps:
        raise DegenerateFitError("Cannot fit a line: all sample times are equal")

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    if not (math.isfinite(slope) and math.isfinite(intercept)):
        raise DegenerateFitError(f"Fit produced non-finite coefficients: slope={slope}, intercept={intercept}")

    return FitResult(slope=slope, intercept=intercept)


def evaluate(time: float, slope: float, intercept: float) -> float:
    """Return the fitted temperature at ``time``."""

    if not math.isfinite(time):
        raise InvalidInputError(f"Time must be a finite number (got {time})")
    result = slope * time + intercept
    if not math.isfinite(result):
        raise NumericOverflowError(f"Temperature at t={time} is not finite: {result}")
    return result


def time_bounds(samples: Iterable[SampleLike] | None) -> Tuple[float, float] | None:
    """Return ``(min_time, max_time)`` or None when there are no samples.

    Samples with a NaN time are skipped, so the bounds do not depend on sample
    order; a set whose times are all NaN has no bounds.
    """

    if samples is None:
        return None
    low = math.inf
    high = -math.inf
    seen = False
    for item in samples:
        time = _as_sample(item).time
        if math.isnan(time):
            continue
        low = min(low, time)
        high = max(high, time)
        seen = True
    return (low, high) if seen else None


def is_within_range(time: float, samples: Iterable[SampleLike] | None) -> bool:
    """True when ``time`` lies inside the observed time range, bounds included."""

    bounds = time_bounds(samples)
    if bounds is None:
        return False
    low, high = bounds
    return low <= time <= high


def range_description(samples: Iterable[SampleLike] | None) -> str:
    """Human-readable time range such as ``"8.0 - 20.0 h"``, or ``NO_DATA_LABEL``."""

    bounds = time_bounds(samples)
    if bounds is None:
        return NO_DATA_LABEL
    low, high = bounds
    return f"{low:.1f} - {high:.1f} h"


@dataclass
class LinearTrendRegressor:
    """Predict temperature from time with a fitted straight line."""

    slope: float = 1.0
    intercept: float = 0.0

    def fit(
        self, times: np.ndarray, temperatures: np.ndarray, *, eps: float = DEGENERATE_DENOMINATOR_EPS
    ) -> "LinearTrendRegressor":
        """Fit slope and intercept via least squares."""

        times = np.asarray(times, dtype=float).reshape(-1)
        temperatures = np.asarray(temperatures, dtype=float).reshape(-1)
        if times.shape != temperatures.shape:
            raise InvalidInputError(
                f"times and temperatures differ in length ({times.shape[0]} vs {temperatures.shape[0]})"
            )
        result = fit(list(zip(times.tolist(), temperatures.tolist())), eps=eps)
        self.slope, self.intercept = result
        return self

    def predict(self, times: np.ndarray) -> np.ndarray:
        """Return predicted temperatures."""

        times = np.asarray(times, dtype=float)
        if not np.all(np.isfinite(times)):
            raise InvalidInputError("Times must be finite numbers")
        with np.errstate(over="ignore", invalid="ignore"):
            predicted = self.slope * times + self.intercept
        if not np.all(np.isfinite(predicted)):
            raise NumericOverflowError("Predicted temperatures are not finite")
        return predicted

    @property
    def result(self) -> FitResult:
        return FitResult(slope=self.slope, intercept=self.intercept)


def _as_sample(item: SampleLike) -> Sample:
    if isinstance(item, Sample):
        return item
    time, temperature = item
    return Sample(float(time), float(temperature))
