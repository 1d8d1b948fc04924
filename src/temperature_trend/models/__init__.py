"""Line-fit engine for predicting temperature from time."""

from .regression import (
    DEGENERATE_DENOMINATOR_EPS,
    NO_DATA_LABEL,
    DegenerateFitError,
    FitResult,
    InvalidInputError,
    LinearTrendRegressor,
    NumericOverflowError,
    Sample,
    TrendError,
    evaluate,
    fit,
    is_within_range,
    range_description,
    time_bounds,
)

__all__ = [
    "DEGENERATE_DENOMINATOR_EPS",
    "NO_DATA_LABEL",
    "DegenerateFitError",
    "FitResult",
    "InvalidInputError",
    "LinearTrendRegressor",
    "NumericOverflowError",
    "Sample",
    "TrendError",
    "evaluate",
    "fit",
    "is_within_range",
    "range_description",
    "time_bounds",
]
