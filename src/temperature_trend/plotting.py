"""
Chart of the samples, the fitted line and the predicted points.

Uses the non-interactive Agg backend so charts can be written from scripts
and tests without a display.
"""

import logging
from pathlib import Path
from typing import List

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from temperature_trend.formatting import format_point
from temperature_trend.models import FitResult, Sample
from temperature_trend.session import TrendSession

matplotlib.use("Agg")

LOGGER = logging.getLogger(__name__)


def plot_trend(session: TrendSession, output_path: Path) -> Path:
    """
    Plot the session and save it to ``output_path``.

    The equation of the fitted line is the chart title. The line spans the
    configured time range; predicted points are annotated with their
    coordinates and user points are drawn separately.

    Args:
        session: Session holding samples, query times and user points
        output_path: Where to save the image (format from the suffix)

    Returns:
        The path written
    """
    result = session.current
    predictions = session.predictions()

    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        draw_trend(ax, session, result, predictions)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.tight_layout()
        fig.savefig(output_path, dpi=120)
    finally:
        plt.close(fig)
    LOGGER.info("Saved chart to %s", output_path)
    return output_path


def draw_trend(ax: plt.Axes, session: TrendSession, result: FitResult, predictions: List[Sample]) -> None:
    """Draw the line, samples, predictions and user points onto ``ax``."""
    decimals = session.settings.value_decimals
    equation = result.equation(session.settings.equation_decimals)

    low, high = session.settings.time_range
    line_t = np.linspace(low, high, 200)
    ax.plot(line_t, result.slope * line_t + result.intercept, "b-", lw=2, label="Fitted line")

    if session.samples:
        ax.scatter(
            [point.time for point in session.samples],
            [point.temperature for point in session.samples],
            c="red",
            s=40,
            zorder=3,
            label="Experimental",
        )

    if predictions:
        ax.scatter(
            [point.time for point in predictions],
            [point.temperature for point in predictions],
            c="green",
            marker="D",
            s=40,
            zorder=3,
            label="Interpolation",
        )
        for point in predictions:
            ax.annotate(
                format_point(point.time, point.temperature, decimals),
                (point.time, point.temperature),
                textcoords="offset points",
                xytext=(5, 8),
                fontsize=9,
            )

    if session.user_points:
        ax.scatter(
            [point.time for point in session.user_points],
            [point.temperature for point in session.user_points],
            c="orange",
            marker="s",
            s=40,
            zorder=3,
            label="User",
        )

    ax.set_xlim(low, high)
    ax.set_xlabel("Time (h)", fontsize=12)
    ax.set_ylabel("Temperature (°C)", fontsize=12)
    ax.set_title(equation, fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
