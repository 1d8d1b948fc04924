"""CLI entry point: fit a temperature trend, print predictions, export and chart them."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from temperature_trend.data_loading import load_point_table, save_point_table
from temperature_trend.formatting import format_value
from temperature_trend.models import TrendError
from temperature_trend.plotting import plot_trend
from temperature_trend.session import TrendSession
from temperature_trend.settings import load_settings

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--input",
        type=Path,
        help="Point table (.xlsx or .csv). Uses the reference samples when omitted.",
    )
    parser.add_argument(
        "--at",
        dest="query_times",
        type=float,
        nargs="+",
        metavar="HOURS",
        help="Query times to predict (replaces the times from the input table).",
    )
    parser.add_argument("--export", type=Path, help="Write samples and predictions to this table file.")
    parser.add_argument("--plot", type=Path, help="Save a chart image to this path.")
    parser.add_argument("--settings", type=Path, help="Optional JSON settings override.")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings(args.settings)
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.input is None:
        session = TrendSession.default(settings)
    else:
        try:
            table = load_point_table(args.input, settings)
        except (OSError, ValueError) as exc:
            LOGGER.error("Failed to load %s: %s", args.input, exc)
            return 1
        if not table.has_data():
            LOGGER.error("No points found in %s", args.input)
            return 1
        session = TrendSession.from_table(table, settings)

    if args.query_times:
        session.query_times = []
        try:
            for time in args.query_times:
                session.add_query_time(time)
        except TrendError as exc:
            LOGGER.error("Invalid query time: %s", exc)
            return 1

    result = session.current
    if session.last_error:
        LOGGER.warning("Using fallback coefficients: %s", session.last_error)
    print(f"equation: {result.equation(settings.equation_decimals)}")
    print(f"range: {session.range_label()}")
    extrapolated = set(session.extrapolated_times())
    try:
        predictions = session.predictions()
    except TrendError as exc:
        LOGGER.error("Prediction failed: %s", exc)
        return 1
    for point in predictions:
        note = " (extrapolated)" if point.time in extrapolated else ""
        time = format_value(point.time, settings.value_decimals)
        temperature = format_value(point.temperature, settings.value_decimals)
        print(f"t={time} T={temperature}{note}")

    if args.export:
        save_point_table(session.to_table(), args.export, settings)
    if args.plot:
        plot_trend(session, args.plot)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
