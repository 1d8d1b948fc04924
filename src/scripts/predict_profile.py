"""CLI tool to fit inline samples and predict temperatures at query times."""

from __future__ import annotations

import argparse
from typing import Sequence

from temperature_trend.formatting import parse_number
from temperature_trend.models import Sample, TrendError, evaluate, fit, is_within_range, range_description


def parse_sample(spec: str) -> Sample:
    """Turn ``"time:temperature"`` into a sample, rejecting malformed specs."""

    parts = spec.split(":")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected time:temperature, got {spec!r}")
    try:
        return Sample(time=parse_number(parts[0]), temperature=parse_number(parts[1]))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid sample {spec!r}: {exc}") from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fit a line through time:temperature samples and predict.")
    parser.add_argument(
        "--samples",
        nargs="+",
        required=True,
        type=parse_sample,
        metavar="time:temperature",
        help="Sample spec like 8:7 meaning 7 °C at hour 8.",
    )
    parser.add_argument("--at", nargs="+", type=float, default=[], metavar="HOURS", help="Query times to evaluate.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    samples = args.samples

    try:
        result = fit(samples)
    except TrendError as exc:
        print(f"fit failed: {exc}")
        return 1

    print(f"equation: {result.equation()}")
    print(f"range: {range_description(samples)}")
    for time in args.at:
        try:
            temperature = evaluate(time, result.slope, result.intercept)
        except TrendError as exc:
            print(f"prediction failed: {exc}")
            return 1
        inside = "inside" if is_within_range(time, samples) else "outside"
        print(f"t={time:.2f} T={temperature:.2f} ({inside} data range)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
