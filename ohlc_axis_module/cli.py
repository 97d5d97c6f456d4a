"""Command line interface for preparing labelled OHLC chart axes from CSV rows.

Example usage
-------------

* Daily axis of the dates present in a file::

    python make_ohlc_axis.py --csv gsk.csv --out_dir ./out

* Weekly averages with the year shown on every label::

    python make_ohlc_axis.py --csv gsk.csv --granularity weeks --show_year --no_changes_only --out_dir ./out
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .bucketing import bucketize
from .config import AxisConfig, Granularity
from .data import load_csv_rows
from .io_utils import ensure_outdir, write_axis_csv, write_metadata
from .metadata import build_metadata_row


LOGGER_NAME = "make_ohlc_axis"


def _add_toggle(parser, name: str, help_text: str) -> None:
    """Add a ``--name`` / ``--no_name`` pair defaulting to ``None``."""

    parser.add_argument(f"--{name}", dest=name, action="store_true", default=None, help=help_text)
    parser.add_argument(f"--no_{name}", dest=name, action="store_false", help=argparse.SUPPRESS)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(description="Prepare a labelled OHLC chart axis.")
    parser.add_argument("--csv", required=True, help="CSV file of date,open,high,low,close[,volume] rows.")
    parser.add_argument(
        "--granularity",
        choices=[member.value for member in Granularity],
        default=Granularity.EVERY_KNOWN_DATE.value,
        help="Which calendar days become axis points (default: days present in the data).",
    )
    parser.add_argument("--out_dir", default="./out", help="Output directory root.")

    label_group = parser.add_argument_group("Label Options")
    label_group.add_argument(
        "--changes_only",
        dest="changes_only",
        action="store_true",
        default=True,
        help="Only show label fields that changed since the previous label (default).",
    )
    label_group.add_argument(
        "--no_changes_only",
        dest="changes_only",
        action="store_false",
        help="Repeat every enabled label field on every label.",
    )
    _add_toggle(label_group, "show_weekday", "Show the weekday name (--no_show_weekday hides it).")
    _add_toggle(label_group, "show_day", "Show the day of the month (--no_show_day hides it).")
    _add_toggle(label_group, "show_month", "Show the month name (--no_show_month hides it).")
    _add_toggle(label_group, "show_year", "Show the year (--no_show_year hides it).")

    compat_group = parser.add_argument_group("Compatibility Options")
    compat_group.add_argument(
        "--no_legacy_two_field_volume",
        dest="legacy_two_field_volume",
        action="store_false",
        default=True,
        help="Do not read the second field of two-field rows as volume.",
    )
    compat_group.add_argument(
        "--average_monthly_volume",
        action="store_true",
        help="Average volume for monthly buckets as well as prices.",
    )

    parser.add_argument(
        "--save_metadata_csv",
        dest="save_metadata_csv",
        action="store_true",
        default=True,
        help="Persist metadata.csv (default).",
    )
    parser.add_argument(
        "--no_save_metadata_csv",
        dest="save_metadata_csv",
        action="store_false",
        help="Skip writing metadata CSV.",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AxisConfig:
    """Translate parsed arguments into an :class:`AxisConfig`."""

    return AxisConfig(
        granularity=Granularity.parse(args.granularity),
        changes_only=args.changes_only,
        show_weekday=args.show_weekday,
        show_day=args.show_day,
        show_month=args.show_month,
        show_year=args.show_year,
        legacy_two_field_volume=args.legacy_two_field_volume,
        average_monthly_volume=args.average_monthly_volume,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI utility."""

    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    logger = logging.getLogger(LOGGER_NAME)

    cfg = build_config(args)

    try:
        rows = load_csv_rows(args.csv)
    except FileNotFoundError as exc:
        raise SystemExit(str(exc))
    logger.info("Read %d rows from %s", len(rows), args.csv)

    result = bucketize(rows, cfg)
    if result.dropped_rows:
        logger.info("Skipped %d row(s) with unrecognised dates.", result.dropped_rows)

    if not len(result):
        logger.warning("No axis points were produced.")
        return

    paths = ensure_outdir(args.out_dir)
    write_axis_csv(result, paths["axis"])
    logger.info(
        "Axis written to %s (%d points by %s, longest label %d)",
        paths["axis"],
        len(result),
        cfg.granularity.value,
        result.label_max,
    )

    if args.save_metadata_csv:
        write_metadata([build_metadata_row(args.csv, result, cfg)], paths["metadata"])
        logger.info("Metadata written to %s", paths["metadata"])
