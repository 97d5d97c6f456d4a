import json

import pandas as pd
import pytest

from ohlc_axis_module.bucketing import bucketize
from ohlc_axis_module.cli import build_config, main, parse_args
from ohlc_axis_module.config import AxisConfig, Granularity
from ohlc_axis_module.io_utils import ensure_outdir, write_axis_csv, write_metadata
from ohlc_axis_module.metadata import build_metadata_row

CSV_TEXT = (
    "Date,Open,High,Low,Close,Volume\n"
    "2002-08-05,9,11,8,10,100\n"
    "2002-08-06,10,12,9,11,200\n"
    "2002-08-07,11,13,10,12,300\n"
    "2002-08-12,19,21,18,20,400\n"
    "2002-08-13,21,23,20,22,500\n"
    "not-a-date,1,2,3,4,5\n"
)


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "prices.csv"
    path.write_text(CSV_TEXT)
    return path


def make_rows():
    return [line.split(",") for line in CSV_TEXT.strip().splitlines()]


def test_build_metadata_row_serialises_expected_fields():
    cfg = AxisConfig(granularity=Granularity.WEEKS)
    result = bucketize(make_rows(), cfg)

    row = build_metadata_row("prices.csv", result, cfg)

    assert row["source"] == "prices.csv"
    assert row["granularity"] == "weeks"
    assert row["n_points"] == 2
    assert row["n_placeholders"] == 0
    assert row["start_date"] == "2002-08-07"
    assert row["end_date"] == "2002-08-13"
    assert row["dropped_rows"] == 1
    assert row["label_max"] == len("7 Aug")

    stats = json.loads(row["ohlc_stats_json"])
    for column in ["Open", "High", "Low", "Close"]:
        assert {"min", "max", "mean", "std"}.issubset(stats[column].keys())
    assert stats["Close"]["min"] == pytest.approx(11.0)
    assert stats["Close"]["max"] == pytest.approx(21.0)
    assert stats["start_iso"] == "2002-08-07"


def test_build_metadata_row_without_bars():
    cfg = AxisConfig()
    result = bucketize([["2002-08-01", "1000"]], cfg)
    stats = json.loads(build_metadata_row("volumes.csv", result, cfg)["ohlc_stats_json"])
    assert "Close" not in stats
    assert stats["end_iso"] == "2002-08-01"


def test_write_helpers(tmp_path):
    paths = ensure_outdir(str(tmp_path / "out"))
    result = bucketize(make_rows(), granularity="weekdays")

    write_axis_csv(result, paths["axis"])
    df = pd.read_csv(paths["axis"])
    assert list(df["Date"]) == list(result.dates)

    write_metadata([], paths["metadata"])
    assert not (tmp_path / "out" / "metadata.csv").exists()


def test_parse_args_defaults():
    args = parse_args(["--csv", "prices.csv"])
    assert args.granularity == "days"
    assert args.changes_only is True
    assert args.show_year is None
    assert args.legacy_two_field_volume is True
    assert args.average_monthly_volume is False
    assert args.save_metadata_csv is True


def test_build_config_from_args():
    args = parse_args(
        ["--csv", "p.csv", "--granularity", "months", "--no_changes_only",
         "--show_day", "--no_show_year", "--average_monthly_volume"]
    )
    cfg = build_config(args)
    assert cfg.granularity is Granularity.MONTHS
    assert cfg.changes_only is False
    assert cfg.label_visibility() == (False, True, True, False)
    assert cfg.average_monthly_volume is True


def test_main_writes_axis_and_metadata(csv_path, tmp_path):
    out_dir = tmp_path / "out"
    main(["--csv", str(csv_path), "--granularity", "weeks", "--out_dir", str(out_dir)])

    axis = pd.read_csv(out_dir / "axis.csv")
    assert list(axis["Date"]) == ["2002-08-07", "2002-08-13"]
    assert axis["Close"].tolist() == pytest.approx([11.0, 21.0])
    assert axis["Volume"].tolist() == pytest.approx([200.0, 450.0])

    meta = pd.read_csv(out_dir / "metadata.csv")
    assert meta.loc[0, "granularity"] == "weeks"
    assert meta.loc[0, "n_points"] == 2


def test_main_without_metadata(csv_path, tmp_path):
    out_dir = tmp_path / "out"
    main(["--csv", str(csv_path), "--out_dir", str(out_dir), "--no_save_metadata_csv"])
    assert (out_dir / "axis.csv").exists()
    assert not (out_dir / "metadata.csv").exists()


def test_main_missing_csv(tmp_path):
    with pytest.raises(SystemExit):
        main(["--csv", str(tmp_path / "missing.csv"), "--out_dir", str(tmp_path / "out")])
