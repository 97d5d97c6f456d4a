import numpy as np
import pandas as pd
import pytest

from ohlc_axis_module.config import PRICE_COLUMNS
from ohlc_axis_module.data import PriceBar
from ohlc_axis_module.dates import CalendarDate
from ohlc_axis_module.result import AxisPoint, ResultIndex


def make_points():
    return [
        AxisPoint(CalendarDate(2002, 8, 1), "Thu 1 Aug", 0, True, PriceBar(1.0, 2.0, 0.5, 1.5), 100.0),
        AxisPoint(CalendarDate(2002, 8, 2), "", 1, False),
        AxisPoint(CalendarDate(2002, 8, 5), "Mon 5", 2, True, None, 300.0),
    ]


def test_from_points_assembles_lookups():
    result = ResultIndex.from_points(make_points(), dropped_rows=2)

    assert len(result) == 3
    assert result.dates == ("2002-08-01", "2002-08-02", "2002-08-05")
    assert result.index == {"2002-08-01": 0, "2002-08-02": 1, "2002-08-05": 2}
    assert result.bars == {"2002-08-01": PriceBar(1.0, 2.0, 0.5, 1.5)}
    assert result.volumes == {"2002-08-01": 100.0, "2002-08-05": 300.0}
    assert result.labels == ("Thu 1 Aug", "", "Mon 5")
    assert result.label_max == 9
    assert result.dropped_rows == 2
    assert result.point("2002-08-05").volume == 300.0


def test_closes_and_volume_series():
    result = ResultIndex.from_points(make_points())
    assert result.closes == [1.5, None, None]
    assert result.volume_series == [100.0, None, 300.0]


def test_known_date_returns_first_date_with_data():
    result = ResultIndex.from_points(make_points())
    assert result.known_date("2002-08-01") == "2002-08-01"
    # The placeholder on 08-02 is skipped.
    assert result.known_date("2002-08-02") == "2002-08-05"
    assert result.known_date("03/08/2002") == "2002-08-05"
    assert result.known_date("2002-08-06") is None


def test_empty_result():
    result = ResultIndex.empty(dropped_rows=3)
    assert len(result) == 0
    assert result.label_max == 0
    assert result.dropped_rows == 3
    assert result.known_date("2002-08-01") is None
    assert result.to_frame().empty


def test_to_frame():
    df = ResultIndex.from_points(make_points()).to_frame()

    assert isinstance(df.index, pd.DatetimeIndex)
    assert df.index.name == "Date"
    assert list(df.columns) == ["Label"] + PRICE_COLUMNS + ["Volume", "HasData"]
    assert df.loc[pd.Timestamp("2002-08-01"), "Close"] == pytest.approx(1.5)
    assert np.isnan(df.loc[pd.Timestamp("2002-08-02"), "Open"])
    assert np.isnan(df.loc[pd.Timestamp("2002-08-02"), "Volume"])
    assert df.loc[pd.Timestamp("2002-08-05"), "Volume"] == pytest.approx(300.0)
    assert list(df["HasData"]) == [True, False, True]
    assert list(df["Label"]) == ["Thu 1 Aug", "", "Mon 5"]
