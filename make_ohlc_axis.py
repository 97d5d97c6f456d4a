#!/usr/bin/env python3
"""make_ohlc_axis.py
=================================

Entry-point script for turning raw daily price rows (CSV) into a labelled,
chart-ready axis: the kept dates, one label per axis point, and the OHLC and
volume values per date, optionally averaged by week or month. The heavy
lifting lives in the ``ohlc_axis_module`` package.

Example usage
-------------

* Every weekday between the first and last date, gaps shown as blank points::

    python make_ohlc_axis.py --csv gsk.csv --granularity weekdays --out_dir ./out

* Monthly averages labelled by month and year::

    python make_ohlc_axis.py --csv gsk.csv --granularity months --out_dir ./out

The script requires the following packages: ``pandas``, ``numpy`` and
``python-dateutil``.
"""
from __future__ import annotations

from ohlc_axis_module.cli import main


if __name__ == "__main__":
    main()
