"""Drive estimators over historical price series.

The estimators are strictly streaming; these helpers only feed a pandas
series through :meth:`~dominant_cycle.base.CycleEstimator.update` one sample
at a time and collect the returned periods on the original index::

    prices = load_price_series("data/BTC_USDT_2h.csv")
    frame = compute_cycle_frame(prices.to_frame("close"), ["tasc", "mesa", "homodyne"])
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from .base import CycleEstimator
from .diagnostics import DiagnosticSink
from .registry import build_estimator

logger = logging.getLogger(__name__)

TIMESTAMP_ALIASES: tuple[str, ...] = ("timestamp", "date", "time", "datetime")


def _detect_timestamp_column(df: pd.DataFrame) -> str:
    lowered = {str(c).strip().lower(): c for c in df.columns}
    for candidate in TIMESTAMP_ALIASES:
        if candidate in lowered:
            return lowered[candidate]
    raise ValueError("Unable to detect the timestamp column (timestamp/date/time)")


def load_price_series(path: str | Path, column: str = "close", tz: str | None = "UTC") -> pd.Series:
    """Load one price column of a timestamped CSV file.

    The index is a sorted, de-duplicated :class:`~pandas.DatetimeIndex`.
    Values that cannot be parsed become ``NaN`` and are left in place: the
    estimators replace them with the previous valid sample.
    """

    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"File not found: {csv_path}")

    df = pd.read_csv(csv_path)
    if df.empty:
        raise ValueError("The CSV file is empty")

    timestamp_col = _detect_timestamp_column(df)
    df.columns = [str(c).strip().lower() for c in df.columns]
    key = column.strip().lower()
    if key not in df.columns:
        raise ValueError(f"Missing price column in the CSV: '{column}'")

    timestamps = pd.to_datetime(df[str(timestamp_col).strip().lower()], utc=True)
    if tz:
        timestamps = timestamps.dt.tz_convert(tz)
    series = pd.to_numeric(df[key], errors="coerce")
    series.index = pd.DatetimeIndex(timestamps, name="timestamp")
    series = series.sort_index(kind="mergesort")
    series = series.loc[~series.index.duplicated(keep="last")]
    return series.rename(key)


def compute_cycle_periods(
    series: pd.Series | Iterable[float],
    estimator: CycleEstimator,
    reset: bool = True,
) -> pd.Series:
    """Feed ``series`` through ``estimator`` and return the period per sample.

    Step indices start at 0 for the first sample.  With ``reset=False`` the
    estimator continues from its current state and the step indices continue
    from :attr:`~dominant_cycle.base.CycleEstimator.samples_seen`.
    """

    if not isinstance(series, pd.Series):
        series = pd.Series(list(series), dtype=float)
    if reset:
        estimator.reset()
    offset = estimator.samples_seen
    values = series.to_numpy(dtype=float, na_value=np.nan)
    periods = np.empty(values.size, dtype=float)
    for i, sample in enumerate(values):
        periods[i] = estimator.update(sample, offset + i)
    logger.debug("%s replayed %d samples, last period %.3f", estimator.name, values.size,
                 periods[-1] if values.size else float("nan"))
    return pd.Series(periods, index=series.index, name=f"{estimator.name}_period")


def compute_cycle_frame(
    df: pd.DataFrame,
    names: Iterable[str],
    price_col: str = "close",
    params: Optional[Mapping[str, object]] = None,
    sink: Optional[DiagnosticSink] = None,
) -> pd.DataFrame:
    """Return one period column per estimator name for ``df[price_col]``.

    ``params`` optionally maps an estimator name to its overrides.  Columns
    are named ``<canonical name>_period``.
    """

    if price_col not in df.columns:
        raise KeyError(f"Column '{price_col}' not found in dataframe")
    params = params or {}
    prices = df[price_col]
    columns = {}
    for name in names:
        estimator = build_estimator(name, params.get(name), sink=sink)
        result = compute_cycle_periods(prices, estimator)
        if result.name in columns:
            raise ValueError(f"Estimator '{name}' requested twice")
        columns[result.name] = result
    return pd.DataFrame(columns, index=df.index)


__all__ = ["load_price_series", "compute_cycle_periods", "compute_cycle_frame"]
