# analytics/prognostics/wear_trend.py
import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

import numpy as np

from analytics.prognostics.degradation_model import (
    MIN_HISTORY,
    ORDER_THRESHOLD,
    REPLACE_FORECAST_THRESHOLD,
    TREND_EPSILON,
)

SECONDS_PER_DAY = 86400.0


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class Prediction:
    slope: float                 # deviation per day
    intercept: float
    current_deviation: float
    wear_rate_per_1000: float    # deviation per 1000 counter units
    days_to_order: int | None
    days_to_replace: int | None
    order_date: date | None
    replace_date: date | None
    trend: TrendDirection
    record_count: int

    def to_dict(self) -> dict:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "current_deviation": self.current_deviation,
            "wear_rate_per_1000": self.wear_rate_per_1000,
            "days_to_order": self.days_to_order,
            "days_to_replace": self.days_to_replace,
            "order_date": self.order_date.isoformat() if self.order_date else None,
            "replace_date": self.replace_date.isoformat() if self.replace_date else None,
            "trend": self.trend.value,
            "record_count": self.record_count,
        }


# =========================================================
# REGRESSION
# =========================================================
def linear_regression(xs, ys) -> tuple[float, float]:
    """
    Closed-form ordinary least squares.

    Returns (slope, intercept); (0.0, 0.0) when the x values have no
    spread or the fit is not a number.
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    n = x.size

    if n == 0:
        return 0.0, 0.0

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x * x))

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0, 0.0

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    if math.isnan(slope) or math.isnan(intercept):
        return 0.0, 0.0

    return slope, intercept


def elapsed_days(start, end) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def trend_direction(slope: float) -> TrendDirection:
    if slope > TREND_EPSILON:
        return TrendDirection.INCREASING
    if slope < -TREND_EPSILON:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def days_until(threshold: float, current: float, slope: float) -> float | None:
    """
    Linear extrapolation to a threshold. None unless wear is increasing
    and the threshold is still ahead.
    """
    if slope <= 0:
        return None

    days = (threshold - current) / slope
    if not math.isfinite(days):
        return None
    return days if days > 0 else None


def wear_rate_per_1000(first, last) -> float:
    counter_delta = last.counter - first.counter

    if counter_delta <= 0:
        return 0.0

    return (last.max_deviation - first.max_deviation) / counter_delta * 1000


def _whole_days(days: float | None) -> int | None:
    if days is None:
        return None
    return int(math.floor(days + 0.5))


def _project(last_date, days: float | None):
    if days is None:
        return None
    try:
        return last_date + timedelta(days=days)
    except OverflowError:
        # noise slopes on a flat history land past date.max
        return None


# =========================================================
# PUBLIC API
# =========================================================
def predict(history) -> Prediction | None:
    """
    Forecast threshold crossings from a line's archive history.

    history: ArchiveRecord list of one line + extruder, oldest first.
    Returns None with fewer than two records.
    """
    history = list(history)

    if len(history) < MIN_HISTORY:
        return None

    first = history[0]
    last = history[-1]

    xs = [elapsed_days(first.verification_date, r.verification_date) for r in history]
    ys = [r.max_deviation for r in history]

    slope, intercept = linear_regression(xs, ys)
    current = last.max_deviation

    to_order = days_until(ORDER_THRESHOLD, current, slope)
    to_replace = days_until(REPLACE_FORECAST_THRESHOLD, current, slope)

    return Prediction(
        slope=slope,
        intercept=intercept,
        current_deviation=current,
        wear_rate_per_1000=wear_rate_per_1000(first, last),
        days_to_order=_whole_days(to_order),
        days_to_replace=_whole_days(to_replace),
        order_date=_project(last.verification_date, to_order),
        replace_date=_project(last.verification_date, to_replace),
        trend=trend_direction(slope),
        record_count=len(history),
    )


def trend_series(history, prediction: Prediction | None = None) -> list[dict]:
    """
    Chart rows for the deviation trend, with the fitted line when a
    prediction is given.
    """
    history = list(history)
    if not history:
        return []

    first_date = history[0].verification_date
    rows = []

    for index, record in enumerate(history):
        x = elapsed_days(first_date, record.verification_date)
        row = {
            "index": index,
            "date": record.verification_date.isoformat(),
            "days": x,
            "deviation": record.max_deviation,
            "counter": record.counter,
        }
        if prediction is not None:
            row["fitted"] = prediction.intercept + prediction.slope * x
        rows.append(row)

    return rows
