"""Per-category monthly trend analysis and next-month forecasts."""

import calendar
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ...config import ANALYSIS_WINDOW_MONTHS
from ...schemas.insights import TrendPrediction

# A category needs this many expense rows in the window for a "high" label
HIGH_CONFIDENCE_MIN_TRANSACTIONS = 3

# Local projections assume at least this many purchases per month
LOCAL_MIN_MONTHLY_TRANSACTIONS = 4
LOCAL_INCREASING_RATIO = 0.8


def get_month_key(d: datetime) -> str:
    """Return YYYY-MM format."""
    return f"{d.year}-{d.month:02d}"


def window_start(as_of: datetime, months: int = ANALYSIS_WINDOW_MONTHS) -> datetime:
    """Step back `months` calendar months, clamping the day to the target month."""
    total_months_linear = (as_of.year * 12) + (as_of.month - 1) - months
    year, month_idx = divmod(total_months_linear, 12)
    month = month_idx + 1
    day = min(as_of.day, calendar.monthrange(year, month)[1])
    return as_of.replace(year=year, month=month, day=day)


def filter_window(
    transactions: Sequence[Any],
    as_of: datetime,
    months: int = ANALYSIS_WINDOW_MONTHS
) -> List[Any]:
    start = window_start(as_of, months)
    return [txn for txn in transactions if start <= txn.transaction_date <= as_of]


def _expenses(transactions: Sequence[Any]) -> List[Any]:
    return [txn for txn in transactions if txn.type == "expense"]


def aggregate_category_months(transactions: Sequence[Any]) -> Dict[str, Dict[str, float]]:
    """Sum expense amounts by (category, month).

    Categories keep the order in which they were first seen.
    """
    category_monthly: Dict[str, Dict[str, float]] = {}

    for txn in _expenses(transactions):
        monthly = category_monthly.setdefault(txn.category, defaultdict(float))
        monthly[get_month_key(txn.transaction_date)] += float(txn.amount)

    return {cat: dict(monthly) for cat, monthly in category_monthly.items()}


def _category_counts(transactions: Sequence[Any]) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for txn in _expenses(transactions):
        counts[txn.category] += 1
    return counts


def _confidence(count: int) -> str:
    return "high" if count >= HIGH_CONFIDENCE_MIN_TRANSACTIONS else "moderate"


def analyze(
    transactions: Sequence[Any],
    as_of: Optional[datetime],
    window_months: Optional[int] = ANALYSIS_WINDOW_MONTHS
) -> Dict[str, TrendPrediction]:
    """Forecast next month's spend for every category with two or more months of data.

    `avg_change` is the mean of amount[i-1] - amount[i] over months sorted
    newest first, so a positive value means the newer months are larger.
    Pass `window_months=None` when the caller has already windowed the input.
    """
    if window_months is not None and as_of is not None:
        transactions = filter_window(transactions, as_of, window_months)

    category_monthly = aggregate_category_months(transactions)
    counts = _category_counts(transactions)

    predictions: Dict[str, TrendPrediction] = {}
    for category, monthly in category_monthly.items():
        if len(monthly) < 2:
            continue

        amounts = [monthly[month] for month in sorted(monthly, reverse=True)]
        last_month = amounts[0]

        avg_change = sum(amounts[i - 1] - amounts[i] for i in range(1, len(amounts)))
        avg_change = avg_change / (len(amounts) - 1)

        percent_change = (avg_change / last_month) * 100 if last_month > 0 else 0.0

        predictions[category] = TrendPrediction(
            current_amount=last_month,
            predicted_amount=max(0.0, last_month + avg_change),
            trend="increasing" if avg_change > 0 else "decreasing",
            percent_change=round(percent_change, 2),
            average_monthly=sum(amounts) / len(amounts),
            confidence=_confidence(counts[category]),
        )

    return predictions


def project_local_predictions(transactions: Sequence[Any]) -> Dict[str, TrendPrediction]:
    """Rough projections for histories too short for a month-over-month trend.

    Each category is projected as its average ticket times at least four
    purchases a month.
    """
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for txn in _expenses(transactions):
        totals[txn.category] = totals.get(txn.category, 0.0) + float(txn.amount)
        counts[txn.category] = counts.get(txn.category, 0) + 1

    predictions: Dict[str, TrendPrediction] = {}
    for category, total in totals.items():
        count = counts[category]
        projected = total / count * max(count, LOCAL_MIN_MONTHLY_TRANSACTIONS)
        percent_change = abs((total - projected) / projected * 100) if projected > 0 else 0.0

        predictions[category] = TrendPrediction(
            current_amount=total,
            predicted_amount=projected,
            trend="increasing" if total > projected * LOCAL_INCREASING_RATIO else "stable",
            percent_change=round(percent_change, 1),
            average_monthly=projected,
            confidence=_confidence(count),
        )

    return predictions
