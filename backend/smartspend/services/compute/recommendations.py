"""Savings recommendations built from trend predictions and raw spending."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ...config import ANALYSIS_WINDOW_MONTHS
from ...schemas.insights import Recommendation, TrendPrediction
from .currency import CurrencyFormatter, format_currency, format_number, format_whole_percent
from .trends import analyze, filter_window

# Trend-driven
TREND_INCREASE_THRESHOLD = 20.0

# Day-of-week
DAY_PATTERN_MIN_COUNT = 4
DAY_PATTERN_SAVINGS_RATE = 0.25
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Fallback
FALLBACK_LIMIT = 4
TOP_CATEGORY_REDUCTION = 0.15
FREQUENT_CATEGORY_REDUCTION = 0.10
DAILY_BUDGET_FACTOR = 0.9
DAYS_PER_MONTH = 30
TIP_SAVINGS_RATE = 0.2


@dataclass(frozen=True)
class CategoryRule:
    """Savings multiplier and advice text for a trending category.

    The template may use {savings} and {average}.
    """
    savings_multiplier: float
    template: str


TREND_RULES: Dict[str, CategoryRule] = {
    "Transport": CategoryRule(
        0.4,
        "Consider using public transportation 2 days a week to save approximately {savings}",
    ),
}

DEFAULT_TREND_RULE = CategoryRule(
    1.0,
    "Setting a budget limit of {average} could save you {savings}",
)

CATEGORY_TIPS: Dict[str, str] = {
    "Food": "Meal prep on weekends to reduce daily food expenses by up to 30%.",
    "Transport": "Consider carpooling or public transport to cut transport costs by 25%.",
    "Shopping": "Make a shopping list and stick to it to avoid impulse purchases.",
    "Entertainment": "Look for free or low-cost entertainment alternatives.",
    "Bills": "Review subscriptions and cancel unused services.",
}


def trend_recommendations(
    predictions: Mapping[str, TrendPrediction],
    formatter: CurrencyFormatter = format_currency
) -> List[Recommendation]:
    """Advice for categories whose spend is rising by more than 20%."""
    recommendations = []

    for category, data in predictions.items():
        if data.trend != "increasing" or data.percent_change <= TREND_INCREASE_THRESHOLD:
            continue

        rule = TREND_RULES.get(category, DEFAULT_TREND_RULE)
        savings = (data.predicted_amount - data.average_monthly) * rule.savings_multiplier

        message = (
            f"Your {category} spending is up {format_number(data.percent_change)}% "
            f"compared to your average. "
        )
        message += rule.template.format(
            savings=formatter(savings),
            average=formatter(data.average_monthly),
        )

        recommendations.append(Recommendation(
            category=category,
            message=message,
            potential_savings=savings,
            recommendation_type="pattern",
        ))

    return recommendations


def day_of_week_recommendations(
    transactions: Sequence[Any],
    formatter: CurrencyFormatter = format_currency
) -> List[Recommendation]:
    """Flag (category, weekday) pairs with at least four purchases."""
    day_amounts: Dict[Tuple[str, int], List[float]] = defaultdict(list)

    for txn in transactions:
        if txn.type != "expense":
            continue
        day_amounts[(txn.category, txn.transaction_date.weekday())].append(float(txn.amount))

    patterns = []
    for (category, weekday), amounts in day_amounts.items():
        if len(amounts) < DAY_PATTERN_MIN_COUNT:
            continue
        avg_amount = sum(amounts) / len(amounts)
        if avg_amount > 0:
            patterns.append((category, DAY_NAMES[weekday], avg_amount))

    patterns.sort(key=lambda p: p[2], reverse=True)

    return [
        Recommendation(
            category=category,
            message=(
                f"You tend to spend more on {category} on {day_name}s "
                f"(avg: {formatter(avg_amount)}). "
                "Consider setting a day-specific budget limit."
            ),
            potential_savings=avg_amount * DAY_PATTERN_SAVINGS_RATE,
            recommendation_type="budget",
        )
        for category, day_name, avg_amount in patterns
    ]


def generate_recommendations(
    transactions: Sequence[Any],
    as_of: Optional[datetime],
    predictions: Optional[Mapping[str, TrendPrediction]] = None,
    formatter: CurrencyFormatter = format_currency,
    window_months: Optional[int] = ANALYSIS_WINDOW_MONTHS
) -> List[Recommendation]:
    """Trend-driven advice followed by day-of-week advice, uncapped."""
    if window_months is not None and as_of is not None:
        transactions = filter_window(transactions, as_of, window_months)

    if predictions is None:
        predictions = analyze(transactions, as_of, window_months=None)

    return (
        trend_recommendations(predictions, formatter)
        + day_of_week_recommendations(transactions, formatter)
    )


def fallback_recommendations(
    transactions: Sequence[Any],
    formatter: CurrencyFormatter = format_currency,
    limit: int = FALLBACK_LIMIT
) -> List[Recommendation]:
    """Simple advice from category totals when no trend data is available.

    Slots fill in order: top-spending category, most frequent category,
    daily budget, then per-category tips, up to `limit` entries.
    """
    expenses = [txn for txn in transactions if txn.type == "expense"]
    if not expenses:
        return []

    category_totals: Dict[str, float] = {}
    category_counts: Dict[str, int] = {}
    for txn in expenses:
        category_totals[txn.category] = category_totals.get(txn.category, 0.0) + float(txn.amount)
        category_counts[txn.category] = category_counts.get(txn.category, 0) + 1

    total_spending = sum(category_totals.values())
    recommendations: List[Recommendation] = []

    # 1. Highest spending category
    sorted_categories = sorted(category_totals.items(), key=lambda kv: kv[1], reverse=True)
    top_category, top_amount = sorted_categories[0]
    percentage = (top_amount / total_spending * 100) if total_spending > 0 else 0.0
    top_savings = top_amount * TOP_CATEGORY_REDUCTION
    recommendations.append(Recommendation(
        category=top_category,
        message=(
            f"{top_category} is {format_whole_percent(percentage)}% of your spending. "
            f"Try reducing by 15% to save {formatter(top_savings)}/month."
        ),
        potential_savings=top_savings,
        recommendation_type="local",
    ))

    # 2. Most frequent category
    freq_category, count = sorted(category_counts.items(), key=lambda kv: kv[1], reverse=True)[0]
    if freq_category != top_category:
        recommendations.append(Recommendation(
            category=freq_category,
            message=(
                f"You spend on {freq_category} {count} times. "
                "Consider bulk buying or looking for better deals to save 10%."
            ),
            potential_savings=category_totals[freq_category] * FREQUENT_CATEGORY_REDUCTION,
            recommendation_type="local",
        ))

    # 3. Daily budget
    avg_daily = total_spending / max(len(expenses), 1)
    suggested_daily = avg_daily * DAILY_BUDGET_FACTOR
    monthly_savings = (avg_daily - suggested_daily) * DAYS_PER_MONTH
    recommendations.append(Recommendation(
        category="Daily Budget",
        message=(
            f"Set a daily budget of {formatter(suggested_daily)} "
            f"to save {formatter(monthly_savings)}/month."
        ),
        potential_savings=monthly_savings,
        recommendation_type="local",
    ))

    # 4. Category tips
    for category, total in category_totals.items():
        if len(recommendations) >= limit:
            break
        tip = CATEGORY_TIPS.get(category)
        if tip:
            recommendations.append(Recommendation(
                category=category,
                message=tip,
                potential_savings=total * TIP_SAVINGS_RATE,
                recommendation_type="local",
            ))

    return recommendations[:limit]
