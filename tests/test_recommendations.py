import datetime

import pytest

from smartspend.schemas.insights import TrendPrediction
from smartspend.services.compute.currency import format_currency, format_number, format_whole_percent
from smartspend.services.compute.recommendations import (
    CATEGORY_TIPS,
    day_of_week_recommendations,
    fallback_recommendations,
    generate_recommendations,
    trend_recommendations,
)

AS_OF = datetime.datetime(2025, 6, 20, 12, 0)


def prediction(predicted, average, percent, trend="increasing"):
    return TrendPrediction(
        current_amount=predicted,
        predicted_amount=predicted,
        trend=trend,
        percent_change=percent,
        average_monthly=average,
        confidence="high",
    )


def naira(amount):
    return format_currency(amount, "₦")


# --- currency ---

def test_format_currency():
    assert format_currency(1234567.891, "₦") == "₦1,234,567.89"
    assert format_currency(0, "$") == "$0.00"


def test_format_number():
    assert format_number(25.0) == "25"
    assert format_number(33.333) == "33.33"
    assert format_number(20.5) == "20.5"


def test_format_whole_percent():
    assert format_whole_percent(62.5) == "63"
    assert format_whole_percent(12.5) == "13"
    assert format_whole_percent(66.666) == "67"
    assert format_whole_percent(0.0) == "0"


# --- trend-driven ---

def test_transport_rule_scales_savings():
    recs = trend_recommendations({"Transport": prediction(5000, 2000, 66.67)}, naira)

    assert len(recs) == 1
    rec = recs[0]
    assert rec.category == "Transport"
    assert rec.potential_savings == pytest.approx(1200)
    assert rec.recommendation_type == "pattern"
    assert rec.message == (
        "Your Transport spending is up 66.67% compared to your average. "
        "Consider using public transportation 2 days a week to save approximately ₦1,200.00"
    )


def test_default_rule_uses_average_as_budget():
    recs = trend_recommendations({"Shopping": prediction(3000, 1500, 50.0)}, naira)

    assert recs[0].potential_savings == 1500
    assert recs[0].message == (
        "Your Shopping spending is up 50% compared to your average. "
        "Setting a budget limit of ₦1,500.00 could save you ₦1,500.00"
    )


def test_threshold_is_strictly_above_twenty_percent():
    predictions = {
        "Food": prediction(1200, 900, 20.0),
        "Bills": prediction(1200, 900, 45.0, trend="decreasing"),
    }
    assert trend_recommendations(predictions, naira) == []


def test_formatter_is_injected():
    recs = trend_recommendations({"Shopping": prediction(3000, 1500, 50.0)}, lambda a: f"${a:.0f}")
    assert "Setting a budget limit of $1500 could save you $1500" in recs[0].message


# --- day of week ---

def test_day_of_week_pattern(make_txn):
    mondays = [datetime.datetime(2025, 5, 26), datetime.datetime(2025, 6, 2),
               datetime.datetime(2025, 6, 9), datetime.datetime(2025, 6, 16)]
    txns = [make_txn("Food", amount, when) for amount, when in zip([100, 200, 300, 400], mondays)]
    # Three Tuesdays are not enough
    txns += [make_txn("Transport", 500, datetime.datetime(2025, 6, day)) for day in (3, 10, 17)]

    recs = day_of_week_recommendations(txns, naira)

    assert len(recs) == 1
    assert recs[0].category == "Food"
    assert recs[0].potential_savings == pytest.approx(62.5)
    assert recs[0].recommendation_type == "budget"
    assert recs[0].message == (
        "You tend to spend more on Food on Mondays (avg: ₦250.00). "
        "Consider setting a day-specific budget limit."
    )


def test_day_of_week_orders_by_average_and_skips_zero(make_txn):
    fridays = [datetime.datetime(2025, 6, day) for day in (6, 13, 20)] + [datetime.datetime(2025, 5, 30)]
    txns = [make_txn("Snacks", 10, when) for when in fridays]
    txns += [make_txn("Fuel", 90, when) for when in fridays]
    txns += [make_txn("Freebies", 0, when) for when in fridays]

    recs = day_of_week_recommendations(txns, naira)

    assert [r.category for r in recs] == ["Fuel", "Snacks"]


# --- server path ---

def test_generate_recommendations_combines_modes(make_txn):
    txns = [
        make_txn("Transport", 1000, datetime.datetime(2025, 5, 3)),
        make_txn("Transport", 3000, datetime.datetime(2025, 6, 3)),
    ]
    mondays = [datetime.datetime(2025, 5, 26), datetime.datetime(2025, 6, 2),
               datetime.datetime(2025, 6, 9), datetime.datetime(2025, 6, 16)]
    txns += [make_txn("Food", 250, when) for when in mondays]

    recs = generate_recommendations(txns, AS_OF, formatter=naira)

    # Food also rises month over month (250 in May, 750 in June)
    assert [(r.category, r.recommendation_type) for r in recs] == [
        ("Transport", "pattern"),
        ("Food", "pattern"),
        ("Food", "budget"),
    ]


def test_generate_recommendations_is_deterministic(make_txn):
    txns = [make_txn("Food", 100 * i, datetime.datetime(2025, 4 + i % 3, i)) for i in range(1, 15)]
    assert generate_recommendations(txns, AS_OF) == generate_recommendations(txns, AS_OF)


def test_generate_recommendations_empty():
    assert generate_recommendations([], AS_OF) == []


# --- fallback ---

def test_fallback_example(make_txn):
    when = datetime.datetime(2025, 6, 1)
    txns = [make_txn("Food", 2000, when) for _ in range(3)]
    txns += [make_txn("Transport", 400, when) for _ in range(5)]
    txns += [make_txn("Bills", 1000, when)]

    recs = fallback_recommendations(txns, naira)

    assert len(recs) == 4
    top, frequent, daily, tip = recs

    assert top.category == "Food"
    assert top.potential_savings == pytest.approx(900)
    assert top.message == "Food is 67% of your spending. Try reducing by 15% to save ₦900.00/month."

    assert frequent.category == "Transport"
    assert frequent.potential_savings == pytest.approx(200)
    assert frequent.message.startswith("You spend on Transport 5 times.")

    assert daily.category == "Daily Budget"
    assert daily.potential_savings == pytest.approx(3000)
    assert daily.message == "Set a daily budget of ₦900.00 to save ₦3,000.00/month."

    assert tip.category == "Food"
    assert tip.message == CATEGORY_TIPS["Food"]
    assert tip.potential_savings == pytest.approx(1200)


def test_fallback_skips_frequent_when_same_as_top(make_txn):
    when = datetime.datetime(2025, 6, 1)
    txns = [make_txn("Food", 500, when) for _ in range(4)]
    txns += [make_txn("Gadgets", 100, when)]

    recs = fallback_recommendations(txns, naira)

    assert [r.category for r in recs] == ["Food", "Daily Budget", "Food"]


def test_fallback_cap(make_txn):
    when = datetime.datetime(2025, 6, 1)
    txns = [make_txn(cat, 100 + i, when) for i, cat in enumerate(CATEGORY_TIPS)]
    txns += [make_txn("Transport", 5, when) for _ in range(3)]

    recs = fallback_recommendations(txns, naira)

    assert len(recs) == 4
    assert len(fallback_recommendations(txns, naira, limit=2)) == 2


def test_fallback_empty_and_income_only(make_txn):
    assert fallback_recommendations([], naira) == []
    income = [make_txn("Salary", 1000, datetime.datetime(2025, 6, 1), type="income")]
    assert fallback_recommendations(income, naira) == []


def test_fallback_share_rounds_half_up(make_txn):
    when = datetime.datetime(2025, 6, 1)
    txns = [make_txn("Food", 500, when), make_txn("Bills", 300, when)]

    top = fallback_recommendations(txns, naira)[0]

    # 500 / 800 = 62.5%
    assert top.message.startswith("Food is 63% of your spending.")
