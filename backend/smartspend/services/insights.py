"""Predictions and savings recommendations for a user's recent spending.

Every call recomputes from the transaction window; nothing is cached between
requests. Snapshots are written to `spending_predictions` and
`recommendations` afterwards on a best-effort basis.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..config import ANALYSIS_WINDOW_MONTHS, CURRENCY_SYMBOL, PERSIST_INSIGHTS
from ..schemas.insights import InsightsOut, Recommendation, TrendPrediction
from .compute import (
    analyze,
    fallback_recommendations,
    generate_recommendations,
    make_formatter,
    project_local_predictions,
    window_start,
)
from .transactions import list_recent_transactions

logger = logging.getLogger(__name__)

formatter = make_formatter(CURRENCY_SYMBOL)


def _next_month_start(as_of: datetime) -> date:
    if as_of.month == 12:
        return date(as_of.year + 1, 1, 1)
    return date(as_of.year, as_of.month + 1, 1)


async def _fetch_window(db: AsyncSession, user_id: int, as_of: datetime) -> List[models.Transaction]:
    start = window_start(as_of, ANALYSIS_WINDOW_MONTHS)
    transactions = await list_recent_transactions(db, user_id, start)
    return [txn for txn in transactions if txn.transaction_date <= as_of]


async def _persist_predictions(
    db: AsyncSession,
    user_id: int,
    predictions: Dict[str, TrendPrediction],
    as_of: datetime
) -> None:
    if not predictions:
        return
    prediction_date = _next_month_start(as_of)
    try:
        for category, data in predictions.items():
            db.add(models.SpendingPrediction(
                user_id=user_id,
                category=category,
                predicted_amount=data.predicted_amount,
                prediction_date=prediction_date,
            ))
        await db.commit()
    except SQLAlchemyError:
        logger.exception(f"[Insights] Could not store predictions for user #{user_id}")
        await db.rollback()


async def _persist_recommendations(
    db: AsyncSession,
    user_id: int,
    recommendations: List[Recommendation]
) -> None:
    if not recommendations:
        return
    try:
        for rec in recommendations:
            db.add(models.Recommendation(
                user_id=user_id,
                category=rec.category,
                recommendation_type=rec.recommendation_type,
                message=rec.message,
                potential_savings=rec.potential_savings,
            ))
        await db.commit()
    except SQLAlchemyError:
        logger.exception(f"[Insights] Could not store recommendations for user #{user_id}")
        await db.rollback()


async def get_predictions(
    db: AsyncSession,
    user_id: int,
    as_of: Optional[datetime] = None,
    persist: bool = PERSIST_INSIGHTS
) -> Dict[str, TrendPrediction]:
    """Per-category forecasts; empty when no category spans two months."""
    as_of = as_of or datetime.utcnow()
    transactions = await _fetch_window(db, user_id, as_of)

    predictions = analyze(transactions, as_of, window_months=None)
    logger.info(f"[Insights] User #{user_id}: {len(predictions)} predictions from {len(transactions)} transactions")

    if persist:
        await _persist_predictions(db, user_id, predictions, as_of)
    return predictions


async def get_recommendations(
    db: AsyncSession,
    user_id: int,
    as_of: Optional[datetime] = None,
    persist: bool = PERSIST_INSIGHTS
) -> List[Recommendation]:
    """Trend-driven and day-of-week recommendations; empty when data is thin."""
    as_of = as_of or datetime.utcnow()
    transactions = await _fetch_window(db, user_id, as_of)

    recommendations = generate_recommendations(
        transactions, as_of, formatter=formatter, window_months=None
    )
    logger.info(f"[Insights] User #{user_id}: {len(recommendations)} recommendations")

    if persist:
        await _persist_recommendations(db, user_id, recommendations)
    return recommendations


async def get_insights(
    db: AsyncSession,
    user_id: int,
    as_of: Optional[datetime] = None,
    persist: bool = PERSIST_INSIGHTS
) -> InsightsOut:
    """Predictions plus recommendations, degrading to local estimates.

    When no category has two months of history, the response is built from
    raw category totals instead ("local" mode) over the same window.
    """
    as_of = as_of or datetime.utcnow()
    transactions = await _fetch_window(db, user_id, as_of)

    predictions = analyze(transactions, as_of, window_months=None)
    if predictions:
        mode = "server"
        recommendations = generate_recommendations(
            transactions, as_of, predictions=predictions, formatter=formatter, window_months=None
        )
    else:
        mode = "local"
        predictions = project_local_predictions(transactions)
        recommendations = fallback_recommendations(transactions, formatter)

    logger.info(
        f"[Insights] User #{user_id}: mode={mode}, "
        f"{len(predictions)} predictions, {len(recommendations)} recommendations"
    )

    if persist:
        # Local projections are not forecasts; only trend output is recorded
        if mode == "server":
            await _persist_predictions(db, user_id, predictions, as_of)
        await _persist_recommendations(db, user_id, recommendations)

    return InsightsOut(
        mode=mode,
        predictions=predictions,
        recommendations=recommendations,
        generated_at=as_of,
    )
