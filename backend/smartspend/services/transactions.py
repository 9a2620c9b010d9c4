import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from .. import models, schemas

logger = logging.getLogger(__name__)


async def list_recent_transactions(
    db: AsyncSession,
    user_id: int,
    window_start: datetime
) -> List[models.Transaction]:
    """Fetch a user's transactions on or after `window_start`, newest first."""
    stmt = (
        select(models.Transaction)
        .where(
            models.Transaction.user_id == user_id,
            models.Transaction.transaction_date >= window_start
        )
        .order_by(desc(models.Transaction.transaction_date))
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def list_transactions(db: AsyncSession, user_id: int) -> List[models.Transaction]:
    stmt = (
        select(models.Transaction)
        .where(models.Transaction.user_id == user_id)
        .order_by(desc(models.Transaction.transaction_date))
    )
    result = await db.execute(stmt)
    return result.scalars().all()


def _balance_delta(txn_type: str, amount: float) -> float:
    return amount if txn_type == "income" else -amount


async def add_transaction(
    db: AsyncSession,
    user_id: int,
    data: schemas.TransactionCreate
) -> models.Transaction:
    """Insert a transaction and move the user's running balance with it."""
    txn = models.Transaction(
        user_id=user_id,
        type=data.type,
        category=data.category,
        description=data.description or "",
        amount=data.amount,
        transaction_date=data.transaction_date or datetime.utcnow(),
    )
    db.add(txn)

    user = await db.get(models.User, user_id)
    user.balance = (user.balance or 0.0) + _balance_delta(data.type, data.amount)

    await db.commit()
    await db.refresh(txn)
    logger.info(f"[Store] User {user_id} added {data.type} #{txn.id} ({data.category}: {data.amount})")
    return txn


async def delete_transaction(
    db: AsyncSession,
    user_id: int,
    txn_id: int
) -> Optional[models.Transaction]:
    """Delete a user's transaction and reverse its balance effect.

    Returns None when the transaction does not exist or belongs to someone else.
    """
    stmt = select(models.Transaction).where(
        models.Transaction.id == txn_id,
        models.Transaction.user_id == user_id
    )
    result = await db.execute(stmt)
    txn = result.scalar_one_or_none()
    if not txn:
        return None

    await db.delete(txn)

    user = await db.get(models.User, user_id)
    user.balance = (user.balance or 0.0) - _balance_delta(txn.type, txn.amount)

    await db.commit()
    logger.info(f"[Store] User {user_id} deleted transaction #{txn_id}")
    return txn


async def get_dashboard_summary(
    db: AsyncSession,
    user: models.User,
    view: str = "monthly",
    as_of: Optional[datetime] = None
) -> schemas.DashboardSummary:
    """Income, expenses and category breakdown for the current month or year."""
    as_of = as_of or datetime.utcnow()
    if view == "yearly":
        period_start = datetime(as_of.year, 1, 1)
    else:
        period_start = datetime(as_of.year, as_of.month, 1)

    transactions = await list_recent_transactions(db, user.id, period_start)

    total_income = 0.0
    total_expense = 0.0
    category_totals: Dict[str, float] = defaultdict(float)
    count = 0

    for txn in transactions:
        if txn.transaction_date > as_of:
            continue
        count += 1
        amount = float(txn.amount)
        if txn.type == "income":
            total_income += amount
        else:
            total_expense += amount
            category_totals[txn.category] += amount

    breakdown = [
        schemas.CategoryTotal(category=cat, total=round(total, 2))
        for cat, total in sorted(category_totals.items(), key=lambda kv: kv[1], reverse=True)
    ]

    return schemas.DashboardSummary(
        view=view,
        balance=round(float(user.balance or 0.0), 2),
        total_income=round(total_income, 2),
        total_expense=round(total_expense, 2),
        category_breakdown=breakdown,
        transaction_count=count,
    )
