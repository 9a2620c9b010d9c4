from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_current_user
from .. import models, schemas, services

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("/", response_model=schemas.TransactionList)
async def read_transactions(
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    transactions = await services.list_transactions(db, user.id)
    return schemas.TransactionList(
        transactions=[schemas.TransactionOut.model_validate(t) for t in transactions],
        balance=user.balance or 0.0
    )


@router.post("/", response_model=schemas.TransactionOut)
async def create_transaction(
    data: schemas.TransactionCreate,
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await services.add_transaction(db, user.id, data)


@router.delete("/{txn_id}")
async def delete_transaction(
    txn_id: int,
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    deleted = await services.delete_transaction(db, user.id, txn_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"message": "Transaction deleted"}
