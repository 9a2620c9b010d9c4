from typing import Literal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_current_user
from .. import models, schemas, services

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/", response_model=schemas.DashboardSummary)
async def get_dashboard(
    view: Literal["monthly", "yearly"] = Query("monthly", description="Current month or current year"),
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await services.get_dashboard_summary(db, user, view=view)
