from typing import Dict, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_current_user
from ..schemas import insights as insight_schemas
from ..services import insights as insights_service
from .. import models

router = APIRouter(prefix="/insights", tags=["Insights"])


@router.get("/", response_model=insight_schemas.InsightsOut)
async def get_insights(
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Predictions and recommendations in one call. Falls back to local
    estimates (mode="local") when no category has two months of history.
    """
    return await insights_service.get_insights(db, user.id)


@router.get("/predictions", response_model=Dict[str, insight_schemas.TrendPrediction])
async def get_predictions(
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Next-month forecast per category over the last three months.
    Categories with a single month of data are omitted.
    """
    return await insights_service.get_predictions(db, user.id)


@router.get("/recommendations", response_model=List[insight_schemas.Recommendation])
async def get_recommendations(
    user: models.User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await insights_service.get_recommendations(db, user.id)
