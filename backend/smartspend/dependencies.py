from typing import Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_db
from . import models, services


async def get_current_user(
    x_session_token: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> models.User:
    user = await services.verify_session(db, x_session_token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return user
