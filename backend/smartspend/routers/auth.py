from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_current_user
from .. import models, schemas, services

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=schemas.UserOut)
async def register(data: schemas.RegisterRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await services.register_user(db, data)
    except services.AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/login", response_model=schemas.LoginResponse)
async def login(data: schemas.LoginRequest, db: AsyncSession = Depends(get_db)):
    try:
        user, session = await services.login_user(db, data)
    except services.AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return schemas.LoginResponse(
        session_token=session.session_token,
        user=schemas.UserOut.model_validate(user)
    )


@router.post("/logout")
async def logout(
    x_session_token: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
):
    if x_session_token:
        await services.logout_user(db, x_session_token)
    return {"message": "Logout successful"}


@router.get("/session", response_model=schemas.UserOut)
async def current_session(user: models.User = Depends(get_current_user)):
    return user
