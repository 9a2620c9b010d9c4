import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models, schemas
from ..config import SESSION_TTL_DAYS

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Registration or login was refused; the message is safe to show users."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


async def register_user(db: AsyncSession, data: schemas.RegisterRequest) -> models.User:
    stmt = select(models.User.id).where(
        or_(models.User.username == data.username, models.User.email == data.email)
    )
    result = await db.execute(stmt)
    if result.first():
        raise AuthError("Username or email already exists")

    user = models.User(
        username=data.username,
        email=data.email,
        phone=data.phone,
        full_name=data.full_name,
        password_hash=hash_password(data.password),
        balance=0.0,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"[Auth] Registered user #{user.id} ({user.username})")
    return user


async def login_user(
    db: AsyncSession,
    data: schemas.LoginRequest
) -> tuple[models.User, models.UserSession]:
    """Check credentials and issue a fresh session, replacing any previous one."""
    stmt = select(models.User).where(
        or_(models.User.username == data.username, models.User.email == data.username)
    )
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise AuthError("Invalid username or password")
    if not user.is_active:
        raise AuthError("Account is deactivated")
    if not check_password(data.password, user.password_hash):
        logger.warning(f"[Auth] Failed login for user #{user.id}")
        raise AuthError("Invalid username or password")

    # One active session per user
    await db.execute(delete(models.UserSession).where(models.UserSession.user_id == user.id))

    now = datetime.utcnow()
    session = models.UserSession(
        user_id=user.id,
        session_token=secrets.token_hex(32),
        expires_at=now + timedelta(days=SESSION_TTL_DAYS),
    )
    db.add(session)
    user.last_login = now

    await db.commit()
    await db.refresh(session)
    logger.info(f"[Auth] User #{user.id} logged in")
    return user, session


async def logout_user(db: AsyncSession, session_token: str) -> None:
    await db.execute(
        delete(models.UserSession).where(models.UserSession.session_token == session_token)
    )
    await db.commit()


async def verify_session(db: AsyncSession, session_token: Optional[str]) -> Optional[models.User]:
    """Return the session's user, or None when the token is unknown or expired."""
    if not session_token:
        return None

    stmt = (
        select(models.User)
        .join(models.UserSession, models.UserSession.user_id == models.User.id)
        .where(
            models.UserSession.session_token == session_token,
            models.UserSession.expires_at > datetime.utcnow()
        )
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
