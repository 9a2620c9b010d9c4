"""Action-style JSON endpoint used by the web client.

POST bodies and GET query strings carry an `action` name; every response is
`{"success": bool, "message"?: str, ...payload}` with HTTP 200.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from .. import schemas, services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Actions"])

ActionHandler = Callable[[Dict[str, Any], AsyncSession], Awaitable[Dict[str, Any]]]


def _fail(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


def _validation_message(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    if first.get("loc") == ("email",):
        return "Invalid email format"
    return first.get("msg", "Invalid input").removeprefix("Value error, ")


def _user_payload(user) -> Dict[str, Any]:
    return schemas.UserOut.model_validate(user).model_dump(mode="json", by_alias=True)


async def _session_user(params: Dict[str, Any], db: AsyncSession):
    return await services.verify_session(db, params.get("sessionToken"))


# ==========================================
# POST ACTIONS
# ==========================================

async def _register(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    try:
        data = schemas.RegisterRequest.model_validate(params)
    except ValidationError as e:
        return _fail(_validation_message(e))
    try:
        user = await services.register_user(db, data)
    except services.AuthError as e:
        return _fail(str(e))
    return {"success": True, "message": "Registration successful", "userId": user.id}


async def _login(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    try:
        data = schemas.LoginRequest.model_validate(params)
    except ValidationError as e:
        return _fail(_validation_message(e))
    try:
        user, session = await services.login_user(db, data)
    except services.AuthError as e:
        return _fail(str(e))
    return {
        "success": True,
        "message": "Login successful",
        "sessionToken": session.session_token,
        "user": _user_payload(user),
    }


async def _logout(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    token = params.get("sessionToken")
    if token:
        await services.logout_user(db, token)
    return {"success": True, "message": "Logout successful"}


async def _add_transaction(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    try:
        data = schemas.TransactionCreate.model_validate(params.get("transaction") or {})
    except ValidationError as e:
        return _fail(_validation_message(e))
    txn = await services.add_transaction(db, user.id, data)
    return {"success": True, "transactionId": txn.id}


async def _delete_transaction(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    try:
        txn_id = int(params.get("transactionId"))
    except (TypeError, ValueError):
        return _fail("Transaction not found")
    deleted = await services.delete_transaction(db, user.id, txn_id)
    if not deleted:
        return _fail("Transaction not found")
    return {"success": True, "message": "Transaction deleted"}


# ==========================================
# GET ACTIONS
# ==========================================

async def _verify_session(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    return {"success": True, "user": _user_payload(user)}


async def _get_transactions(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    transactions = await services.list_transactions(db, user.id)
    return {
        "success": True,
        "transactions": [
            schemas.TransactionOut.model_validate(t).model_dump(mode="json") for t in transactions
        ],
        "balance": user.balance or 0.0,
    }


async def _get_predictions(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    insights = await services.get_insights(db, user.id)
    return {"success": True, **insights.model_dump(mode="json")}


async def _get_recommendations(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    recommendations = await services.get_recommendations(db, user.id)
    return {
        "success": True,
        "recommendations": [r.model_dump(mode="json") for r in recommendations],
    }


async def _get_dashboard(params: Dict[str, Any], db: AsyncSession) -> Dict[str, Any]:
    user = await _session_user(params, db)
    if not user:
        return _fail("Invalid or expired session")
    view = "yearly" if params.get("view") == "yearly" else "monthly"
    summary = await services.get_dashboard_summary(db, user, view=view)
    return {"success": True, "dashboard": summary.model_dump(mode="json")}


POST_ACTIONS: Dict[str, ActionHandler] = {
    "register": _register,
    "login": _login,
    "logout": _logout,
    "addTransaction": _add_transaction,
    "deleteTransaction": _delete_transaction,
}

GET_ACTIONS: Dict[str, ActionHandler] = {
    "verifySession": _verify_session,
    "getTransactions": _get_transactions,
    "getPredictions": _get_predictions,
    "getRecommendations": _get_recommendations,
    "getDashboard": _get_dashboard,
}


async def _dispatch(
    table: Dict[str, ActionHandler],
    action: Optional[str],
    params: Dict[str, Any],
    db: AsyncSession
) -> Dict[str, Any]:
    if not action:
        return _fail("Action not specified")
    handler = table.get(action)
    if not handler:
        return _fail("Invalid action")
    try:
        return await handler(params, db)
    except SQLAlchemyError:
        logger.exception(f"[Actions] Database error while handling '{action}'")
        await db.rollback()
        return _fail("Database error")


@router.post("")
async def post_action(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    payload = payload or {}
    return await _dispatch(POST_ACTIONS, payload.get("action"), payload, db)


@router.get("")
async def get_action(
    action: Optional[str] = Query(None),
    session_token: Optional[str] = Query(None, alias="sessionToken"),
    view: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    params = {"sessionToken": session_token, "view": view}
    return await _dispatch(GET_ACTIONS, action, params, db)
