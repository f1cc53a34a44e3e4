"""FastAPI dependencies for Shrine."""

from __future__ import annotations

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from shrine.database import get_db
from shrine.dice import DiceEngine
from shrine.models import User


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Return the authenticated user from the session.

    Raises a 401 if no valid session is present.
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user = await db.get(User, user_id)
    if not user:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_dice_engine() -> DiceEngine:
    """Return a dice engine on the process-wide random source.

    Tests override this dependency with an engine on a stub source.
    """
    return DiceEngine()
