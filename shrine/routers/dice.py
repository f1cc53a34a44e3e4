"""Dice roll API: parses and rolls an expression for an optional actor."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from shrine.actors import load_actor_context
from shrine.database import get_db
from shrine.dependencies import get_current_user, get_dice_engine
from shrine.dice import ActorContext, DiceEngine, parse
from shrine.models import User

router = APIRouter()

logger = logging.getLogger(__name__)


class ActorPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    abilities: dict[str, int] = Field(default_factory=dict)
    prof_bonus: int | None = Field(default=None, alias="profBonus")


class RollRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped so non-string input fails as an invalid roll, not a 422.
    expr: Any = None
    seed: int | str | None = None
    actor_id: int | None = Field(default=None, alias="actorId")
    actor: ActorPayload | None = None


@router.post("/api/dice/roll")
async def roll_dice(
    payload: RollRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    engine: DiceEngine = Depends(get_dice_engine),
) -> dict[str, Any]:
    """Roll a dice expression.

    An inline ``actor`` wins over ``actorId``. Invalid expressions surface as
    400 and unknown actors as 404 via the domain error handler in main.py.
    """
    # Malformed expressions fail before any actor lookup.
    parse(payload.expr, engine.limits)

    actor: ActorContext | None = None
    if payload.actor is not None:
        actor = ActorContext.from_mapping(payload.actor.model_dump(by_alias=True))
    elif payload.actor_id is not None:
        actor = await load_actor_context(db, payload.actor_id)

    result = engine.roll(payload.expr, actor=actor, seed=payload.seed)
    logger.info(
        "User %d rolled %s for %d", current_user.id, result.expr_norm, result.total
    )
    return result.to_dict()
