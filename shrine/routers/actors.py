"""Actor CRUD routes: ability scores and proficiency bonus for dice rolls."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shrine.database import get_db
from shrine.dependencies import get_current_user
from shrine.models import MAX_ABILITY_SCORE, MIN_ABILITY_SCORE, Actor, User

router = APIRouter()


class AbilityScores(BaseModel):
    STR: int = Field(default=10, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    DEX: int = Field(default=10, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    CON: int = Field(default=10, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    INT: int = Field(default=10, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    WIS: int = Field(default=10, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    CHA: int = Field(default=10, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)


class AbilityScoresUpdate(BaseModel):
    STR: int | None = Field(default=None, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    DEX: int | None = Field(default=None, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    CON: int | None = Field(default=None, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    INT: int | None = Field(default=None, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    WIS: int | None = Field(default=None, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)
    CHA: int | None = Field(default=None, ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE)


class ActorCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=100)
    abilities: AbilityScores = Field(default_factory=AbilityScores)
    prof_bonus: int = Field(default=2, ge=0, le=10, alias="profBonus")


class ActorUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    abilities: AbilityScoresUpdate | None = None
    prof_bonus: int | None = Field(default=None, ge=0, le=10, alias="profBonus")


def _serialize(actor: Actor) -> dict:
    return {
        "id": actor.id,
        "ownerId": actor.owner_id,
        "name": actor.name,
        "abilities": actor.abilities,
        "profBonus": actor.prof_bonus,
    }


async def _get_actor_or_404(actor_id: int, db: AsyncSession) -> Actor:
    actor = await db.get(Actor, actor_id)
    if actor is None:
        raise HTTPException(status_code=404, detail="Actor not found")
    return actor


def _require_owner(actor: Actor, user: User) -> None:
    if actor.owner_id != user.id:
        raise HTTPException(status_code=403, detail="You do not own this actor")


@router.get("/api/actors")
async def list_actors(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    """List the current user's actors, oldest first."""
    result = await db.execute(
        select(Actor).where(Actor.owner_id == current_user.id).order_by(Actor.id)
    )
    return [_serialize(a) for a in result.scalars().all()]


@router.post("/api/actors", status_code=201)
async def create_actor(
    payload: ActorCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Create an actor owned by the current user."""
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Actor name cannot be blank")
    actor = Actor(owner_id=current_user.id, name=name, prof_bonus=payload.prof_bonus)
    actor.abilities = payload.abilities.model_dump()
    db.add(actor)
    await db.commit()
    return _serialize(actor)


@router.get("/api/actors/{actor_id}")
async def get_actor(
    actor_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a single actor."""
    return _serialize(await _get_actor_or_404(actor_id, db))


@router.patch("/api/actors/{actor_id}")
async def update_actor(
    actor_id: int,
    payload: ActorUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Update the name, ability scores or proficiency bonus of an owned actor."""
    actor = await _get_actor_or_404(actor_id, db)
    _require_owner(actor, current_user)

    if payload.name is not None:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=422, detail="Actor name cannot be blank")
        actor.name = name
    if payload.abilities is not None:
        actor.abilities = payload.abilities.model_dump(exclude_none=True)
    if payload.prof_bonus is not None:
        actor.prof_bonus = payload.prof_bonus
    await db.commit()
    await db.refresh(actor)
    return _serialize(actor)


@router.delete("/api/actors/{actor_id}", status_code=204)
async def delete_actor(
    actor_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete an owned actor."""
    actor = await _get_actor_or_404(actor_id, db)
    _require_owner(actor, current_user)
    await db.delete(actor)
    await db.commit()
    return Response(status_code=204)
