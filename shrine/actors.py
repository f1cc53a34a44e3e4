"""Actor lookup for the dice roll endpoint."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from shrine.dice import ActorContext
from shrine.errors import NotFound
from shrine.models import Actor

logger = logging.getLogger(__name__)


def actor_context(actor: Actor) -> ActorContext:
    """Return the dice-engine view of a stored actor."""
    return ActorContext(abilities=actor.abilities, prof_bonus=actor.prof_bonus)


async def load_actor_context(db: AsyncSession, actor_id: int) -> ActorContext:
    """Load an actor by id and return its ability context.

    Raises:
        NotFound: If no actor has that id.
    """
    actor = await db.get(Actor, actor_id)
    if actor is None:
        raise NotFound(f"Actor {actor_id} not found", details={"actorId": actor_id})
    logger.debug("Resolved actor %d (%s) for roll", actor.id, actor.name)
    return actor_context(actor)
