"""Ability score modifiers and proficiency lookups.

An actor context is the slice of an actor the dice engine needs: the six
ability scores and a proficiency bonus. Modifiers follow the standard
tabletop rule ``floor((score - 10) / 2)``, so a score of 9 yields -1.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from shrine.errors import InvalidRoll

ABILITY_CODES: tuple[str, ...] = ("STR", "DEX", "CON", "INT", "WIS", "CHA")

PROFICIENCY_CODE = "PROF"


@dataclass(frozen=True)
class ActorContext:
    """Ability scores and proficiency bonus for the actor making a roll."""

    abilities: Mapping[str, int] = field(default_factory=dict)
    prof_bonus: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ActorContext:
        """Build a context from a plain mapping, as sent over the wire.

        Accepts ``profBonus`` or ``prof_bonus``; ability keys are uppercased.
        """
        abilities = data.get("abilities") or {}
        prof_bonus = data.get("profBonus", data.get("prof_bonus"))
        return cls(
            abilities={str(code).upper(): score for code, score in abilities.items()},
            prof_bonus=prof_bonus,
        )


def ability_modifier(score: int) -> int:
    """Return the signed modifier for a raw ability score."""
    return (score - 10) // 2


def resolve_ability(actor: ActorContext, code: str) -> int:
    """Return the modifier for ``code`` from the actor's ability table.

    Raises:
        InvalidRoll: If the actor has no integer score for the ability.
    """
    score = actor.abilities.get(code)
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidRoll(
            f"Actor is missing ability score {code}",
            details={"missingAbility": code},
        )
    return ability_modifier(score)


def resolve_proficiency(actor: ActorContext) -> int:
    """Return the actor's proficiency bonus for an explicit PROF term."""
    bonus = actor.prof_bonus
    if isinstance(bonus, bool) or not isinstance(bonus, int):
        raise InvalidRoll(
            "Actor must provide profBonus when PROF modifier is used",
            details={"missingAbility": PROFICIENCY_CODE},
        )
    return bonus
