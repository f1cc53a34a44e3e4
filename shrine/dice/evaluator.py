"""Resolve parsed dice terms into parts and a total.

Every non-dice term is resolved before the first die is drawn, so a roll
that fails on a missing ability never consumes the random source.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from shrine.dice.abilities import ActorContext, resolve_ability, resolve_proficiency
from shrine.dice.parser import AbilityTerm, DiceTerm, NumberTerm, ProficiencyTerm, Term
from shrine.dice.results import DiePart, ModPart, Part
from shrine.errors import InvalidRoll

RandomSource = Callable[[], float]


def roll_die(sides: int, random_source: RandomSource) -> int:
    """Roll a single die of ``sides`` faces from one draw of ``random_source``."""
    sample = random_source()
    if not 0.0 <= sample < 1.0:
        raise ValueError(f"Random source must return values in [0, 1), got {sample!r}")
    return math.floor(sample * sides) + 1


def _resolve_modifier(term: Term, actor: ActorContext | None) -> int:
    if isinstance(term, NumberTerm):
        return term.value
    if actor is None:
        raise InvalidRoll("actor context required for ability term")
    if isinstance(term, AbilityTerm):
        return resolve_ability(actor, term.code)
    if isinstance(term, ProficiencyTerm):
        return resolve_proficiency(actor)
    raise TypeError(f"Unsupported term: {term!r}")


def evaluate(
    terms: list[Term],
    random_source: RandomSource,
    actor: ActorContext | None = None,
) -> tuple[int, tuple[Part, ...]]:
    """Evaluate terms in source order.

    Returns:
        Tuple of (signed total, parts). Dice emit one part per die.

    Raises:
        InvalidRoll: If an ability or PROF term cannot be resolved.
    """
    modifiers = {
        i: _resolve_modifier(term, actor)
        for i, term in enumerate(terms)
        if not isinstance(term, DiceTerm)
    }

    parts: list[Part] = []
    for i, term in enumerate(terms):
        if isinstance(term, DiceTerm):
            for _ in range(term.count):
                value = roll_die(term.sides, random_source)
                parts.append(DiePart(value=value, sides=term.sides, sign=term.sign))
        else:
            parts.append(ModPart(value=term.sign * modifiers[i]))

    total = sum(part.contribution for part in parts)
    return total, tuple(parts)
