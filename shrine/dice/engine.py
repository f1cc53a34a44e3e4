"""Public entry point of the dice engine: parse, evaluate, normalize."""

from __future__ import annotations

import logging
import random

from shrine.dice.abilities import ActorContext
from shrine.dice.evaluator import RandomSource, evaluate
from shrine.dice.parser import DiceLimits, parse, render
from shrine.dice.results import RollResult

logger = logging.getLogger(__name__)


class DiceEngine:
    """Rolls dice expressions against an injectable random source.

    Args:
        random_source: Callable returning floats in [0, 1). Defaults to the
            process-wide ``random.random``.
        limits: Caps on dice count, sides and total dice. Defaults to the
            configured limits.
    """

    def __init__(
        self,
        random_source: RandomSource | None = None,
        limits: DiceLimits | None = None,
    ) -> None:
        self.random_source = random_source or random.random
        self.limits = limits or DiceLimits.from_settings()

    def roll(
        self,
        expression: str,
        *,
        actor: ActorContext | None = None,
        seed: int | str | None = None,
        random_source: RandomSource | None = None,
    ) -> RollResult:
        """Roll ``expression`` and return the total, parts and canonical form.

        A per-call ``random_source`` wins over ``seed``, which wins over the
        engine default. The source is called once per die.

        Raises:
            InvalidRoll: If the expression is malformed, over a limit, or
                references an ability the actor cannot provide.
        """
        terms = parse(expression, self.limits)
        if random_source is None:
            random_source = random.Random(seed).random if seed is not None else self.random_source

        total, parts = evaluate(terms, random_source, actor)
        result = RollResult(total=total, expr_norm=render(terms), parts=parts)
        logger.debug("Rolled %s -> %d", result.expr_norm, result.total)
        return result


def roll(
    expression: str,
    *,
    actor: ActorContext | None = None,
    seed: int | str | None = None,
    random_source: RandomSource | None = None,
) -> RollResult:
    """Roll ``expression`` with a default engine. See :meth:`DiceEngine.roll`."""
    return DiceEngine().roll(expression, actor=actor, seed=seed, random_source=random_source)
