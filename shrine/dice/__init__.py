"""Server-side dice expression engine.

Supports ``XdY`` groups, integer modifiers, ability codes and ``PROF``,
joined with ``+`` or ``-``: ``2d6+3``, ``d20``, ``1d8+DEX``, ``1d20+STR+PROF``.
"""

from shrine.dice.abilities import ABILITY_CODES, ActorContext, ability_modifier
from shrine.dice.engine import DiceEngine, roll
from shrine.dice.parser import DiceLimits, parse, render
from shrine.dice.results import DiePart, ModPart, RollResult
from shrine.errors import InvalidRoll

__all__ = [
    "ABILITY_CODES",
    "ActorContext",
    "DiceEngine",
    "DiceLimits",
    "DiePart",
    "InvalidRoll",
    "ModPart",
    "RollResult",
    "ability_modifier",
    "parse",
    "render",
    "roll",
]
