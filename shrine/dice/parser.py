"""Tokenizer and parser for tabletop dice notation.

Grammar::

    expression := term (("+" | "-") term)*
    term       := dice | number | ability | "PROF"
    dice       := [count] ("d" | "D") sides

The first term carries an implicit ``+`` and may not be written with a sign.
Whitespace is allowed around separators only. Examples: ``2d6+3``, ``d20``,
``1d8 + DEX``, ``2d6-1d4``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from shrine.config import settings
from shrine.dice.abilities import ABILITY_CODES, PROFICIENCY_CODE
from shrine.errors import InvalidRoll

_SEPARATOR_RE = re.compile(r"\s*([+-])\s*")
_DICE_RE = re.compile(r"^(?P<count>[0-9]*)d(?P<sides>[0-9]*)$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^[0-9]+$")
_WORD_RE = re.compile(r"^[A-Za-z]+$")

# Longest digit run accepted in a count, sides or number literal.
_MAX_DIGITS = 10


@dataclass(frozen=True)
class DiceLimits:
    """Upper bounds that keep adversarial expressions cheap to evaluate."""

    max_count: int = 100
    max_sides: int = 1000
    max_total_dice: int = 1000

    @classmethod
    def from_settings(cls) -> DiceLimits:
        return cls(
            max_count=settings.dice_max_count,
            max_sides=settings.dice_max_sides,
            max_total_dice=settings.dice_max_total_dice,
        )


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiceTerm:
    sign: int
    count: int
    sides: int

    def render(self) -> str:
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class NumberTerm:
    sign: int
    value: int

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AbilityTerm:
    sign: int
    code: str

    def render(self) -> str:
        return self.code


@dataclass(frozen=True)
class ProficiencyTerm:
    sign: int

    def render(self) -> str:
        return PROFICIENCY_CODE


Term = Union[DiceTerm, NumberTerm, AbilityTerm, ProficiencyTerm]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _split(text: str) -> list[tuple[int, str]]:
    """Split stripped text into (sign, body) pairs in source order."""
    pieces = _SEPARATOR_RE.split(text)
    head = pieces[0]
    if not head:
        # A leading sign: "-1d6" reads as a negative dice count.
        sign, body = pieces[1], pieces[2] if len(pieces) > 2 else ""
        if sign == "-" and _DICE_RE.match(body):
            raise InvalidRoll(
                "Dice count must be an integer greater than or equal to 1",
                details={"fragment": f"-{body}"},
            )
        raise InvalidRoll(
            "Dice expression cannot start with a sign",
            details={"fragment": f"{sign}{body}"},
        )

    pairs = [(1, head)]
    for i in range(1, len(pieces), 2):
        sign = -1 if pieces[i] == "-" else 1
        pairs.append((sign, pieces[i + 1]))
    return pairs


def _parse_dice(sign: int, body: str, match: re.Match[str], limits: DiceLimits) -> DiceTerm:
    if len(match.group("count")) > _MAX_DIGITS or len(match.group("sides")) > _MAX_DIGITS:
        raise InvalidRoll("Dice term has too many digits", details={"fragment": body})
    count = int(match.group("count") or 1)
    if count < 1:
        raise InvalidRoll(
            "Dice count must be an integer greater than or equal to 1",
            details={"fragment": body},
        )
    if not match.group("sides"):
        raise InvalidRoll("Dice term is missing its number of sides", details={"fragment": body})
    sides = int(match.group("sides"))
    if sides < 2:
        raise InvalidRoll(
            "Dice sides must be an integer greater than or equal to 2",
            details={"fragment": body},
        )
    if count > limits.max_count:
        raise InvalidRoll(
            f"Dice count exceeds maximum allowed ({limits.max_count})",
            details={"fragment": body},
        )
    if sides > limits.max_sides:
        raise InvalidRoll(
            f"Dice sides exceed maximum allowed ({limits.max_sides})",
            details={"fragment": body},
        )
    return DiceTerm(sign=sign, count=count, sides=sides)


def _parse_term(sign: int, body: str, limits: DiceLimits) -> Term:
    if not body:
        raise InvalidRoll("Dice expression contains empty terms")

    dice = _DICE_RE.match(body)
    if dice:
        return _parse_dice(sign, body, dice, limits)

    if _NUMBER_RE.match(body):
        if len(body) > _MAX_DIGITS:
            raise InvalidRoll("Number literal has too many digits", details={"fragment": body})
        return NumberTerm(sign=sign, value=int(body))

    if _WORD_RE.match(body):
        code = body.upper()
        if code in ABILITY_CODES:
            return AbilityTerm(sign=sign, code=code)
        if code == PROFICIENCY_CODE:
            return ProficiencyTerm(sign=sign)
        raise InvalidRoll(f"Unknown ability code: {body}", details={"fragment": body})

    raise InvalidRoll(f"Unknown token in dice expression: {body}", details={"fragment": body})


def parse(expression: str, limits: DiceLimits | None = None) -> list[Term]:
    """Parse a dice expression into an ordered list of signed terms.

    Args:
        expression: Raw user text, e.g. ``"2d6 + 3"``.
        limits: Count/sides/total caps; defaults to the configured limits.

    Returns:
        Terms in left-to-right source order.

    Raises:
        InvalidRoll: If the expression is empty, malformed, contains no dice
            term, or exceeds a limit.
    """
    if not isinstance(expression, str) or not expression.strip():
        raise InvalidRoll("Dice expression must be a non-empty string")
    limits = limits or DiceLimits.from_settings()

    terms = [_parse_term(sign, body, limits) for sign, body in _split(expression.strip())]

    dice_terms = [t for t in terms if isinstance(t, DiceTerm)]
    if not dice_terms:
        raise InvalidRoll("Dice expression must include at least one dice term")

    total_dice = sum(t.count for t in dice_terms)
    if total_dice > limits.max_total_dice:
        raise InvalidRoll(
            f"Dice expression rolls too many dice: {total_dice} (max {limits.max_total_dice})",
            details={"totalDice": total_dice},
        )
    return terms


def render(terms: list[Term]) -> str:
    """Render terms back to canonical notation, e.g. ``1d20+DEX-2``."""
    out = []
    for i, term in enumerate(terms):
        if term.sign < 0:
            out.append("-")
        elif i > 0:
            out.append("+")
        out.append(term.render())
    return "".join(out)
