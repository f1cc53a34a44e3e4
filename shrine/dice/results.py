"""Immutable roll results and the per-die / per-modifier parts they carry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class DiePart:
    """One rolled die. ``value`` is the natural face; ``sign`` is the group's."""

    value: int
    sides: int
    sign: int = 1

    @property
    def contribution(self) -> int:
        return self.sign * self.value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": "die", "value": self.value, "sides": self.sides}
        if self.sign < 0:
            data["sign"] = -1
        return data


@dataclass(frozen=True)
class ModPart:
    """A static number, ability modifier or proficiency bonus, already signed."""

    value: int

    @property
    def contribution(self) -> int:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"type": "mod", "value": self.value}


Part = Union[DiePart, ModPart]


@dataclass(frozen=True)
class RollResult:
    total: int
    expr_norm: str
    parts: tuple[Part, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "exprNorm": self.expr_norm,
            "parts": [part.to_dict() for part in self.parts],
        }
