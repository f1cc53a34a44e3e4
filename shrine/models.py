"""SQLAlchemy ORM models for users and their actors."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shrine.database import Base

# Ability code -> Actor column attribute.
ABILITY_COLUMNS: dict[str, str] = {
    "STR": "strength",
    "DEX": "dexterity",
    "CON": "constitution",
    "INT": "intelligence",
    "WIS": "wisdom",
    "CHA": "charisma",
}

MIN_ABILITY_SCORE = 1
MAX_ABILITY_SCORE = 30

# ---------------------------------------------------------------------------
# Timestamp mixin
# ---------------------------------------------------------------------------


class TimestampMixin:
    """Adds created_at and updated_at columns to any model."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class User(TimestampMixin, Base):
    """A Shrine user account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    actors: Mapped[list[Actor]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )


class Actor(TimestampMixin, Base):
    """A character or creature with ability scores that can roll dice."""

    __tablename__ = "actors"
    __table_args__ = tuple(
        CheckConstraint(
            f"{column} BETWEEN {MIN_ABILITY_SCORE} AND {MAX_ABILITY_SCORE}",
            name=f"ck_actors_{column}_range",
        )
        for column in ABILITY_COLUMNS.values()
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    strength: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    dexterity: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    constitution: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    intelligence: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    wisdom: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    charisma: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    prof_bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=2)

    owner: Mapped[User] = relationship(back_populates="actors")

    @property
    def abilities(self) -> dict[str, int]:
        """Ability scores keyed by ability code."""
        return {code: getattr(self, column) for code, column in ABILITY_COLUMNS.items()}

    @abilities.setter
    def abilities(self, value: dict[str, int]) -> None:
        """Set any subset of ability scores keyed by ability code."""
        for code, score in value.items():
            setattr(self, ABILITY_COLUMNS[code.upper()], score)
