"""Unit tests for the dice expression engine."""

from __future__ import annotations

import pytest

from shrine.dice import ActorContext, DiceEngine, DiceLimits, DiePart, ModPart, parse, render, roll
from shrine.dice.abilities import ability_modifier, resolve_ability, resolve_proficiency
from shrine.dice.parser import AbilityTerm, DiceTerm, NumberTerm, ProficiencyTerm
from shrine.errors import InvalidRoll

HERO = ActorContext(
    abilities={"STR": 8, "DEX": 16, "CON": 14, "INT": 10, "WIS": 12, "CHA": 9},
    prof_bonus=2,
)


class StubRandom:
    """Returns the given floats in order, repeating the last; counts calls."""

    def __init__(self, values: list[float]) -> None:
        self.values = values
        self.calls = 0

    def __call__(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


def _shape(result) -> list[tuple]:
    return [(type(p), getattr(p, "sides", None)) for p in result.parts]


class TestAbilityModifier:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [(10, 0), (11, 0), (16, 3), (9, -1), (8, -1), (1, -5), (30, 10)],
    )
    def test_floor_rule(self, score: int, expected: int) -> None:
        assert ability_modifier(score) == expected

    def test_resolve_ability(self) -> None:
        assert resolve_ability(HERO, "DEX") == 3
        assert resolve_ability(HERO, "CHA") == -1

    def test_missing_ability(self) -> None:
        actor = ActorContext(abilities={"STR": 12})
        with pytest.raises(InvalidRoll) as exc:
            resolve_ability(actor, "DEX")
        assert exc.value.details == {"missingAbility": "DEX"}

    def test_non_integer_score_is_missing(self) -> None:
        actor = ActorContext(abilities={"DEX": None})
        with pytest.raises(InvalidRoll):
            resolve_ability(actor, "DEX")

    def test_proficiency(self) -> None:
        assert resolve_proficiency(HERO) == 2

    def test_missing_proficiency(self) -> None:
        actor = ActorContext.from_mapping({"abilities": {"DEX": 10}})
        assert actor.prof_bonus is None
        with pytest.raises(InvalidRoll, match="profBonus"):
            resolve_proficiency(actor)

    def test_from_mapping_accepts_wire_keys(self) -> None:
        actor = ActorContext.from_mapping({"abilities": {"dex": 14}, "profBonus": 3})
        assert actor.abilities == {"DEX": 14}
        assert actor.prof_bonus == 3


class TestParse:
    def test_dice_and_modifier(self) -> None:
        assert parse("2d6+3") == [DiceTerm(1, 2, 6), NumberTerm(1, 3)]

    def test_implicit_one_die(self) -> None:
        assert parse("d20") == [DiceTerm(1, 1, 20)]

    def test_case_insensitive(self) -> None:
        assert parse("2D6+dex") == [DiceTerm(1, 2, 6), AbilityTerm(1, "DEX")]

    def test_whitespace_between_terms(self) -> None:
        assert parse("  1d8 + DEX - 1 ") == [
            DiceTerm(1, 1, 8),
            AbilityTerm(1, "DEX"),
            NumberTerm(-1, 1),
        ]

    def test_subtracted_dice_group(self) -> None:
        assert parse("2d6-1d4") == [DiceTerm(1, 2, 6), DiceTerm(-1, 1, 4)]

    def test_proficiency_term(self) -> None:
        assert parse("1d20+STR+prof") == [
            DiceTerm(1, 1, 20),
            AbilityTerm(1, "STR"),
            ProficiencyTerm(1),
        ]

    @pytest.mark.parametrize(
        "expression",
        ["", "   ", "3x6", "d0", "2d1", "0d6", "-1d6", "+1d6", "1d6+", "1d6++2", "d", "1 d6"],
    )
    def test_malformed(self, expression: str) -> None:
        with pytest.raises(InvalidRoll):
            parse(expression)

    @pytest.mark.parametrize("expression", [None, 42, ["1d6"]])
    def test_not_a_string(self, expression) -> None:
        with pytest.raises(InvalidRoll, match="non-empty string"):
            parse(expression)

    def test_fragment_detail(self) -> None:
        with pytest.raises(InvalidRoll) as exc:
            parse("1d20+3x6")
        assert exc.value.details == {"fragment": "3x6"}

    def test_unknown_ability(self) -> None:
        with pytest.raises(InvalidRoll, match="Unknown ability code") as exc:
            parse("1d20+LUCK")
        assert exc.value.details == {"fragment": "LUCK"}

    def test_negative_count(self) -> None:
        with pytest.raises(InvalidRoll, match="greater than or equal to 1"):
            parse("-1d6")

    def test_requires_a_dice_term(self) -> None:
        with pytest.raises(InvalidRoll, match="at least one dice term"):
            parse("3+DEX")

    def test_too_many_dice_in_group(self) -> None:
        with pytest.raises(InvalidRoll, match="count exceeds"):
            parse("101d6", DiceLimits())

    def test_too_many_sides(self) -> None:
        with pytest.raises(InvalidRoll, match="sides exceed"):
            parse("2d1001", DiceLimits())

    def test_too_many_dice_overall(self) -> None:
        expression = "+".join(["100d6"] * 11)
        with pytest.raises(InvalidRoll, match="too many dice") as exc:
            parse(expression, DiceLimits())
        assert exc.value.details == {"totalDice": 1100}

    def test_custom_limits(self) -> None:
        with pytest.raises(InvalidRoll):
            parse("3d6", DiceLimits(max_total_dice=2))

    @pytest.mark.parametrize(
        "expression",
        ["1" * 5000 + "d6", "d" + "9" * 5000, "1d6+" + "9" * 5000, "12345678901d6"],
    )
    def test_overlong_digits(self, expression: str) -> None:
        with pytest.raises(InvalidRoll, match="too many digits"):
            parse(expression)

    @pytest.mark.parametrize("expression", ["\u0662d6", "1d\u0666", "1d6+\u0663"])
    def test_non_ascii_digits(self, expression: str) -> None:
        with pytest.raises(InvalidRoll):
            parse(expression)


class TestRender:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("d20", "1d20"),
            ("2d6+3", "2d6+3"),
            (" 2d6 - 1d4 + dex ", "2d6-1d4+DEX"),
            ("1d6+007", "1d6+7"),
            ("1D8 + Prof", "1d8+PROF"),
        ],
    )
    def test_canonical_form(self, expression: str, expected: str) -> None:
        assert render(parse(expression)) == expected

    def test_idempotent(self) -> None:
        canonical = render(parse(" d12 - 2 + wis "))
        assert render(parse(canonical)) == canonical
        assert parse(canonical) == parse(" d12 - 2 + wis ")


class TestRoll:
    def test_static_modifier(self) -> None:
        engine = DiceEngine(random_source=StubRandom([0.25, 0.5]))
        result = engine.roll("2d6+3")
        assert result.total == 9
        assert result.expr_norm == "2d6+3"
        assert result.parts == (DiePart(2, 6), DiePart(4, 6), ModPart(3))

    def test_single_die(self) -> None:
        engine = DiceEngine(random_source=StubRandom([0.9]))
        result = engine.roll("d20")
        assert result.total == 19
        assert result.to_dict() == {
            "total": 19,
            "exprNorm": "1d20",
            "parts": [{"type": "die", "value": 19, "sides": 20}],
        }

    def test_ability_modifier(self) -> None:
        engine = DiceEngine(random_source=StubRandom([0.375]))
        result = engine.roll("1d8+DEX", actor=HERO)
        assert result.total == 7
        assert result.expr_norm == "1d8+DEX"
        assert result.to_dict()["parts"] == [
            {"type": "die", "value": 4, "sides": 8},
            {"type": "mod", "value": 3},
        ]

    def test_subtracted_group_keeps_natural_values(self) -> None:
        engine = DiceEngine(random_source=StubRandom([0.25, 0.5, 0.75]))
        result = engine.roll("2d6-1d4")
        assert result.parts == (DiePart(2, 6), DiePart(4, 6), DiePart(4, 4, sign=-1))
        assert result.total == 2
        assert result.to_dict()["parts"][2] == {"type": "die", "value": 4, "sides": 4, "sign": -1}

    def test_subtracted_negative_modifier(self) -> None:
        # STR 8 is -1, subtracting it adds one.
        engine = DiceEngine(random_source=StubRandom([0.0]))
        result = engine.roll("1d20-STR", actor=HERO)
        assert result.parts == (DiePart(1, 20), ModPart(1))
        assert result.total == 2

    def test_proficiency_bonus(self) -> None:
        engine = DiceEngine(random_source=StubRandom([0.5]))
        result = engine.roll("1d20+STR+PROF", actor=HERO)
        assert result.parts == (DiePart(11, 20), ModPart(-1), ModPart(2))
        assert result.total == 12

    def test_total_matches_contributions(self) -> None:
        for _ in range(50):
            result = roll("3d6-1d4+2-WIS", actor=HERO)
            assert result.total == sum(p.contribution for p in result.parts)
            for part in result.parts:
                if isinstance(part, DiePart):
                    assert 1 <= part.value <= part.sides

    def test_one_draw_per_die(self) -> None:
        source = StubRandom([0.1])
        DiceEngine(random_source=source).roll("3d6+2d8-1d4+5")
        assert source.calls == 6

    def test_shorthand_equivalence(self) -> None:
        assert roll("d20", seed=7) == roll("1d20", seed=7)

    def test_seed_is_deterministic(self) -> None:
        first = roll("4d6+2d10-1", seed="session-42")
        second = roll("4d6+2d10-1", seed="session-42")
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_random_source_wins_over_seed(self) -> None:
        result = roll("1d6", seed=1, random_source=StubRandom([0.0]))
        assert result.parts == (DiePart(1, 6),)

    def test_normalized_expression_has_same_shape(self) -> None:
        original = roll(" d8 + 2d6 - dex ", actor=HERO)
        replayed = roll(original.expr_norm, actor=HERO)
        assert _shape(replayed) == _shape(original)

    def test_missing_actor_context(self) -> None:
        source = StubRandom([0.5])
        with pytest.raises(InvalidRoll, match="actor context required"):
            DiceEngine(random_source=source).roll("1d8+DEX")
        assert source.calls == 0

    def test_missing_ability_does_not_draw(self) -> None:
        source = StubRandom([0.5])
        actor = ActorContext(abilities={"STR": 10})
        with pytest.raises(InvalidRoll) as exc:
            DiceEngine(random_source=source).roll("2d6+DEX", actor=actor)
        assert exc.value.details == {"missingAbility": "DEX"}
        assert source.calls == 0

    @pytest.mark.parametrize("expression", ["", "3x6", "d0", "-1d6"])
    def test_malformed_never_draws(self, expression: str) -> None:
        source = StubRandom([0.5])
        with pytest.raises(InvalidRoll):
            DiceEngine(random_source=source).roll(expression)
        assert source.calls == 0

    def test_out_of_range_source(self) -> None:
        with pytest.raises(ValueError, match=r"\[0, 1\)"):
            DiceEngine(random_source=lambda: 1.0).roll("1d6")

    def test_engine_limits(self) -> None:
        engine = DiceEngine(limits=DiceLimits(max_count=2))
        with pytest.raises(InvalidRoll, match="count exceeds"):
            engine.roll("3d6")
