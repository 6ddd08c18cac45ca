import pytest

from barnacleforge.config import MAX_PRIORITY
from barnacleforge.models.card import Card, Effect
from barnacleforge.models.failure import UnresolvedCardError
from barnacleforge.models.tables import (
    EffectKind,
    Efficiency,
    ForgeConfig,
    PriorityModifiers,
    PriorityRounding,
    PrioritySource,
    Range,
    Rarity,
)
from barnacleforge.services.derivation import (
    apply_multiplier,
    barnacles_from_effect,
    get_barnacles,
    get_recast,
    get_withdraw,
    priority_penalty,
)


def make_card(barnacles: int) -> Card:
    return Card(
        name="Test",
        rarity=Rarity.COMMON,
        efficiency=Efficiency.NORMAL,
        power=6,
        priority=9,
        barnacles=barnacles,
        budget=0,
        priority_allocation=2,
        range=Range.SINGLE,
        effect=Effect(EffectKind.DAMAGE, barnacles),
    )


class TestApplyMultiplier:
    def test_truncates(self) -> None:
        assert apply_multiplier(5, 0.75) == 3
        assert apply_multiplier(7, 1.5) == 10

    def test_truncates_toward_zero(self) -> None:
        assert apply_multiplier(-3, 0.5) == -1


class TestPriorityPenalty:
    def test_allocation_times_modifier(self, default_config: ForgeConfig) -> None:
        assert priority_penalty(2, Rarity.COMMON, default_config) == 2
        assert priority_penalty(0, Rarity.COMMON, default_config) == 0

    def test_rarity_modifier_truncates(self) -> None:
        config = ForgeConfig(priority_modifiers=PriorityModifiers(rare=0.5))
        assert priority_penalty(3, Rarity.RARE, config) == 1

    def test_clamped_to_max_priority(self, default_config: ForgeConfig) -> None:
        assert priority_penalty(50, Rarity.COMMON, default_config) == MAX_PRIORITY

    def test_negative_clamped_to_zero(self, default_config: ForgeConfig) -> None:
        assert priority_penalty(-4, Rarity.COMMON, default_config) == 0

    def test_odd_nudge_moves_even_penalty_up(self) -> None:
        config = ForgeConfig(priority_rounding=PriorityRounding.ODD_NUDGE)
        assert priority_penalty(2, Rarity.COMMON, config) == 3
        assert priority_penalty(3, Rarity.COMMON, config) == 3

    def test_odd_nudge_leaves_zero_alone(self) -> None:
        """An unspent allocation stays a zero penalty under either rounding."""
        config = ForgeConfig(priority_rounding=PriorityRounding.ODD_NUDGE)
        assert priority_penalty(0, Rarity.COMMON, config) == 0

    def test_odd_nudge_stays_clamped(self) -> None:
        config = ForgeConfig(priority_rounding=PriorityRounding.ODD_NUDGE)
        assert priority_penalty(10, Rarity.COMMON, config) == MAX_PRIORITY

    def test_remaining_budget_source(self) -> None:
        config = ForgeConfig(priority_source=PrioritySource.REMAINING_BUDGET)
        assert priority_penalty(0, Rarity.COMMON, config) == 1
        assert priority_penalty(4, Rarity.COMMON, config) == 5
        assert priority_penalty(-1, Rarity.COMMON, config) == 0
        assert priority_penalty(20, Rarity.COMMON, config) == MAX_PRIORITY


class TestBarnacles:
    def test_effect_rates(self) -> None:
        assert barnacles_from_effect(Effect(EffectKind.DAMAGE, 4)) == 4
        assert barnacles_from_effect(Effect(EffectKind.HEAL, 4)) == 5
        assert barnacles_from_effect(Effect(EffectKind.ACID_HEAL, 8)) == 9
        assert barnacles_from_effect(Effect(EffectKind.SHIELD, 8)) == 11

    def test_unresolved_effect_fails_loudly(self) -> None:
        with pytest.raises(UnresolvedCardError):
            barnacles_from_effect(None)

    def test_unresolved_range_fails_loudly(self) -> None:
        with pytest.raises(UnresolvedCardError):
            get_barnacles(Effect(EffectKind.DAMAGE, 3), None, Efficiency.NORMAL)

    def test_range_cost_and_efficiency(self) -> None:
        effect = Effect(EffectKind.HEAL, 4)  # 5 barnacles
        assert get_barnacles(effect, Range.AOE, Efficiency.NORMAL) == 7
        # (5 + 2) / 1.5 = 4.67 -> 4
        assert get_barnacles(effect, Range.AOE, Efficiency.GOOD) == 4
        # (5 + 2) / 0.75 = 9.33 -> 9
        assert get_barnacles(effect, Range.AOE, Efficiency.BAD) == 9


class TestSecondaryCosts:
    def test_recast(self) -> None:
        assert get_recast(make_card(4)) == 6
        assert get_recast(make_card(5)) == 7

    def test_withdraw_is_a_third(self) -> None:
        assert get_withdraw(make_card(9)) == 3
        assert get_withdraw(make_card(10)) == 3

    def test_withdraw_minimum_one(self) -> None:
        assert get_withdraw(make_card(1)) == 1
        assert get_withdraw(make_card(2)) == 1
