"""
Modifier Tables: the game economy as data.

Everything the engine needs to price a card lives here:
- Per-rarity power ranges (the starting budget)
- Per-rarity priority multipliers
- Per-effect-kind range multipliers (used while debiting the budget)
- Fixed enum tables: efficiency multipliers, range flat costs,
  effect barnacle rates (used only for the final cast cost)

ForgeConfig is frozen. It is loaded once per run, persisted as
pretty-printed JSON, and deep-copied into every card draft.
"""

import random
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Rarity(str, Enum):
    """Rarity tier, ordered from weakest to strongest."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @property
    def label(self) -> str:
        return self.value.title()


class Efficiency(str, Enum):
    """How much of the rolled power a card gets to spend."""

    BAD = "bad"
    NORMAL = "normal"
    GOOD = "good"

    @property
    def multiplier(self) -> float:
        return EFFICIENCY_MULTIPLIERS[self]


class Range(str, Enum):
    """Targeting breadth of a card's effect."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    AOE = "aoe"
    EXTENDED_AOE = "extended_aoe"

    @property
    def flat_cost(self) -> int:
        return RANGE_FLAT_COSTS[self]


class EffectKind(str, Enum):
    """An effect chosen by the designer, before the engine gives it a magnitude."""

    DAMAGE = "damage"
    HEAL = "heal"
    ACID_HEAL = "acid_heal"
    SHIELD = "shield"

    @property
    def barnacle_rate(self) -> float:
        return BARNACLE_RATES[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


EFFICIENCY_MULTIPLIERS: dict[Efficiency, float] = {
    Efficiency.BAD: 0.75,
    Efficiency.NORMAL: 1.0,
    Efficiency.GOOD: 1.5,
}

RANGE_FLAT_COSTS: dict[Range, int] = {
    Range.SINGLE: 0,
    Range.MULTIPLE: 1,
    Range.AOE: 2,
    Range.EXTENDED_AOE: 4,
}

# Cast cost per point of magnitude. Deliberately separate from the range
# modifier tables, which price the design budget instead.
BARNACLE_RATES: dict[EffectKind, float] = {
    EffectKind.DAMAGE: 1.0,
    EffectKind.HEAL: 1.25,
    EffectKind.ACID_HEAL: 1.125,
    EffectKind.SHIELD: 1.375,
}


# =============================================================================
# POLICIES
# =============================================================================


class PowerPick(str, Enum):
    """How a power value is drawn from a rarity's [min, max] range."""

    ENDPOINT = "endpoint"  # one of the two endpoints
    SPAN = "span"  # any integer in between, inclusive


class PrioritySource(str, Enum):
    """What the priority penalty is derived from at build time."""

    ALLOCATION = "allocation"
    REMAINING_BUDGET = "remaining_budget"


class PriorityRounding(str, Enum):
    """Rounding applied to the priority penalty after clamping."""

    FLOOR = "floor"
    ODD_NUDGE = "odd_nudge"  # positive even penalties move up by one


# =============================================================================
# CONFIG MODELS
# =============================================================================


class RarityRanges(BaseModel):
    """
    Power range per rarity.

    Each entry is either a single fixed value `[n]` or a pair `[min, max]`.
    """

    model_config = ConfigDict(frozen=True)

    common: list[int] = Field(default_factory=lambda: [2, 2])
    uncommon: list[int] = Field(default_factory=lambda: [3, 4])
    rare: list[int] = Field(default_factory=lambda: [5, 6])
    epic: list[int] = Field(default_factory=lambda: [7, 8])
    legendary: list[int] = Field(default_factory=lambda: [9, 10])

    @field_validator("common", "uncommon", "rare", "epic", "legendary")
    @classmethod
    def _check_range(cls, value: list[int]) -> list[int]:
        if len(value) not in (1, 2):
            raise ValueError("power range must be [value] or [min, max]")
        if value[0] < 0:
            raise ValueError("power must not be negative")
        if len(value) == 2 and value[0] > value[1]:
            raise ValueError("power range min must not exceed max")
        return value

    def get_range(self, rarity: Rarity) -> tuple[int, int]:
        """Return (min, max) for a rarity; fixed values give min == max."""
        values: list[int] = getattr(self, rarity.value)
        return values[0], values[-1]


class PriorityModifiers(BaseModel):
    """Multiplier turning spent priority points into priority reduction."""

    model_config = ConfigDict(frozen=True)

    common: float = Field(default=1.0, ge=0)
    uncommon: float = Field(default=1.0, ge=0)
    rare: float = Field(default=1.0, ge=0)
    epic: float = Field(default=1.0, ge=0)
    legendary: float = Field(default=1.0, ge=0)

    def get_modifier(self, rarity: Rarity) -> float:
        return float(getattr(self, rarity.value))


class RangeModifiers(BaseModel):
    """
    Budget cost multiplier for one effect kind at each range.

    Factors must be positive: effect resolution divides by them.
    """

    model_config = ConfigDict(frozen=True)

    single: float = Field(default=1.0, gt=0)
    multiple: float = Field(default=1.0, gt=0)
    aoe: float = Field(default=1.0, gt=0)
    aoe_extended: float = Field(default=1.0, gt=0)

    def get_modifier(self, range_: Range) -> float:
        factors = {
            Range.SINGLE: self.single,
            Range.MULTIPLE: self.multiple,
            Range.AOE: self.aoe,
            Range.EXTENDED_AOE: self.aoe_extended,
        }
        return factors[range_]


class ForgeConfig(BaseModel):
    """
    The full game economy for one run.

    Defaults are the canonical tables; `config_store` writes them out when
    no valid config file exists.
    """

    model_config = ConfigDict(frozen=True)

    rarity_ranges: RarityRanges = Field(default_factory=RarityRanges)
    priority_modifiers: PriorityModifiers = Field(default_factory=PriorityModifiers)
    damage_range_modifiers: RangeModifiers = Field(default_factory=RangeModifiers)
    heal_range_modifiers: RangeModifiers = Field(default_factory=RangeModifiers)
    acid_heal_range_modifiers: RangeModifiers = Field(default_factory=RangeModifiers)
    shield_range_modifiers: RangeModifiers = Field(default_factory=RangeModifiers)
    power_pick: PowerPick = PowerPick.ENDPOINT
    priority_source: PrioritySource = PrioritySource.ALLOCATION
    priority_rounding: PriorityRounding = PriorityRounding.FLOOR

    def range_modifiers_for(self, kind: EffectKind) -> RangeModifiers:
        tables = {
            EffectKind.DAMAGE: self.damage_range_modifiers,
            EffectKind.HEAL: self.heal_range_modifiers,
            EffectKind.ACID_HEAL: self.acid_heal_range_modifiers,
            EffectKind.SHIELD: self.shield_range_modifiers,
        }
        return tables[kind]

    def get_modifier(self, kind: EffectKind, range_: Range) -> float:
        """Budget multiplier for an effect kind at a range."""
        return self.range_modifiers_for(kind).get_modifier(range_)

    def get_priority_modifier(self, rarity: Rarity) -> float:
        return self.priority_modifiers.get_modifier(rarity)

    def get_power(self, rarity: Rarity, rng: random.Random | None = None) -> int:
        """
        Draw a starting power value for a rarity.

        Each call draws independently. The result always lies within the
        configured [min, max] of the rarity.

        Args:
            rarity: Rarity tier to draw for
            rng: Random source; a fresh unseeded generator when omitted
        """
        low, high = self.rarity_ranges.get_range(rarity)
        rng = rng if rng is not None else random.Random()
        if low == high:
            return low
        if self.power_pick == PowerPick.SPAN:
            return rng.randint(low, high)
        return rng.choice((low, high))
