"""
Budget Resolution Engine.

Turns a sequence of designer choices into a budget-consistent card.

PIPELINE (strict order, each step a separate debit):
1. initialize        : budget = trunc(power(rarity) × efficiency)
2. allocate_priority : optional, debits the allocation directly
3. select_range      : debits the range's flat cost
4. select_effect     : magnitude = trunc(budget / modifier),
                       debit = trunc(magnitude × modifier)
5. build             : derives priority and barnacles, or reports why not

INVARIANTS:
- Every step returns a NEW draft; drafts are frozen and never aliased
- Debits are sequential and irreversible; the engine never reorders them
- Budget may go negative between steps; feasibility is judged only by build()
- Driving the pipeline out of order raises ContractViolationError at once
- build() failures are values (Outcome), not exceptions
"""

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum

from barnacleforge.config import MAX_PRIORITY
from barnacleforge.models.card import Card, Debit, Effect
from barnacleforge.models.failure import (
    ContractViolationError,
    InfeasibleCard,
    Outcome,
    UnresolvedCardError,
)
from barnacleforge.models.tables import (
    EffectKind,
    Efficiency,
    ForgeConfig,
    PrioritySource,
    Range,
    Rarity,
)
from barnacleforge.services.derivation import apply_multiplier, get_barnacles, priority_penalty

logger = logging.getLogger(__name__)

BuildResult = Outcome[Card]


class ResolutionOrder(str, Enum):
    """
    Order in which range and effect are debited.

    RANGE_FIRST pays the range's flat cost and then sizes the effect from
    what is left. EFFECT_FIRST sizes the effect from the full budget
    (priced against the intended range) and pays the flat cost afterwards.
    """

    RANGE_FIRST = "range_first"
    EFFECT_FIRST = "effect_first"


@dataclass(frozen=True, slots=True)
class EffectPreview:
    """What selecting an effect would do, without doing it."""

    kind: EffectKind
    modifier: float
    magnitude: int
    debit: int
    budget_after: int


@dataclass(frozen=True, slots=True)
class CardDraft:
    """
    A card under construction.

    Attributes:
        name: Card name
        rarity: Rarity the budget was rolled from
        efficiency: Efficiency applied to the roll
        power: Power the budget was derived from
        config: Private deep copy of the game tables
        budget: Remaining design points (signed)
        priority_allocation: Points spent on priority so far
        range: Selected range, None until select_range
        effect: Resolved effect, None until select_effect
        effect_range: Range the effect was priced against
        ledger: One Debit per pipeline step, oldest first
    """

    name: str
    rarity: Rarity
    efficiency: Efficiency
    power: int
    config: ForgeConfig
    budget: int
    priority_allocation: int = 0
    range: Range | None = None
    effect: Effect | None = None
    effect_range: Range | None = None
    ledger: tuple[Debit, ...] = ()

    def _debit(self, step: str, amount: int, **changes: object) -> "CardDraft":
        budget = self.budget - amount
        logger.debug(
            "%s: %s debits %d, budget %d -> %d", self.name, step, amount, self.budget, budget
        )
        entry = Debit(step=step, amount=amount, budget_after=budget)
        return replace(self, budget=budget, ledger=self.ledger + (entry,), **changes)  # type: ignore[arg-type]

    def allocate_priority(self, allocation: int) -> "CardDraft":
        """
        Spend budget on priority.

        Any integer is accepted; the input layer keeps it within
        1 <= allocation < budget.

        Raises:
            ContractViolationError: If called after range/effect selection
                or more than once
        """
        if self.range is not None or self.effect is not None:
            raise ContractViolationError("Priority must be allocated before range and effect")
        if any(entry.step == "allocate_priority" for entry in self.ledger):
            raise ContractViolationError("Priority has already been allocated")
        return self._debit("allocate_priority", allocation, priority_allocation=allocation)

    def select_range(self, range_: Range) -> "CardDraft":
        """
        Pay the flat cost of a range. The budget may go negative.

        Raises:
            ContractViolationError: If a range is already selected, or an
                effect was priced against a different range
        """
        if self.range is not None:
            raise ContractViolationError(f"Range already selected: {self.range.value}")
        if self.effect_range is not None and self.effect_range != range_:
            raise ContractViolationError(
                f"Effect was priced against {self.effect_range.value}, not {range_.value}"
            )
        return self._debit("select_range", range_.flat_cost, range=range_)

    def _target_range(self, against: Range | None) -> Range:
        if self.range is not None:
            if against is not None and against != self.range:
                raise ContractViolationError(
                    f"Range is {self.range.value}; cannot price an effect against {against.value}"
                )
            return self.range
        if against is None:
            raise ContractViolationError("No range selected: select a range before the effect")
        return against

    def preview_effect(self, kind: EffectKind, against: Range | None = None) -> EffectPreview:
        """
        Price an effect against the current budget without committing it.

        Raises:
            ContractViolationError: If no range is selected and none is given
        """
        target = self._target_range(against)
        modifier = self.config.get_modifier(kind, target)
        magnitude = apply_multiplier(max(self.budget, 0), 1.0 / modifier)
        debit = apply_multiplier(magnitude, modifier)
        return EffectPreview(
            kind=kind,
            modifier=modifier,
            magnitude=magnitude,
            debit=debit,
            budget_after=self.budget - debit,
        )

    def select_effect(self, kind: EffectKind, against: Range | None = None) -> "CardDraft":
        """
        Resolve an effect, sizing its magnitude from the remaining budget.

        The debit is trunc(magnitude × modifier), not the whole budget: the
        two truncations do not cancel, and the spill is intentional.

        Args:
            kind: Effect chosen by the designer
            against: Intended range when the effect is resolved before
                select_range (EFFECT_FIRST order)

        Raises:
            ContractViolationError: If an effect is already resolved, or no
                range is available to price against
        """
        if self.effect is not None:
            raise ContractViolationError(f"Effect already resolved: {self.effect.kind.value}")
        preview = self.preview_effect(kind, against)
        effect = Effect(kind=kind, magnitude=preview.magnitude)
        effect_range = self.range if self.range is not None else against
        return self._debit("select_effect", preview.debit, effect=effect, effect_range=effect_range)

    def build(self) -> BuildResult:
        """
        Derive priority and barnacles and finish the card.

        Pure: the draft is not changed, so building twice gives equal results.

        Returns:
            Success with the finished Card, or failure with InfeasibleCard
            when priority is unreduced or the cast cost is zero

        Raises:
            UnresolvedCardError: If range or effect is missing
        """
        if self.range is None or self.effect is None:
            raise UnresolvedCardError("Range and effect must be resolved before building")

        if self.config.priority_source == PrioritySource.REMAINING_BUDGET:
            amount = self.budget
        else:
            amount = self.priority_allocation
        priority = MAX_PRIORITY - priority_penalty(amount, self.rarity, self.config)
        barnacles = get_barnacles(self.effect, self.range, self.efficiency)

        reason = None
        if priority == MAX_PRIORITY:
            reason = "priority unreduced"
        elif barnacles == 0:
            reason = "zero cast cost"

        if reason is not None:
            logger.debug("%s: infeasible (%s)", self.name, reason)
            return Outcome.known_failure(
                InfeasibleCard(priority=priority, budget=self.budget, reason=reason)
            )

        return Outcome.success(
            Card(
                name=self.name,
                rarity=self.rarity,
                efficiency=self.efficiency,
                power=self.power,
                priority=priority,
                barnacles=barnacles,
                budget=self.budget,
                priority_allocation=self.priority_allocation,
                range=self.range,
                effect=self.effect,
            )
        )


def initialize(
    name: str,
    rarity: Rarity,
    efficiency: Efficiency,
    config: ForgeConfig,
    rng: random.Random | None = None,
    power: int | None = None,
) -> CardDraft:
    """
    Start a draft with a budget rolled from the rarity's power range.

    Args:
        name: Card name
        rarity: Selects the power range
        efficiency: Scales the rolled power (truncated)
        config: Game tables; the draft keeps its own deep copy
        rng: Random source for the power roll
        power: Previously rolled power to reuse; skips the roll

    Returns:
        A fresh draft with no debits
    """
    if power is None:
        power = config.get_power(rarity, rng)
        logger.debug("%s: rolled power %d", name, power)
    budget = apply_multiplier(power, efficiency.multiplier)
    logger.debug("%s: power %d, budget %d", name, power, budget)
    return CardDraft(
        name=name,
        rarity=rarity,
        efficiency=efficiency,
        power=power,
        config=config.model_copy(deep=True),
        budget=budget,
    )


def resolve_card(
    name: str,
    rarity: Rarity,
    efficiency: Efficiency,
    range_: Range,
    effect: EffectKind,
    config: ForgeConfig,
    *,
    priority_allocation: int = 0,
    order: ResolutionOrder = ResolutionOrder.RANGE_FIRST,
    rng: random.Random | None = None,
    power: int | None = None,
) -> BuildResult:
    """
    Run the full pipeline for one set of choices.

    A zero allocation skips the allocate_priority step. A given power
    replaces the roll, so saved choices rebuild the same card.
    """
    draft = initialize(name, rarity, efficiency, config, rng, power)
    if priority_allocation:
        draft = draft.allocate_priority(priority_allocation)

    if order == ResolutionOrder.EFFECT_FIRST:
        draft = draft.select_effect(effect, against=range_).select_range(range_)
    else:
        draft = draft.select_range(range_).select_effect(effect)

    return draft.build()
