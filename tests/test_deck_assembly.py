"""
Tests for the deck assembly workflow.

These tests verify:
1. Template shapes parse, validate and round-trip
2. Same-rarity cards get numeric name suffixes
3. Failing slots are retried by the choice source, never by the engine
4. State machine transitions, including ABORTED
5. The resolved template replays to the same deck
"""

import random

import pytest
from pydantic import ValidationError

from barnacleforge.config import MAX_PRIORITY
from barnacleforge.models.deck import (
    DECK_CURVES,
    DECK_SIZE,
    CardInput,
    DeckSlot,
    DeckType,
    RosterDeckInputs,
    TieredDeckInputs,
    dump_deck_inputs,
    parse_deck_inputs,
)
from barnacleforge.models.failure import InfeasibleCard
from barnacleforge.models.tables import EffectKind, ForgeConfig, Range, Rarity
from barnacleforge.services.deck_assembly import (
    AssemblyState,
    DeckAssembler,
    assemble_deck,
    blank_template,
    default_card_name,
    example_inputs,
    replay_source,
)


def starter_inputs(allocation: int = 1) -> RosterDeckInputs:
    return RosterDeckInputs(
        deck_type=DeckType.STARTER,
        slots={
            role: CardInput(priority_allocation=allocation)
            for role, _ in DECK_CURVES[DeckType.STARTER]
        },
    )


# =============================================================================
# TEMPLATE SHAPES
# =============================================================================


class TestTemplates:
    def test_every_curve_has_five_slots(self) -> None:
        for deck_type in DeckType:
            assert len(DECK_CURVES[deck_type]) == DECK_SIZE

    def test_starter_curve_has_two_rares(self) -> None:
        rarities = [rarity for _, rarity in DECK_CURVES[DeckType.STARTER]]
        assert rarities.count(Rarity.RARE) == 2

    def test_tiered_slots_cover_every_rarity(self) -> None:
        slots = TieredDeckInputs().get_slots()
        assert [slot.rarity for slot in slots] == list(Rarity)
        assert [slot.role for slot in slots] == [rarity.value for rarity in Rarity]

    def test_roster_slots_follow_curve(self) -> None:
        slots = starter_inputs().get_slots()
        assert [(s.role, s.rarity) for s in slots] == list(DECK_CURVES[DeckType.STARTER])

    def test_roster_rejects_wrong_roles(self) -> None:
        with pytest.raises(ValidationError):
            RosterDeckInputs(deck_type=DeckType.STARTER, slots={"vanguard": CardInput()})

    def test_parse_tiered_shape(self) -> None:
        inputs = parse_deck_inputs('{"rare": {"range": "aoe", "effect": "heal"}}')
        assert isinstance(inputs, TieredDeckInputs)
        assert inputs.rare.range == Range.AOE
        assert inputs.rare.effect == EffectKind.HEAL
        assert inputs.common == CardInput()

    def test_parse_roster_shape(self) -> None:
        text = dump_deck_inputs(starter_inputs())
        inputs = parse_deck_inputs(text)
        assert isinstance(inputs, RosterDeckInputs)
        assert inputs == starter_inputs()

    def test_parse_rejects_garbage(self) -> None:
        with pytest.raises(ValidationError):
            parse_deck_inputs('{"deck_type": "mythic", "slots": {}}')
        with pytest.raises(ValidationError):
            parse_deck_inputs("not json")
        with pytest.raises(ValidationError):
            parse_deck_inputs('{"common": {"range": "everywhere"}}')

    def test_blank_template_shapes(self) -> None:
        assert isinstance(blank_template(), TieredDeckInputs)
        roster = blank_template(DeckType.LEGENDARY)
        assert isinstance(roster, RosterDeckInputs)
        assert all(
            card_input == CardInput(priority_allocation=1) for card_input in roster.slots.values()
        )
        assert blank_template().common == CardInput(priority_allocation=1)

    @pytest.mark.parametrize("deck_type", [None, *DeckType])
    def test_unedited_blank_template_builds(
        self, default_config: ForgeConfig, deck_type: DeckType | None
    ) -> None:
        """A template straight from the template command yields a full deck."""
        record = assemble_deck(
            "Fresh", blank_template(deck_type), default_config, replay_source(1), random.Random(9)
        )
        assert record.is_complete

    def test_blank_template_round_trip(self) -> None:
        for deck_type in [None, *DeckType]:
            template = blank_template(deck_type)
            assert parse_deck_inputs(dump_deck_inputs(template)) == template

    def test_example_inputs_are_filled(self) -> None:
        example = example_inputs(DeckType.JOURNEYMAN)
        assert all(card_input.priority_allocation > 0 for card_input in example.slots.values())


# =============================================================================
# NAMING
# =============================================================================


class TestNaming:
    def test_first_occurrence_unsuffixed(self) -> None:
        slot = DeckSlot(role="champion", rarity=Rarity.RARE, card_input=CardInput())
        assert default_card_name("Tide", slot, 1) == "Tide Rare"
        assert default_card_name("Tide", slot, 2) == "Tide Rare 2"
        assert default_card_name("Tide", slot, 3) == "Tide Rare 3"

    def test_starter_deck_suffixes_second_rare(self, fixed_config: ForgeConfig) -> None:
        record = assemble_deck("Tide", starter_inputs(), fixed_config, replay_source(1))

        names = [card.name for card in record.cards]
        assert names == [
            "Tide Common",
            "Tide Common 2",
            "Tide Uncommon",
            "Tide Rare",
            "Tide Rare 2",
        ]
        assert len(set(names)) == DECK_SIZE

    def test_explicit_names_win(self, fixed_config: ForgeConfig) -> None:
        inputs = starter_inputs().with_inputs(
            {"champion": CardInput(name="Kraken", priority_allocation=1)}
        )
        record = assemble_deck("Tide", inputs, fixed_config, replay_source(1))
        names = [card.name for card in record.cards]
        assert "Kraken" in names
        assert "Tide Rare 2" in names


# =============================================================================
# ASSEMBLY
# =============================================================================


class TestAssembly:
    def test_complete_deck(self, fixed_config: ForgeConfig) -> None:
        assembler = DeckAssembler("Tide", starter_inputs(), fixed_config, replay_source(1))
        assert assembler.state == AssemblyState.EMPTY

        record = assembler.run()

        assert assembler.state == AssemblyState.COMPLETE
        assert record.is_complete
        assert record.skipped == []
        assert [card.rarity for card in record.cards] == [
            rarity for _, rarity in DECK_CURVES[DeckType.STARTER]
        ]
        assert all(card.priority == MAX_PRIORITY - 1 for card in record.cards)

    def test_assembler_is_single_use(self, fixed_config: ForgeConfig) -> None:
        assembler = DeckAssembler("Tide", starter_inputs(), fixed_config, replay_source(1))
        assembler.run()
        with pytest.raises(RuntimeError):
            assembler.run()

    def test_infeasible_slot_is_skipped_after_replay_attempts(
        self, fixed_config: ForgeConfig
    ) -> None:
        """Zero allocation can never reduce priority; replay gives up."""
        attempts: list[int] = []
        replay = replay_source(3)

        def counting(slot: DeckSlot, attempt: int, failure: InfeasibleCard | None):
            attempts.append(attempt)
            return replay(slot, attempt, failure)

        inputs = starter_inputs().with_inputs({"warden": CardInput(priority_allocation=0)})
        record = assemble_deck("Tide", inputs, fixed_config, counting)

        assert record.skipped == ["warden"]
        assert not record.is_complete
        assert len(record.cards) == DECK_SIZE - 1
        # four feasible slots take one attempt; the warden asks 3 times, then once more
        assert attempts.count(1) == DECK_SIZE
        assert max(attempts) == 4

    def test_failure_is_passed_to_next_attempt(self, fixed_config: ForgeConfig) -> None:
        """An interactive-style source sees the previous failure and fixes its choice."""
        seen: list[InfeasibleCard | None] = []

        def designer(slot: DeckSlot, attempt: int, failure: InfeasibleCard | None) -> CardInput:
            seen.append(failure)
            if attempt == 1:
                return CardInput(priority_allocation=0)
            return CardInput(priority_allocation=1, range=Range.SINGLE)

        inputs = TieredDeckInputs()
        record = assemble_deck("Curve", inputs, fixed_config, designer)

        assert record.is_complete
        failures = [f for f in seen if f is not None]
        assert len(failures) == DECK_SIZE
        assert all(f.priority == MAX_PRIORITY for f in failures)

    def test_exception_aborts(self, fixed_config: ForgeConfig) -> None:
        def quitter(slot: DeckSlot, attempt: int, failure: InfeasibleCard | None) -> CardInput:
            if slot.rarity == Rarity.RARE:
                raise KeyboardInterrupt
            return CardInput(priority_allocation=1)

        assembler = DeckAssembler("Tide", TieredDeckInputs(), fixed_config, quitter)
        with pytest.raises(KeyboardInterrupt):
            assembler.run()
        assert assembler.state == AssemblyState.ABORTED
        assert assembler.current_slot == 2

    def test_resolved_template_replays(self, fixed_config: ForgeConfig) -> None:
        """The record's template carries names and choices and rebuilds the same deck."""
        record = assemble_deck("Tide", starter_inputs(), fixed_config, replay_source(1))
        assert record.template is not None

        reloaded = parse_deck_inputs(dump_deck_inputs(record.template))
        replayed = assemble_deck("Tide", reloaded, fixed_config, replay_source(1))

        assert replayed.cards == record.cards
        assert isinstance(reloaded, RosterDeckInputs)
        assert reloaded.slots["warden"].name == "Tide Rare 2"

    def test_replay_reuses_rolled_powers(self, default_config: ForgeConfig) -> None:
        """
        A saved template rebuilds identical cards from ranged powers.

        Failed first attempts consume extra rolls, so only the saved power
        (not the seed) can reproduce what the designer got.
        """

        def designer(slot: DeckSlot, attempt: int, failure: InfeasibleCard | None) -> CardInput:
            if attempt == 1:
                return CardInput(priority_allocation=0, range=Range.MULTIPLE)
            return CardInput(priority_allocation=1, range=Range.MULTIPLE, effect=EffectKind.HEAL)

        record = assemble_deck("Tide", TieredDeckInputs(), default_config, designer, random.Random(7))
        assert record.is_complete
        assert record.template is not None

        reloaded = parse_deck_inputs(dump_deck_inputs(record.template))
        for slot, card in zip(reloaded.get_slots(), record.cards, strict=True):
            low, high = default_config.rarity_ranges.get_range(slot.rarity)
            assert slot.card_input.power == card.power
            assert low <= card.power <= high

        for seed in (7, 8, 9):
            replayed = assemble_deck(
                "Tide", reloaded, default_config, replay_source(1), random.Random(seed)
            )
            assert replayed.cards == record.cards

    @pytest.mark.parametrize("deck_type", list(DeckType))
    def test_example_decks_build(self, default_config: ForgeConfig, deck_type: DeckType) -> None:
        record = assemble_deck(
            "Example", example_inputs(deck_type), default_config, replay_source(8), random.Random(5)
        )
        assert record.is_complete
