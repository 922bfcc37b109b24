"""Deck programs: which fixtures furnish which sector of each deck.

A program lists, per sector, the fixture slots that go into it. Programs
are plain data; the builder turns each slot into a Part with the slot's
PlacementRule (or the fixture's default rule for its PLACEMENT).

Sector 0 of every deck holds the stair hatch near the core, so its slots
stay against the hull.

Programs repeat from the start when a deck has more sectors than the
program lists; a deck with fewer sectors simply uses the first ones.

Usage:
    program = PROGRAMS["main_deck"]
    for slot in program.slots_for(sector.index):
        module = fixtures.get(slot.fixture)
        prims = module.generate(slot.params())
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from habitat_gen import fixtures
from habitat_gen.layout import DEFAULT_RULES, PlacementRule


@dataclass(frozen=True)
class FixtureSlot:
    """One fixture inside a sector.

    Attributes:
        fixture: Module name in habitat_gen/fixtures/
        variation: Key into the module's VARIATIONS
        rule: Placement override; None uses the fixture's PLACEMENT default
    """

    fixture: str
    variation: str
    rule: PlacementRule | None = None

    def module(self):
        return fixtures.get(self.fixture)

    def params(self):
        return self.module().VARIATIONS[self.variation]

    def placement_rule(self) -> PlacementRule:
        if self.rule is not None:
            return self.rule
        return DEFAULT_RULES[self.module().PLACEMENT]


@dataclass(frozen=True)
class DeckProgram:
    """Fixture assignment for one deck.

    Attributes:
        name: Deck name the program applies to
        zone: Functional zone the deck is dedicated to
        sectors: Slots per sector, in sector order
    """

    name: str
    zone: str
    sectors: tuple[tuple[FixtureSlot, ...], ...] = ()

    def slots_for(self, sector_index: int) -> tuple[FixtureSlot, ...]:
        if not self.sectors:
            return ()
        return self.sectors[sector_index % len(self.sectors)]

    def fixture_names(self) -> set[str]:
        return {slot.fixture for sector in self.sectors for slot in sector}


def _at(af: float, rf: float, yaw_offset: float = 0.0) -> PlacementRule:
    return PlacementRule(angle_fraction=af, radius_fraction=rf, yaw_offset=yaw_offset)


PROGRAMS: dict[str, DeckProgram] = {
    "lower_deck": DeckProgram(
        name="lower_deck",
        zone="life support",
        sectors=(
            (
                FixtureSlot("life_support_rack", "air revitalization", _at(0.7, 0.8)),
                FixtureSlot("water_tank", "potable water", _at(0.3, 0.85)),
            ),
            (
                FixtureSlot("life_support_rack", "water recovery"),
                FixtureSlot("battery_bank", "battery bank"),
            ),
            (
                FixtureSlot("water_tank", "grey water", _at(0.3, 0.85)),
                FixtureSlot("water_tank", "coolant reservoir", _at(0.7, 0.85)),
                FixtureSlot("storage_locker", "stowage locker"),
            ),
            (
                FixtureSlot("life_support_rack", "thermal control"),
                FixtureSlot("battery_bank", "short bank"),
            ),
        ),
    ),
    "main_deck": DeckProgram(
        name="main_deck",
        zone="common",
        sectors=(
            (FixtureSlot("workstation", "ops desk", _at(0.6, 0.85)),),
            (
                FixtureSlot("galley", "galley with locker"),
                FixtureSlot("storage_locker", "wide locker"),
            ),
            (FixtureSlot("exercise_station", "treadmill"),),
            (
                FixtureSlot("hygiene_unit", "hygiene cubicle"),
                FixtureSlot("workstation", "dual-screen desk", _at(0.6, 0.85)),
            ),
            (
                FixtureSlot("hydroponics_rack", "salad rack"),
                FixtureSlot("storage_locker", "stowage locker"),
            ),
            (
                FixtureSlot("exercise_station", "cycle ergometer"),
                FixtureSlot("galley", "drinks station", _at(0.5, 0.85)),
            ),
        ),
    ),
    "upper_deck": DeckProgram(
        name="upper_deck",
        zone="crew quarters",
        sectors=(
            (FixtureSlot("sleep_pod", "crew bunk", _at(0.6, 0.75)),),
            (
                FixtureSlot("sleep_pod", "compact bunk", _at(0.5, 0.75)),
                FixtureSlot("storage_locker", "tall locker"),
            ),
            (
                FixtureSlot("hygiene_unit", "shower stall"),
                FixtureSlot("storage_locker", "soft stowage"),
            ),
            (
                FixtureSlot("sleep_pod", "guest bunk", _at(0.5, 0.75)),
                FixtureSlot("hydroponics_rack", "herb tray", _at(0.5, 0.3, math.pi)),
            ),
        ),
    ),
}
