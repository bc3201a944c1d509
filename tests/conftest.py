from __future__ import annotations

import pytest

from vibeloop.engine.types import (
    CardDatabase,
    CardDefinition,
    Character,
    CharacterCatalog,
    GameConfig,
    GameContent,
    ObstacleCard,
    ObstacleCatalog,
)

TANK = Character(type="tank", name="Tank", strength=6, speed=1, tech=1, max_health=10)
RUNNER = Character(type="runner", name="Runner", strength=1, speed=5, tech=1, max_health=10)

PUSH = CardDefinition(id="push", name="Push", description="", stat="strength", compatible_types=frozenset({"barrier"}))
DASH = CardDefinition(
    id="dash", name="Dash", description="", stat="speed", compatible_types=frozenset({"barrier", "hazard"})
)

# tank + runner playing push + dash: 6 + 5 = 11
WALL = ObstacleCard(
    id="wall", name="Wall", description="", difficulty=10, required_skills=("strength", "speed"), type="barrier"
)
# only dash is compatible: 5 of 20
PIT = ObstacleCard(id="pit", name="Pit", description="", difficulty=20, required_skills=("speed",), type="hazard")
GATE = ObstacleCard(id="gate", name="Gate", description="", difficulty=1, required_skills=("tech",), type="barrier")
# a second pit, so loop 2 can get one obstacle further than loop 1
CHASM = ObstacleCard(
    id="chasm", name="Chasm", description="", difficulty=20, required_skills=("speed",), type="hazard"
)
CORE = ObstacleCard(id="core", name="Core", description="", difficulty=0, required_skills=(), type="finale")

# no sampling, no shuffling: catalog order with the finale last
FIXED_ORDER = GameConfig(obstacle_deck_size=99, shuffle_obstacle_deck=False)


def make_content(
    obstacles: list[ObstacleCard],
    cards: list[CardDefinition] | None = None,
    starter_decks: dict[str, tuple[str, ...]] | None = None,
) -> GameContent:
    cards = cards if cards is not None else [PUSH, DASH]
    decks = starter_decks if starter_decks is not None else {"tank": ("push",) * 5, "runner": ("dash",) * 5}
    return GameContent(
        cards=CardDatabase(cards={c.id: c for c in cards}, starter_decks=decks),
        characters=CharacterCatalog(characters={"tank": TANK, "runner": RUNNER}),
        obstacles=ObstacleCatalog(obstacles={o.id: o for o in obstacles}),
    )


@pytest.fixture
def loop_content() -> GameContent:
    return make_content([WALL, PIT, GATE])


@pytest.fixture
def finale_content() -> GameContent:
    omni = CardDefinition(
        id="omni",
        name="Omni",
        description="",
        stat="strength",
        compatible_types=frozenset({"barrier", "hazard", "environment"}),
    )
    return make_content([CORE], cards=[omni], starter_decks={"tank": ("omni",) * 4, "runner": ("omni",) * 4})


@pytest.fixture
def fixed_order() -> GameConfig:
    return FIXED_ORDER


@pytest.fixture
def short_content() -> GameContent:
    return make_content([WALL, GATE])


@pytest.fixture
def long_content() -> GameContent:
    return make_content([WALL, PIT, CHASM, GATE])
