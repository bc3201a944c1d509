from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

Stat = Literal["strength", "speed", "tech"]
CardTag = Literal["barrier", "hazard", "environment", "personnel"]
ObstacleType = Literal["barrier", "hazard", "environment", "personnel", "finale"]

ALL_CARD_TAGS: tuple[CardTag, ...] = ("barrier", "hazard", "environment", "personnel")
FINALE_CATEGORIES: tuple[CardTag, ...] = ("environment", "hazard", "barrier")
DEFAULT_FINALE_REQUIREMENT = 5


@dataclass(frozen=True)
class CardDefinition:
    id: str
    name: str
    description: str
    stat: Stat
    compatible_types: frozenset[CardTag] = frozenset(ALL_CARD_TAGS)

    def is_compatible_with(self, obstacle_type: str) -> bool:
        return obstacle_type.lower() in self.compatible_types


@dataclass(frozen=True)
class CardInstance:
    """One physical copy of a card inside a player's pool.

    Two copies of the same catalog card compare unequal because ``uid`` is
    unique within a game.
    """

    uid: int
    card: CardDefinition

    @property
    def card_id(self) -> str:
        return self.card.id

    @property
    def name(self) -> str:
        return self.card.name


@dataclass(frozen=True)
class ObstacleCard:
    id: str
    name: str
    description: str
    difficulty: int
    required_skills: tuple[Stat, ...]
    type: ObstacleType
    environment_required: int = DEFAULT_FINALE_REQUIREMENT
    hazard_required: int = DEFAULT_FINALE_REQUIREMENT
    barrier_required: int = DEFAULT_FINALE_REQUIREMENT

    @property
    def is_finale(self) -> bool:
        return self.type == "finale"

    def requirement(self, category: str) -> int:
        if category == "environment":
            return self.environment_required
        if category == "hazard":
            return self.hazard_required
        if category == "barrier":
            return self.barrier_required
        raise KeyError(category)


@dataclass(frozen=True)
class Character:
    type: str
    name: str
    strength: int
    speed: int
    tech: int
    max_health: int
    description: str = ""

    def stat_value(self, stat: str) -> int:
        s = stat.lower()
        if s == "speed":
            return self.speed
        if s == "tech":
            return self.tech
        # strength, and anything unrecognized
        return self.strength


@dataclass(frozen=True)
class CardDatabase:
    """Immutable card catalog plus the starter deck lists per character type."""

    cards: dict[str, CardDefinition]
    starter_decks: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def get(self, card_id: str) -> CardDefinition:
        return self.cards[card_id]

    def all_ids(self) -> Sequence[str]:
        return list(self.cards.keys())

    def starter_deck_ids(self, character_type: str) -> Sequence[str]:
        return list(self.starter_decks.get(character_type, ()))


@dataclass(frozen=True)
class CharacterCatalog:
    characters: dict[str, Character]

    def get(self, character_type: str) -> Character:
        return self.characters[character_type]

    def types(self) -> Sequence[str]:
        return list(self.characters.keys())

    def next_type(self, current: str) -> str:
        types = self.types()
        return types[(types.index(current) + 1) % len(types)]

    def previous_type(self, current: str) -> str:
        types = self.types()
        return types[(types.index(current) - 1) % len(types)]


@dataclass(frozen=True)
class ObstacleCatalog:
    obstacles: dict[str, ObstacleCard]

    def get(self, obstacle_id: str) -> ObstacleCard:
        return self.obstacles[obstacle_id]

    def all(self) -> Sequence[ObstacleCard]:
        return list(self.obstacles.values())


@dataclass(frozen=True)
class GameContent:
    cards: CardDatabase
    characters: CharacterCatalog
    obstacles: ObstacleCatalog


@dataclass(frozen=True)
class GameConfig:
    obstacle_deck_size: int = 12
    shuffle_obstacle_deck: bool = True
    max_difficulty: int | None = None
    hand_size: int = 3
