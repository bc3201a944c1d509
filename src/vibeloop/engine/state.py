from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from .actions import Action
from .deck import Deck, ObstacleDeck
from .types import CardDefinition, CardInstance, Character, GameConfig, GameContent, ObstacleCard

Event = dict[str, object]

Phase = Literal["in_loop", "awaiting_card_removal", "won", "lost"]
TERMINAL_PHASES: tuple[Phase, ...] = ("won", "lost")

ErrorKind = Literal[
    "NotPlayersTurn",
    "InvalidCardReference",
    "ActionAfterResolution",
    "IncompleteRemovalSelection",
    "ActionInTerminalState",
    "WrongPhase",
    "RemovalAlreadyChosen",
    "InvalidPlayerIndex",
]

ContributionReason = Literal["skipped", "incompatible", "matched", "base", "finale"]


@dataclass
class Player:
    player_number: int
    name: str
    character: Character
    current_health: int
    deck: Deck = field(default_factory=Deck)

    @property
    def max_health(self) -> int:
        return self.character.max_health

    def take_damage(self, amount: int) -> int:
        self.current_health = max(0, self.current_health - max(0, amount))
        return self.current_health

    def heal_to_max(self) -> None:
        self.current_health = self.character.max_health

    def is_defeated(self) -> bool:
        return self.current_health == 0


@dataclass(frozen=True)
class Contribution:
    player: int
    card: CardInstance | None
    value: int
    reason: ContributionReason
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class ObstacleResult:
    obstacle: ObstacleCard
    contributions: tuple[Contribution, ...]
    total: int
    success: bool
    damage: int
    category_totals: dict[str, int] = field(default_factory=dict)
    unmet: tuple[str, ...] = ()


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    kind: ErrorKind | None = None
    view: dict[str, object] | None = None


@dataclass
class GameState:
    content: GameContent
    config: GameConfig
    seed: int
    rng: random.Random
    players: list[Player]
    obstacle_deck: ObstacleDeck = field(default_factory=ObstacleDeck)
    obstacle_order: tuple[ObstacleCard, ...] = ()
    phase: Phase = "in_loop"
    current_obstacle: ObstacleCard | None = None
    current_player: int = 0
    # player index -> played card, or None for a skip
    round_actions: dict[int, CardInstance | None] = field(default_factory=dict)
    current_loop: int = 1
    max_obstacles_passed: int = 0
    obstacle_history: list[tuple[ObstacleCard, bool]] = field(default_factory=list)
    removal_choices: dict[int, CardInstance] = field(default_factory=dict)
    end_reason: str | None = None
    last_result: ObstacleResult | None = None
    next_uid: int = 1
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    @property
    def is_over(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def mint(self, card: CardDefinition) -> CardInstance:
        inst = CardInstance(uid=self.next_uid, card=card)
        self.next_uid += 1
        return inst

    def emit(self, event: Event) -> None:
        self.event_log.append(event)

    def successes_this_loop(self) -> int:
        return sum(1 for _, ok in self.obstacle_history if ok)
