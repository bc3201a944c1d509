"""Deterministic, headless rules engine for VibeLoop.

IMPORTANT: This package performs no I/O; content arrives already parsed.
"""

from .actions import (
    ChooseRemovalAction,
    ConfirmRemovalsAction,
    PlayCardAction,
    SkipTurnAction,
    StartNewGameAction,
)
from .deck import Deck, ObstacleDeck
from .match import new_game, replay, step
from .state import GameState, Player, StepResult
from .types import (
    CardDefinition,
    CardInstance,
    Character,
    GameConfig,
    GameContent,
    ObstacleCard,
)

__all__ = [
    "CardDefinition",
    "CardInstance",
    "Character",
    "ChooseRemovalAction",
    "ConfirmRemovalsAction",
    "Deck",
    "GameConfig",
    "GameContent",
    "GameState",
    "ObstacleCard",
    "ObstacleDeck",
    "PlayCardAction",
    "Player",
    "SkipTurnAction",
    "StartNewGameAction",
    "StepResult",
    "new_game",
    "replay",
    "step",
]
