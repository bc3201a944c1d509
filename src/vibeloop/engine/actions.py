from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayCardAction:
    player: int
    card_uid: int


@dataclass(frozen=True)
class SkipTurnAction:
    player: int


@dataclass(frozen=True)
class ChooseRemovalAction:
    player: int
    card_uid: int


@dataclass(frozen=True)
class ConfirmRemovalsAction:
    pass


@dataclass(frozen=True)
class StartNewGameAction:
    pass


Action = (
    PlayCardAction
    | SkipTurnAction
    | ChooseRemovalAction
    | ConfirmRemovalsAction
    | StartNewGameAction
)
