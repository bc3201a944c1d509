from __future__ import annotations

import random
from typing import Iterable, Sequence

from . import loop, resolution
from .actions import (
    Action,
    ChooseRemovalAction,
    ConfirmRemovalsAction,
    PlayCardAction,
    SkipTurnAction,
    StartNewGameAction,
)
from .serialize import view
from .state import ErrorKind, GameState, Player, StepResult
from .types import GameConfig, GameContent


def _reject(state: GameState, kind: ErrorKind, msg: str) -> StepResult:
    return StepResult(ok=False, events=[], error=msg, kind=kind, view=view(state))


def _check_turn(state: GameState, player: int) -> StepResult | None:
    if state.phase == "awaiting_card_removal":
        return _reject(state, "ActionAfterResolution", "The round has already been resolved.")
    if player != state.current_player:
        return _reject(state, "NotPlayersTurn", "Not your turn.")
    return None


def _play_card(state: GameState, action: PlayCardAction) -> StepResult | None:
    err = _check_turn(state, action.player)
    if err:
        return err
    card = state.players[action.player].deck.find_in_hand(action.card_uid)
    if card is None:
        return _reject(state, "InvalidCardReference", "That card is not in your hand.")
    if resolution.record_play(state, action.player, card):
        resolution.resolve_round(state)
        loop.after_resolution(state)
    return None


def _skip_turn(state: GameState, action: SkipTurnAction) -> StepResult | None:
    err = _check_turn(state, action.player)
    if err:
        return err
    if resolution.record_skip(state, action.player):
        resolution.resolve_round(state)
        loop.after_resolution(state)
    return None


def _choose_removal(state: GameState, action: ChooseRemovalAction) -> StepResult | None:
    if state.phase != "awaiting_card_removal":
        return _reject(state, "WrongPhase", "Cards can only be removed between loops.")
    if action.player < 0 or action.player >= len(state.players):
        return _reject(state, "InvalidPlayerIndex", "No such player.")
    if action.player in state.removal_choices:
        return _reject(state, "RemovalAlreadyChosen", "A card has already been chosen for removal.")
    card = state.players[action.player].deck.find(action.card_uid)
    if card is None:
        return _reject(state, "InvalidCardReference", "That card is not in your deck.")
    state.removal_choices[action.player] = card
    state.emit(
        {"type": "CARD_REMOVAL_CHOSEN", "player": action.player, "uid": card.uid, "card_id": card.card_id}
    )
    return None


def _confirm_removals(state: GameState, action: ConfirmRemovalsAction) -> StepResult | None:
    if state.phase != "awaiting_card_removal":
        return _reject(state, "WrongPhase", "There is nothing to confirm.")
    if not loop.removals_complete(state):
        return _reject(state, "IncompleteRemovalSelection", "Every player must choose a card to remove.")
    loop.begin_next_loop(state)
    return None


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single action to the game state.

    Rejected actions leave ``state`` untouched. Accepted ones mutate it in
    place and are appended to ``action_log``, so a game is reproducible from
    (content, characters, seed, config, actions).
    """
    if state.is_over and not isinstance(action, StartNewGameAction):
        return _reject(state, "ActionInTerminalState", "The game is over. Start a new game.")

    mark = len(state.event_log)
    if isinstance(action, PlayCardAction):
        err = _play_card(state, action)
    elif isinstance(action, SkipTurnAction):
        err = _skip_turn(state, action)
    elif isinstance(action, ChooseRemovalAction):
        err = _choose_removal(state, action)
    elif isinstance(action, ConfirmRemovalsAction):
        err = _confirm_removals(state, action)
    elif isinstance(action, StartNewGameAction):
        loop.start_game(state)
        err = None
    else:
        raise TypeError(f"Unknown action: {action!r}")

    if err is not None:
        return err
    state.action_log.append(action)
    return StepResult(ok=True, events=state.event_log[mark:], view=view(state))


def new_game(
    content: GameContent,
    character_types: Sequence[str],
    seed: int,
    config: GameConfig | None = None,
    names: Sequence[str] | None = None,
) -> GameState:
    cfg = config or GameConfig()
    if not character_types:
        raise ValueError("At least one player is required.")

    players: list[Player] = []
    for i, ctype in enumerate(character_types):
        if ctype not in content.characters.characters:
            raise ValueError(f"Unknown character type: {ctype}")
        character = content.characters.get(ctype)
        name = names[i] if names is not None and i < len(names) else f"Player {i + 1}"
        players.append(
            Player(player_number=i + 1, name=name, character=character, current_health=character.max_health)
        )

    state = GameState(content=content, config=cfg, seed=seed, rng=random.Random(seed), players=players)
    loop.start_game(state)
    return state


def replay(
    content: GameContent,
    character_types: Sequence[str],
    seed: int,
    actions: Iterable[Action],
    config: GameConfig | None = None,
    names: Sequence[str] | None = None,
) -> GameState:
    state = new_game(content, character_types, seed=seed, config=config, names=names)
    for a in actions:
        step(state, a)
    return state
