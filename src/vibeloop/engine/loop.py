"""Time-loop progression: loop resets, the ratchet rule, and the end of a game.

After every resolved obstacle :func:`after_resolution` decides between the
next obstacle, a loop reset (via the card-removal phase), a win, or a loss.
"""

from __future__ import annotations

from .builder import build_obstacle_order, new_obstacle_deck
from .deck import Deck
from .state import GameState

REASON_ALL_CLEARED = "All obstacles cleared."
REASON_RATCHET = "Failed to exceed previous loop's progress."
REASON_FIRST_LOOP_WIPE = "Failed all objectives on loop 1."


def _build_starter_deck(state: GameState, character_type: str) -> Deck:
    deck = Deck()
    cards = state.content.cards
    for card_id in cards.starter_deck_ids(character_type):
        if card_id in cards.cards:
            deck.add_card(state.mint(cards.get(card_id)))
    deck.shuffle(state.rng)
    return deck


def _deal_hands(state: GameState) -> None:
    for i, p in enumerate(state.players):
        for card in p.deck.draw_cards(state.config.hand_size):
            state.emit({"type": "CARD_DRAWN", "player": i, "uid": card.uid, "card_id": card.card_id})


def start_game(state: GameState) -> None:
    """(Re)start from loop 1 with fresh decks, full health and a newly sampled obstacle order."""
    for p in state.players:
        p.deck = _build_starter_deck(state, p.character.type)
        p.heal_to_max()

    order = build_obstacle_order(state.content.obstacles.all(), state.config, state.rng)
    state.obstacle_order = tuple(order)
    state.obstacle_deck = new_obstacle_deck(order)

    state.phase = "in_loop"
    state.current_loop = 1
    state.max_obstacles_passed = 0
    state.obstacle_history = []
    state.removal_choices = {}
    state.round_actions = {}
    state.end_reason = None
    state.last_result = None
    state.emit(
        {
            "type": "GAME_STARTED",
            "obstacles": [o.id for o in state.obstacle_order],
            "players": [p.character.type for p in state.players],
        }
    )
    _deal_hands(state)
    present_next_obstacle(state)


def present_next_obstacle(state: GameState) -> None:
    state.round_actions = {}
    state.current_player = 0
    obstacle = state.obstacle_deck.draw_obstacle()
    state.current_obstacle = obstacle
    if obstacle is None:
        _sequence_exhausted(state)
        return
    state.emit(
        {
            "type": "OBSTACLE_PRESENTED",
            "loop": state.current_loop,
            "index": len(state.obstacle_history),
            "obstacle_id": obstacle.id,
        }
    )


def _end_game(state: GameState, won: bool, reason: str) -> None:
    state.phase = "won" if won else "lost"
    state.end_reason = reason
    state.current_obstacle = None
    state.emit({"type": "GAME_ENDED", "won": won, "loop": state.current_loop, "reason": reason})


def _sequence_exhausted(state: GameState) -> None:
    n = len(state.obstacle_history)
    if state.current_loop == 1 or n > state.max_obstacles_passed:
        _end_game(state, True, REASON_ALL_CLEARED)
    else:
        _end_game(state, False, REASON_RATCHET)


def _loop_failed(state: GameState) -> None:
    n = len(state.obstacle_history)
    if state.current_loop > 1 and n <= state.max_obstacles_passed:
        _end_game(state, False, REASON_RATCHET)
        return

    successes = state.successes_this_loop()
    state.max_obstacles_passed = max(state.max_obstacles_passed, n)
    state.emit(
        {
            "type": "LOOP_ENDED",
            "loop": state.current_loop,
            "obstacles_encountered": n,
            "successes": successes,
        }
    )
    state.current_loop += 1
    if state.current_loop == 2 and successes == 0:
        _end_game(state, False, REASON_FIRST_LOOP_WIPE)
        return

    state.phase = "awaiting_card_removal"
    state.current_obstacle = None
    state.removal_choices = {}


def after_resolution(state: GameState) -> None:
    if any(p.is_defeated() for p in state.players):
        _loop_failed(state)
    elif not state.obstacle_deck.draw_pile:
        _sequence_exhausted(state)
    else:
        present_next_obstacle(state)


def players_needing_removal(state: GameState) -> list[int]:
    # a player with an empty pool has nothing to give up
    return [i for i, p in enumerate(state.players) if p.deck.cards]


def removals_complete(state: GameState) -> bool:
    return all(i in state.removal_choices for i in players_needing_removal(state))


def begin_next_loop(state: GameState) -> None:
    """Apply the chosen removals, restore every player and replay the fixed obstacle order."""
    for i, p in enumerate(state.players):
        chosen = state.removal_choices.get(i)
        if chosen is not None and p.deck.remove_card(chosen):
            state.emit({"type": "CARD_REMOVED", "player": i, "uid": chosen.uid, "card_id": chosen.card_id})
        p.heal_to_max()
        p.deck.reset_for_time_loop(state.rng)

    _deal_hands(state)
    state.obstacle_deck.restore_order(state.obstacle_order)
    state.obstacle_history = []
    state.removal_choices = {}
    state.last_result = None
    state.phase = "in_loop"
    state.emit({"type": "LOOP_STARTED", "loop": state.current_loop})
    present_next_obstacle(state)
