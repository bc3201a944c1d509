from __future__ import annotations

from collections.abc import Sequence

from .state import Contribution, GameState, ObstacleResult
from .types import FINALE_CATEGORIES, CardInstance, Character, ObstacleCard

# (player index, character, played card or None for a skip)
Play = tuple[int, Character, CardInstance | None]


def score_regular(obstacle: ObstacleCard, plays: Sequence[Play]) -> ObstacleResult:
    required = {s.lower() for s in obstacle.required_skills}
    contributions: list[Contribution] = []
    total = 0
    for player, character, inst in plays:
        if inst is None:
            contributions.append(Contribution(player=player, card=None, value=0, reason="skipped"))
            continue
        card = inst.card
        if not card.is_compatible_with(obstacle.type):
            contributions.append(Contribution(player=player, card=inst, value=0, reason="incompatible"))
            continue
        stat = card.stat.lower()
        if stat in required:
            value = character.stat_value(stat)
            contributions.append(Contribution(player=player, card=inst, value=value, reason="matched"))
        else:
            value = 1
            contributions.append(Contribution(player=player, card=inst, value=value, reason="base"))
        total += value

    success = total >= obstacle.difficulty
    return ObstacleResult(
        obstacle=obstacle,
        contributions=tuple(contributions),
        total=total,
        success=success,
        damage=0 if success else obstacle.difficulty - total,
    )


def score_finale(obstacle: ObstacleCard, plays: Sequence[Play]) -> ObstacleResult:
    """Three-category resource check.

    A card adds its full stat value to every finale category it is tagged
    with, so one card can count towards several categories at once.
    """
    totals: dict[str, int] = {c: 0 for c in FINALE_CATEGORIES}
    contributions: list[Contribution] = []
    for player, character, inst in plays:
        if inst is None:
            contributions.append(Contribution(player=player, card=None, value=0, reason="skipped"))
            continue
        value = character.stat_value(inst.card.stat)
        categories = tuple(c for c in FINALE_CATEGORIES if c in inst.card.compatible_types)
        for category in categories:
            totals[category] += value
        contributions.append(
            Contribution(player=player, card=inst, value=value, reason="finale", categories=categories)
        )

    unmet = tuple(c for c in FINALE_CATEGORIES if totals[c] < obstacle.requirement(c))
    return ObstacleResult(
        obstacle=obstacle,
        contributions=tuple(contributions),
        total=sum(totals.values()),
        success=not unmet,
        damage=2 * len(unmet),
        category_totals=totals,
        unmet=unmet,
    )


def score(obstacle: ObstacleCard, plays: Sequence[Play]) -> ObstacleResult:
    if obstacle.is_finale:
        return score_finale(obstacle, plays)
    return score_regular(obstacle, plays)


def distribute_damage(damage: int, player_count: int) -> list[int]:
    """Split ``damage`` evenly; the first ``damage % player_count`` players take one extra."""
    if player_count <= 0:
        return []
    damage = max(0, damage)
    per_player, remainder = divmod(damage, player_count)
    return [per_player + (1 if i < remainder else 0) for i in range(player_count)]


def _refill_hand(state: GameState, player: int) -> None:
    deck = state.players[player].deck
    missing = state.config.hand_size - len(deck.hand)
    for card in deck.draw_cards(missing):
        state.emit({"type": "CARD_DRAWN", "player": player, "uid": card.uid, "card_id": card.card_id})


def _advance(state: GameState) -> bool:
    state.current_player += 1
    return state.current_player >= len(state.players)


def record_play(state: GameState, player: int, card: CardInstance) -> bool:
    """Play ``card`` for ``player``. Returns True once every player has acted."""
    state.players[player].deck.play_card(card)
    state.round_actions[player] = card
    state.emit({"type": "CARD_PLAYED", "player": player, "uid": card.uid, "card_id": card.card_id})
    _refill_hand(state, player)
    return _advance(state)


def record_skip(state: GameState, player: int) -> bool:
    state.round_actions[player] = None
    state.emit({"type": "TURN_SKIPPED", "player": player})
    _refill_hand(state, player)
    return _advance(state)


def _grant_reward(state: GameState, player: int) -> None:
    card_ids = state.content.cards.all_ids()
    if not card_ids:
        return
    inst = state.mint(state.content.cards.get(state.rng.choice(card_ids)))
    state.players[player].deck.add_card_to_discard(inst)
    state.emit({"type": "REWARD_GRANTED", "player": player, "uid": inst.uid, "card_id": inst.card_id})


def apply_damage(state: GameState, damage: int) -> None:
    shares = distribute_damage(damage, len(state.players))
    for i, amount in enumerate(shares):
        health = state.players[i].take_damage(amount)
        state.emit({"type": "DAMAGE_PLAYER", "player": i, "amount": amount, "health": health})


def resolve_round(state: GameState) -> ObstacleResult:
    """Score the collected actions against the current obstacle and apply the outcome."""
    obstacle = state.current_obstacle
    assert obstacle is not None
    plays: list[Play] = [(i, p.character, state.round_actions.get(i)) for i, p in enumerate(state.players)]
    result = score(obstacle, plays)

    if result.success:
        state.obstacle_deck.defeat_obstacle(obstacle)
        if obstacle.is_finale:
            for i in range(len(state.players)):
                _grant_reward(state, i)
        elif state.players:
            _grant_reward(state, state.rng.randrange(len(state.players)))
    else:
        apply_damage(state, result.damage)

    state.obstacle_history.append((obstacle, result.success))
    state.last_result = result
    state.emit(
        {
            "type": "OBSTACLE_RESOLVED",
            "obstacle_id": obstacle.id,
            "success": result.success,
            "total": result.total,
            "difficulty": obstacle.difficulty,
            "damage": result.damage,
            "unmet": list(result.unmet),
            "contributions": [
                {
                    "player": c.player,
                    "card_id": c.card.card_id if c.card is not None else None,
                    "value": c.value,
                    "reason": c.reason,
                }
                for c in result.contributions
            ],
        }
    )
    state.round_actions = {}
    return result
