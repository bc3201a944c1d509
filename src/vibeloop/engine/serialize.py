from __future__ import annotations

from .actions import (
    Action,
    ChooseRemovalAction,
    ConfirmRemovalsAction,
    PlayCardAction,
    SkipTurnAction,
    StartNewGameAction,
)
from .state import GameState, ObstacleResult, Player
from .types import CardInstance, ObstacleCard


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {"type": "play", "player": a.player, "card_uid": a.card_uid}
    if isinstance(a, SkipTurnAction):
        return {"type": "skip", "player": a.player}
    if isinstance(a, ChooseRemovalAction):
        return {"type": "choose_removal", "player": a.player, "card_uid": a.card_uid}
    if isinstance(a, ConfirmRemovalsAction):
        return {"type": "confirm_removals"}
    if isinstance(a, StartNewGameAction):
        return {"type": "new_game"}
    raise TypeError(f"Unknown action: {a!r}")


def _card_to_dict(c: CardInstance) -> dict[str, object]:
    return {
        "uid": c.uid,
        "card_id": c.card_id,
        "name": c.name,
        "stat": c.card.stat,
        "compatible_types": sorted(c.card.compatible_types),
    }


def _obstacle_to_dict(o: ObstacleCard | None) -> dict[str, object] | None:
    if o is None:
        return None
    d: dict[str, object] = {
        "id": o.id,
        "name": o.name,
        "type": o.type,
        "difficulty": o.difficulty,
        "required_skills": list(o.required_skills),
    }
    if o.is_finale:
        d["requirements"] = {
            "environment": o.environment_required,
            "hazard": o.hazard_required,
            "barrier": o.barrier_required,
        }
    return d


def _result_to_dict(r: ObstacleResult | None) -> dict[str, object] | None:
    if r is None:
        return None
    return {
        "obstacle_id": r.obstacle.id,
        "success": r.success,
        "total": r.total,
        "damage": r.damage,
        "category_totals": dict(r.category_totals),
        "unmet": list(r.unmet),
        "contributions": [
            {
                "player": c.player,
                "card_id": c.card.card_id if c.card is not None else None,
                "value": c.value,
                "reason": c.reason,
                "categories": list(c.categories),
            }
            for c in r.contributions
        ],
    }


def _player_view(state: GameState, index: int, p: Player) -> dict[str, object]:
    chosen = state.removal_choices.get(index)
    return {
        "player_number": p.player_number,
        "name": p.name,
        "character": p.character.type,
        "health": p.current_health,
        "max_health": p.max_health,
        "hand": [_card_to_dict(c) for c in p.deck.hand],
        "draw_count": len(p.deck.draw_pile),
        "discard_count": len(p.deck.discard_pile),
        "pool_count": len(p.deck.cards),
        "removal_choice": chosen.uid if chosen is not None else None,
    }


def view(state: GameState) -> dict[str, object]:
    """Public view for a presentation layer."""
    return {
        "phase": state.phase,
        "loop": state.current_loop,
        "max_obstacles_passed": state.max_obstacles_passed,
        "current_obstacle": _obstacle_to_dict(state.current_obstacle),
        "current_player": state.current_player if state.phase == "in_loop" else None,
        "obstacles_remaining": len(state.obstacle_deck.draw_pile),
        "players": [_player_view(state, i, p) for i, p in enumerate(state.players)],
        "history": [{"obstacle_id": o.id, "succeeded": ok} for o, ok in state.obstacle_history],
        "last_result": _result_to_dict(state.last_result),
        "end_reason": state.end_reason,
    }


def _player_to_dict(p: Player) -> dict[str, object]:
    return {
        "name": p.name,
        "character": p.character.type,
        "health": p.current_health,
        "cards": [c.uid for c in p.deck.cards],
        "draw_pile": [c.uid for c in p.deck.draw_pile],
        "hand": [c.uid for c in p.deck.hand],
        "discard_pile": [c.uid for c in p.deck.discard_pile],
    }


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "seed": state.seed,
        "phase": state.phase,
        "loop": state.current_loop,
        "max_obstacles_passed": state.max_obstacles_passed,
        "current_player": state.current_player,
        "obstacle_order": [o.id for o in state.obstacle_order],
        "obstacle_draw_pile": [o.id for o in state.obstacle_deck.draw_pile],
        "history": [[o.id, ok] for o, ok in state.obstacle_history],
        "players": [_player_to_dict(p) for p in state.players],
        "end_reason": state.end_reason,
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
