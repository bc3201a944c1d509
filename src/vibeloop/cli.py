from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence, TextIO

from vibeloop.engine.actions import (
    Action,
    ChooseRemovalAction,
    ConfirmRemovalsAction,
    PlayCardAction,
    SkipTurnAction,
    StartNewGameAction,
)
from vibeloop.engine.match import new_game, step
from vibeloop.engine.serialize import view
from vibeloop.engine.state import GameState
from vibeloop.paths import get_paths
from vibeloop.services.content import ContentError, ContentService
from vibeloop.services.telemetry import TelemetryService

DEFAULT_CHARACTERS = ["mechanic", "medic", "pilot", "soldier"]
TELEMETRY_EVENTS = ("GAME_STARTED", "LOOP_ENDED", "LOOP_STARTED", "GAME_ENDED")

HELP = """commands:
  play <uid>            play a card from the current player's hand
  skip                  skip the current player's turn
  remove <player> <uid> choose a card to remove (between loops, player is 1-based)
  continue              confirm removals and start the next loop
  new                   start a new game
  quit"""


def _content_service() -> ContentService:
    paths = get_paths()
    return ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)


def _cmd_validate(args: argparse.Namespace, out: TextIO) -> int:
    try:
        _content_service().validate_all()
    except ContentError as e:
        print(str(e), file=out)
        return 1
    print("Content OK.", file=out)
    return 0


def _cmd_deck(args: argparse.Namespace, out: TextIO) -> int:
    # same seed and characters as `play` give the same sequence
    service = _content_service()
    try:
        state = new_game(service.load_content(), args.characters, seed=args.seed, config=service.load_game_config())
    except (ContentError, ValueError) as e:
        print(str(e), file=out)
        return 1
    for i, o in enumerate(state.obstacle_order, start=1):
        print(f"{i:2d}. {o.name} ({o.type}, difficulty {o.difficulty})", file=out)
    return 0


def _render(state: GameState, out: TextIO) -> None:
    v = view(state)
    print(f"-- loop {v['loop']} | best {v['max_obstacles_passed']} | phase {v['phase']}", file=out)
    for p in state.players:
        hand = ", ".join(f"[{c.uid}] {c.name} ({c.card.stat})" for c in p.deck.hand)
        print(
            f"   {p.name} the {p.character.name}: {p.current_health}/{p.max_health} hp "
            f"| draw {len(p.deck.draw_pile)} discard {len(p.deck.discard_pile)} | {hand}",
            file=out,
        )
    r = state.last_result
    if r is not None:
        verdict = "overcome" if r.success else f"failed, {r.damage} damage"
        print(f"   last: {r.obstacle.name} {verdict} (total {r.total})", file=out)
    if state.phase == "in_loop" and state.current_obstacle is not None:
        o = state.current_obstacle
        print(f"   obstacle: {o.name} ({o.type}) difficulty {o.difficulty}", file=out)
        print(f"   {state.players[state.current_player].name} to act", file=out)
    elif state.phase == "awaiting_card_removal":
        print("   each player must remove one card from their pool", file=out)
    elif state.is_over:
        print(f"   GAME {'WON' if state.phase == 'won' else 'LOST'}: {state.end_reason}", file=out)


def _parse_command(state: GameState, line: str) -> Action | None:
    parts = line.split()
    if not parts:
        return None
    cmd, rest = parts[0].lower(), parts[1:]
    if cmd == "play" and len(rest) == 1:
        return PlayCardAction(player=state.current_player, card_uid=int(rest[0]))
    if cmd == "skip":
        return SkipTurnAction(player=state.current_player)
    if cmd == "remove" and len(rest) == 2:
        return ChooseRemovalAction(player=int(rest[0]) - 1, card_uid=int(rest[1]))
    if cmd == "continue":
        return ConfirmRemovalsAction()
    if cmd == "new":
        return StartNewGameAction()
    raise ValueError(line)


def _cmd_play(args: argparse.Namespace, out: TextIO, inp: TextIO) -> int:
    service = _content_service()
    try:
        state = new_game(service.load_content(), args.characters, seed=args.seed, config=service.load_game_config())
    except (ContentError, ValueError) as e:
        print(str(e), file=out)
        return 1
    telemetry = TelemetryService(args.telemetry or get_paths().userdata_dir / "telemetry.jsonl")
    telemetry.log_events(state.event_log, only=TELEMETRY_EVENTS)
    print(HELP, file=out)
    _render(state, out)
    for line in inp:
        if line.strip().lower() == "quit":
            break
        try:
            action = _parse_command(state, line)
        except ValueError:
            print("?", file=out)
            continue
        if action is None:
            continue
        res = step(state, action)
        if not res.ok:
            print(f"! {res.kind}: {res.error}", file=out)
            continue
        telemetry.log_events(res.events, only=TELEMETRY_EVENTS)
        _render(state, out)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="vibeloop")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("validate", help="validate all content files")

    p_deck = sub.add_parser("deck", help="print the obstacle order for a seed")
    p_deck.add_argument("--seed", type=int, default=0)
    p_deck.add_argument("--characters", nargs="+", default=DEFAULT_CHARACTERS)

    p_play = sub.add_parser("play", help="play a game on the terminal")
    p_play.add_argument("--seed", type=int, default=0)
    p_play.add_argument("--characters", nargs="+", default=DEFAULT_CHARACTERS)
    p_play.add_argument(
        "--telemetry", type=Path, default=None, help="telemetry file (default: <userdata>/telemetry.jsonl)"
    )

    args = parser.parse_args(argv)
    if args.command == "validate":
        return _cmd_validate(args, sys.stdout)
    if args.command == "deck":
        return _cmd_deck(args, sys.stdout)
    return _cmd_play(args, sys.stdout, sys.stdin)


if __name__ == "__main__":
    raise SystemExit(main())
