from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from vibeloop.engine.types import (
    ALL_CARD_TAGS,
    DEFAULT_FINALE_REQUIREMENT,
    CardDatabase,
    CardDefinition,
    CardTag,
    Character,
    CharacterCatalog,
    GameConfig,
    GameContent,
    ObstacleCard,
    ObstacleCatalog,
    Stat,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: e.path)
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _require_list(obj: Mapping[str, object], key: str) -> list[object]:
    v = obj.get(key)
    if not isinstance(v, list):
        raise ContentError(f"Expected list for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str, default: int) -> int:
    if obj.get(key) is None:
        return default
    return _require_int(obj, key)


def _parse_tags(raw: object) -> frozenset[CardTag]:
    if raw is None:
        # untagged cards work against every regular obstacle
        return frozenset(ALL_CARD_TAGS)
    if not isinstance(raw, list):
        raise ContentError("compatible_types must be a list")
    return frozenset(str(t).lower() for t in raw)  # type: ignore[misc]


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> dict[str, object]:
        path = self._data_dir / f"{name}.json"
        raw = _load_json(path)
        schema = _load_schema(self._schema_dir / f"{name}.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_characters(self) -> CharacterCatalog:
        raw = self._load_validated("characters")
        out: dict[str, Character] = {}
        for item in _require_list(raw, "characters"):
            if not isinstance(item, dict):
                continue
            ch = Character(
                type=_require_str(item, "type"),
                name=_require_str(item, "name"),
                strength=_require_int(item, "strength"),
                speed=_require_int(item, "speed"),
                tech=_require_int(item, "tech"),
                max_health=_require_int(item, "health"),
                description=str(item.get("description", "")),
            )
            out[ch.type] = ch
        return CharacterCatalog(characters=out)

    def load_cards_db(self) -> CardDatabase:
        raw = self._load_validated("cards")
        cards: dict[str, CardDefinition] = {}
        for item in _require_list(raw, "cards"):
            if not isinstance(item, dict):
                continue
            stat: Stat = _require_str(item, "stat").lower()  # type: ignore[assignment]
            card = CardDefinition(
                id=_require_str(item, "id"),
                name=_require_str(item, "name"),
                description=str(item.get("description", "")),
                stat=stat,
                compatible_types=_parse_tags(item.get("compatible_types")),
            )
            cards[card.id] = card

        starter_decks: dict[str, tuple[str, ...]] = {}
        raw_decks = raw.get("starter_decks", {})
        if isinstance(raw_decks, dict):
            for ctype, ids in raw_decks.items():
                if not isinstance(ctype, str) or not isinstance(ids, list):
                    continue
                unknown = [c for c in ids if c not in cards]
                if unknown:
                    raise ContentError(f"Starter deck {ctype} references unknown cards: {unknown}")
                starter_decks[ctype] = tuple(str(c) for c in ids)
        return CardDatabase(cards=cards, starter_decks=starter_decks)

    def load_obstacles(self) -> ObstacleCatalog:
        raw = self._load_validated("obstacles")
        out: dict[str, ObstacleCard] = {}
        for item in _require_list(raw, "obstacles"):
            if not isinstance(item, dict):
                continue
            skills = tuple(str(s).lower() for s in _require_list(item, "required_skills"))
            obstacle = ObstacleCard(
                id=_require_str(item, "id"),
                name=_require_str(item, "name"),
                description=str(item.get("description", "")),
                difficulty=_require_int(item, "difficulty"),
                required_skills=skills,  # type: ignore[arg-type]
                type=_require_str(item, "type").lower(),  # type: ignore[arg-type]
                environment_required=_optional_int(item, "environment_required", DEFAULT_FINALE_REQUIREMENT),
                hazard_required=_optional_int(item, "hazard_required", DEFAULT_FINALE_REQUIREMENT),
                barrier_required=_optional_int(item, "barrier_required", DEFAULT_FINALE_REQUIREMENT),
            )
            out[obstacle.id] = obstacle
        return ObstacleCatalog(obstacles=out)

    def load_game_config(self) -> GameConfig:
        if not (self._data_dir / "game_config.json").exists():
            return GameConfig()
        raw = self._load_validated("game_config")
        defaults = GameConfig()
        obstacles = raw.get("obstacles", {})
        if not isinstance(obstacles, dict):
            raise ContentError("game_config.obstacles must be an object")
        max_difficulty = obstacles.get("max_difficulty")
        return GameConfig(
            obstacle_deck_size=_optional_int(obstacles, "deck_size", defaults.obstacle_deck_size),
            shuffle_obstacle_deck=bool(obstacles.get("shuffle", defaults.shuffle_obstacle_deck)),
            max_difficulty=max_difficulty if isinstance(max_difficulty, int) else None,
            hand_size=_optional_int(raw, "hand_size", defaults.hand_size),
        )

    def load_content(self) -> GameContent:
        return GameContent(
            cards=self.load_cards_db(),
            characters=self.load_characters(),
            obstacles=self.load_obstacles(),
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_content()
        _ = self.load_game_config()
