from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from vibeloop.engine.types import ALL_CARD_TAGS, GameConfig
from vibeloop.paths import get_paths
from vibeloop.services.content import ContentError, ContentService


def _service(data_dir: Path | None = None) -> ContentService:
    paths = get_paths()
    return ContentService(data_dir or paths.data_dir, paths.schema_dir)


def _copy_data(tmp_path: Path) -> Path:
    data = tmp_path / "data"
    shutil.copytree(get_paths().data_dir, data, ignore=shutil.ignore_patterns("schemas"))
    return data


def test_content_schemas_validate() -> None:
    _service().validate_all()


def test_shipped_content_is_consistent() -> None:
    content = _service().load_content()
    finales = [o for o in content.obstacles.all() if o.is_finale]
    assert len(finales) == 1
    assert finales[0].environment_required == 5
    for ctype in content.characters.types():
        ids = content.cards.starter_deck_ids(ctype)
        assert ids, ctype
        assert all(i in content.cards.cards for i in ids)


def test_card_without_tags_is_compatible_with_everything() -> None:
    cards = _service().load_cards_db()
    assert cards.get("field_kit").compatible_types == frozenset(ALL_CARD_TAGS)
    assert not cards.get("vault").is_compatible_with("hazard")


def test_character_cycling_wraps_around() -> None:
    characters = _service().load_characters()
    types = characters.types()
    assert characters.next_type(types[-1]) == types[0]
    assert characters.previous_type(types[0]) == types[-1]
    assert characters.previous_type(characters.next_type(types[1])) == types[1]


def test_game_config_loads() -> None:
    cfg = _service().load_game_config()
    assert cfg.obstacle_deck_size == 12
    assert cfg.shuffle_obstacle_deck is True
    assert cfg.max_difficulty is None
    assert cfg.hand_size == 3


def test_missing_game_config_falls_back_to_defaults(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    (data / "game_config.json").unlink()
    assert _service(data).load_game_config() == GameConfig()


def test_invalid_obstacle_type_fails_validation(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    raw = json.loads((data / "obstacles.json").read_text(encoding="utf-8"))
    raw["obstacles"][0]["type"] = "dragon"
    (data / "obstacles.json").write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ContentError, match="Schema validation failed"):
        _service(data).load_obstacles()


def test_unknown_starter_card_is_reported(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    raw = json.loads((data / "cards.json").read_text(encoding="utf-8"))
    raw["starter_decks"]["medic"].append("no_such_card")
    (data / "cards.json").write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ContentError, match="no_such_card"):
        _service(data).load_cards_db()


def test_missing_file_is_a_content_error(tmp_path: Path) -> None:
    with pytest.raises(ContentError, match="Missing content file"):
        _service(tmp_path).load_characters()
