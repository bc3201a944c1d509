from __future__ import annotations

import random
from typing import Iterable

from .deck import ObstacleDeck
from .types import GameConfig, ObstacleCard


def build_obstacle_order(
    obstacles: Iterable[ObstacleCard], config: GameConfig, rng: random.Random
) -> list[ObstacleCard]:
    """Pick and order the obstacles for one game.

    At most ``obstacle_deck_size - 1`` regular obstacles are sampled, shuffled
    if configured, and the finale (when the catalog has one) is always last.
    """
    finale: ObstacleCard | None = None
    regular: list[ObstacleCard] = []
    for card in obstacles:
        if card.is_finale:
            if finale is None:
                finale = card
            continue
        if config.max_difficulty is not None and card.difficulty > config.max_difficulty:
            continue
        regular.append(card)

    slots = max(0, config.obstacle_deck_size - 1)
    if slots < len(regular):
        regular = rng.sample(regular, slots)

    if config.shuffle_obstacle_deck:
        rng.shuffle(regular)

    if finale is not None:
        regular.append(finale)
    return regular


def new_obstacle_deck(order: Iterable[ObstacleCard]) -> ObstacleDeck:
    deck = ObstacleDeck()
    deck.add_cards(order)
    return deck
