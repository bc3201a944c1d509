from __future__ import annotations

import random
from typing import Iterable

from .types import CardInstance, ObstacleCard


class Deck:
    """A player's card pool and its draw/hand/discard piles.

    ``cards`` is the master list. Every card in one of the three piles is also
    in ``cards``, and no card sits in more than one pile. Drawing never
    reshuffles the discard pile.
    """

    def __init__(self) -> None:
        self._cards: list[CardInstance] = []
        self._draw_pile: list[CardInstance] = []
        self._hand: list[CardInstance] = []
        self._discard_pile: list[CardInstance] = []

    @property
    def cards(self) -> tuple[CardInstance, ...]:
        return tuple(self._cards)

    @property
    def draw_pile(self) -> tuple[CardInstance, ...]:
        return tuple(self._draw_pile)

    @property
    def hand(self) -> tuple[CardInstance, ...]:
        return tuple(self._hand)

    @property
    def discard_pile(self) -> tuple[CardInstance, ...]:
        return tuple(self._discard_pile)

    def add_card(self, card: CardInstance) -> None:
        self._cards.append(card)
        self._draw_pile.append(card)

    def add_cards(self, cards: Iterable[CardInstance]) -> None:
        for card in cards:
            self.add_card(card)

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self._draw_pile)

    def draw_card(self) -> CardInstance | None:
        if not self._draw_pile:
            return None
        card = self._draw_pile.pop(0)
        self._hand.append(card)
        return card

    def draw_cards(self, count: int) -> list[CardInstance]:
        drawn: list[CardInstance] = []
        for _ in range(max(0, count)):
            card = self.draw_card()
            if card is None:
                break
            drawn.append(card)
        return drawn

    def play_card(self, card: CardInstance) -> bool:
        if card not in self._hand:
            return False
        self._hand.remove(card)
        self._discard_pile.append(card)
        return True

    def discard_hand(self) -> None:
        self._discard_pile.extend(self._hand)
        self._hand.clear()

    def add_card_to_discard(self, card: CardInstance) -> None:
        self._cards.append(card)
        self._discard_pile.append(card)

    def remove_card(self, card: CardInstance) -> bool:
        removed = False
        for pile in (self._cards, self._draw_pile, self._hand, self._discard_pile):
            if card in pile:
                pile.remove(card)
                removed = True
        return removed

    def find(self, uid: int) -> CardInstance | None:
        for card in self._cards:
            if card.uid == uid:
                return card
        return None

    def find_in_hand(self, uid: int) -> CardInstance | None:
        for card in self._hand:
            if card.uid == uid:
                return card
        return None

    def reset_for_time_loop(self, rng: random.Random) -> None:
        """Put every remaining card back into a freshly shuffled draw pile."""
        self._draw_pile = list(self._cards)
        self._hand.clear()
        self._discard_pile.clear()
        self.shuffle(rng)


class ObstacleDeck:
    """Obstacle sequence with draw/active/defeated piles over ``all_cards``."""

    def __init__(self) -> None:
        self._all_cards: list[ObstacleCard] = []
        self._draw_pile: list[ObstacleCard] = []
        self._active: list[ObstacleCard] = []
        self._defeated: list[ObstacleCard] = []

    @property
    def all_cards(self) -> tuple[ObstacleCard, ...]:
        return tuple(self._all_cards)

    @property
    def draw_pile(self) -> tuple[ObstacleCard, ...]:
        return tuple(self._draw_pile)

    @property
    def active_obstacles(self) -> tuple[ObstacleCard, ...]:
        return tuple(self._active)

    @property
    def defeated_obstacles(self) -> tuple[ObstacleCard, ...]:
        return tuple(self._defeated)

    def add_card(self, card: ObstacleCard) -> None:
        self._all_cards.append(card)
        self._draw_pile.append(card)

    def add_cards(self, cards: Iterable[ObstacleCard]) -> None:
        for card in cards:
            self.add_card(card)

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self._draw_pile)

    def draw_obstacle(self) -> ObstacleCard | None:
        if not self._draw_pile:
            return None
        card = self._draw_pile.pop(0)
        self._active.append(card)
        return card

    def defeat_obstacle(self, card: ObstacleCard) -> None:
        if card in self._active:
            self._active.remove(card)
            self._defeated.append(card)

    def reset_deck(self, rng: random.Random) -> None:
        self._draw_pile = list(self._all_cards)
        self._active.clear()
        self._defeated.clear()
        self.shuffle(rng)

    def clear_obstacles(self) -> None:
        self._active.clear()
        self._defeated.clear()

    def restore_order(self, order: Iterable[ObstacleCard]) -> None:
        """Rebuild the draw pile in exactly ``order``; active/defeated are cleared."""
        self.clear_obstacles()
        self._draw_pile = list(order)
