from __future__ import annotations

import random

from vibeloop.engine.deck import Deck, ObstacleDeck
from vibeloop.engine.types import CardDefinition, CardInstance, ObstacleCard

CARD = CardDefinition(id="sprint", name="Sprint", description="", stat="speed")


def _deck(n: int) -> Deck:
    deck = Deck()
    deck.add_cards(CardInstance(uid=i, card=CARD) for i in range(1, n + 1))
    return deck


def _assert_piles_consistent(deck: Deck) -> None:
    piles = list(deck.draw_pile) + list(deck.hand) + list(deck.discard_pile)
    uids = [c.uid for c in piles]
    assert len(uids) == len(set(uids))
    assert set(uids) <= {c.uid for c in deck.cards}


def test_draw_stops_when_draw_pile_is_empty() -> None:
    deck = _deck(2)
    drawn = deck.draw_cards(5)
    assert len(drawn) == 2
    assert deck.draw_card() is None
    deck.discard_hand()
    # the discard pile is never reshuffled into the draw pile
    assert deck.draw_card() is None
    assert len(deck.discard_pile) == 2
    _assert_piles_consistent(deck)


def test_play_card_moves_from_hand_to_discard_only_if_in_hand() -> None:
    deck = _deck(3)
    first = deck.draw_card()
    assert first is not None
    assert deck.play_card(first)
    assert first in deck.discard_pile
    assert not deck.play_card(first)
    not_drawn = deck.draw_pile[0]
    assert not deck.play_card(not_drawn)
    assert not_drawn in deck.draw_pile
    _assert_piles_consistent(deck)


def test_reward_goes_to_discard_and_master_list() -> None:
    deck = _deck(1)
    reward = CardInstance(uid=99, card=CARD)
    deck.add_card_to_discard(reward)
    assert reward in deck.cards
    assert reward in deck.discard_pile
    assert reward not in deck.draw_pile


def test_remove_card_from_any_pile() -> None:
    deck = _deck(4)
    in_hand = deck.draw_cards(2)[0]
    deck.play_card(in_hand)
    assert deck.remove_card(in_hand)
    assert in_hand not in deck.cards
    assert in_hand not in deck.discard_pile
    assert not deck.remove_card(in_hand)
    assert len(deck.cards) == 3
    _assert_piles_consistent(deck)


def test_remove_card_targets_one_copy_of_identical_cards() -> None:
    deck = _deck(3)
    target = deck.cards[1]
    deck.remove_card(target)
    assert [c.uid for c in deck.cards] == [1, 3]


def test_reset_for_time_loop_consolidates_remaining_cards() -> None:
    deck = _deck(6)
    rng = random.Random(7)
    hand = deck.draw_cards(3)
    deck.play_card(hand[0])
    deck.add_card_to_discard(CardInstance(uid=50, card=CARD))
    deck.remove_card(hand[1])

    deck.reset_for_time_loop(rng)
    assert deck.hand == ()
    assert deck.discard_pile == ()
    assert len(deck.draw_pile) == len(deck.cards) == 6

    drawn = deck.draw_cards(100)
    assert sorted(c.uid for c in drawn) == sorted(c.uid for c in deck.cards)
    _assert_piles_consistent(deck)


def test_shuffle_only_reorders_draw_pile() -> None:
    deck = _deck(10)
    hand = deck.draw_cards(2)
    deck.shuffle(random.Random(1))
    assert list(deck.hand) == hand
    assert sorted(c.uid for c in deck.draw_pile) == list(range(3, 11))


def _obstacle(i: int) -> ObstacleCard:
    return ObstacleCard(
        id=f"o{i}", name=f"O{i}", description="", difficulty=i, required_skills=("tech",), type="hazard"
    )


def test_obstacle_deck_draw_defeat_and_restore() -> None:
    deck = ObstacleDeck()
    order = [_obstacle(i) for i in range(4)]
    deck.add_cards(order)

    first = deck.draw_obstacle()
    second = deck.draw_obstacle()
    assert first is order[0] and second is order[1]
    deck.defeat_obstacle(first)
    assert deck.defeated_obstacles == (first,)
    assert deck.active_obstacles == (second,)

    deck.clear_obstacles()
    assert deck.active_obstacles == () and deck.defeated_obstacles == ()
    assert len(deck.draw_pile) == 2

    deck.restore_order(order)
    assert deck.draw_pile == tuple(order)
    assert deck.all_cards == tuple(order)


def test_obstacle_deck_reset_and_exhaustion() -> None:
    deck = ObstacleDeck()
    deck.add_card(_obstacle(1))
    assert deck.draw_obstacle() is not None
    assert deck.draw_obstacle() is None
    deck.reset_deck(random.Random(3))
    assert len(deck.draw_pile) == 1
    assert deck.active_obstacles == ()
