# tests/test_cards.py
import random

import pytest

from thunee_engine.cards import (
    DECK_SIZE,
    Card,
    Deck,
    Rank,
    Suit,
    card_to_dict,
    create_deck,
    dict_to_card,
)


def test_deck_has_24_distinct_cards_worth_304_points():
    deck = create_deck()
    assert len(deck) == DECK_SIZE
    assert len(set(deck)) == DECK_SIZE
    # 4 suits x (30 + 20 + 11 + 10 + 3 + 2)
    assert sum(c.points for c in deck) == 304


def test_rank_orders_reverse_under_royals():
    standard = sorted(Rank, key=lambda r: r.strength(), reverse=True)
    royals = sorted(Rank, key=lambda r: r.strength(royals=True), reverse=True)
    assert [r.label for r in standard] == ["J", "9", "A", "10", "K", "Q"]
    assert royals == list(reversed(standard))


def test_shuffle_is_reproducible_with_seed():
    d1 = Deck()
    d2 = Deck()
    d1.shuffle(random.Random(7))
    d2.shuffle(random.Random(7))
    assert d1.cards == d2.cards
    assert d1.cards != create_deck()


def test_deal_gives_four_hands_of_six():
    deck = Deck()
    deck.shuffle(random.Random(1))
    hands = deck.deal()
    assert [len(h) for h in hands] == [6, 6, 6, 6]
    dealt = [c for h in hands for c in h]
    assert sorted(dealt, key=str) == sorted(create_deck(), key=str)


def test_deal_split_holds_two_back_per_player():
    deck = Deck()
    deck.shuffle(random.Random(3))
    initial, held_back = deck.deal_split()
    assert [len(h) for h in initial] == [4, 4, 4, 4]
    assert [len(h) for h in held_back] == [2, 2, 2, 2]
    full = deck.deal()
    for seat in range(4):
        assert initial[seat] + held_back[seat] == full[seat]


def test_deck_rejects_wrong_cards():
    cards = create_deck()
    with pytest.raises(ValueError):
        Deck(cards[:-1])
    with pytest.raises(ValueError):
        Deck(cards[:-1] + [cards[0]])


def test_card_string_parsing_and_dict_round_trip():
    card = Card.from_string("10♠")
    assert card == Card(Suit.SPADES, Rank.TEN)
    assert str(card) == "10♠"
    assert card_to_dict(card) == {"suit": "SPADES", "rank": "TEN"}
    assert dict_to_card(card_to_dict(card)) == card
    with pytest.raises(ValueError):
        Card.from_string("X♠")
