# thunee_engine/ranking.py
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .cards import Card, Rank, Suit
from .errors import InvariantViolation


def rank_strength(rank: Rank, royals: bool = False) -> int:
    return rank.strength(royals)


def compare_cards(
    card1: Card,
    card2: Card,
    trump_suit: Optional[Suit],
    lead_suit: Optional[Suit],
    royals: bool = False,
) -> int:
    """
    Compare two cards within a trick.

    Returns a positive number if card1 outranks card2, negative if card2
    outranks card1, and 0 when neither can beat the other (two off-suit,
    non-trump cards).

    - Trump beats non-trump.
    - Two trumps, or two lead-suit cards, compare by rank in the active mode.
    - A lead-suit card beats an off-suit non-trump card.
    """
    trump1 = trump_suit is not None and card1.suit == trump_suit
    trump2 = trump_suit is not None and card2.suit == trump_suit
    if trump1 and not trump2:
        return 1
    if trump2 and not trump1:
        return -1
    if trump1 and trump2:
        return card1.rank.strength(royals) - card2.rank.strength(royals)

    lead1 = lead_suit is not None and card1.suit == lead_suit
    lead2 = lead_suit is not None and card2.suit == lead_suit
    if lead1 and not lead2:
        return 1
    if lead2 and not lead1:
        return -1
    if lead1 and lead2:
        return card1.rank.strength(royals) - card2.rank.strength(royals)
    return 0


def beats(
    challenger: Card,
    current_best: Card,
    trump_suit: Optional[Suit],
    lead_suit: Optional[Suit],
    royals: bool = False,
) -> bool:
    return compare_cards(challenger, current_best, trump_suit, lead_suit, royals) > 0


def determine_winning_card_index(
    cards: Sequence[Card],
    trump_suit: Optional[Suit],
    lead_suit: Optional[Suit] = None,
    royals: bool = False,
) -> int:
    """
    Index of the winning card in play order. The first card is the
    provisional winner and is only replaced by a strictly higher card.
    When `lead_suit` is omitted the first card's suit is used.
    """
    if not cards:
        raise InvariantViolation("Cannot pick a winner from no cards")
    if lead_suit is None:
        lead_suit = cards[0].suit
    best = 0
    for i in range(1, len(cards)):
        if beats(cards[i], cards[best], trump_suit, lead_suit, royals):
            best = i
    return best


def sort_by_strength(
    cards: Iterable[Card], royals: bool = False, descending: bool = True
) -> List[Card]:
    """Sort by rank strength only (suit-agnostic), strongest first by default."""
    return sorted(cards, key=lambda c: c.rank.strength(royals), reverse=descending)
