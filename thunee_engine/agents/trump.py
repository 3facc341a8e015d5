# thunee_engine/agents/trump.py
from __future__ import annotations

from typing import Dict, Sequence

from ..cards import Card, Rank, Suit

_RANK_BONUS = {
    Rank.JACK: 40,
    Rank.NINE: 25,
    Rank.ACE: 15,
    Rank.TEN: 5,
}
PER_CARD = 10
KING_QUEEN_BONUS = 50


def score_trump_suits(hand: Sequence[Card]) -> Dict[Suit, int]:
    """Score each suit held: 10 per card, J/9/A/10 bonuses, and 50 for K+Q."""
    scores: Dict[Suit, int] = {}
    for suit in Suit:
        cards = [c for c in hand if c.suit == suit]
        if not cards:
            continue
        score = PER_CARD * len(cards)
        score += sum(_RANK_BONUS.get(c.rank, 0) for c in cards)
        ranks = {c.rank for c in cards}
        if {Rank.KING, Rank.QUEEN} <= ranks:
            score += KING_QUEEN_BONUS
        scores[suit] = score
    return scores


def select_best_trump_suit(hand: Sequence[Card]) -> Suit:
    if not hand:
        raise ValueError("Cannot choose trump from an empty hand")
    scores = score_trump_suits(hand)
    # Ties go to the suit declared first.
    return max(scores, key=lambda s: (scores[s], -list(Suit).index(s)))
