# thunee_engine/agents/random_agent.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional
import random

from ..calls import BID_INCREMENT, MIN_BID
from ..cards import Card, Rank, Suit
from ..seats import Seat
from ..state import RoundState
from .base import ThuneeAgent
from .decisions import BidDecision, MakeBid, MakeSpecialCall, PassBid, PlayCard


@dataclass
class RandomAgent(ThuneeAgent):
    """
    A simple baseline agent with a bit of structure:

    - decide_bid: count Jacks and Nines, open at most 10 per honour, then
      raise by the minimum only half the time.
    - decide_card_play: pick uniformly among legal cards.
    - decide_trump: the suit held most often, ties broken randomly.
    - never makes special calls.
    """

    rng: random.Random

    def decide_bid(self, state: RoundState, seat: Seat) -> BidDecision:
        hand = state.player_at(seat).hand
        honours = sum(1 for c in hand if c.rank in (Rank.JACK, Rank.NINE))
        ceiling = honours * BID_INCREMENT

        highest = state.highest_bid
        if highest is not None and highest.caller.is_teammate(seat):
            return PassBid()
        amount = MIN_BID if highest is None else highest.amount + BID_INCREMENT
        if amount > ceiling or self.rng.random() < 0.5:
            return PassBid()
        return MakeBid(amount)

    def decide_special_call(
        self, state: RoundState, seat: Seat
    ) -> Optional[MakeSpecialCall]:
        return None

    def decide_card_play(
        self, state: RoundState, seat: Seat, legal_cards: List[Card]
    ) -> PlayCard:
        return PlayCard(self.rng.choice(legal_cards))

    def decide_trump(self, state: RoundState, seat: Seat) -> Suit:
        counts = Counter(c.suit for c in state.player_at(seat).hand)
        max_count = max(counts.values())
        candidates = [s for s in Suit if counts.get(s, 0) == max_count]
        return self.rng.choice(candidates)
