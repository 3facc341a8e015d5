# thunee_engine/agents/base.py
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from ..cards import Card, Suit
from ..seats import Seat
from ..state import RoundState
from .decisions import BidDecision, MakeSpecialCall, PlayCard


@runtime_checkable
class ThuneeAgent(Protocol):
    """
    Interface that every non-human seat implements.

    Agents only ever return decisions; the engine applies them. `state` is
    the full round, so agents must limit themselves to their own hand and
    public information (completed and current tricks, call history).
    """

    def decide_bid(self, state: RoundState, seat: Seat) -> BidDecision:
        """Return MakeBid(amount) or PassBid() during bidding."""
        raise NotImplementedError

    def decide_special_call(
        self, state: RoundState, seat: Seat
    ) -> Optional[MakeSpecialCall]:
        """Return a special call to make right now, or None."""
        raise NotImplementedError

    def decide_card_play(
        self, state: RoundState, seat: Seat, legal_cards: List[Card]
    ) -> PlayCard:
        raise NotImplementedError

    def decide_trump(self, state: RoundState, seat: Seat) -> Suit:
        """Pick a trump suit from the four cards in hand."""
        raise NotImplementedError
