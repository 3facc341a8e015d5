# thunee_engine/agents/rule_based.py
from __future__ import annotations

from typing import List, Optional
import random

from ..cards import Card, Suit
from ..config import GameConfig
from ..seats import Seat
from ..state import RoundState
from .base import ThuneeAgent
from .bidding import CallDecisionMaker
from .card_play import CardSelector
from .decisions import BidDecision, MakeSpecialCall, PlayCard
from .trump import select_best_trump_suit


class RuleBasedAgent(ThuneeAgent):
    """
    Heuristic bot: HCC bidding, the card-play priority cascade, and a
    point-weighted trump choice. One seeded RNG drives all of it.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig.standard()
        self.rng = rng or random.Random()
        self.calls = CallDecisionMaker(self.config, rng=self.rng)
        self.cards = CardSelector(rng=self.rng)

    def decide_bid(self, state: RoundState, seat: Seat) -> BidDecision:
        return self.calls.decide_bid(state, seat)

    def decide_special_call(
        self, state: RoundState, seat: Seat
    ) -> Optional[MakeSpecialCall]:
        return self.calls.decide_special_call(state, seat)

    def decide_card_play(
        self, state: RoundState, seat: Seat, legal_cards: List[Card]
    ) -> PlayCard:
        return PlayCard(self.cards.select_card(state, seat, legal_cards))

    def decide_trump(self, state: RoundState, seat: Seat) -> Suit:
        return select_best_trump_suit(state.player_at(seat).hand)
