# thunee_engine/agents/bidding.py
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import random

from ..calls import BID_INCREMENT, DoubleCall, JodiCall, KunuckCall, RoyalsCall, ThuneeCall
from ..cards import Card, Rank, Suit, create_deck
from ..config import GameConfig
from ..ranking import sort_by_strength
from ..rules import will_card_win
from ..seats import Seat
from ..state import RoundPhase, RoundState
from ..tracker import GameTracker
from ..validation import CallValidator
from .decisions import BidDecision, MakeBid, MakeSpecialCall, PassBid

logger = logging.getLogger(__name__)

_POWER = {
    Rank.JACK: 0.20,
    Rank.NINE: 0.14,
    Rank.ACE: 0.07,
    Rank.TEN: 0.04,
    Rank.KING: 0.025,
    Rank.QUEEN: 0.015,
}

# Minimum HCC to bid a given amount in response to an existing bid.
_DEFAULT_THRESHOLDS = {20: 0.50, 30: 0.70, 40: 0.85}
_CALL_AND_LOSS_THRESHOLDS = {20: 0.65, 30: 0.82, 40: 0.92}
_TOP_THRESHOLD = 0.95

NOISE = 0.10
DAMPING = 0.35
THUNEE_MIN_TRUMPS = 2


def _by_suit(hand: Sequence[Card]) -> Dict[Suit, List[Card]]:
    suits: Dict[Suit, List[Card]] = {suit: [] for suit in Suit}
    for card in hand:
        suits[card.suit].append(card)
    return suits


def _ranks(cards: Sequence[Card]) -> set:
    return {c.rank for c in cards}


def structural_max_level(hand: Sequence[Card]) -> int:
    """
    Highest bid level (0, 10, 20 or 30) the shape of the hand allows.

    10: a Jack with a same-suit companion, a same-suit K+Q, or 3+ of a suit.
    20: J+9 of a suit, a Jack in a 3+ suit, 4+ of a suit, or J+Q+K.
    30: J+9 in a 3+ suit, a Jack in a 4+ suit, or two Jacks each with company.
    """
    suits = _by_suit(hand)
    level = 0
    jacks_with_company = 0
    for cards in suits.values():
        ranks = _ranks(cards)
        n = len(cards)
        has_jack = Rank.JACK in ranks
        if has_jack and n >= 2:
            jacks_with_company += 1

        if (has_jack and n >= 2) or {Rank.KING, Rank.QUEEN} <= ranks or n >= 3:
            level = max(level, 10)
        if (
            {Rank.JACK, Rank.NINE} <= ranks
            or (has_jack and n >= 3)
            or n >= 4
            or {Rank.JACK, Rank.QUEEN, Rank.KING} <= ranks
        ):
            level = max(level, 20)
        if ({Rank.JACK, Rank.NINE} <= ranks and n >= 3) or (has_jack and n >= 4):
            level = max(level, 30)
    if jacks_with_company >= 2:
        level = 30
    return level


def find_jodi_combos(hand: Sequence[Card]) -> List[Tuple[Card, ...]]:
    """Every K+Q in hand, upgraded to J+Q+K when the Jack is held too."""
    combos: List[Tuple[Card, ...]] = []
    for suit, cards in _by_suit(hand).items():
        ranks = _ranks(cards)
        if {Rank.KING, Rank.QUEEN} <= ranks:
            if Rank.JACK in ranks:
                combos.append((Card(suit, Rank.JACK), Card(suit, Rank.QUEEN), Card(suit, Rank.KING)))
            else:
                combos.append((Card(suit, Rank.KING), Card(suit, Rank.QUEEN)))
    return combos


def holds_top_cards(hand: Sequence[Card], royals: bool = False) -> bool:
    """True if, in every suit held, the hand's cards are that suit's strongest cards."""
    full = _by_suit(create_deck())
    for suit, cards in _by_suit(hand).items():
        if not cards:
            continue
        ordered = sort_by_strength(full[suit], royals)
        if set(ordered[: len(cards)]) != set(cards):
            return False
    return True


class CallDecisionMaker:
    """
    Bot bidding and special calls.

    Bids use a two-stage model: the hand's shape caps the level it may
    reach, then a noisy Hand Control Confidence (HCC) score in [0, 1]
    picks the actual amount.
    """

    def __init__(self, config: GameConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng or random.Random()
        self.validator = CallValidator(config)

    # ------------------------------------------------------------------ #
    # Bidding
    # ------------------------------------------------------------------ #

    def decide_bid(self, state: RoundState, seat: Seat) -> BidDecision:
        highest = state.highest_bid
        if highest is not None:
            if highest.caller == seat:
                return PassBid()
            if not self.config.enable_call_over_teammates and highest.caller == seat.partner:
                return PassBid()

        hand = state.player_at(seat).hand
        max_level = structural_max_level(hand)
        if max_level == 0:
            return PassBid()

        hcc = self.compute_hcc(hand)
        if highest is None:
            decision = self._opening_bid(hcc, max_level)
        else:
            decision = self._response_bid(hcc, highest.amount, max_level)
        logger.debug("%s HCC %.2f (max level %d) -> %s", seat.name, hcc, max_level, decision)
        return decision

    def compute_hcc(self, hand: Sequence[Card]) -> float:
        score = sum(_POWER[c.rank] for c in hand)

        counts = Counter(c.suit for c in hand)
        longest = max(counts.values(), default=0)
        if longest >= 5:
            score += 0.22
        elif longest == 4:
            score += 0.15
        elif longest == 3:
            score += 0.08
        elif longest == 2:
            score += 0.03

        suits_held = len(counts)
        if suits_held == 4:
            score += 0.03
        elif suits_held == 3:
            score += 0.01
        elif suits_held == 1:
            score -= 0.02

        jodi_bonus = 0.0
        for combo in find_jodi_combos(hand):
            jodi_bonus = max(jodi_bonus, 0.10 if len(combo) == 3 else 0.07)
        score += jodi_bonus

        score += (self.rng.random() - 0.5) * NOISE
        return min(1.0, max(0.0, score))

    def _opening_bid(self, hcc: float, max_level: int) -> BidDecision:
        rng = self.rng
        if self.config.enable_call_and_loss:
            if hcc < 0.48:
                return PassBid()
            if hcc < 0.60:
                amount = 10 if rng.random() < 0.35 else 0
            elif hcc < 0.78:
                amount = 10
            elif hcc < 0.90:
                amount = 10 if rng.random() < 0.40 else 20
            elif hcc < 0.97:
                amount = 20
            else:
                amount = 30 if rng.random() < 0.30 else 20
        else:
            if hcc < 0.30:
                return PassBid()
            if hcc < 0.42:
                amount = 10 if rng.random() < 0.40 else 0
            elif hcc < 0.65:
                amount = 10
            elif hcc < 0.78:
                amount = 10 if rng.random() < 0.45 else 20
            elif hcc < 0.92:
                amount = 20
            else:
                amount = 20 if rng.random() < 0.50 else 30

        if amount == 0:
            return PassBid()
        return MakeBid(min(amount, max_level))

    def _thresholds(self) -> Dict[int, float]:
        if self.config.enable_call_and_loss:
            return _CALL_AND_LOSS_THRESHOLDS
        return _DEFAULT_THRESHOLDS

    def required_hcc(self, amount: int) -> float:
        for level, needed in sorted(self._thresholds().items()):
            if amount <= level:
                return needed
        return _TOP_THRESHOLD

    def _response_bid(self, hcc: float, current: int, max_level: int) -> BidDecision:
        minimum = current + BID_INCREMENT
        if hcc < self.required_hcc(minimum):
            return PassBid()
        # Past 30 the hand must qualify for the top level outright.
        if minimum > max_level and max_level < 30:
            return PassBid()

        amount = minimum
        jump = current + 2 * BID_INCREMENT
        if hcc >= self.required_hcc(jump) and (jump <= max_level or max_level >= 30):
            amount = jump
            if self.rng.random() < DAMPING:
                amount = minimum
        return MakeBid(amount)

    # ------------------------------------------------------------------ #
    # Special calls
    # ------------------------------------------------------------------ #

    def decide_special_call(
        self, state: RoundState, seat: Seat
    ) -> Optional[MakeSpecialCall]:
        if state.phase != RoundPhase.PLAYING:
            return None
        for candidate in (
            self._thunee_call(state, seat),
            self._jodi_call(state, seat),
            self._last_trick_call(state, seat),
        ):
            if candidate is not None and self.validator.validate_call(candidate, state):
                logger.debug("%s decides to call %s", seat.name, candidate.category.name)
                return MakeSpecialCall(candidate)
        return None

    def _thunee_call(self, state: RoundState, seat: Seat):
        if state.tricks_completed != 0 or state.active_thunee_call is not None:
            return None
        if state.current_trick is not None and not state.current_trick.is_empty:
            return None
        hand = state.player_at(seat).hand
        trumps = [c for c in hand if c.suit == state.trump_suit]
        if len(trumps) >= THUNEE_MIN_TRUMPS and holds_top_cards(hand):
            return ThuneeCall(caller=seat)
        if self.config.enable_royals and len(trumps) >= THUNEE_MIN_TRUMPS and holds_top_cards(
            hand, royals=True
        ):
            return RoyalsCall(caller=seat)
        return None

    def _jodi_call(self, state: RoundState, seat: Seat):
        if not self.config.enable_jodi or not state.completed_tricks:
            return None
        last_winner = state.completed_tricks[-1].winning_seat
        if last_winner is None or not last_winner.is_teammate(seat):
            return None
        for combo in find_jodi_combos(state.player_at(seat).hand):
            call = JodiCall(
                caller=seat,
                cards=combo,
                is_trump=state.trump_suit is not None and combo[0].suit == state.trump_suit,
            )
            if self.validator.validate_jodi(call, state):
                return call
        return None

    def _last_trick_call(self, state: RoundState, seat: Seat):
        if state.tricks_completed != 5 or state.trump_suit is None:
            return None
        hand = state.player_at(seat).hand
        if len(hand) != 1 or hand[0].suit != state.trump_suit:
            return None
        tracker = GameTracker.from_tricks(
            state.completed_tricks, state.current_trick, royals=state.is_royals_mode
        )
        if not tracker.is_highest_remaining(hand[0]):
            return None
        trick = state.current_trick
        if trick is not None and not will_card_win(
            hand[0], trick, state.trump_suit, state.is_royals_mode
        ):
            return None
        if self.config.enable_double:
            return DoubleCall(caller=seat)
        if self.config.enable_kunuck:
            return KunuckCall(caller=seat)
        return None
