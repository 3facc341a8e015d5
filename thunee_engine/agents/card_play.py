# thunee_engine/agents/card_play.py
from __future__ import annotations

from typing import List, Optional, Sequence
import logging
import random

from ..cards import Card, Rank, Suit
from ..errors import InvariantViolation
from ..ranking import beats, rank_strength, sort_by_strength
from ..rules import current_winning_card, current_winning_seat, will_card_win
from ..seats import Seat
from ..state import PlayerState, RoundState, Trick
from ..tracker import GameTracker

logger = logging.getLogger(__name__)

RANDOM_DEVIATION = 0.12
CUT_WORTHY_POINTS = 15
# Completed-trick count from which play is "late": the 5th and 6th tricks.
LATE_TRICKS = 4


class CardSelector:
    """
    Bot card play as a strict priority cascade: the first rule that
    produces a card wins.

    Leading:
      0. random deviation (off in critical situations)
      1. support a partner's Thunee/Royals, or try to catch an opponent's
      2. win tricks 1 and 3 when holding a K+Q (to call Jodi)
      3. lead a bare side Jack, or a Nine whose Jack is gone
      4. pool trump with the trump Jack
      5. bait with an Ace/Nine where the Jack is held
      6. set up or take the last trick
      7. lead a card that is highest remaining in its suit
      8. dump the weakest card, keeping trumps

    Following:
      0. random deviation
      1. Thunee/Royals support or counter
      2. smart cut when void in the lead suit
      3. win cheaply, or dump
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def select_card(
        self, state: RoundState, seat: Seat, legal_cards: Sequence[Card]
    ) -> Card:
        if not legal_cards:
            raise InvariantViolation("No legal cards to select from")
        legal = list(legal_cards)
        if len(legal) == 1:
            return legal[0]

        trick = state.current_trick or Trick(lead_seat=seat)
        tracker = GameTracker.from_tricks(
            state.completed_tricks, trick, royals=state.is_royals_mode
        )
        bot = state.player_at(seat)
        if trick.is_empty:
            return self._select_lead(legal, state, bot, tracker)
        return self._select_follow(legal, trick, state, bot, tracker)

    # -------------------------------------------------------------------------
    # Leading
    # -------------------------------------------------------------------------

    def _select_lead(
        self,
        legal: List[Card],
        state: RoundState,
        bot: PlayerState,
        tracker: GameTracker,
    ) -> Card:
        if not self._is_critical(state):
            card = self._maybe_random(legal)
            if card is not None:
                return card

        for rule in (
            self._lead_thunee,
            self._lead_for_jodi,
            self._lead_jack,
            self._lead_pool_trump,
            self._lead_bait,
            self._lead_last_tricks,
        ):
            card = rule(legal, state, bot, tracker)
            if card is not None:
                logger.debug("%s leads %s via %s", bot.seat.name, card, rule.__name__)
                return card

        for card in legal:
            if tracker.is_highest_remaining(card):
                return card
        return self._weakest(legal, state)

    def _lead_thunee(self, legal, state, bot, tracker) -> Optional[Card]:
        call = state.active_thunee_call
        if call is None or call.caller == bot.seat:
            return None
        if call.caller.is_teammate(bot.seat):
            return self._dump_for_caller(legal, state)
        return self._strongest(legal, state)

    def _lead_for_jodi(self, legal, state, bot, tracker) -> Optional[Card]:
        if state.tricks_completed not in (0, 2) or state.active_thunee_call is not None:
            return None
        for suit in Suit:
            ranks = {c.rank for c in bot.cards_of_suit(suit)}
            if {Rank.KING, Rank.QUEEN} <= ranks:
                return self._strongest(legal, state)
        return None

    def _lead_jack(self, legal, state, bot, tracker) -> Optional[Card]:
        # The trump Jack is left to pooling, and a Jack backed by an A/9 to baiting.
        trump = state.trump_suit
        side = [
            c
            for c in legal
            if c.rank == Rank.JACK and c.suit != trump and not self._has_bait(bot, c.suit)
        ]
        if side:
            return min(side, key=lambda c: len(bot.cards_of_suit(c.suit)))
        for card in legal:
            if card.rank == Rank.NINE and tracker.jack_played(card.suit):
                return card
        return None

    def _lead_pool_trump(self, legal, state, bot, tracker) -> Optional[Card]:
        trump = state.trump_suit
        if trump is None:
            return None
        if not tracker.opponents_may_have_trump(bot.seat, trump, bot.hand):
            return None
        if tracker.only_teammate_has_trump(bot.seat, trump, bot.hand):
            return None
        for card in legal:
            if card.suit == trump and card.rank == Rank.JACK:
                return card
        return None

    def _lead_bait(self, legal, state, bot, tracker) -> Optional[Card]:
        for card in legal:
            if card.rank not in (Rank.ACE, Rank.NINE):
                continue
            if state.trump_suit is not None and card.suit == state.trump_suit:
                continue
            if bot.has_card(Card(card.suit, Rank.JACK)):
                return card
        return None

    def _has_bait(self, bot: PlayerState, suit: Suit) -> bool:
        return any(c.rank in (Rank.ACE, Rank.NINE) for c in bot.cards_of_suit(suit))

    def _lead_last_tricks(self, legal, state, bot, tracker) -> Optional[Card]:
        if state.tricks_completed < LATE_TRICKS:
            return None
        trump = state.trump_suit
        if state.tricks_completed == LATE_TRICKS and trump is not None and len(bot.hand) == 2:
            trumps = [c for c in legal if c.suit == trump]
            others = [c for c in legal if c.suit != trump]
            if (
                len(trumps) == 1
                and len(others) == 1
                and tracker.highest_remaining_in_suit(trump) == trumps[0]
            ):
                # Keep the master trump for the last trick.
                return others[0]
        return self._strongest(legal, state)

    # -------------------------------------------------------------------------
    # Following
    # -------------------------------------------------------------------------

    def _select_follow(
        self,
        legal: List[Card],
        trick: Trick,
        state: RoundState,
        bot: PlayerState,
        tracker: GameTracker,
    ) -> Card:
        if not self._is_critical(state):
            card = self._maybe_random(legal)
            if card is not None:
                return card

        card = self._follow_thunee(legal, trick, state, bot)
        if card is not None:
            return card
        card = self._smart_cut(legal, trick, state, bot)
        if card is not None:
            return card
        return self._win_or_dump(legal, trick, state, bot, tracker)

    def _follow_thunee(self, legal, trick, state, bot) -> Optional[Card]:
        call = state.active_thunee_call
        if call is None:
            return None
        if call.caller == bot.seat:
            return self._strongest(legal, state)
        if call.caller.is_teammate(bot.seat):
            return self._dump_for_caller(legal, state)
        winners = self._winning_cards(legal, trick, state)
        if winners:
            return self._weakest(winners, state)
        return self._weakest(legal, state)

    def _smart_cut(self, legal, trick, state, bot) -> Optional[Card]:
        trump = state.trump_suit
        lead_suit = trick.lead_suit
        if trump is None or lead_suit is None or lead_suit == trump:
            return None
        if any(c.suit == lead_suit for c in legal):
            return None
        trumps = [c for c in legal if c.suit == trump]
        if not trumps:
            return None

        royals = state.is_royals_mode
        winner = current_winning_seat(trick, trump, royals)
        if winner is not None and winner.is_teammate(bot.seat):
            return None

        best = current_winning_card(trick, trump, royals)
        if best is not None and best.suit == trump:
            over = [c for c in trumps if beats(c, best, trump, lead_suit, royals)]
            if not over:
                return None
            return self._weakest(over, state)

        if trick.points < CUT_WORTHY_POINTS and state.tricks_completed < LATE_TRICKS:
            return None
        return self._weakest(trumps, state)

    def _win_or_dump(self, legal, trick, state, bot, tracker) -> Card:
        winner = current_winning_seat(trick, state.trump_suit, state.is_royals_mode)
        if winner is not None and winner.is_teammate(bot.seat):
            return self._smart_dump(legal, tracker)
        winners = self._winning_cards(legal, trick, state)
        if winners:
            return self._weakest(winners, state)
        return self._weakest(legal, state)

    def _smart_dump(self, legal: List[Card], tracker: GameTracker) -> Card:
        """Partner is winning: give away the most points we can afford to."""
        candidates = []
        for card in legal:
            if tracker.is_highest_remaining(card):
                backup = [c for c in legal if c.suit == card.suit and c != card]
                if not backup:
                    continue
            candidates.append(card)
        pool = candidates or legal
        return max(pool, key=lambda c: c.points)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _is_critical(self, state: RoundState) -> bool:
        return state.active_thunee_call is not None or state.tricks_completed >= LATE_TRICKS

    def _maybe_random(self, legal: List[Card]) -> Optional[Card]:
        if self.rng.random() < RANDOM_DEVIATION:
            return legal[self.rng.randrange(len(legal))]
        return None

    def _dump_for_caller(self, legal: List[Card], state: RoundState) -> Card:
        """
        Partner of a Thunee caller: Thunee throws its strongest card,
        Royals its weakest, so the caller is never overtaken.
        """
        if state.is_royals_mode:
            return self._weakest(legal, state)
        return self._strongest(legal, state)

    def _winning_cards(self, legal, trick, state) -> List[Card]:
        return [
            c for c in legal if will_card_win(c, trick, state.trump_suit, state.is_royals_mode)
        ]

    def _strongest(self, cards: Sequence[Card], state: RoundState) -> Card:
        return sort_by_strength(cards, state.is_royals_mode)[0]

    def _weakest(self, cards: Sequence[Card], state: RoundState) -> Card:
        """Lowest rank, spending a trump only when nothing else is left."""
        trump = state.trump_suit
        royals = state.is_royals_mode
        return min(
            cards,
            key=lambda c: (trump is not None and c.suit == trump, rank_strength(c.rank, royals)),
        )
