# thunee_engine/turns.py
from __future__ import annotations

from typing import Optional

from .seats import Seat
from .state import RoundPhase, RoundState

PASSES_TO_CLOSE_BIDDING = 3


def first_bidder(dealer: Seat) -> Seat:
    return dealer.next


def should_end_bidding(state: RoundState) -> bool:
    """Three passes after a bid, or four passes with no bid at all."""
    if state.highest_bid is not None:
        return state.pass_count >= PASSES_TO_CLOSE_BIDDING
    return state.pass_count >= 4


def trump_maker(state: RoundState) -> Seat:
    """The bid winner, or the seat after the dealer when everybody passed."""
    if state.highest_bid is not None:
        return state.highest_bid.caller
    return state.dealer.next


def first_trick_leader(state: RoundState) -> Seat:
    call = state.active_thunee_call
    if call is not None:
        return call.caller
    return trump_maker(state)


def next_trick_leader(state: RoundState) -> Optional[Seat]:
    if not state.completed_tricks:
        return first_trick_leader(state)
    return state.completed_tricks[-1].winning_seat


def thunee_outcome_decided(state: RoundState) -> bool:
    """A Thunee-family call is settled the moment anyone else takes a trick."""
    call = state.active_thunee_call
    if call is None:
        return False
    return any(t.winning_seat != call.caller for t in state.completed_tricks)


def next_turn(state: RoundState) -> Optional[Seat]:
    if state.phase == RoundPhase.BIDDING:
        return state.current_turn.next if state.current_turn else first_bidder(state.dealer)
    if state.phase == RoundPhase.CHOOSING_TRUMP:
        return trump_maker(state)
    if state.phase == RoundPhase.PLAYING:
        if state.current_trick is None:
            return next_trick_leader(state)
        return state.current_trick.next_to_play
    return None


def next_phase(state: RoundState) -> RoundPhase:
    """The phase `state` should move to now; returns the current phase if it stays."""
    phase = state.phase
    if phase == RoundPhase.DEALING:
        return RoundPhase.BIDDING
    if phase == RoundPhase.BIDDING:
        return RoundPhase.CHOOSING_TRUMP if should_end_bidding(state) else phase
    if phase == RoundPhase.CHOOSING_TRUMP:
        return RoundPhase.PLAYING if state.trump_suit is not None else phase
    if phase == RoundPhase.PLAYING:
        if state.all_tricks_complete or thunee_outcome_decided(state):
            return RoundPhase.SCORING
        return phase
    return RoundPhase.SCORING
