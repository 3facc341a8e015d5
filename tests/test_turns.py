# tests/test_turns.py
from thunee_engine.calls import BidCall, PassCall, ThuneeCall
from thunee_engine.seats import Seat, team_seats
from thunee_engine.state import PlayerState, RoundPhase, RoundState, TeamState, Trick
from thunee_engine.turns import (
    first_bidder,
    first_trick_leader,
    next_phase,
    next_trick_leader,
    next_turn,
    should_end_bidding,
    thunee_outcome_decided,
    trump_maker,
)


def _make_round(phase=RoundPhase.BIDDING, dealer=Seat.SOUTH, **changes):
    players = tuple(PlayerState(seat, seat.name.title()) for seat in Seat)
    state = RoundState(
        phase=phase,
        players=players,
        teams=(TeamState(0, "Team 0"), TeamState(1, "Team 1")),
        dealer=dealer,
    )
    return state.with_changes(**changes) if changes else state


def _won_by(*seats):
    return tuple(Trick(lead_seat=s, winning_seat=s) for s in seats)


def test_seats_rotate_anticlockwise_in_two_teams():
    assert [s.next for s in Seat] == [Seat.EAST, Seat.NORTH, Seat.WEST, Seat.SOUTH]
    assert Seat.SOUTH.partner == Seat.NORTH
    assert Seat.EAST.partner == Seat.WEST
    assert Seat.SOUTH.is_teammate(Seat.NORTH)
    assert not Seat.SOUTH.is_teammate(Seat.WEST)
    assert team_seats(0) == (Seat.SOUTH, Seat.NORTH)
    assert team_seats(1) == (Seat.EAST, Seat.WEST)
    assert Seat.WEST.order_from() == [Seat.WEST, Seat.SOUTH, Seat.EAST, Seat.NORTH]


def test_bidding_starts_after_dealer():
    assert first_bidder(Seat.WEST) == Seat.SOUTH
    assert next_turn(_make_round(dealer=Seat.NORTH)) == Seat.WEST


def test_bidding_ends_after_three_passes_following_a_bid():
    bid = BidCall(Seat.EAST, 10)
    state = _make_round(highest_bid=bid, pass_count=2)
    assert not should_end_bidding(state)
    assert should_end_bidding(state.with_changes(pass_count=3))
    assert next_phase(state.with_changes(pass_count=3)) == RoundPhase.CHOOSING_TRUMP


def test_four_passes_without_bid_end_bidding():
    passes = tuple(PassCall(s) for s in Seat)
    state = _make_round(pass_count=3, call_history=passes[:3])
    assert not should_end_bidding(state)
    state = state.with_changes(pass_count=4, call_history=passes)
    assert should_end_bidding(state)
    assert state.all_passed
    assert trump_maker(state) == Seat.EAST


def test_bid_winner_makes_trump_and_leads():
    state = _make_round(RoundPhase.PLAYING, highest_bid=BidCall(Seat.WEST, 30))
    assert trump_maker(state) == Seat.WEST
    assert first_trick_leader(state) == Seat.WEST
    assert state.current_player is None
    assert next_trick_leader(state) == Seat.WEST

    with_thunee = state.with_changes(call_history=(ThuneeCall(Seat.NORTH),))
    assert first_trick_leader(with_thunee) == Seat.NORTH


def test_trick_winner_leads_next():
    state = _make_round(RoundPhase.PLAYING, completed_tricks=_won_by(Seat.EAST, Seat.NORTH))
    assert next_trick_leader(state) == Seat.NORTH
    assert next_turn(state) == Seat.NORTH


def test_playing_ends_after_six_tricks_or_decided_thunee():
    six = _make_round(RoundPhase.PLAYING, completed_tricks=_won_by(*[Seat.SOUTH] * 6))
    assert next_phase(six) == RoundPhase.SCORING

    thunee = _make_round(
        RoundPhase.PLAYING,
        call_history=(ThuneeCall(Seat.SOUTH),),
        completed_tricks=_won_by(Seat.SOUTH, Seat.SOUTH),
    )
    assert not thunee_outcome_decided(thunee)
    assert next_phase(thunee) == RoundPhase.PLAYING

    caught = thunee.with_changes(completed_tricks=_won_by(Seat.SOUTH, Seat.NORTH))
    assert thunee_outcome_decided(caught)
    assert next_phase(caught) == RoundPhase.SCORING


def test_dealing_always_moves_to_bidding():
    assert next_phase(_make_round(RoundPhase.DEALING)) == RoundPhase.BIDDING
