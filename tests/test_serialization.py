# tests/test_serialization.py
import json

from thunee_engine.calls import (
    BidCall,
    BlindRoyalsCall,
    DoubleCall,
    JodiCall,
    KunuckCall,
    PassCall,
    ThuneeCall,
    call_to_dict,
    dict_to_call,
)
from thunee_engine.cards import Card, Suit
from thunee_engine.config import GameConfig
from thunee_engine.engine import GameEngine
from thunee_engine.seats import Seat
from thunee_engine.serialization import (
    dict_to_match,
    dict_to_round,
    hands_by_seat,
    match_to_dict,
    redact_match,
    restore_hand,
    round_to_dict,
)
from thunee_engine.state import RoundPhase

C = Card.from_string


def _mid_round(seed: int = 4):
    """A round two cards into the first trick, plus the match holding it."""
    engine = GameEngine(GameConfig.strict(), rng_seed=seed)
    match = engine.create_match(bot_seats=[Seat.EAST, Seat.WEST])
    result = engine.start_new_round(match)
    match = result.new_match_state
    state = engine.begin_bidding(result.new_state).new_state
    bidder = state.current_turn
    state = engine.make_bid(state, bidder, 20).new_state
    for _ in range(3):
        state = engine.pass_bid(state, state.current_turn).new_state
    state = engine.select_trump(state, bidder, state.player_at(bidder).hand[0].suit).new_state
    for _ in range(2):
        state = engine.play_card(state, state.current_turn, engine.legal_cards(state)[0]).new_state
    return state, match.start_round(state)


def test_round_round_trips_through_json():
    state, _ = _mid_round()
    data = json.loads(json.dumps(round_to_dict(state)))
    assert data["phase"] == "PLAYING"
    assert data["current_trick"]["lead_suit"] in {s.name for s in Suit}
    assert dict_to_round(data) == state


def test_match_round_trips_with_config():
    _, match = _mid_round()
    data = json.loads(json.dumps(match_to_dict(match)))
    restored = dict_to_match(data)
    assert restored == match
    assert restored.config.enable_call_and_loss


def test_every_call_type_round_trips():
    calls = [
        BidCall(Seat.SOUTH, 30),
        PassCall(Seat.EAST),
        ThuneeCall(Seat.NORTH, Suit.CLUBS),
        BlindRoyalsCall(Seat.WEST, (C("K♥"), C("Q♥")), None),
        JodiCall(Seat.SOUTH, (C("J♠"), C("Q♠"), C("K♠")), True),
        DoubleCall(Seat.EAST),
        KunuckCall(Seat.WEST),
    ]
    for call in calls:
        data = call_to_dict(call)
        assert data["type"] == call.category.name
        assert dict_to_call(json.loads(json.dumps(data))) == call


def test_redacted_match_hides_hands_but_keeps_sizes():
    state, match = _mid_round()
    data = redact_match(match)
    current = data["current_round"]

    assert all(p["hand"] == [] for p in current["players"])
    assert [p["hand_size"] for p in current["players"]] == [len(p.hand) for p in state.players]
    assert current["held_back"] == [[], [], [], []]
    # Played cards stay public.
    assert len(current["current_trick"]["plays"]) == 2
    # The original state is untouched.
    assert match_to_dict(match)["current_round"]["players"][0]["hand"]


def test_restore_single_hand_to_redacted_round():
    state, match = _mid_round()
    redacted = dict_to_round(redact_match(match)["current_round"])
    hands = hands_by_seat(state)

    restored = restore_hand(redacted, Seat.NORTH, hands["NORTH"])
    assert restored.player_at(Seat.NORTH).hand == state.player_at(Seat.NORTH).hand
    assert restored.player_at(Seat.SOUTH).hand == ()
    assert restored.phase == RoundPhase.PLAYING
