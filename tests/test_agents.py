# tests/test_agents.py
import random

import pytest

from thunee_engine.agents import (
    CallDecisionMaker,
    CardSelector,
    MakeBid,
    PassBid,
    PlayCard,
    RandomAgent,
    RuleBasedAgent,
    ThuneeAgent,
    select_best_trump_suit,
)
from thunee_engine.agents.bidding import find_jodi_combos, holds_top_cards, structural_max_level
from thunee_engine.calls import BidCall, DoubleCall, JodiCall, RoyalsCall, ThuneeCall
from thunee_engine.cards import Card, Suit
from thunee_engine.config import GameConfig
from thunee_engine.errors import InvariantViolation
from thunee_engine.seats import Seat
from thunee_engine.state import PlayerState, RoundPhase, RoundState, TeamState, Trick

C = Card.from_string


class _NeverDeviate(random.Random):
    """Keeps bots on their rule cascade."""

    def random(self):
        return 0.99


class _AlwaysDeviate(random.Random):
    """Takes every random deviation, always picking the last legal card."""

    def random(self):
        return 0.0

    def randrange(self, start, stop=None, step=1):
        return start - 1


def _cards(texts):
    return tuple(C(t) for t in texts)


def _make_round(hands, phase=RoundPhase.PLAYING, trick=None, tricks_done=0, **changes):
    players = tuple(
        PlayerState(seat, seat.name.title(), _cards(hands.get(seat, ()))) for seat in Seat
    )
    done = tuple(Trick(lead_seat=Seat.SOUTH, winning_seat=Seat.SOUTH) for _ in range(tricks_done))
    state = RoundState(
        phase=phase,
        players=players,
        teams=(TeamState(0, "Team 0"), TeamState(1, "Team 1")),
        dealer=Seat.WEST,
        completed_tricks=done,
        current_trick=trick or (Trick(lead_seat=Seat.SOUTH) if phase == RoundPhase.PLAYING else None),
        trump_suit=Suit.HEARTS if phase == RoundPhase.PLAYING else None,
        trump_making_team=0,
        current_turn=Seat.SOUTH,
    )
    return state.with_changes(**changes) if changes else state


def _trick(lead, texts):
    trick = Trick(lead_seat=lead)
    for seat, text in zip(lead.order_from(), texts):
        trick = trick.play_card(seat, C(text))
    return trick


def _done(lead, texts):
    return _trick(lead, texts).with_winner(lead)


def _select(state, seat=Seat.SOUTH, rng=None):
    legal = list(state.player_at(seat).hand)
    return CardSelector(rng or _NeverDeviate()).select_card(state, seat, legal)


# --------------------------------------------------------------------------- #
# Hand evaluation                                                             #
# --------------------------------------------------------------------------- #


def test_structural_max_level():
    assert structural_max_level(_cards(["J♥", "9♠", "A♣", "10♦"])) == 0
    assert structural_max_level(_cards(["K♠", "Q♠", "A♣", "10♦"])) == 10
    assert structural_max_level(_cards(["J♥", "9♥", "A♣", "10♦"])) == 20
    assert structural_max_level(_cards(["J♥", "9♥", "A♥", "K♠"])) == 30
    assert structural_max_level(_cards(["J♥", "Q♥", "J♠", "K♠"])) == 30


def test_find_jodi_combos_upgrades_with_jack():
    combos = find_jodi_combos(_cards(["J♥", "K♥", "Q♥", "K♠", "Q♠", "A♣"]))
    assert set(combos) == {
        (C("J♥"), C("Q♥"), C("K♥")),
        (C("K♠"), C("Q♠")),
    }


def test_holds_top_cards():
    assert holds_top_cards(_cards(["J♥", "9♥", "J♠"]))
    assert not holds_top_cards(_cards(["J♥", "A♥"]))
    assert holds_top_cards(_cards(["Q♥", "K♥"]), royals=True)


def test_trump_choice_prefers_strong_suit():
    assert select_best_trump_suit(_cards(["J♥", "9♥", "A♠", "Q♣"])) == Suit.HEARTS
    assert select_best_trump_suit(_cards(["K♣", "Q♣", "J♠"])) == Suit.CLUBS
    with pytest.raises(ValueError):
        select_best_trump_suit(())


# --------------------------------------------------------------------------- #
# Bidding and calls                                                           #
# --------------------------------------------------------------------------- #


def test_bot_passes_weak_hand_and_over_partner():
    maker = CallDecisionMaker(GameConfig.standard(), random.Random(1))
    weak = _make_round({Seat.SOUTH: ["J♥", "9♠", "A♣", "10♦"]}, phase=RoundPhase.BIDDING)
    assert maker.decide_bid(weak, Seat.SOUTH) == PassBid()

    strong = {Seat.SOUTH: ["J♥", "9♥", "A♥", "J♠"]}
    partner_high = _make_round(
        strong, phase=RoundPhase.BIDDING, highest_bid=BidCall(Seat.NORTH, 20)
    )
    assert maker.decide_bid(partner_high, Seat.SOUTH) == PassBid()


def test_opening_bid_respects_shape_cap():
    hand = {Seat.SOUTH: ["K♠", "Q♠", "J♥", "J♣"]}
    state = _make_round(hand, phase=RoundPhase.BIDDING)
    cap = structural_max_level(state.player_at(Seat.SOUTH).hand)
    for seed in range(40):
        decision = CallDecisionMaker(GameConfig.standard(), random.Random(seed)).decide_bid(
            state, Seat.SOUTH
        )
        if isinstance(decision, MakeBid):
            assert decision.amount <= cap
            assert decision.amount % 10 == 0


def test_response_bid_beats_current_bid():
    hand = {Seat.SOUTH: ["J♥", "9♥", "A♥", "J♠"]}
    state = _make_round(
        hand, phase=RoundPhase.BIDDING, highest_bid=BidCall(Seat.EAST, 10)
    )
    for seed in range(40):
        decision = CallDecisionMaker(GameConfig.standard(), random.Random(seed)).decide_bid(
            state, Seat.SOUTH
        )
        if isinstance(decision, MakeBid):
            assert decision.amount in (20, 30)


def test_seeded_bots_are_reproducible():
    hand = {Seat.SOUTH: ["J♥", "9♥", "A♠", "K♠"]}
    state = _make_round(hand, phase=RoundPhase.BIDDING)
    decisions = [
        CallDecisionMaker(GameConfig.standard(), random.Random(99)).decide_bid(state, Seat.SOUTH)
        for _ in range(3)
    ]
    assert decisions[0] == decisions[1] == decisions[2]


def test_bot_calls_thunee_with_top_cards():
    hand = {Seat.SOUTH: ["J♥", "9♥", "J♠", "9♠", "J♣", "J♦"]}
    state = _make_round(hand)
    decision = CallDecisionMaker(GameConfig.standard(), random.Random(0)).decide_special_call(
        state, Seat.SOUTH
    )
    assert decision is not None
    assert decision.call == ThuneeCall(Seat.SOUTH)


def test_bot_calls_jodi_after_team_wins_trick():
    hand = {Seat.SOUTH: ["K♠", "Q♠", "A♣", "10♦", "9♦"]}
    state = _make_round(hand, tricks_done=1)
    decision = CallDecisionMaker(GameConfig.standard(), random.Random(0)).decide_special_call(
        state, Seat.SOUTH
    )
    assert decision is not None
    assert decision.call == JodiCall(Seat.SOUTH, (C("K♠"), C("Q♠")), False)


def test_bot_doubles_with_master_trump_on_last_trick():
    state = _make_round({Seat.SOUTH: ["J♥"]}, tricks_done=5)
    decision = CallDecisionMaker(GameConfig.standard(), random.Random(0)).decide_special_call(
        state, Seat.SOUTH
    )
    assert decision is not None
    assert decision.call == DoubleCall(Seat.SOUTH)

    basic = CallDecisionMaker(GameConfig.basic(), random.Random(0))
    assert basic.decide_special_call(state, Seat.SOUTH) is None


# --------------------------------------------------------------------------- #
# Card play                                                                   #
# --------------------------------------------------------------------------- #


def test_selector_requires_legal_cards():
    state = _make_round({Seat.SOUTH: ["J♥"]})
    selector = CardSelector(random.Random(0))
    with pytest.raises(InvariantViolation):
        selector.select_card(state, Seat.SOUTH, [])
    assert selector.select_card(state, Seat.SOUTH, [C("J♥")]) == C("J♥")


def test_royals_partner_dumps_weakest():
    trick = _trick(Seat.SOUTH, ["Q♠", "K♠"])
    hands = {Seat.NORTH: ["J♠", "A♠"]}
    state = _make_round(
        hands,
        trick=trick,
        current_turn=Seat.NORTH,
        call_history=(RoyalsCall(Seat.SOUTH, Suit.HEARTS),),
    )
    card = CardSelector(random.Random(0)).select_card(state, Seat.NORTH, [C("J♠"), C("A♠")])
    # J is the lowest card under Royals.
    assert card == C("J♠")


def test_thunee_opponent_wins_as_cheaply_as_possible():
    trick = _trick(Seat.SOUTH, ["A♠"])
    hands = {Seat.EAST: ["J♠", "9♠", "Q♠"]}
    state = _make_round(
        hands,
        trick=trick,
        current_turn=Seat.EAST,
        call_history=(ThuneeCall(Seat.SOUTH, Suit.HEARTS),),
    )
    card = CardSelector(random.Random(0)).select_card(state, Seat.EAST, list(_cards(hands[Seat.EAST])))
    assert card == C("9♠")


def test_late_cut_with_lowest_trump():
    trick = _trick(Seat.WEST, ["A♠"])
    hands = {Seat.SOUTH: ["Q♥", "J♥", "K♦"]}
    state = _make_round(hands, trick=trick, tricks_done=4)
    legal = list(_cards(hands[Seat.SOUTH]))
    assert CardSelector(random.Random(0)).select_card(state, Seat.SOUTH, legal) == C("Q♥")


def test_dump_points_when_partner_is_winning():
    trick = _trick(Seat.NORTH, ["J♠", "Q♠"])
    hands = {Seat.SOUTH: ["A♠", "K♠"]}
    state = _make_round(hands, trick=trick, tricks_done=4)
    legal = list(_cards(hands[Seat.SOUTH]))
    assert CardSelector(random.Random(0)).select_card(state, Seat.SOUTH, legal) == C("A♠")


def test_leads_side_jack():
    hands = {Seat.SOUTH: ["J♠", "9♦", "Q♣"]}
    state = _make_round(hands, tricks_done=1)
    legal = list(_cards(hands[Seat.SOUTH]))
    assert CardSelector(_NeverDeviate()).select_card(state, Seat.SOUTH, legal) == C("J♠")


def test_leads_strongest_against_opponents_thunee():
    state = _make_round(
        {Seat.SOUTH: ["Q♠", "A♣", "K♦"]},
        tricks_done=1,
        call_history=(ThuneeCall(Seat.EAST, Suit.HEARTS),),
    )
    assert _select(state) == C("A♣")


def test_jodi_holder_leads_strong_on_first_and_third_tricks():
    hands = {Seat.SOUTH: ["K♠", "Q♠", "A♣", "10♦"]}
    assert _select(_make_round(hands, tricks_done=0)) == C("A♣")
    assert _select(_make_round(hands, tricks_done=2)) == C("A♣")
    # On the second trick nothing applies and the weakest card goes.
    assert _select(_make_round(hands, tricks_done=1)) == C("Q♠")


def test_weakest_lead_keeps_trumps():
    state = _make_round({Seat.SOUTH: ["Q♥", "K♠", "10♦"]}, tricks_done=1)
    assert _select(state) == C("K♠")


def test_pools_trump_jack_only_while_opponents_may_hold_trump():
    hands = {Seat.SOUTH: ["A♠", "J♥", "K♣"]}
    spades_followed = _done(Seat.EAST, ["J♠", "9♠", "Q♠", "10♠"])
    state = _make_round(hands, completed_tricks=(spades_followed,))
    assert _select(state) == C("J♥")

    # East and West showed out of hearts: lead the master spade instead.
    opponents_void = _done(Seat.NORTH, ["9♥", "J♠", "Q♥", "9♠"])
    state = _make_round(hands, completed_tricks=(opponents_void,))
    assert _select(state) == C("A♠")


def test_baits_with_ace_before_leading_its_jack():
    state = _make_round({Seat.SOUTH: ["Q♣", "A♠", "J♠"]}, tricks_done=1)
    assert _select(state) == C("A♠")


def test_keeps_master_trump_for_last_trick():
    hands = {Seat.SOUTH: ["A♥", "K♦"]}
    dummies = tuple(Trick(lead_seat=Seat.SOUTH, winning_seat=Seat.SOUTH) for _ in range(3))
    top_hearts_gone = _done(Seat.EAST, ["J♥", "9♥", "Q♥", "K♥"])
    state = _make_round(hands, completed_tricks=(top_hearts_gone,) + dummies)
    assert _select(state) == C("K♦")

    # With J♥ still out, A♥ is not the master and the strongest card leads.
    assert _select(_make_round(hands, tricks_done=4)) == C("A♥")


def test_no_cut_when_partner_is_winning():
    trick = _trick(Seat.NORTH, ["J♠", "10♠"])
    state = _make_round({Seat.SOUTH: ["Q♥", "K♦"]}, trick=trick, tricks_done=1)
    assert _select(state) == C("K♦")


def test_no_cut_under_a_higher_trump_and_trump_is_kept():
    trick = _trick(Seat.EAST, ["A♠", "J♥"])
    state = _make_round(
        {Seat.WEST: ["Q♥", "K♦"]}, trick=trick, tricks_done=1, current_turn=Seat.WEST
    )
    assert _select(state, Seat.WEST) == C("K♦")


def test_dump_keeps_a_sole_master_card():
    trick = _trick(Seat.NORTH, ["J♠", "9♠"])
    state = _make_round({Seat.SOUTH: ["J♦", "10♣"]}, trick=trick, tricks_done=1)
    assert _select(state) == C("10♣")


def test_random_deviation_is_off_in_critical_play():
    hands = {Seat.SOUTH: ["J♠", "9♦", "Q♣"]}
    assert _select(_make_round(hands), rng=_AlwaysDeviate()) == C("Q♣")

    under_thunee = _make_round(hands, call_history=(ThuneeCall(Seat.EAST, Suit.HEARTS),))
    assert _select(under_thunee, rng=_AlwaysDeviate()) == C("J♠")


# --------------------------------------------------------------------------- #
# Agents                                                                      #
# --------------------------------------------------------------------------- #


def test_agents_satisfy_protocol():
    assert isinstance(RuleBasedAgent(rng=random.Random(0)), ThuneeAgent)
    assert isinstance(RandomAgent(rng=random.Random(0)), ThuneeAgent)


def test_random_agent_plays_a_legal_card_and_never_calls():
    agent = RandomAgent(rng=random.Random(3))
    hands = {Seat.SOUTH: ["J♥", "9♠", "A♣"]}
    state = _make_round(hands)
    legal = list(_cards(hands[Seat.SOUTH]))
    decision = agent.decide_card_play(state, Seat.SOUTH, legal)
    assert isinstance(decision, PlayCard)
    assert decision.card in legal
    assert agent.decide_special_call(state, Seat.SOUTH) is None

    no_honours = _make_round({Seat.SOUTH: ["A♥", "K♠", "Q♣", "10♦"]}, phase=RoundPhase.BIDDING)
    assert agent.decide_bid(no_honours, Seat.SOUTH) == PassBid()


def test_rule_based_agent_picks_held_trump():
    agent = RuleBasedAgent(rng=random.Random(0))
    state = _make_round({Seat.SOUTH: ["J♣", "9♣", "A♥", "Q♦"]}, phase=RoundPhase.CHOOSING_TRUMP)
    assert agent.decide_trump(state, Seat.SOUTH) == Suit.CLUBS
