# thunee_engine/engine.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence
import logging
import random

from .calls import (
    BidCall,
    BlindRoyalsCall,
    BlindThuneeCall,
    CallData,
    PassCall,
    RoyalsCall,
    ThuneeCall,
    is_thunee_family,
    with_trump_suit,
)
from .cards import Card, Deck, Suit
from .config import KUNUCK_MATCH_TARGET, GameConfig
from .errors import InvariantViolation
from .rules import determine_winner, legal_cards as trick_legal_cards, validate_card_play
from .scoring import KunuckRule, ScoringEngine, kunuck_won_last_trick
from .seats import Seat
from .state import (
    CompletedRound,
    MatchState,
    PlayerState,
    RoundPhase,
    RoundState,
    TeamState,
    Trick,
)
from .turns import first_bidder, next_phase, should_end_bidding, trump_maker
from .validation import CallValidator, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAMES = ("South", "East", "North", "West")


@dataclass(frozen=True)
class ActionResult:
    success: bool
    error_message: Optional[str] = None
    new_state: Optional[RoundState] = None
    new_match_state: Optional[MatchState] = None

    @classmethod
    def ok(
        cls,
        new_state: Optional[RoundState] = None,
        new_match_state: Optional[MatchState] = None,
    ) -> "ActionResult":
        return cls(True, None, new_state, new_match_state)

    @classmethod
    def error(cls, message: str) -> "ActionResult":
        return cls(False, message)


class GameEngine:
    """
    Pure Thunee transitions.

    Every public method takes the current state and returns an ActionResult
    carrying a successor state; the input state is never modified. Rule
    violations come back as failed results, programming errors raise
    InvariantViolation. Randomness (only the shuffle) comes from `rng`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        rng_seed: Optional[int] = None,
        kunuck_rule: KunuckRule = kunuck_won_last_trick,
    ) -> None:
        self.config = config or GameConfig.standard()
        self.rng = rng if rng is not None else random.Random(rng_seed)
        self.validator = CallValidator(self.config)
        self.scoring = ScoringEngine(self.config, kunuck_rule=kunuck_rule)

    # -------------------------------------------------------------------------
    # Match setup
    # -------------------------------------------------------------------------

    def create_match(
        self,
        player_names: Optional[Sequence[str]] = None,
        bot_seats: Iterable[Seat] = (),
        team_names: Sequence[str] = ("Team 0", "Team 1"),
    ) -> MatchState:
        if player_names is None:
            player_names = DEFAULT_PLAYER_NAMES
        if len(player_names) != 4:
            raise ValueError("Thunee needs exactly 4 players")
        bots = set(bot_seats)
        players = tuple(
            PlayerState(seat=seat, name=name, is_bot=seat in bots)
            for seat, name in zip(Seat, player_names)
        )
        teams = (TeamState(0, team_names[0]), TeamState(1, team_names[1]))
        return MatchState(config=self.config, players=players, teams=teams)

    def start_new_round(
        self, match: MatchState, dealer: Optional[Seat] = None
    ) -> ActionResult:
        """Shuffle and deal 4 cards each, holding 2 per seat back."""
        if match.is_complete:
            return ActionResult.error("Match is already complete")
        if match.current_round is not None:
            return ActionResult.error("Round already in progress")
        if dealer is None:
            dealer = match.next_dealer

        deck = Deck()
        deck.shuffle(self.rng)
        initial, held_back = deck.deal_split()

        players = tuple(
            p.with_hand(initial[p.seat.value]) for p in match.players
        )
        teams = tuple(t.reset_round() for t in match.teams)
        round_state = RoundState(
            phase=RoundPhase.DEALING,
            players=players,
            teams=teams,  # type: ignore[arg-type]
            dealer=dealer,
            held_back=tuple(tuple(h) for h in held_back),
        )
        logger.info(
            "Starting round %d, dealer %s",
            len(match.completed_rounds) + 1,
            dealer.name,
        )
        return ActionResult.ok(new_state=round_state, new_match_state=match.start_round(round_state))

    def begin_bidding(self, state: RoundState) -> ActionResult:
        """Close the blind-call window and open bidding with the seat after the dealer."""
        if state.phase != RoundPhase.DEALING:
            return self._reject("Bidding can only start after dealing")
        return ActionResult.ok(
            new_state=replace(
                state,
                phase=RoundPhase.BIDDING,
                current_turn=first_bidder(state.dealer),
            )
        )

    # -------------------------------------------------------------------------
    # Bidding
    # -------------------------------------------------------------------------

    def make_bid(self, state: RoundState, seat: Seat, amount: int) -> ActionResult:
        bid = BidCall(caller=seat, amount=amount)
        turn_error = self._check_turn(state, seat, RoundPhase.BIDDING)
        if turn_error:
            return self._reject(turn_error)
        result = self.validator.validate_bid(bid, state)
        if not result:
            return self._reject(result.error_message)

        new_state = replace(
            state.append_call(bid),
            highest_bid=bid,
            pass_count=0,
            trump_making_team=seat.team,
            current_turn=seat.next,
        )
        logger.debug("%s bids %d", seat.name, amount)
        return ActionResult.ok(new_state=self._close_bidding_if_done(new_state))

    def pass_bid(self, state: RoundState, seat: Seat) -> ActionResult:
        call = PassCall(caller=seat)
        turn_error = self._check_turn(state, seat, RoundPhase.BIDDING)
        if turn_error:
            return self._reject(turn_error)
        result = self.validator.validate_pass(call, state)
        if not result:
            return self._reject(result.error_message)

        new_state = replace(
            state.append_call(call),
            pass_count=state.pass_count + 1,
            current_turn=seat.next,
        )
        logger.debug("%s passes", seat.name)
        return ActionResult.ok(new_state=self._close_bidding_if_done(new_state))

    def _close_bidding_if_done(self, state: RoundState) -> RoundState:
        if not should_end_bidding(state):
            return state
        maker = trump_maker(state)
        if state.all_passed:
            logger.debug("All seats passed; %s makes trump by default", maker.name)
        return replace(
            state,
            phase=RoundPhase.CHOOSING_TRUMP,
            current_turn=maker,
            trump_making_team=maker.team,
        )

    # -------------------------------------------------------------------------
    # Trump
    # -------------------------------------------------------------------------

    def select_trump(self, state: RoundState, seat: Seat, suit: Suit) -> ActionResult:
        """
        The trump maker names a suit they hold. The held-back cards are then
        dealt and the trump maker leads the first trick.
        """
        if state.phase != RoundPhase.CHOOSING_TRUMP:
            return self._reject("Can only select trump during trump selection phase")
        maker = trump_maker(state)
        if seat != maker:
            return self._reject(f"Only {maker.name} may choose trump")
        if not state.player_at(seat).has_suit(suit):
            return self._reject(f"You must hold a {suit.name.title()} card to make it trump")

        dealt = state.distribute_held_back()
        new_state = replace(
            dealt,
            phase=RoundPhase.PLAYING,
            trump_suit=suit,
            trump_making_team=maker.team,
            current_trick=Trick(lead_seat=maker),
            current_turn=maker,
        )
        logger.debug("%s chooses %s as trump", seat.name, suit.name)
        return ActionResult.ok(new_state=new_state)

    # -------------------------------------------------------------------------
    # Play
    # -------------------------------------------------------------------------

    def play_card(self, state: RoundState, seat: Seat, card: Card) -> ActionResult:
        if state.phase != RoundPhase.PLAYING:
            return self._reject("Can only play cards during playing phase")
        trick = state.current_trick
        if trick is None:
            raise InvariantViolation("Playing phase without a current trick")
        if seat != state.current_turn:
            return self._reject("Not your turn")

        player = state.player_at(seat)
        result = validate_card_play(card, player, trick)
        if not result:
            return self._reject(result.error_message)

        new_state = state.update_player(player.without_card(card))
        trick = trick.play_card(seat, card)

        if new_state.trump_suit is None:
            # Blind calls: the first card led names trump.
            new_state = self._set_trump_from_lead(new_state, card.suit)

        if not trick.is_complete:
            new_state = replace(
                new_state, current_trick=trick, current_turn=trick.next_to_play
            )
            return ActionResult.ok(new_state=new_state)
        return ActionResult.ok(new_state=self._complete_trick(new_state, trick))

    def _set_trump_from_lead(self, state: RoundState, suit: Suit) -> RoundState:
        history = tuple(
            with_trump_suit(c, suit) if is_thunee_family(c) and c.trump_suit is None else c
            for c in state.call_history
        )
        return replace(state, trump_suit=suit, call_history=history)

    def _complete_trick(self, state: RoundState, trick: Trick) -> RoundState:
        winner = determine_winner(trick, state.trump_suit, state.is_royals_mode)
        finished = trick.with_winner(winner)
        state = state.update_team(state.team_for(winner).add_trick(finished.points))
        state = replace(
            state,
            completed_tricks=state.completed_tricks + (finished,),
            current_trick=None,
        )
        logger.debug(
            "Trick %d won by %s (%d points)",
            state.tricks_completed,
            winner.name,
            finished.points,
        )

        if next_phase(state) == RoundPhase.SCORING:
            return replace(state, phase=RoundPhase.SCORING, current_turn=None)
        return replace(state, current_trick=Trick(lead_seat=winner), current_turn=winner)

    # -------------------------------------------------------------------------
    # Special calls
    # -------------------------------------------------------------------------

    def make_special_call(self, state: RoundState, call: CallData) -> ActionResult:
        if isinstance(call, BidCall):
            return self.make_bid(state, call.caller, call.amount)
        if isinstance(call, PassCall):
            return self.pass_bid(state, call.caller)

        result: ValidationResult = self.validator.validate_call(call, state)
        if not result:
            return self._reject(result.error_message)

        if isinstance(call, (ThuneeCall, RoyalsCall)):
            recorded = with_trump_suit(call, state.trump_suit)
            new_state = replace(
                state.append_call(recorded),
                trump_making_team=call.caller.team,
                current_trick=Trick(lead_seat=call.caller),
                current_turn=call.caller,
            )
        elif isinstance(call, (BlindThuneeCall, BlindRoyalsCall)):
            new_state = replace(
                state.append_call(call).distribute_held_back(),
                phase=RoundPhase.PLAYING,
                trump_suit=None,
                trump_making_team=call.caller.team,
                current_trick=Trick(lead_seat=call.caller),
                current_turn=call.caller,
            )
        else:
            new_state = state.append_call(call)

        logger.info("%s calls %s", call.caller.name, call.category.name)
        return ActionResult.ok(new_state=new_state)

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def score_round(self, round_state: RoundState, match: MatchState) -> ActionResult:
        if round_state.phase != RoundPhase.SCORING:
            return self._reject("Round is not in scoring phase")

        breakdown = self.scoring.score_round(round_state)
        new_match = match
        for team, balls in enumerate(breakdown.balls_awarded):
            new_match = new_match.add_balls(team, balls)
        if breakdown.kunuck_succeeded and new_match.match_target < KUNUCK_MATCH_TARGET:
            new_match = replace(new_match, match_target=KUNUCK_MATCH_TARGET)

        record = CompletedRound(
            round=round_state,
            team_points=breakdown.team_points,
            balls_awarded=breakdown.balls_awarded,
            description=breakdown.description,
            details=breakdown.details,
        )
        new_match = new_match.complete_current_round(record)
        logger.info(
            "Round %d scored: %s (balls %d-%d)",
            len(new_match.completed_rounds),
            breakdown.description,
            *new_match.balls,
        )
        if new_match.is_complete:
            logger.info("Match won by Team %d", new_match.winning_team)
        return ActionResult.ok(new_state=round_state, new_match_state=new_match)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def legal_cards(self, state: RoundState, seat: Optional[Seat] = None) -> List[Card]:
        if state.phase != RoundPhase.PLAYING or state.current_trick is None:
            return []
        seat = seat or state.current_turn
        if seat is None:
            return []
        return trick_legal_cards(state.player_at(seat), state.current_trick)

    def is_card_legal(self, state: RoundState, seat: Seat, card: Card) -> bool:
        if state.current_trick is None:
            return False
        return validate_card_play(card, state.player_at(seat), state.current_trick).is_valid

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_turn(
        self, state: RoundState, seat: Seat, phase: RoundPhase
    ) -> Optional[str]:
        if state.phase != phase:
            return None  # phase errors are reported by the validator
        if state.current_turn is not None and seat != state.current_turn:
            return "Not your turn"
        return None

    def _reject(self, message: Optional[str]) -> ActionResult:
        logger.debug("Rejected action: %s", message)
        return ActionResult.error(message or "Invalid action")
