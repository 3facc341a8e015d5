# thunee_engine/simulate.py
from __future__ import annotations

from typing import List, Optional, Sequence
import logging
import random

from .agents.base import ThuneeAgent
from .agents.decisions import MakeBid
from .config import GameConfig
from .engine import ActionResult, GameEngine
from .scoring import KunuckRule, kunuck_won_last_trick
from .seats import Seat
from .state import MatchState, RoundPhase, RoundState

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 200


class MatchRunner:
    """
    Plays a full match headlessly, asking one agent per seat for every
    decision and feeding it through the GameEngine transitions.

    Agents are given in seat order (South, East, North, West). An agent
    decision the engine rejects is logged and replaced by the safest legal
    action (a pass, or the first legal card) so one bad agent cannot stall
    the match.
    """

    def __init__(
        self,
        agents: Sequence[ThuneeAgent],
        config: Optional[GameConfig] = None,
        player_names: Optional[Sequence[str]] = None,
        rng_seed: Optional[int] = None,
        game_label: Optional[str] = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        kunuck_rule: KunuckRule = kunuck_won_last_trick,
    ) -> None:
        if len(agents) != 4:
            raise ValueError("Thunee needs exactly 4 agents")
        if player_names is not None and len(player_names) != len(agents):
            raise ValueError("player_names must match number of agents")

        self.agents: List[ThuneeAgent] = list(agents)
        self.config = config or GameConfig.standard()
        self.engine = GameEngine(
            self.config, rng=random.Random(rng_seed), kunuck_rule=kunuck_rule
        )
        self.player_names = player_names
        self.game_label = game_label
        self.max_rounds = max_rounds
        self.match: Optional[MatchState] = None

    def _agent(self, seat: Seat) -> ThuneeAgent:
        return self.agents[seat.value]

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def play_match(self) -> MatchState:
        """Play rounds until a team reaches the target (or max_rounds) and return the final MatchState."""
        self.match = self.engine.create_match(self.player_names, bot_seats=list(Seat))
        while not self.match.is_complete:
            if len(self.match.completed_rounds) >= self.max_rounds:
                logger.warning(
                    "Stopping%s after %d rounds without a winner",
                    f" {self.game_label}" if self.game_label else "",
                    self.max_rounds,
                )
                break
            self.match = self.play_round(self.match)

        logger.info(
            "Finished match%s: balls %d-%d, winner %s",
            f" {self.game_label}" if self.game_label else "",
            *self.match.balls,
            self.match.winning_team,
        )
        return self.match

    def play_round(self, match: MatchState) -> MatchState:
        result = self._require(self.engine.start_new_round(match))
        match = result.new_match_state

        # Blind calls are made on the first four cards and skip bidding.
        state = self._offer_special_calls(result.new_state)
        if state.phase == RoundPhase.DEALING:
            state = self._require(self.engine.begin_bidding(state)).new_state
            state = self._bidding_phase(state)
            state = self._trump_phase(state)
        state = self._trick_phase(state)

        scored = self._require(self.engine.score_round(state, match))
        return scored.new_match_state

    # -------------------------------------------------------------------------
    # Round lifecycle
    # -------------------------------------------------------------------------

    def _bidding_phase(self, state: RoundState) -> RoundState:
        while state.phase == RoundPhase.BIDDING:
            seat = state.current_turn
            decision = self._agent(seat).decide_bid(state, seat)
            if isinstance(decision, MakeBid):
                result = self.engine.make_bid(state, seat, decision.amount)
                if not result.success:
                    logger.warning(
                        "%s bid %d rejected (%s); passing instead",
                        seat.name,
                        decision.amount,
                        result.error_message,
                    )
                    result = self.engine.pass_bid(state, seat)
            else:
                result = self.engine.pass_bid(state, seat)
            state = self._require(result).new_state
        return state

    def _trump_phase(self, state: RoundState) -> RoundState:
        seat = state.current_turn
        suit = self._agent(seat).decide_trump(state, seat)
        result = self.engine.select_trump(state, seat, suit)
        if not result.success:
            fallback = state.current_player.hand[0].suit
            logger.warning(
                "%s trump choice rejected (%s); using %s",
                seat.name,
                result.error_message,
                fallback.name,
            )
            result = self.engine.select_trump(state, seat, fallback)
        return self._require(result).new_state

    def _trick_phase(self, state: RoundState) -> RoundState:
        offered_at = -1
        while state.phase == RoundPhase.PLAYING:
            trick = state.current_trick
            if trick is not None and trick.is_empty and offered_at != state.tricks_completed:
                offered_at = state.tricks_completed
                state = self._offer_special_calls(state)

            seat = state.current_turn
            legal = self.engine.legal_cards(state, seat)
            decision = self._agent(seat).decide_card_play(state, seat, legal)
            result = self.engine.play_card(state, seat, decision.card)
            if not result.success:
                logger.warning(
                    "%s played illegal %s (%s); auto-correcting to %s",
                    seat.name,
                    decision.card,
                    result.error_message,
                    legal[0],
                )
                result = self.engine.play_card(state, seat, legal[0])
            state = self._require(result).new_state
        return state

    def _offer_special_calls(self, state: RoundState) -> RoundState:
        leader = state.current_turn or state.dealer.next
        for seat in leader.order_from():
            decision = self._agent(seat).decide_special_call(state, seat)
            if decision is None:
                continue
            result = self.engine.make_special_call(state, decision.call)
            if result.success:
                state = result.new_state
            else:
                logger.debug(
                    "%s special call rejected: %s", seat.name, result.error_message
                )
        return state

    def _require(self, result: ActionResult) -> ActionResult:
        if not result.success:
            raise RuntimeError(f"Engine rejected a required transition: {result.error_message}")
        return result
