# thunee_engine/scoring.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from .calls import (
    BLIND_FAMILY,
    CallCategory,
    DoubleCall,
    KunuckCall,
    ThuneeFamilyCall,
)
from .config import (
    BLIND_FAIL_BALLS,
    DOUBLE_FAIL_BALLS,
    DOUBLE_SUCCESS_BALLS,
    KUNUCK_FAIL_BALLS,
    KUNUCK_SUCCESS_BALLS,
    LAST_TRICK_BONUS,
    PARTNER_CATCH_BALLS,
    ROYALS_FAIL_BALLS,
    ROYALS_SUCCESS_BALLS,
    THUNEE_FAIL_BALLS,
    THUNEE_SUCCESS_BALLS,
    WINNING_THRESHOLD,
    GameConfig,
)
from .errors import InvariantViolation
from .state import TRICKS_PER_ROUND, RoundState

KunuckRule = Callable[[RoundState, KunuckCall], bool]


def kunuck_won_last_trick(state: RoundState, call: KunuckCall) -> bool:
    """Kunuck succeeds when the caller's own seat takes the final trick."""
    return state.completed_tricks[-1].winning_seat == call.caller


def kunuck_won_first_trick(state: RoundState, call: KunuckCall) -> bool:
    return state.completed_tricks[0].winning_seat == call.caller


def kunuck_reached_points(state: RoundState, call: KunuckCall) -> bool:
    """Kunuck succeeds when the caller's team collected at least 105 card points."""
    return team_card_points(state, call.caller.team) >= WINNING_THRESHOLD


def team_card_points(state: RoundState, team: int) -> int:
    """Card points from tricks won by `team`, plus the last-trick bonus."""
    points = 0
    last = len(state.completed_tricks) - 1
    for i, trick in enumerate(state.completed_tricks):
        if trick.winning_seat is None:
            raise InvariantViolation("Completed trick has no winner")
        if trick.winning_seat.team != team:
            continue
        points += trick.points
        if i == last and last == TRICKS_PER_ROUND - 1:
            points += LAST_TRICK_BONUS
    return points


def team_jodi_points(state: RoundState, team: int) -> int:
    return sum(c.points for c in state.jodi_calls if c.caller.team == team)


@dataclass(frozen=True)
class ScoringBreakdown:
    team_points: Tuple[int, int]
    balls_awarded: Tuple[int, int]
    description: str
    details: Tuple[str, ...] = ()
    kunuck_succeeded: bool = False

    def __str__(self) -> str:
        return self.description


class ScoringEngine:
    """
    Turns a finished round into balls.

    Thunee-family rounds are settled on tricks alone. Normal rounds are
    settled on the counting team's points. A Double or Kunuck on the last
    trick adds its own ball delta on top of either.
    """

    def __init__(
        self,
        config: GameConfig,
        kunuck_rule: KunuckRule = kunuck_won_last_trick,
    ) -> None:
        self.config = config
        self.kunuck_rule = kunuck_rule

    def score_round(self, state: RoundState) -> ScoringBreakdown:
        thunee = state.active_thunee_call
        details: List[str] = []
        if thunee is not None:
            balls = self._score_thunee(state, thunee, details)
        else:
            balls = self._score_normal(state, details)

        kunuck_succeeded = False
        if state.all_tricks_complete:
            kunuck_succeeded = self._apply_last_trick_calls(state, balls, details)

        points = (self._total_points(state, 0), self._total_points(state, 1))
        label = thunee.category.name.replace("_", " ").title() if thunee else "Normal round"
        description = f"{label}: Team 0 +{balls[0]} balls, Team 1 +{balls[1]} balls"
        return ScoringBreakdown(
            team_points=points,
            balls_awarded=(balls[0], balls[1]),
            description=description,
            details=tuple(details),
            kunuck_succeeded=kunuck_succeeded,
        )

    # ------------------------------------------------------------------ #
    # Thunee / Royals / Blind
    # ------------------------------------------------------------------ #

    def _score_thunee(
        self, state: RoundState, call: ThuneeFamilyCall, details: List[str]
    ) -> List[int]:
        caller = call.caller
        caller_team = caller.team
        opponents = 1 - caller_team

        winners = [t.winning_seat for t in state.completed_tricks]
        caller_tricks = sum(1 for w in winners if w == caller)
        partner_tricks = sum(1 for w in winners if w == caller.partner)
        opponent_tricks = sum(1 for w in winners if w is not None and w.team == opponents)

        if partner_tricks == 0 and opponent_tricks == 0 and caller_tricks < TRICKS_PER_ROUND:
            raise InvariantViolation(
                "Cannot score a Thunee round before its outcome is decided"
            )

        name = call.category.name.replace("_", " ").title()
        details.append(f"{name} called by {caller.name} (Team {caller_team})")
        details.append(
            f"Caller won {caller_tricks}, partner won {partner_tricks}, "
            f"opponents won {opponent_tricks}"
        )

        balls = [0, 0]
        blind = call.category in BLIND_FAMILY
        if partner_tricks > 0:
            penalty = BLIND_FAIL_BALLS if blind else PARTNER_CATCH_BALLS
            balls[opponents] += penalty
            details.append(f"Partner catch: opponents get +{penalty} balls")
        elif caller_tricks == TRICKS_PER_ROUND:
            success = self._thunee_success_balls(call.category)
            balls[caller_team] += success
            details.append(f"Success: caller's team gets +{success} balls")
        else:
            failure = self._thunee_failure_balls(call.category)
            balls[opponents] += failure
            details.append(f"Failure: opponents get +{failure} balls")
        return balls

    def _thunee_success_balls(self, category: CallCategory) -> int:
        if category == CallCategory.THUNEE:
            return THUNEE_SUCCESS_BALLS
        if category == CallCategory.ROYALS:
            return ROYALS_SUCCESS_BALLS
        if category == CallCategory.BLIND_THUNEE:
            return self.config.blind_thunee_success_balls
        if category == CallCategory.BLIND_ROYALS:
            return self.config.blind_royals_success_balls
        raise TypeError(f"{category.name} is not a Thunee call")

    def _thunee_failure_balls(self, category: CallCategory) -> int:
        if category == CallCategory.THUNEE:
            return THUNEE_FAIL_BALLS
        if category == CallCategory.ROYALS:
            return ROYALS_FAIL_BALLS
        if category in BLIND_FAMILY:
            return BLIND_FAIL_BALLS
        raise TypeError(f"{category.name} is not a Thunee call")

    # ------------------------------------------------------------------ #
    # Normal bidding round
    # ------------------------------------------------------------------ #

    def _score_normal(self, state: RoundState, details: List[str]) -> List[int]:
        if not state.all_tricks_complete:
            raise InvariantViolation(
                f"Cannot score a normal round after {state.tricks_completed} tricks"
            )
        trump_team = state.trump_making_team
        if trump_team is None:
            raise InvariantViolation("Normal round has no trump-making team")
        counting = 1 - trump_team

        for team in (0, 1):
            cards = team_card_points(state, team)
            jodi = team_jodi_points(state, team)
            jodi_text = f" + {jodi} Jodi" if jodi else ""
            details.append(f"Team {team}: {cards} card points{jodi_text} = {cards + jodi}")

        bid_amount = state.highest_bid.amount if state.highest_bid else 0
        counting_total = self._total_points(state, counting) + bid_amount
        details.append(
            f"Counting team: Team {counting} with {counting_total} "
            f"(including {bid_amount} from the bid)"
        )

        balls = [0, 0]
        if counting_total >= WINNING_THRESHOLD:
            balls[counting] += 1
            details.append(f"Counting team reached {WINNING_THRESHOLD}: +1 ball")
        elif self.config.enable_call_and_loss:
            balls[trump_team] += self.config.call_and_loss_balls
            details.append(
                f"Call & Loss: trump-making team gets +{self.config.call_and_loss_balls} balls"
            )
        else:
            balls[trump_team] += 1
            details.append("Counting team fell short: trump-making team gets +1 ball")
        return balls

    def _total_points(self, state: RoundState, team: int) -> int:
        return team_card_points(state, team) + team_jodi_points(state, team)

    # ------------------------------------------------------------------ #
    # Double / Kunuck
    # ------------------------------------------------------------------ #

    def _apply_last_trick_calls(
        self, state: RoundState, balls: List[int], details: List[str]
    ) -> bool:
        kunuck_succeeded = False
        last_winner = state.completed_tricks[-1].winning_seat
        for call in state.special_calls:
            if isinstance(call, DoubleCall):
                team = call.caller.team
                if last_winner is not None and last_winner.team == team:
                    balls[team] += DOUBLE_SUCCESS_BALLS
                    details.append(f"Double won: Team {team} +{DOUBLE_SUCCESS_BALLS} balls")
                else:
                    balls[1 - team] += DOUBLE_FAIL_BALLS
                    details.append(
                        f"Double lost: Team {1 - team} +{DOUBLE_FAIL_BALLS} balls"
                    )
            elif isinstance(call, KunuckCall):
                team = call.caller.team
                if self.kunuck_rule(state, call):
                    kunuck_succeeded = True
                    balls[team] += KUNUCK_SUCCESS_BALLS
                    details.append(f"Kunuck won: Team {team} +{KUNUCK_SUCCESS_BALLS} balls")
                else:
                    balls[1 - team] += KUNUCK_FAIL_BALLS
                    details.append(
                        f"Kunuck lost: Team {1 - team} +{KUNUCK_FAIL_BALLS} balls"
                    )
        return kunuck_succeeded
