# thunee_engine/state.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple
import enum

from .calls import (
    ROYALS_FAMILY,
    BidCall,
    CallData,
    JodiCall,
    PassCall,
    ThuneeFamilyCall,
    is_special,
    is_thunee_family,
)
from .cards import CARDS_PER_PLAYER, Card, Suit
from .config import GameConfig
from .errors import InvariantViolation
from .seats import Seat

TRICKS_PER_ROUND = 6


@dataclass(frozen=True)
class PlayerState:
    seat: Seat
    name: str
    hand: Tuple[Card, ...] = ()
    is_bot: bool = False

    def has_card(self, card: Card) -> bool:
        return card in self.hand

    def has_suit(self, suit: Suit) -> bool:
        return any(c.suit == suit for c in self.hand)

    def cards_of_suit(self, suit: Suit) -> List[Card]:
        return [c for c in self.hand if c.suit == suit]

    def with_hand(self, hand) -> "PlayerState":
        return replace(self, hand=tuple(hand))

    def without_card(self, card: Card) -> "PlayerState":
        if card not in self.hand:
            raise InvariantViolation(f"{self.seat.name} does not hold {card}")
        return replace(self, hand=tuple(c for c in self.hand if c != card))


@dataclass(frozen=True)
class TeamState:
    number: int
    name: str
    tricks_won: int = 0
    points_collected: int = 0
    balls: int = 0

    def add_trick(self, points: int) -> "TeamState":
        return replace(
            self,
            tricks_won=self.tricks_won + 1,
            points_collected=self.points_collected + points,
        )

    def add_balls(self, balls: int) -> "TeamState":
        if balls < 0:
            raise InvariantViolation("A team's balls can only increase")
        return replace(self, balls=self.balls + balls)

    def reset_round(self) -> "TeamState":
        return replace(self, tricks_won=0, points_collected=0)


@dataclass(frozen=True)
class Trick:
    """
    Up to four plays, one per seat, led by `lead_seat`.

    `plays` keeps insertion order; the lead seat's card always comes first,
    so `lead_suit` is fixed by the first play and never changes.
    `winning_seat` is only ever set by the resolver through `with_winner`.
    """
    lead_seat: Seat
    plays: Tuple[Tuple[Seat, Card], ...] = ()
    winning_seat: Optional[Seat] = None

    @property
    def lead_suit(self) -> Optional[Suit]:
        return self.plays[0][1].suit if self.plays else None

    @property
    def points(self) -> int:
        return sum(card.points for _, card in self.plays)

    @property
    def is_empty(self) -> bool:
        return not self.plays

    @property
    def is_complete(self) -> bool:
        return len(self.plays) == 4

    @property
    def cards(self) -> List[Card]:
        return [card for _, card in self.plays]

    @property
    def cards_by_seat(self) -> Dict[Seat, Card]:
        return dict(self.plays)

    def has_played(self, seat: Seat) -> bool:
        return any(s == seat for s, _ in self.plays)

    def cards_in_order(self) -> List[Tuple[Seat, Card]]:
        """Plays ordered anti-clockwise from the lead seat, whatever the insertion order."""
        by_seat = self.cards_by_seat
        return [(s, by_seat[s]) for s in self.lead_seat.order_from() if s in by_seat]

    @property
    def next_to_play(self) -> Optional[Seat]:
        if self.is_complete:
            return None
        for seat in self.lead_seat.order_from():
            if not self.has_played(seat):
                return seat
        return None

    def play_card(self, seat: Seat, card: Card) -> "Trick":
        if self.is_complete:
            raise InvariantViolation("Trick already has four cards")
        if self.has_played(seat):
            raise InvariantViolation(f"{seat.name} has already played to this trick")
        if not self.plays and seat != self.lead_seat:
            raise InvariantViolation(
                f"First card must come from {self.lead_seat.name}, not {seat.name}"
            )
        return replace(self, plays=self.plays + ((seat, card),))

    def with_winner(self, seat: Seat) -> "Trick":
        return replace(self, winning_seat=seat)


class RoundPhase(enum.Enum):
    DEALING = "dealing"
    BIDDING = "bidding"
    CHOOSING_TRUMP = "choosing_trump"
    PLAYING = "playing"
    SCORING = "scoring"


@dataclass(frozen=True)
class RoundState:
    phase: RoundPhase
    players: Tuple[PlayerState, ...]
    teams: Tuple[TeamState, TeamState]
    dealer: Seat
    completed_tricks: Tuple[Trick, ...] = ()
    current_trick: Optional[Trick] = None
    call_history: Tuple[CallData, ...] = ()
    highest_bid: Optional[BidCall] = None
    pass_count: int = 0
    trump_suit: Optional[Suit] = None
    trump_making_team: Optional[int] = None
    current_turn: Optional[Seat] = None
    # Cards dealt but not yet in hand, per seat in seat order.
    held_back: Tuple[Tuple[Card, ...], ...] = ((), (), (), ())

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def player_at(self, seat: Seat) -> PlayerState:
        return self.players[seat.value]

    def team(self, number: int) -> TeamState:
        return self.teams[number]

    def team_for(self, seat: Seat) -> TeamState:
        return self.teams[seat.team]

    @property
    def current_player(self) -> Optional[PlayerState]:
        if self.current_turn is None:
            return None
        return self.player_at(self.current_turn)

    @property
    def tricks_completed(self) -> int:
        return len(self.completed_tricks)

    @property
    def all_tricks_complete(self) -> bool:
        return self.tricks_completed == TRICKS_PER_ROUND

    @property
    def bids(self) -> List[BidCall]:
        return [c for c in self.call_history if isinstance(c, BidCall)]

    @property
    def special_calls(self) -> List[CallData]:
        return [c for c in self.call_history if is_special(c)]

    @property
    def jodi_calls(self) -> List[JodiCall]:
        return [c for c in self.call_history if isinstance(c, JodiCall)]

    @property
    def active_thunee_call(self) -> Optional[ThuneeFamilyCall]:
        for call in self.call_history:
            if is_thunee_family(call):
                return call  # type: ignore[return-value]
        return None

    @property
    def is_royals_mode(self) -> bool:
        call = self.active_thunee_call
        return call is not None and call.category in ROYALS_FAMILY

    @property
    def all_passed(self) -> bool:
        """True once every seat has passed without a single bid (a redeal signal)."""
        return self.highest_bid is None and self.pass_count >= 4

    @property
    def passes(self) -> List[PassCall]:
        return [c for c in self.call_history if isinstance(c, PassCall)]

    @property
    def cards_played(self) -> int:
        played = sum(len(t.plays) for t in self.completed_tricks)
        # The current trick is always the one still in progress.
        if self.current_trick is not None:
            played += len(self.current_trick.plays)
        return played

    @property
    def cards_accounted_for(self) -> int:
        """Hands plus held-back plus played cards; 24 in every phase."""
        in_hand = sum(len(p.hand) for p in self.players)
        held = sum(len(h) for h in self.held_back)
        return in_hand + held + self.cards_played

    # ------------------------------------------------------------------ #
    # Record updates
    # ------------------------------------------------------------------ #

    def with_changes(self, **changes) -> "RoundState":
        return replace(self, **changes)

    def update_player(self, player: PlayerState) -> "RoundState":
        players = list(self.players)
        players[player.seat.value] = player
        return replace(self, players=tuple(players))

    def update_team(self, team: TeamState) -> "RoundState":
        teams = list(self.teams)
        teams[team.number] = team
        return replace(self, teams=tuple(teams))  # type: ignore[arg-type]

    def append_call(self, call: CallData) -> "RoundState":
        return replace(self, call_history=self.call_history + (call,))

    def distribute_held_back(self) -> "RoundState":
        """Move every seat's held-back cards into its hand."""
        players = tuple(
            p.with_hand(p.hand + self.held_back[p.seat.value]) for p in self.players
        )
        for p in players:
            if len(p.hand) > CARDS_PER_PLAYER:
                raise InvariantViolation(f"{p.seat.name} would hold more than 6 cards")
        return replace(self, players=players, held_back=((), (), (), ()))


@dataclass(frozen=True)
class CompletedRound:
    round: RoundState
    team_points: Tuple[int, int]
    balls_awarded: Tuple[int, int]
    description: str
    details: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchState:
    config: GameConfig
    players: Tuple[PlayerState, ...]
    teams: Tuple[TeamState, TeamState]
    completed_rounds: Tuple[CompletedRound, ...] = ()
    current_round: Optional[RoundState] = None
    is_complete: bool = False
    winning_team: Optional[int] = None
    match_target: int = field(default=0)
    next_dealer: Seat = Seat.SOUTH

    def __post_init__(self) -> None:
        if self.match_target == 0:
            object.__setattr__(self, "match_target", self.config.match_target)

    def team(self, number: int) -> TeamState:
        return self.teams[number]

    @property
    def balls(self) -> Tuple[int, int]:
        return (self.teams[0].balls, self.teams[1].balls)

    def add_balls(self, team: int, balls: int) -> "MatchState":
        if balls == 0:
            return self
        teams = list(self.teams)
        teams[team] = teams[team].add_balls(balls)
        return replace(self, teams=tuple(teams))  # type: ignore[arg-type]

    def start_round(self, round_state: RoundState) -> "MatchState":
        return replace(self, current_round=round_state)

    def complete_current_round(self, record: CompletedRound) -> "MatchState":
        """Fold the scored round into history, rotate the dealer and settle the winner."""
        state = replace(
            self,
            completed_rounds=self.completed_rounds + (record,),
            current_round=None,
            next_dealer=record.round.dealer.next,
        )
        leaders = [t for t in state.teams if t.balls >= state.match_target]
        if leaders:
            winner = max(leaders, key=lambda t: t.balls)
            state = replace(state, is_complete=True, winning_team=winner.number)
        return state
