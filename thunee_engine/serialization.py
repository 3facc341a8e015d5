# thunee_engine/serialization.py
"""
Field-named dict forms of round and match state.

Suits, ranks, seats and phases are written as their enum names so the
result can go straight through `json.dumps`. Converting a state to a dict
and back yields an equal state.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .calls import BidCall, call_to_dict, dict_to_call
from .cards import Card, Suit, card_to_dict, dict_to_card
from .config import config_to_dict, dict_to_config
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


def _cards(cards) -> List[Dict[str, Any]]:
    return [card_to_dict(c) for c in cards]


def _load_cards(data) -> tuple:
    return tuple(dict_to_card(c) for c in data)


def _opt_name(value) -> Optional[str]:
    return value.name if value is not None else None


def player_to_dict(player: PlayerState) -> Dict[str, Any]:
    return {
        "seat": player.seat.name,
        "name": player.name,
        "hand": _cards(player.hand),
        "is_bot": player.is_bot,
    }


def dict_to_player(data: Dict[str, Any]) -> PlayerState:
    return PlayerState(
        seat=Seat[data["seat"]],
        name=data["name"],
        hand=_load_cards(data.get("hand", [])),
        is_bot=bool(data.get("is_bot", False)),
    )


def team_to_dict(team: TeamState) -> Dict[str, Any]:
    return {
        "number": team.number,
        "name": team.name,
        "tricks_won": team.tricks_won,
        "points_collected": team.points_collected,
        "balls": team.balls,
    }


def dict_to_team(data: Dict[str, Any]) -> TeamState:
    return TeamState(
        number=int(data["number"]),
        name=data["name"],
        tricks_won=int(data.get("tricks_won", 0)),
        points_collected=int(data.get("points_collected", 0)),
        balls=int(data.get("balls", 0)),
    )


def trick_to_dict(trick: Trick) -> Dict[str, Any]:
    return {
        "lead_seat": trick.lead_seat.name,
        "lead_suit": _opt_name(trick.lead_suit),
        "plays": [
            {"seat": seat.name, "card": card_to_dict(card)} for seat, card in trick.plays
        ],
        "winning_seat": _opt_name(trick.winning_seat),
        "points": trick.points,
    }


def dict_to_trick(data: Dict[str, Any]) -> Trick:
    winner = data.get("winning_seat")
    return Trick(
        lead_seat=Seat[data["lead_seat"]],
        plays=tuple(
            (Seat[p["seat"]], dict_to_card(p["card"])) for p in data.get("plays", [])
        ),
        winning_seat=Seat[winner] if winner else None,
    )


def round_to_dict(state: RoundState) -> Dict[str, Any]:
    return {
        "phase": state.phase.name,
        "dealer": state.dealer.name,
        "players": [player_to_dict(p) for p in state.players],
        "teams": [team_to_dict(t) for t in state.teams],
        "completed_tricks": [trick_to_dict(t) for t in state.completed_tricks],
        "current_trick": (
            trick_to_dict(state.current_trick) if state.current_trick is not None else None
        ),
        "call_history": [call_to_dict(c) for c in state.call_history],
        "highest_bid": (
            call_to_dict(state.highest_bid) if state.highest_bid is not None else None
        ),
        "pass_count": state.pass_count,
        "trump_suit": _opt_name(state.trump_suit),
        "trump_making_team": state.trump_making_team,
        "current_turn": _opt_name(state.current_turn),
        "held_back": [_cards(h) for h in state.held_back],
    }


def dict_to_round(data: Dict[str, Any]) -> RoundState:
    highest = data.get("highest_bid")
    highest_bid = dict_to_call(highest) if highest else None
    if highest_bid is not None and not isinstance(highest_bid, BidCall):
        raise ValueError("highest_bid must be a BID call")
    current = data.get("current_trick")
    trump = data.get("trump_suit")
    turn = data.get("current_turn")
    held = data.get("held_back") or [[], [], [], []]
    return RoundState(
        phase=RoundPhase[data["phase"]],
        players=tuple(dict_to_player(p) for p in data["players"]),
        teams=tuple(dict_to_team(t) for t in data["teams"]),  # type: ignore[arg-type]
        dealer=Seat[data["dealer"]],
        completed_tricks=tuple(dict_to_trick(t) for t in data.get("completed_tricks", [])),
        current_trick=dict_to_trick(current) if current else None,
        call_history=tuple(dict_to_call(c) for c in data.get("call_history", [])),
        highest_bid=highest_bid,
        pass_count=int(data.get("pass_count", 0)),
        trump_suit=Suit[trump] if trump else None,
        trump_making_team=data.get("trump_making_team"),
        current_turn=Seat[turn] if turn else None,
        held_back=tuple(_load_cards(h) for h in held),
    )


def _completed_to_dict(record: CompletedRound) -> Dict[str, Any]:
    return {
        "round": round_to_dict(record.round),
        "team_points": list(record.team_points),
        "balls_awarded": list(record.balls_awarded),
        "description": record.description,
        "details": list(record.details),
    }


def _dict_to_completed(data: Dict[str, Any]) -> CompletedRound:
    return CompletedRound(
        round=dict_to_round(data["round"]),
        team_points=tuple(data["team_points"]),  # type: ignore[arg-type]
        balls_awarded=tuple(data["balls_awarded"]),  # type: ignore[arg-type]
        description=data["description"],
        details=tuple(data.get("details", [])),
    )


def match_to_dict(match: MatchState) -> Dict[str, Any]:
    return {
        "config": config_to_dict(match.config),
        "players": [player_to_dict(p) for p in match.players],
        "teams": [team_to_dict(t) for t in match.teams],
        "completed_rounds": [_completed_to_dict(r) for r in match.completed_rounds],
        "current_round": (
            round_to_dict(match.current_round) if match.current_round is not None else None
        ),
        "is_complete": match.is_complete,
        "winning_team": match.winning_team,
        "match_target": match.match_target,
        "next_dealer": match.next_dealer.name,
    }


def dict_to_match(data: Dict[str, Any]) -> MatchState:
    current = data.get("current_round")
    config = dict_to_config(data.get("config", {}))
    return MatchState(
        config=config,
        players=tuple(dict_to_player(p) for p in data["players"]),
        teams=tuple(dict_to_team(t) for t in data["teams"]),  # type: ignore[arg-type]
        completed_rounds=tuple(_dict_to_completed(r) for r in data.get("completed_rounds", [])),
        current_round=dict_to_round(current) if current else None,
        is_complete=bool(data.get("is_complete", False)),
        winning_team=data.get("winning_team"),
        match_target=int(data.get("match_target") or config.match_target),
        next_dealer=Seat[data.get("next_dealer", "SOUTH")],
    )


# ----------------------------------------------------------------------------
# Hand redaction for transmission to other devices
# ----------------------------------------------------------------------------


def _redact_players(players: List[Dict[str, Any]]) -> None:
    for p in players:
        p["hand_size"] = len(p["hand"])
        p["hand"] = []


def redact_round(data: Dict[str, Any]) -> Dict[str, Any]:
    """Strip every hand (keeping its size) and the held-back cards from a round dict."""
    data = dict(data)
    data["players"] = [dict(p) for p in data["players"]]
    _redact_players(data["players"])
    data["held_back"] = [[], [], [], []]
    return data


def redact_match(match: MatchState) -> Dict[str, Any]:
    data = match_to_dict(match)
    _redact_players(data["players"])
    if data["current_round"] is not None:
        data["current_round"] = redact_round(data["current_round"])
    return data


def hands_by_seat(state: RoundState) -> Dict[str, List[Dict[str, Any]]]:
    """Each seat's private hand, to be sent only to that seat."""
    return {p.seat.name: _cards(p.hand) for p in state.players}


def restore_hand(state: RoundState, seat: Seat, hand: List[Dict[str, Any]]) -> RoundState:
    """Re-attach one seat's private hand to a redacted round."""
    cards: List[Card] = [dict_to_card(c) for c in hand]
    return state.update_player(state.player_at(seat).with_hand(cards))
