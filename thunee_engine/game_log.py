# thunee_engine/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List, Optional

from .calls import is_special
from .state import CompletedRound, MatchState

FIELDNAMES = [
    "game_id",
    "round_index",
    "dealer",
    "team",
    "team_name",
    "bid",
    "trump_suit",
    "trump_making_team",
    "special_calls",
    "tricks_won",
    "points",
    "balls_awarded",
    "total_balls",
    "description",
]


def _special_call_names(record: CompletedRound) -> str:
    return ";".join(
        f"{c.category.name}:{c.caller.name}"
        for c in record.round.call_history
        if is_special(c)
    )


def build_round_score_rows(
    match: MatchState,
    game_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round ball awards for CSV export.

    Each row corresponds to (round, team) and has keys in FIELDNAMES. Only
    scored rounds are included, so a match stopped early still logs cleanly.
    """
    running_balls = [0, 0]
    rows: List[Dict[str, Any]] = []

    for index, record in enumerate(match.completed_rounds, start=1):
        state = record.round
        bid = state.highest_bid.amount if state.highest_bid is not None else 0
        calls = _special_call_names(record)

        for team in state.teams:
            number = team.number
            running_balls[number] += record.balls_awarded[number]
            rows.append(
                {
                    "game_id": game_id,
                    "round_index": index,
                    "dealer": state.dealer.name,
                    "team": number,
                    "team_name": team.name,
                    "bid": bid,
                    "trump_suit": (
                        state.trump_suit.name if state.trump_suit is not None else None
                    ),
                    "trump_making_team": state.trump_making_team,
                    "special_calls": calls,
                    "tricks_won": team.tricks_won,
                    "points": record.team_points[number],
                    "balls_awarded": record.balls_awarded[number],
                    "total_balls": running_balls[number],
                    "description": record.description,
                }
            )

    return rows


def write_round_scores_csv(
    match: MatchState,
    path,
    game_id: Optional[str] = None,
) -> None:
    """
    Write per-round ball awards to a CSV file.

    `path` can be a string or any path-like object accepted by `open`.
    """
    rows = build_round_score_rows(match, game_id=game_id)
    write_rows_csv(rows, path)


def write_rows_csv(rows: List[Dict[str, Any]], path) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
