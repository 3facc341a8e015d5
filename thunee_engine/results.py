# thunee_engine/results.py
from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd

from .game_log import FIELDNAMES


def load_results(csv_path: Union[str, Path]) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    missing = [c for c in FIELDNAMES if c not in df.columns]
    if missing:
        raise ValueError(f"Results file is missing columns: {', '.join(missing)}")
    return df


def summarize_results(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-team summary over every game in a round-score table.

    Returns one row per team with games won, rounds played, total and mean
    balls per round, and how often the team made trump.
    """
    if df.empty:
        return pd.DataFrame(
            columns=[
                "team",
                "games_won",
                "rounds",
                "total_balls",
                "mean_balls_per_round",
                "trump_rounds",
            ]
        )

    final = (
        df.sort_values("round_index")
          .groupby(["game_id", "team"])
          .agg(final_balls=("total_balls", "last"))
          .reset_index()
    )
    winners = final.loc[final.groupby("game_id")["final_balls"].idxmax()]
    games_won = winners.groupby("team").size().rename("games_won")

    per_team = (
        df.groupby("team")
          .agg(
              rounds=("round_index", "size"),
              total_balls=("balls_awarded", "sum"),
              mean_balls_per_round=("balls_awarded", "mean"),
          )
    )
    trump_rounds = (
        df[df["trump_making_team"] == df["team"]]
        .groupby("team")
        .size()
        .rename("trump_rounds")
    )

    summary = per_team.join(games_won).join(trump_rounds).fillna(0)
    summary["games_won"] = summary["games_won"].astype(int)
    summary["trump_rounds"] = summary["trump_rounds"].astype(int)
    return summary.reset_index()[
        ["team", "games_won", "rounds", "total_balls", "mean_balls_per_round", "trump_rounds"]
    ]


def special_call_counts(df: pd.DataFrame) -> pd.Series:
    """How many rounds each special call category appeared in."""
    calls = (
        df.drop_duplicates(["game_id", "round_index"])["special_calls"]
          .fillna("")
          .astype(str)
    )
    categories = calls.str.split(";").explode()
    categories = categories[categories != ""].str.split(":").str[0]
    return categories.value_counts()
