# thunee_engine/cli.py
from __future__ import annotations

import argparse
import logging
import random
from typing import Any, Callable, Dict, List

import pandas as pd

from .agents import RandomAgent, RuleBasedAgent, ThuneeAgent
from .config import PRESETS, GameConfig, load_config_from_env, preset
from .game_log import build_round_score_rows, write_rows_csv
from .paths import resolve_results_path
from .results import summarize_results
from .simulate import DEFAULT_MAX_ROUNDS, MatchRunner

AgentFactory = Callable[[GameConfig, random.Random], ThuneeAgent]

AGENT_FACTORIES: Dict[str, AgentFactory] = {
    "rule": lambda config, rng: RuleBasedAgent(config=config, rng=rng),
    "random": lambda config, rng: RandomAgent(rng=rng),
}
DEFAULT_AGENTS = ["rule", "rule", "rule", "rule"]


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Simulate Thunee matches between bot agents and log per-round "
            "ball awards to a CSV file."
        )
    )

    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of full matches to play (default: 1).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base random seed for shuffles and agents.",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Rule preset (default: THUNEE_PRESET or 'standard').",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Optional .env file with THUNEE_* rule overrides.",
    )
    parser.add_argument(
        "--agents",
        nargs=4,
        default=DEFAULT_AGENTS,
        choices=sorted(AGENT_FACTORIES),
        metavar="AGENT",
        help=(
            "Four agent kinds in seat order South East North West, "
            f"each one of: {', '.join(sorted(AGENT_FACTORIES))} (default: all rule)."
        ),
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=DEFAULT_MAX_ROUNDS,
        help="Stop a match after this many rounds (default: %(default)s).",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default="thunee_scores.csv",
        help="Path to the output CSV file (default: thunee_scores.csv).",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a per-team summary of the run when done.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO.",
    )

    return parser.parse_args(argv)


def build_agents(kinds: List[str], config: GameConfig, seed: int) -> List[ThuneeAgent]:
    return [
        AGENT_FACTORIES[kind](config, random.Random(seed * 1000 + i))
        for i, kind in enumerate(kinds)
    ]


def play_games(args: argparse.Namespace, config: GameConfig) -> List[Dict[str, Any]]:
    all_rows: List[Dict[str, Any]] = []
    for game_index in range(args.games):
        game_id = f"game-{game_index}"
        seed = args.seed + game_index
        runner = MatchRunner(
            build_agents(args.agents, config, seed),
            config=config,
            player_names=[f"{kind}-{i}" for i, kind in enumerate(args.agents)],
            rng_seed=seed,
            game_label=game_id,
            max_rounds=args.max_rounds,
        )
        match = runner.play_match()
        all_rows.extend(build_round_score_rows(match, game_id=game_id))
    return all_rows


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    base = preset(args.preset) if args.preset else None
    config = load_config_from_env(args.env_file, base=base)
    csv_path = resolve_results_path(args.csv)

    logging.info("Agents: %s", ", ".join(args.agents))
    logging.info("Games to play: %d", args.games)
    logging.info("Output CSV: %s", csv_path)

    rows = play_games(args, config)
    write_rows_csv(rows, csv_path)
    logging.info("Finished %d games; wrote %d rows to %s", args.games, len(rows), csv_path)

    if args.summary:
        print(summarize_results(pd.DataFrame(rows)).to_string(index=False))


if __name__ == "__main__":
    main()
