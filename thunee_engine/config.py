# thunee_engine/config.py
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import os

from dotenv import load_dotenv

DEFAULT_MATCH_TARGET = 12
KUNUCK_MATCH_TARGET = 13
WINNING_THRESHOLD = 105
LAST_TRICK_BONUS = 10

THUNEE_SUCCESS_BALLS = 4
THUNEE_FAIL_BALLS = 4
ROYALS_SUCCESS_BALLS = 4
ROYALS_FAIL_BALLS = 4
PARTNER_CATCH_BALLS = 8
BLIND_FAIL_BALLS = 8
DOUBLE_SUCCESS_BALLS = 2
DOUBLE_FAIL_BALLS = 4
KUNUCK_SUCCESS_BALLS = 3
KUNUCK_FAIL_BALLS = 4

ENV_PREFIX = "THUNEE_"


@dataclass(frozen=True)
class GameConfig:
    """
    House rules for a match. Created once and never changed afterwards;
    use `with_changes` to derive a variant.
    """
    enable_royals: bool = True
    enable_blind_thunee: bool = True
    enable_blind_royals: bool = True
    enable_jodi: bool = True
    enable_double: bool = True
    enable_kunuck: bool = True
    enable_first_third_only_jodi_calls: bool = False
    enable_call_over_teammates: bool = False
    enable_call_and_loss: bool = False
    blind_thunee_success_balls: int = 8
    blind_royals_success_balls: int = 8
    match_target: int = DEFAULT_MATCH_TARGET
    call_and_loss_balls: int = 2

    def __post_init__(self) -> None:
        if self.match_target < 1:
            raise ValueError("match_target must be positive")
        if self.blind_thunee_success_balls < 0 or self.blind_royals_success_balls < 0:
            raise ValueError("blind success balls cannot be negative")
        if self.call_and_loss_balls < 1:
            raise ValueError("call_and_loss_balls must be at least 1")

    @classmethod
    def standard(cls) -> "GameConfig":
        return cls()

    @classmethod
    def basic(cls) -> "GameConfig":
        """Plain bidding game: every special call switched off."""
        return cls(
            enable_royals=False,
            enable_blind_thunee=False,
            enable_blind_royals=False,
            enable_jodi=False,
            enable_double=False,
            enable_kunuck=False,
        )

    @classmethod
    def strict(cls) -> "GameConfig":
        return cls(
            enable_first_third_only_jodi_calls=True,
            enable_call_and_loss=True,
        )

    def with_changes(self, **changes: Any) -> "GameConfig":
        return replace(self, **changes)


PRESETS = {
    "standard": GameConfig.standard,
    "basic": GameConfig.basic,
    "strict": GameConfig.strict,
}


def config_to_dict(config: GameConfig) -> Dict[str, Any]:
    return asdict(config)


def dict_to_config(data: Mapping[str, Any]) -> GameConfig:
    """Build a config from a dict; unknown keys are ignored, missing keys default."""
    known = {f.name for f in fields(GameConfig)}
    return GameConfig(**{k: v for k, v in data.items() if k in known})


def preset(name: str) -> GameConfig:
    try:
        return PRESETS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown preset {name!r}; expected one of {', '.join(PRESETS)}"
        ) from None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config_from_env(
    env_file: Optional[str | Path] = None,
    base: Optional[GameConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GameConfig:
    """
    Overlay THUNEE_* environment variables on top of a base config.

    A `.env` file is loaded first (python-dotenv never overrides variables
    that are already set). Each field maps to THUNEE_<FIELD_NAME>, e.g.
    THUNEE_ENABLE_ROYALS=false or THUNEE_MATCH_TARGET=13. THUNEE_PRESET picks
    the base preset when `base` is not given.
    """
    if environ is None:
        load_dotenv(dotenv_path=env_file)
        environ = os.environ

    if base is None:
        base = preset(environ.get(f"{ENV_PREFIX}PRESET", "standard"))

    changes: Dict[str, Any] = {}
    for f in fields(GameConfig):
        key = f"{ENV_PREFIX}{f.name.upper()}"
        raw = environ.get(key)
        if raw is None or raw == "":
            continue
        if f.type in (bool, "bool"):
            changes[f.name] = _parse_bool(key, raw)
        else:
            try:
                changes[f.name] = int(raw)
            except ValueError:
                raise ValueError(f"{key} must be an integer, got {raw!r}") from None

    return base.with_changes(**changes) if changes else base
