# thunee_engine/validation.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .calls import (
    BID_INCREMENT,
    MIN_BID,
    BidCall,
    BlindRoyalsCall,
    BlindThuneeCall,
    CallData,
    DoubleCall,
    JodiCall,
    KunuckCall,
    PassCall,
    RoyalsCall,
    ThuneeCall,
    jodi_kind,
)
from .cards import CARDS_PER_PLAYER, INITIAL_DEAL
from .config import GameConfig
from .state import RoundPhase, RoundState

HIDDEN_CARD_COUNT = CARDS_PER_PLAYER - INITIAL_DEAL
LAST_TRICK_CALL_WINDOW = 5


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error_message: Optional[str] = None

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def invalid(cls, message: str) -> "ValidationResult":
        return cls(False, message)

    def __bool__(self) -> bool:
        return self.is_valid


_OK = ValidationResult.valid()


class CallValidator:
    """
    Checks every call category against phase, house rules and the caller's
    hand. Never mutates the round and never raises for a rule violation.
    """

    def __init__(self, config: GameConfig) -> None:
        self.config = config

    def validate_call(self, call: CallData, state: RoundState) -> ValidationResult:
        if isinstance(call, BidCall):
            return self.validate_bid(call, state)
        if isinstance(call, PassCall):
            return self.validate_pass(call, state)
        if isinstance(call, ThuneeCall):
            return self.validate_thunee(call, state)
        if isinstance(call, RoyalsCall):
            return self.validate_royals(call, state)
        if isinstance(call, BlindThuneeCall):
            return self.validate_blind_thunee(call, state)
        if isinstance(call, BlindRoyalsCall):
            return self.validate_blind_royals(call, state)
        if isinstance(call, JodiCall):
            return self.validate_jodi(call, state)
        if isinstance(call, DoubleCall):
            return self.validate_double(call, state)
        if isinstance(call, KunuckCall):
            return self.validate_kunuck(call, state)
        raise TypeError(f"Unknown call type: {type(call).__name__}")

    # ------------------------------------------------------------------ #
    # Bidding
    # ------------------------------------------------------------------ #

    def validate_bid(self, bid: BidCall, state: RoundState) -> ValidationResult:
        if state.phase != RoundPhase.BIDDING:
            return ValidationResult.invalid("Can only bid during bidding phase")
        if bid.amount % BID_INCREMENT != 0:
            return ValidationResult.invalid(
                f"Bid must be in increments of {BID_INCREMENT}"
            )
        if bid.amount < MIN_BID:
            return ValidationResult.invalid(f"Bid must be at least {MIN_BID}")

        highest = state.highest_bid
        if highest is not None:
            if bid.amount <= highest.amount:
                return ValidationResult.invalid(
                    f"Bid must beat current bid of {highest.amount}"
                )
            if highest.caller == bid.caller:
                return ValidationResult.invalid("Cannot bid over your own bid")
            if (
                not self.config.enable_call_over_teammates
                and highest.caller == bid.caller.partner
            ):
                return ValidationResult.invalid("Cannot bid over your teammate")
        return _OK

    def validate_pass(self, call: PassCall, state: RoundState) -> ValidationResult:
        if state.phase != RoundPhase.BIDDING:
            return ValidationResult.invalid("Can only pass during bidding phase")
        return _OK

    # ------------------------------------------------------------------ #
    # Thunee family
    # ------------------------------------------------------------------ #

    def validate_thunee(self, call: ThuneeCall, state: RoundState) -> ValidationResult:
        return self._validate_open_thunee(call, state)

    def validate_royals(self, call: RoyalsCall, state: RoundState) -> ValidationResult:
        return self._validate_open_thunee(call, state)

    def validate_blind_thunee(
        self, call: BlindThuneeCall, state: RoundState
    ) -> ValidationResult:
        return self._validate_blind(call, state)

    def validate_blind_royals(
        self, call: BlindRoyalsCall, state: RoundState
    ) -> ValidationResult:
        return self._validate_blind(call, state)

    def _validate_open_thunee(self, call, state: RoundState) -> ValidationResult:
        name = "Royals" if isinstance(call, RoyalsCall) else "Thunee"
        if isinstance(call, RoyalsCall) and not self.config.enable_royals:
            return ValidationResult.invalid("Royals is disabled in game config")
        if state.phase != RoundPhase.PLAYING:
            return ValidationResult.invalid(f"{name} can only be called during play")
        if state.tricks_completed != 0:
            return ValidationResult.invalid(
                f"{name} must be called before the first trick"
            )
        if state.current_trick is not None and not state.current_trick.is_empty:
            return ValidationResult.invalid(
                f"{name} must be called before any card is played"
            )
        if len(state.player_at(call.caller).hand) != CARDS_PER_PLAYER:
            return ValidationResult.invalid(
                f"Must hold all {CARDS_PER_PLAYER} cards to call {name}"
            )
        if state.active_thunee_call is not None:
            return ValidationResult.invalid("A Thunee call is already active")
        return _OK

    def _validate_blind(self, call, state: RoundState) -> ValidationResult:
        royals = isinstance(call, BlindRoyalsCall)
        name = "Blind Royals" if royals else "Blind Thunee"
        enabled = (
            self.config.enable_blind_royals if royals else self.config.enable_blind_thunee
        )
        if not enabled:
            return ValidationResult.invalid(f"{name} is disabled in game config")
        if state.phase != RoundPhase.DEALING:
            return ValidationResult.invalid(
                f"{name} must be called during dealing (after {INITIAL_DEAL} cards)"
            )
        player = state.player_at(call.caller)
        if len(player.hand) != INITIAL_DEAL:
            return ValidationResult.invalid(
                f"Must have exactly {INITIAL_DEAL} cards to call {name}"
            )
        hidden = tuple(call.hidden_cards)
        if len(hidden) != HIDDEN_CARD_COUNT or len(set(hidden)) != HIDDEN_CARD_COUNT:
            return ValidationResult.invalid(
                f"Must hide exactly {HIDDEN_CARD_COUNT} cards"
            )
        if any(player.has_card(c) for c in hidden):
            return ValidationResult.invalid("Hidden cards cannot come from the visible hand")
        held = state.held_back[call.caller.value]
        if held and set(held) != set(hidden):
            return ValidationResult.invalid("Hidden cards must be the cards still to be dealt")
        if state.active_thunee_call is not None:
            return ValidationResult.invalid("A Thunee call is already active")
        return _OK

    # ------------------------------------------------------------------ #
    # Jodi
    # ------------------------------------------------------------------ #

    def validate_jodi(self, call: JodiCall, state: RoundState) -> ValidationResult:
        if not self.config.enable_jodi:
            return ValidationResult.invalid("Jodi is disabled in game config")
        if state.phase != RoundPhase.PLAYING:
            return ValidationResult.invalid("Jodi can only be called during play")
        if (
            self.config.enable_first_third_only_jodi_calls
            and state.tricks_completed not in (1, 3)
        ):
            return ValidationResult.invalid(
                "Jodi can only be called after the first or third trick"
            )
        player = state.player_at(call.caller)
        if not all(player.has_card(c) for c in call.cards):
            return ValidationResult.invalid("You must hold every card in the Jodi")
        kind = jodi_kind(tuple(call.cards))
        if kind is None:
            return ValidationResult.invalid(
                "Jodi must be King+Queen or Jack+Queen+King of one suit"
            )
        if call.is_trump != (call.suit == state.trump_suit):
            return ValidationResult.invalid("Jodi trump flag does not match the trump suit")
        for earlier in state.jodi_calls:
            if earlier.caller.team == call.caller.team and earlier.suit == call.suit:
                return ValidationResult.invalid(
                    f"Jodi in {call.suit.name.title()} already called by your team"
                )
        return _OK

    # ------------------------------------------------------------------ #
    # Double / Kunuck
    # ------------------------------------------------------------------ #

    def validate_double(self, call: DoubleCall, state: RoundState) -> ValidationResult:
        return self._validate_last_trick_call(call, state)

    def validate_kunuck(self, call: KunuckCall, state: RoundState) -> ValidationResult:
        return self._validate_last_trick_call(call, state)

    def _validate_last_trick_call(self, call, state: RoundState) -> ValidationResult:
        is_double = isinstance(call, DoubleCall)
        name = "Double" if is_double else "Kunuck"
        enabled = self.config.enable_double if is_double else self.config.enable_kunuck
        if not enabled:
            return ValidationResult.invalid(f"{name} is disabled in game config")
        if state.phase != RoundPhase.PLAYING:
            return ValidationResult.invalid(f"{name} can only be called during play")
        if state.tricks_completed != LAST_TRICK_CALL_WINDOW:
            return ValidationResult.invalid(
                f"{name} can only be called before the last trick"
            )
        if any(isinstance(c, (DoubleCall, KunuckCall)) for c in state.call_history):
            return ValidationResult.invalid("A last-trick call has already been made")
        return _OK
