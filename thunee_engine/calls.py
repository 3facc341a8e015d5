# thunee_engine/calls.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple, Union
import enum

from .cards import Card, Rank, Suit, card_to_dict, dict_to_card
from .seats import Seat

MIN_BID = 10
BID_INCREMENT = 10

JODI_KQ_POINTS = 20
JODI_KQ_TRUMP_POINTS = 40
JODI_JQK_POINTS = 30
JODI_JQK_TRUMP_POINTS = 50


class CallCategory(enum.Enum):
    BID = "bid"
    PASS = "pass"
    THUNEE = "thunee"
    ROYALS = "royals"
    BLIND_THUNEE = "blind_thunee"
    BLIND_ROYALS = "blind_royals"
    JODI = "jodi"
    DOUBLE = "double"
    KUNUCK = "kunuck"


THUNEE_FAMILY = frozenset(
    {
        CallCategory.THUNEE,
        CallCategory.ROYALS,
        CallCategory.BLIND_THUNEE,
        CallCategory.BLIND_ROYALS,
    }
)
ROYALS_FAMILY = frozenset({CallCategory.ROYALS, CallCategory.BLIND_ROYALS})
BLIND_FAMILY = frozenset({CallCategory.BLIND_THUNEE, CallCategory.BLIND_ROYALS})


@dataclass(frozen=True)
class BidCall:
    caller: Seat
    amount: int
    category = CallCategory.BID


@dataclass(frozen=True)
class PassCall:
    caller: Seat
    category = CallCategory.PASS


@dataclass(frozen=True)
class ThuneeCall:
    caller: Seat
    trump_suit: Optional[Suit] = None
    category = CallCategory.THUNEE


@dataclass(frozen=True)
class RoyalsCall:
    caller: Seat
    trump_suit: Optional[Suit] = None
    category = CallCategory.ROYALS


@dataclass(frozen=True)
class BlindThuneeCall:
    caller: Seat
    hidden_cards: Tuple[Card, ...]
    trump_suit: Optional[Suit] = None
    category = CallCategory.BLIND_THUNEE


@dataclass(frozen=True)
class BlindRoyalsCall:
    caller: Seat
    hidden_cards: Tuple[Card, ...]
    trump_suit: Optional[Suit] = None
    category = CallCategory.BLIND_ROYALS


@dataclass(frozen=True)
class JodiCall:
    caller: Seat
    cards: Tuple[Card, ...]
    is_trump: bool
    category = CallCategory.JODI

    @property
    def suit(self) -> Optional[Suit]:
        return self.cards[0].suit if self.cards else None

    @property
    def points(self) -> int:
        """K+Q is worth 20 (40 in trump); J+Q+K is worth 30 (50 in trump)."""
        if len(self.cards) == 3:
            return JODI_JQK_TRUMP_POINTS if self.is_trump else JODI_JQK_POINTS
        return JODI_KQ_TRUMP_POINTS if self.is_trump else JODI_KQ_POINTS


@dataclass(frozen=True)
class DoubleCall:
    caller: Seat
    category = CallCategory.DOUBLE


@dataclass(frozen=True)
class KunuckCall:
    caller: Seat
    category = CallCategory.KUNUCK


CallData = Union[
    BidCall,
    PassCall,
    ThuneeCall,
    RoyalsCall,
    BlindThuneeCall,
    BlindRoyalsCall,
    JodiCall,
    DoubleCall,
    KunuckCall,
]

ThuneeFamilyCall = Union[ThuneeCall, RoyalsCall, BlindThuneeCall, BlindRoyalsCall]

_CALL_TYPES = {
    CallCategory.BID: BidCall,
    CallCategory.PASS: PassCall,
    CallCategory.THUNEE: ThuneeCall,
    CallCategory.ROYALS: RoyalsCall,
    CallCategory.BLIND_THUNEE: BlindThuneeCall,
    CallCategory.BLIND_ROYALS: BlindRoyalsCall,
    CallCategory.JODI: JodiCall,
    CallCategory.DOUBLE: DoubleCall,
    CallCategory.KUNUCK: KunuckCall,
}


def is_thunee_family(call: CallData) -> bool:
    return call.category in THUNEE_FAMILY


def is_special(call: CallData) -> bool:
    """Everything except bids and passes."""
    return not isinstance(call, (BidCall, PassCall))


def with_trump_suit(call: ThuneeFamilyCall, suit: Optional[Suit]) -> ThuneeFamilyCall:
    return replace(call, trump_suit=suit)


def call_to_dict(call: CallData) -> Dict[str, Any]:
    """Convert a call to a JSON-serializable dict tagged by its category name."""
    data: Dict[str, Any] = {"type": call.category.name, "caller": call.caller.name}
    if isinstance(call, BidCall):
        data["amount"] = call.amount
    elif isinstance(call, (ThuneeCall, RoyalsCall)):
        data["trump_suit"] = call.trump_suit.name if call.trump_suit else None
    elif isinstance(call, (BlindThuneeCall, BlindRoyalsCall)):
        data["hidden_cards"] = [card_to_dict(c) for c in call.hidden_cards]
        data["trump_suit"] = call.trump_suit.name if call.trump_suit else None
    elif isinstance(call, JodiCall):
        data["cards"] = [card_to_dict(c) for c in call.cards]
        data["is_trump"] = call.is_trump
    elif not isinstance(call, (PassCall, DoubleCall, KunuckCall)):
        raise TypeError(f"Unknown call type: {type(call).__name__}")
    return data


def dict_to_call(data: Dict[str, Any]) -> CallData:
    """Convert a dict produced by call_to_dict back into a call."""
    category = CallCategory[data["type"]]
    caller = Seat[data["caller"]]
    cls = _CALL_TYPES[category]
    if cls is BidCall:
        return BidCall(caller=caller, amount=int(data["amount"]))
    if cls in (ThuneeCall, RoyalsCall):
        suit = data.get("trump_suit")
        return cls(caller=caller, trump_suit=Suit[suit] if suit else None)
    if cls in (BlindThuneeCall, BlindRoyalsCall):
        suit = data.get("trump_suit")
        return cls(
            caller=caller,
            hidden_cards=tuple(dict_to_card(c) for c in data["hidden_cards"]),
            trump_suit=Suit[suit] if suit else None,
        )
    if cls is JodiCall:
        return JodiCall(
            caller=caller,
            cards=tuple(dict_to_card(c) for c in data["cards"]),
            is_trump=bool(data["is_trump"]),
        )
    return cls(caller=caller)


def jodi_kind(cards: Tuple[Card, ...]) -> Optional[str]:
    """Return 'KQ' or 'JQK' for a valid single-suit combination, else None."""
    if not cards or len({c.suit for c in cards}) != 1:
        return None
    ranks = {c.rank for c in cards}
    if len(cards) == 2 and ranks == {Rank.KING, Rank.QUEEN}:
        return "KQ"
    if len(cards) == 3 and ranks == {Rank.JACK, Rank.QUEEN, Rank.KING}:
        return "JQK"
    return None
