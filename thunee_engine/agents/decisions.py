# thunee_engine/agents/decisions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..calls import CallData
from ..cards import Card


@dataclass(frozen=True)
class MakeBid:
    amount: int


@dataclass(frozen=True)
class PassBid:
    pass


@dataclass(frozen=True)
class PlayCard:
    card: Card


@dataclass(frozen=True)
class MakeSpecialCall:
    call: CallData


Decision = Union[MakeBid, PassBid, PlayCard, MakeSpecialCall]
BidDecision = Union[MakeBid, PassBid]
