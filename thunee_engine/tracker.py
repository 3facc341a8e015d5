# thunee_engine/tracker.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set

from .cards import Card, Rank, Suit, create_deck
from .ranking import sort_by_strength
from .seats import Seat
from .state import Trick


@dataclass(frozen=True)
class GameTracker:
    """
    Public knowledge derived from tricks alone: what has been played, which
    seats have shown out of which suits, and what is still unplayed.

    Build it with `from_tricks`; it never sees anybody's hand, so callers
    that want to discount their own cards pass them to the queries.
    """
    played: FrozenSet[Card]
    voids: Dict[Seat, FrozenSet[Suit]]
    remaining: Dict[Suit, List[Card]]
    royals: bool = False
    tricks_seen: int = field(default=0)

    @classmethod
    def from_tricks(
        cls,
        completed: Sequence[Trick],
        current: Optional[Trick] = None,
        royals: bool = False,
    ) -> "GameTracker":
        tricks = list(completed)
        if current is not None and not current.is_empty:
            tricks.append(current)

        played: Set[Card] = set()
        voids: Dict[Seat, Set[Suit]] = {seat: set() for seat in Seat}
        for trick in tricks:
            lead_suit = trick.lead_suit
            for seat, card in trick.plays:
                played.add(card)
                if lead_suit is not None and card.suit != lead_suit:
                    voids[seat].add(lead_suit)

        remaining: Dict[Suit, List[Card]] = {suit: [] for suit in Suit}
        for card in create_deck():
            if card not in played:
                remaining[card.suit].append(card)
        for suit in Suit:
            remaining[suit] = sort_by_strength(remaining[suit], royals)

        return cls(
            played=frozenset(played),
            voids={seat: frozenset(s) for seat, s in voids.items()},
            remaining=remaining,
            royals=royals,
            tricks_seen=len(completed),
        )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def is_played(self, card: Card) -> bool:
        return card in self.played

    def is_highest_remaining(self, card: Card) -> bool:
        """True if no unplayed card of the same suit outranks `card`."""
        top = self.highest_remaining_in_suit(card.suit)
        return top is not None and top == card

    def highest_remaining_in_suit(
        self, suit: Suit, exclude: Iterable[Card] = ()
    ) -> Optional[Card]:
        skip = set(exclude)
        for card in self.remaining[suit]:
            if card not in skip:
                return card
        return None

    def remaining_in_suit(self, suit: Suit) -> List[Card]:
        return list(self.remaining[suit])

    def remaining_count(self, suit: Suit) -> int:
        return len(self.remaining[suit])

    def is_void_in_suit(self, seat: Seat, suit: Suit) -> bool:
        return suit in self.voids[seat]

    def jack_played(self, suit: Suit) -> bool:
        return Card(suit, Rank.JACK) in self.played

    def nine_played(self, suit: Suit) -> bool:
        return Card(suit, Rank.NINE) in self.played

    def _outstanding(self, suit: Suit, own_hand: Iterable[Card]) -> List[Card]:
        mine = set(own_hand)
        return [c for c in self.remaining[suit] if c not in mine]

    def opponents_may_have_trump(
        self, seat: Seat, trump_suit: Optional[Suit], own_hand: Iterable[Card] = ()
    ) -> bool:
        if trump_suit is None or not self._outstanding(trump_suit, own_hand):
            return False
        opponents = [s for s in Seat if not s.is_teammate(seat)]
        return any(not self.is_void_in_suit(o, trump_suit) for o in opponents)

    def only_teammate_has_trump(
        self, seat: Seat, trump_suit: Optional[Suit], own_hand: Iterable[Card] = ()
    ) -> bool:
        if trump_suit is None or not self._outstanding(trump_suit, own_hand):
            return False
        if self.opponents_may_have_trump(seat, trump_suit, own_hand):
            return False
        return not self.is_void_in_suit(seat.partner, trump_suit)
