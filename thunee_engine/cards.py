# thunee_engine/cards.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import enum
import random

CARDS_PER_PLAYER = 6
INITIAL_DEAL = 4
NUM_PLAYERS = 4
DECK_SIZE = 24


class Suit(enum.Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class Rank(enum.Enum):
    """
    The six Thunee ranks.

    Each value is (label, points, standard strength, royals strength); a
    higher strength wins. Standard order is J > 9 > A > 10 > K > Q and
    Royals reverses it to Q > K > 10 > A > 9 > J.
    """
    JACK = ("J", 30, 6, 1)
    NINE = ("9", 20, 5, 2)
    ACE = ("A", 11, 4, 3)
    TEN = ("10", 10, 3, 4)
    KING = ("K", 3, 2, 5)
    QUEEN = ("Q", 2, 1, 6)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def points(self) -> int:
        return self.value[1]

    @property
    def standard_strength(self) -> int:
        return self.value[2]

    @property
    def royals_strength(self) -> int:
        return self.value[3]

    def strength(self, royals: bool = False) -> int:
        return self.royals_strength if royals else self.standard_strength


@dataclass(frozen=True)
class Card:
    """A Thunee card. Equality and hashing are by (suit, rank)."""
    suit: Suit
    rank: Rank

    @property
    def points(self) -> int:
        return self.rank.points

    @property
    def short_name(self) -> str:
        return f"{self.rank.label}{self.suit.symbol}"

    def __str__(self) -> str:
        return self.short_name

    @classmethod
    def from_string(cls, text: str) -> "Card":
        """Parse a short name such as 'J♥' or '10♠'."""
        text = text.strip()
        if len(text) < 2:
            raise ValueError(f"Cannot parse card from {text!r}")
        label, symbol = text[:-1], text[-1]
        rank = next((r for r in Rank if r.label == label), None)
        suit = next((s for s in Suit if s.symbol == symbol), None)
        if rank is None or suit is None:
            raise ValueError(f"Cannot parse card from {text!r}")
        return cls(suit, rank)


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Convert a Card to a JSON-serializable dict."""
    return {"suit": card.suit.name, "rank": card.rank.name}


def dict_to_card(data: Dict[str, Any]) -> Card:
    """Convert a dict back into a Card."""
    return Card(suit=Suit[data["suit"]], rank=Rank[data["rank"]])


def create_deck() -> List[Card]:
    """All 24 cards in suit-major order (unshuffled)."""
    return [Card(suit, rank) for suit in Suit for rank in Rank]


class Deck:
    """
    The 24-card Thunee deck: J, 9, A, 10, K, Q in each of the four suits.

    Hands come back indexed in seat order (South, East, North, West).
    """

    def __init__(self, cards: Optional[List[Card]] = None) -> None:
        self.cards: List[Card] = list(cards) if cards is not None else create_deck()
        if len(self.cards) != DECK_SIZE or len(set(self.cards)) != DECK_SIZE:
            raise ValueError("Deck must contain exactly 24 distinct cards")

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """Shuffle the deck in place. Uses provided RNG if given."""
        if rng is None:
            random.shuffle(self.cards)
        else:
            rng.shuffle(self.cards)

    def deal(self) -> List[List[Card]]:
        """Deal 6 cards to each of the 4 players, one at a time."""
        hands: List[List[Card]] = [[] for _ in range(NUM_PLAYERS)]
        idx = 0
        for _ in range(CARDS_PER_PLAYER):
            for p in range(NUM_PLAYERS):
                hands[p].append(self.cards[idx])
                idx += 1
        return hands

    def deal_split(self) -> Tuple[List[List[Card]], List[List[Card]]]:
        """
        Deal 4 cards to each player now and hold 2 per player back.

        Returns (initial, held_back). The held-back cards are handed out once
        trump is chosen, or straight away after a blind call.
        """
        hands = self.deal()
        initial = [hand[:INITIAL_DEAL] for hand in hands]
        held_back = [hand[INITIAL_DEAL:] for hand in hands]
        return initial, held_back
