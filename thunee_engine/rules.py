# thunee_engine/rules.py
from __future__ import annotations

from typing import List, Optional

from .cards import Card, Suit
from .errors import InvariantViolation
from .ranking import beats, determine_winning_card_index
from .seats import Seat
from .state import PlayerState, Trick
from .validation import ValidationResult


def validate_card_play(card: Card, player: PlayerState, trick: Trick) -> ValidationResult:
    """
    Check a single card against the follow-suit rule.

    - The first card of a trick is always legal.
    - If the player holds the lead suit, they must play it.
    - Otherwise any card in hand is legal, trump included.
    """
    if not player.has_card(card):
        return ValidationResult.invalid(f"{card} is not in your hand")
    if trick.has_played(player.seat):
        return ValidationResult.invalid("You have already played to this trick")
    lead_suit = trick.lead_suit
    if lead_suit is None:
        return ValidationResult.valid()
    if card.suit != lead_suit and player.has_suit(lead_suit):
        return ValidationResult.invalid(
            f"Must follow suit: {lead_suit.name.title()} was led"
        )
    return ValidationResult.valid()


def legal_cards(player: PlayerState, trick: Optional[Trick]) -> List[Card]:
    """
    Return the cards in hand that may legally be played to `trick`.

    All cards are legal when leading or when void in the lead suit.
    """
    hand = list(player.hand)
    if trick is None or trick.lead_suit is None:
        return hand
    follow = [c for c in hand if c.suit == trick.lead_suit]
    return follow if follow else hand


def determine_winner(trick: Trick, trump_suit: Optional[Suit], royals: bool = False) -> Seat:
    """
    Winning seat of a complete trick.

    Cards are folded in turn order from the lead seat; a later card only
    takes over if it strictly beats the card currently winning.
    """
    if not trick.is_complete:
        raise InvariantViolation(
            f"Cannot determine winner of a trick with {len(trick.plays)} cards"
        )
    ordered = trick.cards_in_order()
    idx = determine_winning_card_index(
        [card for _, card in ordered], trump_suit, trick.lead_suit, royals
    )
    return ordered[idx][0]


def current_winning_card(
    trick: Trick, trump_suit: Optional[Suit], royals: bool = False
) -> Optional[Card]:
    if trick.is_empty:
        return None
    ordered = trick.cards_in_order()
    idx = determine_winning_card_index(
        [card for _, card in ordered], trump_suit, trick.lead_suit, royals
    )
    return ordered[idx][1]


def current_winning_seat(
    trick: Trick, trump_suit: Optional[Suit], royals: bool = False
) -> Optional[Seat]:
    if trick.is_empty:
        return None
    ordered = trick.cards_in_order()
    idx = determine_winning_card_index(
        [card for _, card in ordered], trump_suit, trick.lead_suit, royals
    )
    return ordered[idx][0]


def will_card_win(
    card: Card, trick: Trick, trump_suit: Optional[Suit], royals: bool = False
) -> bool:
    """Would `card` be winning the trick if it were played right now?"""
    best = current_winning_card(trick, trump_suit, royals)
    if best is None:
        return True
    lead_suit = trick.lead_suit or card.suit
    return beats(card, best, trump_suit, lead_suit, royals)
