"""
Card encoding, values and deck utilities.

A card is a plain integer. Several decks can be in play at once, so the
position of a card inside its own deck is ``card % CARDS_PER_DECK``.
"""

import random
from enum import Enum, IntEnum
from typing import List, Optional

from .constants import CARDS_PER_DECK, JOKER_THRESHOLD, RANKS_PER_SUIT

Card = int


class Suit(IntEnum):
    CLUBS = 0
    HEARTS = 1
    DIAMOND = 2
    SPADE = 3
    JOKER = 4


class Rank(IntEnum):
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


def _position_in_deck(card: Card) -> int:
    return card % CARDS_PER_DECK


def is_joker(card: Card) -> bool:
    """Check if a card is a joker, whatever deck it belongs to."""
    return _position_in_deck(card) > JOKER_THRESHOLD


def get_suit(card: Card) -> Suit:
    if is_joker(card):
        return Suit.JOKER
    return Suit(_position_in_deck(card) // RANKS_PER_SUIT)


def get_rank(card: Card) -> Rank:
    """
    Get the rank of a card.

    Raises:
        ValueError: If the card is a joker (jokers have no rank)
    """
    if is_joker(card):
        raise ValueError(f"Card number is invalid for retrieving rank: {card}")
    return Rank(_position_in_deck(card) % RANKS_PER_SUIT + 1)


def card_value(card: Card) -> int:
    """Get the penalty value of a card."""
    if is_joker(card):
        return 20

    rank = get_rank(card)
    if rank == Rank.ACE:
        return 15
    if rank == Rank.TWO:
        return 20
    if Rank.THREE <= rank <= Rank.NINE:
        return int(rank)
    return 10


def create_deck(deck_size: int) -> List[Card]:
    """Create an ordered deck with cards ``0 .. deck_size - 1``."""
    return list(range(deck_size))


def shuffle_deck(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a list of cards in place.

    Args:
        cards: Cards to shuffle (a full deck or any pile of cards)
        rng: Optional random source, the module level one is used otherwise

    Returns:
        The same list, shuffled
    """
    (rng or random).shuffle(cards)
    return cards


def create_shuffled_deck(deck_size: int, rng: Optional[random.Random] = None) -> List[Card]:
    return shuffle_deck(create_deck(deck_size), rng)


def format_card(card: Card) -> str:
    if is_joker(card):
        return "Joker"
    return f"{get_suit(card).name.title()}-{get_rank(card).name.title()}"


def format_cards(cards: List[Card]) -> str:
    return "[" + ", ".join(format_card(c) for c in cards) + "]"
