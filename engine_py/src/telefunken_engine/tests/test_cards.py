"""
Tests for card encoding and deck utilities.
"""

import random

import pytest
from telefunken_engine.cards import (
    Rank, Suit, card_value, create_deck, create_shuffled_deck, format_card,
    format_cards, get_rank, get_suit, is_joker, shuffle_deck
)
from telefunken_engine.constants import NUM_CARDS


def card(suit, rank, deck=0):
    return deck * 54 + int(suit) * 13 + int(rank) - 1


def test_joker_positions():
    """Positions 51 to 53 of each deck are jokers."""
    assert is_joker(51)
    assert is_joker(52)
    assert is_joker(53)
    assert is_joker(54 + 52)
    assert not is_joker(0)
    assert not is_joker(50)
    assert not is_joker(54)


def test_suits():
    assert get_suit(0) == Suit.CLUBS
    assert get_suit(13) == Suit.HEARTS
    assert get_suit(26) == Suit.DIAMOND
    assert get_suit(39) == Suit.SPADE
    assert get_suit(52) == Suit.JOKER
    # Second deck
    assert get_suit(54 + 13) == Suit.HEARTS


def test_ranks():
    assert get_rank(0) == Rank.ACE
    assert get_rank(12) == Rank.KING
    assert get_rank(13) == Rank.ACE
    assert get_rank(54 + 1) == Rank.TWO
    assert get_rank(card(Suit.DIAMOND, Rank.SEVEN, deck=1)) == Rank.SEVEN


def test_joker_has_no_rank():
    with pytest.raises(ValueError):
        get_rank(52)


def test_card_values():
    assert card_value(card(Suit.CLUBS, Rank.ACE)) == 15
    assert card_value(card(Suit.HEARTS, Rank.TWO)) == 20
    assert card_value(card(Suit.SPADE, Rank.FIVE)) == 5
    assert card_value(card(Suit.DIAMOND, Rank.NINE)) == 9
    assert card_value(card(Suit.DIAMOND, Rank.TEN)) == 10
    assert card_value(card(Suit.HEARTS, Rank.KING)) == 10
    assert card_value(52) == 20


def test_create_deck():
    assert create_deck(NUM_CARDS) == list(range(108))


def test_shuffled_deck_is_a_permutation():
    deck = create_shuffled_deck(NUM_CARDS, random.Random(1))
    assert len(deck) == NUM_CARDS
    assert sorted(deck) == list(range(NUM_CARDS))


def test_shuffle_is_reproducible_with_seed():
    assert create_shuffled_deck(NUM_CARDS, random.Random(3)) == create_shuffled_deck(NUM_CARDS, random.Random(3))
    assert create_shuffled_deck(NUM_CARDS, random.Random(3)) != create_shuffled_deck(NUM_CARDS, random.Random(4))


def test_shuffle_sub_list_in_place():
    """Shuffling works on any pile, e.g. a discard pile."""
    pile = [5, 17, 40, 99, 63]
    result = shuffle_deck(pile, random.Random(0))
    assert result is pile
    assert sorted(pile) == [5, 17, 40, 63, 99]


def test_format_card():
    assert format_card(card(Suit.HEARTS, Rank.SEVEN)) == "Hearts-Seven"
    assert format_card(53) == "Joker"
    assert format_cards([0, 52]) == "[Clubs-Ace, Joker]"
