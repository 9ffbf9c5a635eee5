"""
Tests for combination (meld) validation.
"""

from telefunken_engine.cards import Suit
from telefunken_engine.combinations import (
    do_melds_satisfy_deal_constraint, find_run_gaps, is_valid_combination,
    is_valid_extension, rank_sort_key, validate_combination
)
from telefunken_engine.deals import (
    DEAL_CONSTRAINTS, CombinationConstraint, build_combination_constraint,
    build_deal_constraint
)

JOKER = 52
JOKER_2 = 53


def card(suit, rank, deck=0):
    return deck * 54 + int(suit) * 13 + int(rank) - 1


def hearts(rank, deck=0):
    return card(Suit.HEARTS, rank, deck)


def test_set_recognition():
    cards = [hearts(7), card(Suit.CLUBS, 7), card(Suit.SPADE, 7)]
    meld = validate_combination(cards)
    assert meld is not None
    assert sorted(meld) == sorted(cards)


def test_run_is_sorted():
    meld = validate_combination([hearts(7), hearts(5), hearts(6)])
    assert meld == [hearts(5), hearts(6), hearts(7)]


def test_size_limits():
    assert validate_combination([hearts(5), hearts(6)]) is None
    assert validate_combination([]) is None
    fourteen = [hearts(r) for r in range(1, 14)] + [card(Suit.CLUBS, 5)]
    assert validate_combination(fourteen) is None


def test_full_run_ace_to_king():
    cards = [hearts(r) for r in range(1, 14)]
    assert validate_combination(cards) == cards


def test_exact_size_constraint():
    four_sevens = [hearts(7), card(Suit.CLUBS, 7), card(Suit.SPADE, 7), card(Suit.DIAMOND, 7)]
    assert validate_combination(four_sevens, build_combination_constraint(3)) is None
    assert validate_combination(four_sevens, build_combination_constraint(4)) is not None


def test_wildcard_budget():
    """A combination can't be more than half jokers."""
    assert validate_combination([hearts(5), JOKER, JOKER_2]) is None
    assert validate_combination([hearts(5), hearts(6), JOKER, JOKER_2]) == [
        hearts(5), hearts(6), JOKER, JOKER_2
    ]


def test_set_with_joker():
    meld = validate_combination([JOKER, hearts(7), card(Suit.CLUBS, 7)])
    assert meld == [hearts(7), card(Suit.CLUBS, 7), JOKER]


def test_joker_fills_gap():
    assert validate_combination([hearts(7), JOKER, hearts(5)]) == [hearts(5), JOKER, hearts(7)]


def test_run_gap_placement_with_two_wildcards():
    """Gaps of size one and one between three, five and seven are filled in order."""
    cards = [hearts(2), hearts(3), hearts(5), hearts(7), JOKER, JOKER_2]
    assert validate_combination(cards) == [hearts(2), hearts(3), JOKER, hearts(5), JOKER_2, hearts(7)]


def test_run_needing_more_wildcards_than_naturals():
    """Two, five and seven with two jokers need the Two as a third wildcard."""
    assert validate_combination([hearts(2), hearts(5), hearts(7), JOKER, JOKER_2]) is None


def test_leftover_wildcards_extend_above():
    assert validate_combination([hearts(8), hearts(9), JOKER]) == [hearts(8), hearts(9), JOKER]


def test_leftover_wildcards_go_below_king():
    """A run can't go past King, extra wildcards are placed below it."""
    meld = validate_combination([hearts(12), hearts(13), JOKER])
    assert meld == [JOKER, hearts(12), hearts(13)]


def test_natural_two_in_pure_run():
    meld = validate_combination([hearts(3), hearts(1), hearts(2)])
    assert meld == [hearts(1), hearts(2), hearts(3)]


def test_natural_two_with_gap():
    meld = validate_combination([hearts(2), hearts(4), JOKER])
    assert meld == [hearts(2), JOKER, hearts(4)]


def test_two_as_wildcard_in_set():
    two = card(Suit.SPADE, 2)
    meld = validate_combination([two, hearts(7), card(Suit.CLUBS, 7)])
    assert meld == [hearts(7), card(Suit.CLUBS, 7), two]


def test_two_as_wildcard_in_set_budget():
    twos = [card(Suit.SPADE, 2), card(Suit.CLUBS, 2)]
    sevens = [hearts(7), card(Suit.CLUBS, 7)]
    assert validate_combination(sevens + twos + [JOKER]) is None
    assert validate_combination(sevens + twos) is not None


def test_two_as_wildcard_in_run():
    two = card(Suit.CLUBS, 2)
    assert validate_combination([hearts(5), two, hearts(6)]) == [hearts(5), hearts(6), two]
    assert validate_combination([hearts(5), two, hearts(7)]) == [hearts(5), two, hearts(7)]


def test_wildcard_twos_count_against_the_budget():
    twos = [card(Suit.CLUBS, 2), card(Suit.DIAMOND, 2)]
    assert validate_combination([hearts(5)] + twos) is None
    assert validate_combination([hearts(5)] + twos + [JOKER]) is None
    assert validate_combination([hearts(5), hearts(6)] + twos) == [hearts(5), hearts(6)] + twos


def test_natural_two_next_to_ace():
    meld = validate_combination([hearts(5), hearts(2), hearts(1), JOKER, JOKER_2])
    assert meld == [hearts(1), hearts(2), JOKER, JOKER_2, hearts(5)]


def test_repeated_rank_is_never_a_run():
    assert validate_combination([hearts(5), hearts(5, deck=1), hearts(6)]) is None
    assert validate_combination([hearts(5), hearts(5, deck=1), hearts(6), JOKER]) is None


def test_mixed_suits_are_invalid():
    assert validate_combination([hearts(5), card(Suit.CLUBS, 6), card(Suit.DIAMOND, 7)]) is None


def test_not_enough_wildcards_for_gaps():
    assert validate_combination([hearts(3), hearts(9), JOKER]) is None


def test_pure_constraint_forbids_wildcards():
    pure = CombinationConstraint(size=3, pure=True)
    assert validate_combination([hearts(7), card(Suit.CLUBS, 7), JOKER], pure) is None
    assert validate_combination([hearts(5), hearts(6), card(Suit.CLUBS, 2)], pure) is None
    assert validate_combination([hearts(7), card(Suit.CLUBS, 7), card(Suit.DIAMOND, 7)], pure) is not None
    assert validate_combination([hearts(1), hearts(2), hearts(3)], pure) is not None


def test_deal_constraint_satisfaction():
    two_threes = DEAL_CONSTRAINTS[0]
    first = [hearts(7), card(Suit.CLUBS, 7), card(Suit.SPADE, 7)]
    second = [card(Suit.DIAMOND, 3), card(Suit.DIAMOND, 4), card(Suit.DIAMOND, 5)]
    assert do_melds_satisfy_deal_constraint([first, second], two_threes)
    assert not do_melds_satisfy_deal_constraint([first], two_threes)
    assert not do_melds_satisfy_deal_constraint([first, second + [card(Suit.DIAMOND, 6)]], two_threes)
    assert not do_melds_satisfy_deal_constraint([first, [hearts(1), hearts(5), hearts(9)]], two_threes)


def test_pure_deal_constraint():
    constraint = build_deal_constraint(1, 3, pure=True)
    assert do_melds_satisfy_deal_constraint([[hearts(4), hearts(5), hearts(6)]], constraint)
    assert not do_melds_satisfy_deal_constraint([[hearts(4), JOKER, hearts(6)]], constraint)


def test_extension():
    run = [hearts(5), hearts(6), hearts(7)]
    assert is_valid_extension(run, [hearts(8)])
    assert is_valid_extension(run, [hearts(4), hearts(8)])
    assert is_valid_extension(run, [JOKER])
    assert not is_valid_extension(run, [card(Suit.CLUBS, 9)])
    assert not is_valid_extension(run, [hearts(7, deck=1)])


def test_is_valid_combination():
    assert is_valid_combination([hearts(5), hearts(6), hearts(7)])
    assert not is_valid_combination([hearts(5), hearts(6), hearts(9)])


def test_helpers():
    assert sorted([JOKER, hearts(9), hearts(2)], key=rank_sort_key) == [hearts(2), hearts(9), JOKER]
    assert find_run_gaps([hearts(2), hearts(5), hearts(7)]) == [2, 1]
    assert find_run_gaps([hearts(2), hearts(2, deck=1)]) is None
