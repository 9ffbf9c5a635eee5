"""
Combination (meld) validation.

A combination is either a set (cards of the same rank) or a run (cards of the
same suit with consecutive ranks). Jokers are always wildcards; Twos are
wildcards too unless they sit in their natural position inside a run.
Validation returns the combination in canonical order, with wildcards placed
where they stand in for a missing card.
"""

from typing import Iterable, List, Optional, Sequence

from .cards import Card, Rank, get_rank, get_suit, is_joker
from .constants import MAX_COMBINATION_SIZE, MIN_COMBINATION_SIZE
from .deals import CombinationConstraint, DealConstraint

Meld = List[Card]

UNCONSTRAINED = CombinationConstraint()


def rank_sort_key(card: Card) -> tuple:
    """Sort key ordering cards by rank, jokers last."""
    if is_joker(card):
        return (1, 0)
    return (0, get_rank(card))


def are_cards_same_suit(cards: Sequence[Card]) -> bool:
    suit = get_suit(cards[0])
    return all(get_suit(card) == suit for card in cards)


# Set and run checks do not look at the amount of cards, callers do
def is_valid_set(cards: Sequence[Card]) -> bool:
    rank = get_rank(cards[0])
    return all(get_rank(card) == rank for card in cards)


def is_valid_run(rank_sorted_cards: Sequence[Card]) -> bool:
    for previous, current in zip(rank_sorted_cards, rank_sorted_cards[1:]):
        if get_rank(current) - get_rank(previous) != 1:
            return False
    return True


def find_run_gaps(rank_sorted_cards: Sequence[Card]) -> Optional[List[int]]:
    """
    Get the number of missing ranks between each pair of adjacent cards.

    Args:
        rank_sorted_cards: Cards of a single suit, sorted by rank

    Returns:
        One gap size per adjacent pair, or None if a rank is repeated
        (a repeated rank can never be part of a run)
    """
    gaps = []
    for previous, current in zip(rank_sorted_cards, rank_sorted_cards[1:]):
        gap = get_rank(current) - get_rank(previous) - 1
        if gap < 0:
            return None
        gaps.append(gap)
    return gaps


def _place_wildcards(run: Sequence[Card], wildcards: Sequence[Card]) -> Optional[Meld]:
    """
    Lay out a run, filling its gaps with wildcards.

    Gaps are filled left to right. Leftover wildcards extend the run above
    its last card up to King, then below its first card down to Ace.
    """
    gaps = find_run_gaps(run)
    if gaps is None or sum(gaps) > len(wildcards):
        return None

    pool = list(wildcards)
    meld = [run[0]]
    for card, gap in zip(run[1:], gaps):
        meld.extend(pool[:gap])
        del pool[:gap]
        meld.append(card)

    room_above = Rank.KING - get_rank(run[-1])
    meld.extend(pool[:room_above])
    del pool[:room_above]

    # A run can not start below Ace
    room_below = get_rank(run[0]) - Rank.ACE
    if len(pool) > room_below:
        return None
    return pool + meld


def validate_combination(
    cards: Sequence[Card],
    constraint: Optional[CombinationConstraint] = None
) -> Optional[Meld]:
    """
    Validate a combination of cards.

    Args:
        cards: Cards forming the combination, in any order
        constraint: Optional shape the combination must have

    Returns:
        The combination in canonical order, or None if it is not valid
    """
    constraint = constraint or UNCONSTRAINED

    if constraint.has_size:
        if len(cards) != constraint.size:
            return None
    elif not MIN_COMBINATION_SIZE <= len(cards) <= MAX_COMBINATION_SIZE:
        return None

    jokers = [card for card in cards if is_joker(card)]
    rest = sorted((card for card in cards if not is_joker(card)), key=get_rank)

    # A combination can not be more than half wildcards
    if len(jokers) > len(rest):
        return None
    if constraint.pure and jokers:
        return None

    if is_valid_set(rest):
        return rest + jokers
    if are_cards_same_suit(rest) and is_valid_run(rest):
        return _place_wildcards(rest, jokers)

    if constraint.pure:
        return None

    twos = [card for card in rest if get_rank(card) == Rank.TWO]
    if not twos:
        if not are_cards_same_suit(rest):
            return None
        return _place_wildcards(rest, jokers)

    naturals = [card for card in rest if get_rank(card) != Rank.TWO]
    if is_valid_set(naturals) and len(jokers) + len(twos) <= len(naturals):
        return naturals + twos + jokers

    if not are_cards_same_suit(naturals) or find_run_gaps(naturals) is None:
        return None

    # Keep a Two of the run's suit in its natural place if the rest of the
    # wildcards still cover the gaps. That Two then counts as a natural card.
    suit = get_suit(naturals[0])
    natural_two_index = next(
        (i for i, card in enumerate(twos) if get_suit(card) == suit), None
    )
    if natural_two_index is not None:
        run = sorted(naturals + [twos[natural_two_index]], key=get_rank)
        wildcards = jokers + twos[:natural_two_index] + twos[natural_two_index + 1:]
        if len(wildcards) <= len(run):
            meld = _place_wildcards(run, wildcards)
            if meld is not None:
                return meld

    if len(jokers) + len(twos) > len(naturals):
        return None
    return _place_wildcards(naturals, jokers + twos)


def is_valid_combination(
    cards: Sequence[Card],
    constraint: Optional[CombinationConstraint] = None
) -> bool:
    return validate_combination(cards, constraint) is not None


def do_melds_satisfy_deal_constraint(
    melds: Sequence[Sequence[Card]],
    deal_constraint: DealConstraint
) -> bool:
    """Check if a group of melds is exactly what a deal asks for."""
    if len(melds) != deal_constraint.size:
        return False
    return all(
        is_valid_combination(meld, deal_constraint.combination_constraint)
        for meld in melds
    )


def is_valid_extension(meld: Sequence[Card], new_cards: Iterable[Card]) -> bool:
    """Check if cards can be added to an existing meld, keeping it valid as a whole."""
    return is_valid_combination(list(meld) + list(new_cards))
