"""
Deal constraints.

Each deal asks players to lay down a given number of combinations of a given
shape before they can meld freely for the rest of that deal.
"""

from dataclasses import dataclass
from typing import Tuple

# Combination size is not constrained
NO_SIZE_CONSTRAINT = -1


@dataclass(frozen=True)
class CombinationConstraint:
    size: int = NO_SIZE_CONSTRAINT
    pure: bool = False

    @property
    def has_size(self) -> bool:
        return self.size != NO_SIZE_CONSTRAINT


@dataclass(frozen=True)
class DealConstraint:
    size: int  # number of combinations required
    combination_constraint: CombinationConstraint


def build_combination_constraint(size: int, pure: bool = False) -> CombinationConstraint:
    return CombinationConstraint(size=size, pure=pure)


def build_deal_constraint(count: int, size: int, pure: bool = False) -> DealConstraint:
    return DealConstraint(size=count, combination_constraint=build_combination_constraint(size, pure))


DEAL_CONSTRAINTS: Tuple[DealConstraint, ...] = (
    build_deal_constraint(2, 3),
    build_deal_constraint(1, 4),
    build_deal_constraint(2, 4),
    build_deal_constraint(1, 5),
    build_deal_constraint(2, 5),
    build_deal_constraint(1, 6),
)

NUM_DEALS = len(DEAL_CONSTRAINTS)
