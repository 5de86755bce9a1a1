"""
Five-card hand classification into payout categories.

Category precedence (highest to lowest):
    1. royal_flush / straight_flush
    2. four of a kind, split by quad rank and kicker:
         aces with a 2/3/4 kicker     -> four_aces_234_kicker
         aces with any other kicker   -> four_aces_other
         2s/3s/4s with an A/2/3/4 kicker -> four_234_ace_kicker
         2s/3s/4s with any other kicker  -> four_234_other
         5s through Ks                -> four_5k
    3. full_house
    4. flush
    5. straight (A-2-3-4-5 wheel included, no special pay)
    6. three_kind
    7. two_pair
    8. jacks_or_better (one pair of J, Q, K or A)
    9. nothing

The category depends only on the five cards, never on the paytable. Which
categories a paytable pays, and how much, is paytables.py's business.

Two implementations are kept in lockstep: classify() for single hands and
classify_batch() for (N, 5) numpy arrays in the EV estimator's hot loop.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from enum import IntEnum

import numpy as np

from .cards import (
    HIGH_PAIR_RANKS,
    NUM_RANKS,
    RANK_ACE,
    RANK_FIVE,
    RANK_FOUR,
    RANK_TEN,
    RANK_THREE,
    RANK_TWO,
)

# ─── Categories ───────────────────────────────────────────────────────────────


class Category(IntEnum):
    """Payout category of a finished five-card hand.

    The integer value is the index into Paytable.payout_vector().
    """

    NOTHING = 0
    JACKS_OR_BETTER = 1
    TWO_PAIR = 2
    THREE_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_ACES_234_KICKER = 7
    FOUR_ACES_OTHER = 8
    FOUR_234_ACE_KICKER = 9
    FOUR_234_OTHER = 10
    FOUR_5K = 11
    STRAIGHT_FLUSH = 12
    ROYAL_FLUSH = 13

    @property
    def key(self) -> str:
        """Paytable payout key, e.g. 'full_house'."""
        return self.name.lower()


NUM_CATEGORIES: int = len(Category)

FOUR_KIND_CATEGORIES: frozenset[Category] = frozenset({
    Category.FOUR_ACES_234_KICKER,
    Category.FOUR_ACES_OTHER,
    Category.FOUR_234_ACE_KICKER,
    Category.FOUR_234_OTHER,
    Category.FOUR_5K,
})

# Hands that keep the carry-forward multiplier alive for the next hand
QUALIFYING: frozenset[Category] = frozenset(c for c in Category if c is not Category.NOTHING)

LOW_QUAD_RANKS: frozenset[int] = frozenset({RANK_TWO, RANK_THREE, RANK_FOUR})
ACE_QUAD_BONUS_KICKERS: frozenset[int] = LOW_QUAD_RANKS
LOW_QUAD_BONUS_KICKERS: frozenset[int] = frozenset({RANK_ACE}) | LOW_QUAD_RANKS

_WHEEL_RANKS: frozenset[int] = frozenset({RANK_TWO, RANK_THREE, RANK_FOUR, RANK_FIVE, RANK_ACE})


def is_qualifying(category: Category) -> bool:
    """Return True if ``category`` carries the bonus multiplier forward.

    Examples:
        >>> is_qualifying(Category.JACKS_OR_BETTER)
        True
        >>> is_qualifying(Category.NOTHING)
        False
    """
    return category in QUALIFYING


# ─── Scalar classifier ────────────────────────────────────────────────────────


def _is_straight(distinct_ranks: set[int]) -> bool:
    if len(distinct_ranks) != 5:
        return False
    return max(distinct_ranks) - min(distinct_ranks) == 4 or distinct_ranks == _WHEEL_RANKS


def _four_kind_category(quad_rank: int, kicker_rank: int) -> Category:
    if quad_rank == RANK_ACE:
        if kicker_rank in ACE_QUAD_BONUS_KICKERS:
            return Category.FOUR_ACES_234_KICKER
        return Category.FOUR_ACES_OTHER
    if quad_rank in LOW_QUAD_RANKS:
        if kicker_rank in LOW_QUAD_BONUS_KICKERS:
            return Category.FOUR_234_ACE_KICKER
        return Category.FOUR_234_OTHER
    return Category.FOUR_5K


def classify(cards: Sequence[int]) -> Category:
    """Classify a five-card hand.

    Args:
        cards: Five card integers (0–51). Order is irrelevant.

    Returns:
        The hand's Category. Every five-card hand maps to exactly one.

    Raises:
        ValueError: If ``cards`` does not hold exactly five cards.

    Examples:
        >>> classify((51, 47, 43, 39, 35))   # AS KS QS JS TS
        <Category.ROYAL_FLUSH: 13>
        >>> classify((51, 6, 9, 12, 15))     # AS 3H 4D 5C 5S
        <Category.NOTHING: 0>
    """
    if len(cards) != 5:
        raise ValueError(f"classify() needs exactly 5 cards, got {len(cards)}")

    rank_counts = Counter(c // 4 for c in cards)
    distinct_ranks = set(rank_counts)
    flush = len({c % 4 for c in cards}) == 1
    straight = _is_straight(distinct_ranks)

    if flush and straight:
        if RANK_ACE in distinct_ranks and RANK_TEN in distinct_ranks:
            return Category.ROYAL_FLUSH
        return Category.STRAIGHT_FLUSH

    # most_common orders by count, so the pattern reads e.g. (3, 2) for a boat
    ordered = rank_counts.most_common()
    pattern = tuple(count for _, count in ordered)

    if pattern[0] == 4:
        return _four_kind_category(ordered[0][0], ordered[1][0])
    if pattern == (3, 2):
        return Category.FULL_HOUSE
    if flush:
        return Category.FLUSH
    if straight:
        return Category.STRAIGHT
    if pattern[0] == 3:
        return Category.THREE_KIND
    if pattern[:2] == (2, 2):
        return Category.TWO_PAIR
    if pattern[0] == 2 and ordered[0][0] in HIGH_PAIR_RANKS:
        return Category.JACKS_OR_BETTER
    return Category.NOTHING


# ─── Vectorised classifier ────────────────────────────────────────────────────


def classify_batch(hands: np.ndarray) -> np.ndarray:
    """Classify many five-card hands at once.

    Mirrors classify() exactly; the EV estimator relies on the two agreeing.

    Args:
        hands: Integer array of shape (N, 5), one hand per row.

    Returns:
        np.ndarray: int8 array of shape (N,) holding Category values.

    Examples:
        >>> classify_batch(np.array([[51, 47, 43, 39, 35], [0, 5, 10, 15, 20]])).tolist()
        [13, 0]
    """
    hands = np.asarray(hands, dtype=np.int16)
    if hands.ndim != 2 or hands.shape[1] != 5:
        raise ValueError(f"classify_batch() needs an (N, 5) array, got shape {hands.shape}")

    ranks = hands // 4
    suits = hands % 4

    # (N, 13) multiplicity of each rank
    rank_counts = (ranks[:, :, None] == np.arange(NUM_RANKS)).sum(axis=1)
    sorted_counts = np.sort(rank_counts, axis=1)
    c0 = sorted_counts[:, -1]
    c1 = sorted_counts[:, -2]

    flush = (suits == suits[:, :1]).all(axis=1)
    distinct = (rank_counts > 0).sum(axis=1) == 5
    span = ranks.max(axis=1) - ranks.min(axis=1)
    wheel = (rank_counts[:, sorted(_WHEEL_RANKS)] == 1).all(axis=1)
    straight = distinct & ((span == 4) | wheel)
    royal = rank_counts[:, RANK_ACE].astype(bool) & rank_counts[:, RANK_TEN].astype(bool)

    quad_rank = np.argmax(rank_counts == 4, axis=1)
    kicker_rank = np.argmax(rank_counts == 1, axis=1)
    quads = c0 == 4
    ace_quads = quads & (quad_rank == RANK_ACE)
    low_quads = quads & np.isin(quad_rank, sorted(LOW_QUAD_RANKS))
    ace_bonus_kicker = np.isin(kicker_rank, sorted(ACE_QUAD_BONUS_KICKERS))
    low_bonus_kicker = np.isin(kicker_rank, sorted(LOW_QUAD_BONUS_KICKERS))

    pair_rank = np.argmax(rank_counts == 2, axis=1)
    high_pair = (c0 == 2) & (c1 == 1) & np.isin(pair_rank, sorted(HIGH_PAIR_RANKS))

    # np.select takes the first matching condition, so order = precedence
    conditions = [
        flush & straight & royal,
        flush & straight,
        ace_quads & ace_bonus_kicker,
        ace_quads,
        low_quads & low_bonus_kicker,
        low_quads,
        quads,
        (c0 == 3) & (c1 == 2),
        flush,
        straight,
        c0 == 3,
        (c0 == 2) & (c1 == 2),
        high_pair,
    ]
    choices = [
        Category.ROYAL_FLUSH,
        Category.STRAIGHT_FLUSH,
        Category.FOUR_ACES_234_KICKER,
        Category.FOUR_ACES_OTHER,
        Category.FOUR_234_ACE_KICKER,
        Category.FOUR_234_OTHER,
        Category.FOUR_5K,
        Category.FULL_HOUSE,
        Category.FLUSH,
        Category.STRAIGHT,
        Category.THREE_KIND,
        Category.TWO_PAIR,
        Category.JACKS_OR_BETTER,
    ]
    return np.select(conditions, [int(c) for c in choices], default=int(Category.NOTHING)).astype(np.int8)
