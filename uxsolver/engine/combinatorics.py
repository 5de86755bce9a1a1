"""
Subset enumeration for exact draws and the 32 hold decisions.

Ordering is fixed so exact-EV results are reproducible run to run:
    combinations(items, k)  ->  lexicographic by index (itertools order)
    hold_masks()            ->  mask 0..31 ascending, bit i = dealt card i
"""

from __future__ import annotations

import functools
import itertools
from collections.abc import Iterator, Sequence

import numpy as np

from .deck import HAND_SIZE

NUM_HOLD_MASKS: int = 1 << HAND_SIZE

HoldMask = tuple[bool, bool, bool, bool, bool]


def combinations(items: Sequence[int], k: int) -> Iterator[tuple[int, ...]]:
    """Yield every k-element subset of ``items`` in lexicographic index order.

    Examples:
        >>> list(combinations([7, 8, 9], 2))
        [(7, 8), (7, 9), (8, 9)]
    """
    return itertools.combinations(items, k)


def combination_matrix(items: Sequence[int], k: int) -> np.ndarray:
    """Materialise combinations(items, k) as an int8 array of shape (C(n, k), k).

    Row order matches combinations(). For k == 0 the result has a single
    empty row, mirroring the one empty combination.

    Examples:
        >>> combination_matrix([7, 8, 9], 2).tolist()
        [[7, 8], [7, 9], [8, 9]]
    """
    rows = list(combinations([int(c) for c in items], k))
    return np.array(rows, dtype=np.int8).reshape(len(rows), k)


def mask_to_hold(mask: int) -> HoldMask:
    """Expand an integer mask (0–31) into a 5-element hold vector.

    Examples:
        >>> mask_to_hold(5)
        (True, False, True, False, False)
    """
    if not 0 <= mask < NUM_HOLD_MASKS:
        raise ValueError(f"Hold mask out of range: {mask}")
    return tuple(bool(mask & (1 << i)) for i in range(HAND_SIZE))  # type: ignore[return-value]


def hold_to_mask(hold: Sequence[bool]) -> int:
    """Collapse a 5-element hold vector back into its integer mask.

    Examples:
        >>> hold_to_mask((True, False, True, False, False))
        5
    """
    if len(hold) != HAND_SIZE:
        raise ValueError(f"Hold vector must have {HAND_SIZE} entries, got {len(hold)}")
    return sum(1 << i for i, held in enumerate(hold) if held)


@functools.cache
def hold_masks() -> tuple[HoldMask, ...]:
    """Return all 32 hold vectors in increasing numeric mask order.

    Examples:
        >>> len(hold_masks())
        32
        >>> hold_masks()[0]
        (False, False, False, False, False)
        >>> hold_masks()[31]
        (True, True, True, True, True)
    """
    return tuple(mask_to_hold(m) for m in range(NUM_HOLD_MASKS))
