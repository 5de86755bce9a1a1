"""
Shared pytest fixtures for hold solver tests.

Provides convenience wrappers around str_to_card for building known hands,
and small sampling budgets so sampled paths stay fast under test.
"""

from __future__ import annotations

import numpy as np
import pytest

from uxsolver.engine.cards import str_to_card
from uxsolver.engine.paytables import PAYTABLES, Paytable

# Sampled draw sizes at a fraction of the production budget
SMALL_BUDGET: dict[int, int] = {3: 400, 4: 300, 5: 200}


def hand(*card_strs: str) -> tuple[int, ...]:
    """Build a hand tuple from human-readable card strings.

    Examples:
        >>> hand('AS', 'AC')   # Ace of Spades, Ace of Clubs
        (51, 48)
        >>> hand('7C', '7D', '7H')
        (20, 21, 22)
    """
    return tuple(str_to_card(s) for s in card_strs)


@pytest.fixture
def rng() -> np.random.Generator:
    """A freshly seeded generator; identical for every test."""
    return np.random.default_rng(12345)


@pytest.fixture
def ddb96() -> Paytable:
    return PAYTABLES["DDB_9_6"]


@pytest.fixture
def ddb95() -> Paytable:
    """DDB 9/5 has base_ev 0, so it scores cash only."""
    return PAYTABLES["DDB_9_5"]


@pytest.fixture
def small_budget() -> dict[int, int]:
    return dict(SMALL_BUDGET)


@pytest.fixture
def h():
    """Expose the hand() helper as a fixture for convenience."""
    return hand
