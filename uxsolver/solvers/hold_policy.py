"""
Hold policies: pick one of the 32 evaluated holds.

Both policies rank candidates by ev_with_multiplier, keep those within a band
of the best EV, and then choose by number of cards held:

    CONSERVATIVE  band >= 99.5% of best, hold the MOST cards
    AGGRESSIVE    band >= 97.0% of best, hold the FEWEST cards

Ties on held count go to the higher EV, then to the lower mask, so the choice
is a pure function of the evaluations even when the EVs came from sampling.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from uxsolver.engine.errors import InvalidParameterError
from uxsolver.solvers.ev_engine import HoldEvaluation

CONSERVATIVE_BAND: float = 0.995
AGGRESSIVE_BAND: float = 0.97


class Strategy(Enum):
    """Named hold-selection policies."""

    CONSERVATIVE = "conservative"
    AGGRESSIVE = "aggressive"


DEFAULT_STRATEGY: Strategy = Strategy.CONSERVATIVE


def parse_strategy(name: str | Strategy | None) -> Strategy:
    """Convert a boundary value into a Strategy; None means the default.

    Raises:
        InvalidParameterError: For any name other than the two strategies.

    Examples:
        >>> parse_strategy('Aggressive')
        <Strategy.AGGRESSIVE: 'aggressive'>
        >>> parse_strategy(None)
        <Strategy.CONSERVATIVE: 'conservative'>
    """
    if name is None:
        return DEFAULT_STRATEGY
    if isinstance(name, Strategy):
        return name
    try:
        return Strategy(str(name).strip().lower())
    except ValueError:
        valid = ", ".join(s.value for s in Strategy)
        raise InvalidParameterError("strategy", f"unknown strategy {name!r} (expected one of: {valid})") from None


def near_optimal(evaluations: Sequence[HoldEvaluation], band: float) -> list[HoldEvaluation]:
    """Return the candidates with EV >= band × best EV, best first."""
    if not evaluations:
        raise ValueError("No hold evaluations to choose from.")
    ranked = sorted(evaluations, key=lambda e: (-e.ev_with_multiplier, e.mask))
    best = ranked[0].ev_with_multiplier
    return [e for e in ranked if e.ev_with_multiplier >= band * best]


def choose_conservative(evaluations: Sequence[HoldEvaluation]) -> HoldEvaluation:
    """Most cards held within 99.5% of the best EV."""
    viable = near_optimal(evaluations, CONSERVATIVE_BAND)
    return min(viable, key=lambda e: (-e.held_count, -e.ev_with_multiplier, e.mask))


def choose_aggressive(evaluations: Sequence[HoldEvaluation]) -> HoldEvaluation:
    """Fewest cards held within 97% of the best EV."""
    viable = near_optimal(evaluations, AGGRESSIVE_BAND)
    return min(viable, key=lambda e: (e.held_count, -e.ev_with_multiplier, e.mask))


def choose_hold(
    evaluations: Sequence[HoldEvaluation],
    strategy: Strategy = DEFAULT_STRATEGY,
) -> HoldEvaluation:
    """Select the recommended hold under ``strategy``.

    Args:
        evaluations: Output of evaluate_all_holds() (any order).
        strategy:    A Strategy member.

    Returns:
        The chosen HoldEvaluation.
    """
    if strategy is Strategy.CONSERVATIVE:
        return choose_conservative(evaluations)
    if strategy is Strategy.AGGRESSIVE:
        return choose_aggressive(evaluations)
    raise TypeError(f"strategy must be a Strategy member, got {strategy!r}")
