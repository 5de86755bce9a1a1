"""
Hold recommendation: the engine's boundary contract.

    recommend_hold(hand, paytable, multiplier, strategy)
        -> best_hold, ev_with_multiplier, ev_without_multiplier, strategy

Input is validated before anything is computed; a hand that fails validation
must be re-derived by the caller, not resubmitted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from uxsolver.engine.cards import hand_to_str
from uxsolver.engine.combinatorics import HoldMask
from uxsolver.engine.deck import parse_hand, validate_hand
from uxsolver.engine.paytables import Paytable, resolve_paytable
from uxsolver.solvers.ev_engine import HoldEvaluation, evaluate_all_holds, normalize_multiplier
from uxsolver.solvers.hold_policy import Strategy, choose_hold, parse_strategy

logger = logging.getLogger(__name__)

OUTPUT_PRECISION: int = 6
"""Decimal places kept in reported EV figures."""


@dataclass(frozen=True)
class Recommendation:
    """The recommended hold plus the evaluations it was chosen from.

    Attributes:
        best_hold:             Five booleans, True = keep the card.
        ev_with_multiplier:    EV of best_hold including carry-forward value.
        ev_without_multiplier: Base-game EV of best_hold.
        strategy:              Policy used to choose.
        paytable_key:          Key of the paytable evaluated against.
        multiplier:            Multiplier actually applied.
        evaluations:           All 32 evaluations, index == mask.
    """

    best_hold: HoldMask
    ev_with_multiplier: float
    ev_without_multiplier: float
    strategy: Strategy
    paytable_key: str
    multiplier: float
    evaluations: tuple[HoldEvaluation, ...]

    def to_dict(self) -> dict[str, object]:
        """Boundary output: plain JSON-serialisable values."""
        return {
            "best_hold": list(self.best_hold),
            "ev_with_multiplier": self.ev_with_multiplier,
            "ev_without_multiplier": self.ev_without_multiplier,
            "strategy": self.strategy.value,
        }


def _coerce_hand(hand: Sequence[int] | Sequence[str] | str) -> tuple[int, ...]:
    if isinstance(hand, str):
        return parse_hand(hand)
    if isinstance(hand, Sequence) and hand and all(isinstance(c, str) for c in hand):
        return parse_hand(hand)  # type: ignore[arg-type]
    return validate_hand(hand)  # type: ignore[arg-type]


def recommend_hold(
    hand: Sequence[int] | Sequence[str] | str,
    paytable: Paytable | str | Mapping[str, object],
    multiplier: float | None = 1,
    strategy: Strategy | str | None = None,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    sample_budget: Mapping[int, int] | None = None,
) -> Recommendation:
    """Recommend which cards to hold.

    Args:
        hand:          Five cards as ints, card strings, or one string 'AS KS ...'.
        paytable:      A Paytable, a preset key, or a custom DDB specification.
        multiplier:    Current multiplier; missing or non-positive means 1.
        strategy:      Strategy or its name; None means conservative.
        rng:           Generator for sampled draws.
        seed:          Seed for a new Generator when ``rng`` is None.
        sample_budget: Per-draw-size overrides of the sampling budget.

    Returns:
        Recommendation with EV figures rounded to OUTPUT_PRECISION places.

    Raises:
        InvalidHandError:       Wrong card count, bad card, or duplicate.
        UnknownPaytableError:   Unknown preset key.
        UnsupportedFamilyError: Custom family other than DDB.
        InvalidParameterError:  Bad custom pays, multiplier, or strategy.
    """
    cards = _coerce_hand(hand)
    table = resolve_paytable(paytable)
    mult = normalize_multiplier(multiplier)
    policy = parse_strategy(strategy)

    evaluations = evaluate_all_holds(
        cards, table, mult, rng=rng, seed=seed, sample_budget=sample_budget
    )
    chosen = choose_hold(evaluations, policy)
    logger.debug(
        "%s on %s x%g (%s): hold mask %d, EV %.6f",
        hand_to_str(cards),
        table.key,
        mult,
        policy.value,
        chosen.mask,
        chosen.ev_with_multiplier,
    )

    return Recommendation(
        best_hold=chosen.hold_mask,
        ev_with_multiplier=round(chosen.ev_with_multiplier, OUTPUT_PRECISION),
        ev_without_multiplier=round(chosen.ev_without_multiplier, OUTPUT_PRECISION),
        strategy=policy,
        paytable_key=table.key,
        multiplier=mult,
        evaluations=tuple(evaluations),
    )
