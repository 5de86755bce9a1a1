"""
Expected value of every hold decision for one dealt hand.

For each of the 32 hold masks the discarded cards are redrawn from the 47
cards not dealt, and every resulting five-card hand is scored as

    cash   = paytable pay for the category × multiplier
    future = paytable.base_ev if the category qualifies, else 0

    ev_with_multiplier    = mean(cash + future)
    ev_without_multiplier = mean(cash) / multiplier

``future`` values the multiplier a qualifying hand earns for the next hand;
it does not scale with the current multiplier.

Draw sizes 0–2 are enumerated exactly (1, 47 or 1,081 outcomes). Draw sizes
3–5 are estimated from SAMPLE_BUDGET uniform draws without replacement, made
by a partial Fisher–Yates shuffle of a buffer local to the call. Exact
enumeration there would cost up to C(47, 5) = 1,533,939 hands per mask.

Randomness comes from an injected numpy Generator. Without one, each call
creates its own generator, so concurrent calls never share random state.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from uxsolver.engine.combinatorics import (
    NUM_HOLD_MASKS,
    HoldMask,
    combination_matrix,
    hold_to_mask,
    mask_to_hold,
)
from uxsolver.engine.deck import HAND_SIZE, build_deck, validate_hand
from uxsolver.engine.errors import InvalidParameterError, UnknownPaytableError
from uxsolver.engine.hand_classifier import QUALIFYING, Category, classify_batch
from uxsolver.engine.paytables import Paytable

logger = logging.getLogger(__name__)

# ─── Constants ────────────────────────────────────────────────────────────────

EXACT_MAX_DRAW: int = 2
"""Largest draw size that is enumerated exactly."""

SAMPLE_BUDGET: Mapping[int, int] = {3: 20_000, 4: 15_000, 5: 10_000}
"""Monte Carlo trials per hold mask, keyed by number of cards drawn."""

_QUALIFYING_VECTOR: np.ndarray = np.array([c in QUALIFYING for c in Category], dtype=bool)


# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HoldEvaluation:
    """EV of one hold decision.

    Attributes:
        hold_mask:             Which of the five dealt cards are kept.
        ev_with_multiplier:    Mean of cash + future per hand.
        ev_without_multiplier: Mean cash divided by the multiplier, i.e. the
                               base-game EV of this hold.
        held_count:            Number of cards kept.
        mask:                  Integer form of hold_mask (0–31).
        draw_count:            Number of replacement cards drawn.
        n_samples:             Outcomes averaged (enumerated or sampled).
        exact:                 True if every outcome was enumerated.
        std_error:             Standard error of ev_with_multiplier; 0 when exact.
    """

    hold_mask: HoldMask
    ev_with_multiplier: float
    ev_without_multiplier: float
    held_count: int
    mask: int
    draw_count: int
    n_samples: int
    exact: bool
    std_error: float = 0.0


# ─── Input normalisation ──────────────────────────────────────────────────────


def normalize_multiplier(multiplier: float | None) -> float:
    """Return the multiplier to apply; missing or non-positive means 1.

    Raises:
        InvalidParameterError: If the multiplier is not a finite number.

    Examples:
        >>> normalize_multiplier(None)
        1.0
        >>> normalize_multiplier(0)
        1.0
        >>> normalize_multiplier(4)
        4.0
    """
    if multiplier is None:
        return 1.0
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float, np.integer, np.floating)):
        raise InvalidParameterError("multiplier", f"expected a number, got {multiplier!r}")
    value = float(multiplier)
    if not math.isfinite(value):
        raise InvalidParameterError("multiplier", f"expected a finite number, got {multiplier!r}")
    return value if value > 0 else 1.0


def make_rng(rng: np.random.Generator | None = None, seed: int | None = None) -> np.random.Generator:
    """Return ``rng`` if given, else a new Generator seeded with ``seed``.

    ``seed=None`` draws fresh OS entropy, so production calls are
    non-deterministic while tests can pin a seed.
    """
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def _merged_budget(sample_budget: Mapping[int, int] | None) -> dict[int, int]:
    budget = dict(SAMPLE_BUDGET)
    if sample_budget:
        for draw_count, trials in sample_budget.items():
            if draw_count not in SAMPLE_BUDGET:
                raise InvalidParameterError(
                    "sample_budget", f"draw sizes {sorted(SAMPLE_BUDGET)} are sampled, got {draw_count}"
                )
            if isinstance(trials, bool) or not isinstance(trials, int) or trials < 1:
                raise InvalidParameterError("sample_budget", f"trials must be a positive int, got {trials!r}")
            budget[draw_count] = trials
    return budget


def _require_paytable(paytable: object) -> Paytable:
    if not isinstance(paytable, Paytable):
        raise UnknownPaytableError(
            f"Expected a resolved Paytable, got {type(paytable).__name__}; call resolve_paytable() first"
        )
    return paytable


# ─── Outcome generation ───────────────────────────────────────────────────────


def exact_outcomes(held: np.ndarray, deck: np.ndarray, draw_count: int) -> np.ndarray:
    """Every final hand reachable from ``held``: shape (C(47, draw_count), 5)."""
    draws = combination_matrix(deck, draw_count)
    kept = np.broadcast_to(held, (len(draws), held.size))
    return np.hstack([kept, draws])


def sampled_outcomes(
    held: np.ndarray,
    deck: np.ndarray,
    draw_count: int,
    n_trials: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """``n_trials`` random final hands, each drawn without replacement.

    Every row of the local buffer is a copy of the deck; swapping position i
    with a uniform pick from positions i..n-1 for i < draw_count leaves a
    uniform draw in the first draw_count columns.
    """
    n = deck.size
    buf = np.tile(deck, (n_trials, 1))
    rows = np.arange(n_trials)
    for i in range(draw_count):
        j = i + rng.integers(0, n - i, size=n_trials)
        picked = buf[rows, j]
        buf[rows, j] = buf[rows, i]
        buf[rows, i] = picked
    kept = np.broadcast_to(held, (n_trials, held.size))
    return np.hstack([kept, buf[:, :draw_count]])


def score_hands(
    hands: np.ndarray,
    paytable: Paytable,
    multiplier: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Return per-hand (cash, future) arrays for an (N, 5) array of final hands."""
    categories = classify_batch(hands)
    cash = paytable.payout_vector()[categories] * multiplier
    future = np.where(_QUALIFYING_VECTOR[categories], paytable.base_ev, 0.0)
    return cash, future


# ─── Public API ───────────────────────────────────────────────────────────────


def evaluate_hold(
    hand: Sequence[int],
    hold: int | Sequence[bool],
    paytable: Paytable,
    multiplier: float | None = 1,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    sample_budget: Mapping[int, int] | None = None,
) -> HoldEvaluation:
    """Evaluate a single hold decision.

    Args:
        hand:          Five dealt cards.
        hold:          Integer mask (0–31) or five booleans.
        paytable:      A resolved Paytable.
        multiplier:    Current multiplier; missing or non-positive means 1.
        rng:           Generator for sampled draws.
        seed:          Seed for a new Generator when ``rng`` is None.
        sample_budget: Per-draw-size overrides of SAMPLE_BUDGET.

    Raises:
        InvalidHandError:      Illegal hand.
        UnknownPaytableError:  ``paytable`` is not a resolved Paytable.
        InvalidParameterError: Bad multiplier or sample budget.
    """
    cards = validate_hand(hand)
    mask = hold if isinstance(hold, int) else hold_to_mask(hold)
    return _evaluate_mask(
        cards,
        mask,
        _require_paytable(paytable),
        normalize_multiplier(multiplier),
        make_rng(rng, seed),
        build_deck(cards),
        _merged_budget(sample_budget),
    )


def evaluate_all_holds(
    hand: Sequence[int],
    paytable: Paytable,
    multiplier: float | None = 1,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    sample_budget: Mapping[int, int] | None = None,
) -> list[HoldEvaluation]:
    """Evaluate all 32 hold decisions for ``hand``.

    Either every result is returned, ordered by mask 0..31, or an error is
    raised before any computation starts. Selection among the results is the
    hold policy's job.

    Args:
        hand:          Five dealt cards (validated).
        paytable:      A resolved Paytable.
        multiplier:    Current multiplier; missing or non-positive means 1.
        rng:           Generator shared by all 32 masks of this call.
        seed:          Seed for a new Generator when ``rng`` is None.
        sample_budget: Per-draw-size overrides of SAMPLE_BUDGET.

    Returns:
        List of 32 HoldEvaluation, index == mask.
    """
    cards = validate_hand(hand)
    table = _require_paytable(paytable)
    mult = normalize_multiplier(multiplier)
    budget = _merged_budget(sample_budget)
    generator = make_rng(rng, seed)
    deck = build_deck(cards)

    started = time.perf_counter()
    results = [
        _evaluate_mask(cards, mask, table, mult, generator, deck, budget)
        for mask in range(NUM_HOLD_MASKS)
    ]
    logger.debug(
        "Evaluated %d holds for %s on %s x%g in %.3fs",
        len(results),
        cards,
        table.key,
        mult,
        time.perf_counter() - started,
    )
    return results


def _evaluate_mask(
    cards: tuple[int, ...],
    mask: int,
    paytable: Paytable,
    multiplier: float,
    rng: np.random.Generator,
    deck: np.ndarray,
    budget: Mapping[int, int],
) -> HoldEvaluation:
    hold_mask = mask_to_hold(mask)
    held = np.array([c for c, keep in zip(cards, hold_mask) if keep], dtype=np.int8)
    draw_count = HAND_SIZE - held.size
    exact = draw_count <= EXACT_MAX_DRAW

    if exact:
        outcomes = exact_outcomes(held, deck, draw_count)
    else:
        outcomes = sampled_outcomes(held, deck, draw_count, budget[draw_count], rng)

    cash, future = score_hands(outcomes, paytable, multiplier)
    total = cash + future
    n = len(total)
    std_error = 0.0
    if not exact and n > 1:
        std_error = float(total.std(ddof=1) / math.sqrt(n))

    return HoldEvaluation(
        hold_mask=hold_mask,
        ev_with_multiplier=float(total.mean()),
        ev_without_multiplier=float(cash.mean() / multiplier),
        held_count=int(held.size),
        mask=mask,
        draw_count=draw_count,
        n_samples=n,
        exact=exact,
        std_error=std_error,
    )
