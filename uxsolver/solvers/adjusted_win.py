"""
Adjusted-win hold estimator (legacy formula).

An alternative way of valuing holds that predates the main engine. Each final
hand is scored as

    adjusted = 2 × base pay + award multiplier − 1

using Bonus Poker 6/5 base pays and the triple-play award multiplier table;
with ``progressive=True`` the royal flush base pay is the 4000-credit
progressive. The single-line EV is then scaled by the total multiplier.

This formula has never been cross-validated against evaluate_all_holds() and
the two must not be assumed to agree. It is kept as an optional variant;
recommend_hold() does not use it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from uxsolver.engine.combinatorics import NUM_HOLD_MASKS, HoldMask, mask_to_hold
from uxsolver.engine.deck import HAND_SIZE, build_deck, validate_hand
from uxsolver.engine.hand_classifier import Category, classify_batch
from uxsolver.solvers.ev_engine import EXACT_MAX_DRAW, exact_outcomes, make_rng, sampled_outcomes

# Trials per mask for sampled draw sizes (smaller than the main engine's)
ADJUSTED_SAMPLE_BUDGET: dict[int, int] = {3: 6000, 4: 4000, 5: 2500}

PROGRESSIVE_ROYAL: int = 4000

# Bonus Poker 6/5 base pays
BASE_PAY_BP_6_5: dict[Category, int] = {
    Category.ROYAL_FLUSH: 800,
    Category.STRAIGHT_FLUSH: 50,
    Category.FOUR_ACES_234_KICKER: 80,
    Category.FOUR_ACES_OTHER: 80,
    Category.FOUR_234_ACE_KICKER: 40,
    Category.FOUR_234_OTHER: 40,
    Category.FOUR_5K: 25,
    Category.FULL_HOUSE: 6,
    Category.FLUSH: 5,
    Category.STRAIGHT: 4,
    Category.THREE_KIND: 3,
    Category.TWO_PAIR: 2,
    Category.JACKS_OR_BETTER: 1,
    Category.NOTHING: 0,
}

# Multiplier each category awards for the next hand (triple play)
AWARD_MULTIPLIER_3PLAY: dict[Category, int] = {
    Category.ROYAL_FLUSH: 2,
    Category.STRAIGHT_FLUSH: 2,
    Category.FOUR_ACES_234_KICKER: 2,
    Category.FOUR_ACES_OTHER: 2,
    Category.FOUR_234_ACE_KICKER: 2,
    Category.FOUR_234_OTHER: 2,
    Category.FOUR_5K: 2,
    Category.FULL_HOUSE: 12,
    Category.FLUSH: 11,
    Category.STRAIGHT: 8,
    Category.THREE_KIND: 4,
    Category.TWO_PAIR: 3,
    Category.JACKS_OR_BETTER: 2,
    Category.NOTHING: 1,
}


@dataclass(frozen=True)
class AdjustedWinResult:
    """Best hold under the adjusted-win formula.

    Attributes:
        hold:      Five booleans, True = keep the card.
        mask:      Integer form of hold.
        ev_single: Adjusted-win EV for one line.
        ev_total:  ev_single × total multiplier.
    """

    hold: HoldMask
    mask: int
    ev_single: float
    ev_total: float


def adjusted_win(category: Category, progressive: bool = False) -> int:
    """Adjusted win for one final hand.

    Examples:
        >>> adjusted_win(Category.FULL_HOUSE)      # 2*6 + 12 - 1
        23
        >>> adjusted_win(Category.NOTHING)         # 2*0 + 1 - 1
        0
        >>> adjusted_win(Category.ROYAL_FLUSH, progressive=True)
        8001
    """
    category = Category(category)
    base = BASE_PAY_BP_6_5[category]
    if category is Category.ROYAL_FLUSH and progressive:
        base = PROGRESSIVE_ROYAL
    return 2 * base + AWARD_MULTIPLIER_3PLAY[category] - 1


def _adjusted_vector(progressive: bool) -> np.ndarray:
    return np.array([adjusted_win(c, progressive) for c in Category], dtype=np.float64)


def adjusted_hold_ev(
    hand: Sequence[int],
    mask: int,
    progressive: bool = False,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> float:
    """Adjusted-win EV of holding ``mask`` on ``hand`` (single line)."""
    cards = validate_hand(hand)
    return _hold_ev(cards, mask, _adjusted_vector(progressive), build_deck(cards), make_rng(rng, seed))


def _hold_ev(
    cards: tuple[int, ...],
    mask: int,
    values: np.ndarray,
    deck: np.ndarray,
    rng: np.random.Generator,
) -> float:
    hold = mask_to_hold(mask)
    held = np.array([c for c, keep in zip(cards, hold) if keep], dtype=np.int8)
    draw_count = HAND_SIZE - held.size
    if draw_count <= EXACT_MAX_DRAW:
        outcomes = exact_outcomes(held, deck, draw_count)
    else:
        outcomes = sampled_outcomes(held, deck, draw_count, ADJUSTED_SAMPLE_BUDGET[draw_count], rng)
    return float(values[classify_batch(outcomes)].mean())


def adjusted_best_hold(
    hand: Sequence[int],
    total_multiplier: float = 1.0,
    progressive: bool = False,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> AdjustedWinResult:
    """Best hold under the adjusted-win formula.

    The hold with the strictly highest single-line EV wins; on an exact tie
    the lower mask is kept.

    Args:
        hand:             Five dealt cards.
        total_multiplier: Factor applied to the single-line EV for ev_total.
        progressive:      Use the progressive royal flush pay.
        rng:              Generator for sampled draws.
        seed:             Seed for a new Generator when ``rng`` is None.
    """
    cards = validate_hand(hand)
    values = _adjusted_vector(progressive)
    deck = build_deck(cards)
    generator = make_rng(rng, seed)

    best_mask = 0
    best_ev = -np.inf
    for mask in range(NUM_HOLD_MASKS):
        ev = _hold_ev(cards, mask, values, deck, generator)
        if ev > best_ev:
            best_ev, best_mask = ev, mask

    return AdjustedWinResult(
        hold=mask_to_hold(best_mask),
        mask=best_mask,
        ev_single=best_ev,
        ev_total=best_ev * total_multiplier,
    )
