"""Tests for uxsolver/solvers/hold_policy.py — conservative and aggressive selection.

All fixtures are hand-built HoldEvaluations, so these tests never depend on
sampling noise.
"""

from __future__ import annotations

import random

import pytest

from uxsolver.engine.combinatorics import mask_to_hold
from uxsolver.engine.errors import InvalidParameterError
from uxsolver.solvers.ev_engine import HoldEvaluation
from uxsolver.solvers.hold_policy import (
    AGGRESSIVE_BAND,
    CONSERVATIVE_BAND,
    Strategy,
    choose_aggressive,
    choose_conservative,
    choose_hold,
    near_optimal,
    parse_strategy,
)


def ev(mask: int, value: float) -> HoldEvaluation:
    hold = mask_to_hold(mask)
    held = sum(hold)
    return HoldEvaluation(
        hold_mask=hold,
        ev_with_multiplier=value,
        ev_without_multiplier=value,
        held_count=held,
        mask=mask,
        draw_count=5 - held,
        n_samples=1,
        exact=True,
    )


def fill(*specials: HoldEvaluation, floor: float = 0.1) -> list[HoldEvaluation]:
    """32 evaluations: the given ones plus low-EV filler for the other masks."""
    by_mask = {e.mask: e for e in specials}
    return [by_mask.get(m, ev(m, floor)) for m in range(32)]


# Best: hold two cards (mask 0b00011) at 10.0.
# Within 0.3%: hold four cards (mask 0b01111) at 9.98.
NEAR_TIE = fill(ev(0b00011, 10.0), ev(0b01111, 9.98))


class TestBands:
    def test_band_constants(self):
        assert CONSERVATIVE_BAND == 0.995
        assert AGGRESSIVE_BAND == 0.97

    def test_near_optimal_sorted_best_first(self):
        viable = near_optimal(NEAR_TIE, CONSERVATIVE_BAND)
        assert [e.mask for e in viable] == [0b00011, 0b01111]

    def test_band_filters_by_ratio_to_best(self):
        evals = fill(ev(1, 100.0), ev(3, 99.6), ev(7, 99.4))
        assert [e.mask for e in near_optimal(evals, CONSERVATIVE_BAND)] == [1, 3]
        assert [e.mask for e in near_optimal(evals, AGGRESSIVE_BAND)] == [1, 3, 7]

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            near_optimal([], CONSERVATIVE_BAND)


class TestNearTieScenario:
    def test_conservative_holds_more_cards(self):
        chosen = choose_hold(NEAR_TIE, Strategy.CONSERVATIVE)
        assert chosen.mask == 0b01111
        assert chosen.held_count == 4

    def test_aggressive_holds_fewer_cards(self):
        chosen = choose_hold(NEAR_TIE, Strategy.AGGRESSIVE)
        assert chosen.mask == 0b00011
        assert chosen.held_count == 2

    def test_input_order_irrelevant(self):
        shuffled = list(NEAR_TIE)
        random.Random(3).shuffle(shuffled)
        assert choose_hold(shuffled, Strategy.CONSERVATIVE).mask == 0b01111
        assert choose_hold(shuffled, Strategy.AGGRESSIVE).mask == 0b00011

    def test_input_not_mutated(self):
        before = list(NEAR_TIE)
        choose_hold(NEAR_TIE, Strategy.CONSERVATIVE)
        choose_hold(NEAR_TIE, Strategy.AGGRESSIVE)
        assert NEAR_TIE == before


class TestConservative:
    def test_outside_band_is_ignored(self):
        # 9.9 is 1% below best: outside 0.5%
        evals = fill(ev(0b00001, 10.0), ev(0b11111, 9.9))
        assert choose_conservative(evals).mask == 0b00001

    def test_tie_on_held_count_goes_to_higher_ev(self):
        evals = fill(ev(0b00111, 10.0), ev(0b01011, 9.99), ev(0b10011, 9.97))
        assert choose_conservative(evals).mask == 0b00111

    def test_full_tie_goes_to_lower_mask(self):
        evals = fill(ev(0b00110, 10.0), ev(0b00011, 10.0))
        assert choose_conservative(evals).mask == 0b00011

    def test_all_zero_ev_holds_everything(self):
        evals = [ev(m, 0.0) for m in range(32)]
        assert choose_conservative(evals).mask == 0b11111


class TestAggressive:
    def test_wider_band_reaches_draw_five(self):
        # Discarding everything costs 2.5%: inside the 3% band
        evals = fill(ev(0b11000, 10.0), ev(0b00000, 9.75))
        assert choose_aggressive(evals).mask == 0b00000

    def test_outside_band_is_ignored(self):
        evals = fill(ev(0b11000, 10.0), ev(0b00000, 9.6))
        assert choose_aggressive(evals).mask == 0b11000

    def test_tie_on_held_count_goes_to_higher_ev(self):
        evals = fill(ev(0b11000, 10.0), ev(0b00001, 9.8), ev(0b00010, 9.9))
        assert choose_aggressive(evals).mask == 0b00010

    def test_all_zero_ev_discards_everything(self):
        evals = [ev(m, 0.0) for m in range(32)]
        assert choose_aggressive(evals).mask == 0


class TestChooseHoldDispatch:
    def test_default_is_conservative(self):
        assert choose_hold(NEAR_TIE).mask == choose_conservative(NEAR_TIE).mask

    def test_rejects_plain_string(self):
        with pytest.raises(TypeError):
            choose_hold(NEAR_TIE, "aggressive")  # type: ignore[arg-type]


class TestParseStrategy:
    @pytest.mark.parametrize("name, expected", [
        ("conservative", Strategy.CONSERVATIVE),
        ("AGGRESSIVE", Strategy.AGGRESSIVE),
        (" Aggressive ", Strategy.AGGRESSIVE),
        (Strategy.AGGRESSIVE, Strategy.AGGRESSIVE),
        (None, Strategy.CONSERVATIVE),
    ])
    def test_valid(self, name, expected):
        assert parse_strategy(name) is expected

    def test_unknown_name_raises(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            parse_strategy("reckless")
        assert exc_info.value.field == "strategy"
