"""Tests for uxsolver/engine/paytables.py — presets, custom DDB resolution, lookup."""

from __future__ import annotations

import numpy as np
import pytest

from uxsolver.engine.errors import (
    InvalidParameterError,
    UnknownPaytableError,
    UnsupportedFamilyError,
)
from uxsolver.engine.hand_classifier import Category
from uxsolver.engine.paytables import (
    DDB_9_6_BASE_EV,
    DEFAULT_PAYTABLE,
    PAYTABLES,
    Paytable,
    resolve_paytable,
)


class TestPresets:
    def test_preset_keys(self):
        assert set(PAYTABLES) == {"DDB_9_6", "DDB_9_5", "DDB_8_5", "DDB_7_5", "BP_6_5"}

    def test_default_is_ddb_9_6(self):
        assert DEFAULT_PAYTABLE == "DDB_9_6"
        assert PAYTABLES[DEFAULT_PAYTABLE].base_ev == pytest.approx(0.9861)

    def test_only_ddb_9_6_is_calibrated(self):
        calibrated = {k for k, pt in PAYTABLES.items() if pt.calibrated}
        assert calibrated == {"DDB_9_6"}

    @pytest.mark.parametrize("key, full_house, flush", [
        ("DDB_9_6", 9, 6),
        ("DDB_9_5", 9, 5),
        ("DDB_8_5", 8, 5),
        ("DDB_7_5", 7, 5),
    ])
    def test_ddb_variant_pays(self, key, full_house, flush):
        pt = PAYTABLES[key]
        assert pt.family == "DDB"
        assert pt.pay(Category.FULL_HOUSE) == full_house
        assert pt.pay(Category.FLUSH) == flush

    def test_ddb_quad_ladder(self):
        pt = PAYTABLES["DDB_9_6"]
        assert pt.pay(Category.ROYAL_FLUSH) == 800
        assert pt.pay(Category.STRAIGHT_FLUSH) == 50
        assert pt.pay(Category.FOUR_ACES_234_KICKER) == 400
        assert pt.pay(Category.FOUR_ACES_OTHER) == 160
        assert pt.pay(Category.FOUR_234_ACE_KICKER) == 160
        assert pt.pay(Category.FOUR_234_OTHER) == 80
        assert pt.pay(Category.FOUR_5K) == 50
        assert pt.pay(Category.TWO_PAIR) == 1
        assert pt.pay(Category.JACKS_OR_BETTER) == 1

    def test_nothing_pays_zero(self):
        for pt in PAYTABLES.values():
            assert pt.pay(Category.NOTHING) == 0

    def test_bonus_poker_ignores_kicker(self):
        pt = PAYTABLES["BP_6_5"]
        assert pt.pay(Category.FOUR_ACES_234_KICKER) == pt.pay(Category.FOUR_ACES_OTHER) == 80
        assert pt.pay(Category.TWO_PAIR) == 2

    def test_presets_are_read_only(self):
        pt = PAYTABLES["DDB_9_6"]
        with pytest.raises(TypeError):
            pt.payouts["full_house"] = 100  # type: ignore[index]
        with pytest.raises(TypeError):
            PAYTABLES["NEW"] = pt  # type: ignore[index]


class TestPaytable:
    def test_missing_key_pays_zero(self):
        pt = Paytable(key="X", name="Sparse", family="DDB", payouts={"royal_flush": 800})
        assert pt.pay(Category.FLUSH) == 0
        assert pt.pay(Category.ROYAL_FLUSH) == 800

    def test_negative_payout_rejected(self):
        with pytest.raises(InvalidParameterError):
            Paytable(key="X", name="Bad", family="DDB", payouts={"flush": -1})

    def test_payout_vector_indexed_by_category(self):
        pt = PAYTABLES["DDB_9_6"]
        vec = pt.payout_vector()
        assert vec.shape == (len(Category),)
        assert vec.dtype == np.float64
        for cat in Category:
            assert vec[cat] == pt.pay(cat)

    def test_payout_vector_not_writeable(self):
        vec = PAYTABLES["DDB_9_6"].payout_vector()
        with pytest.raises(ValueError):
            vec[0] = 99.0

    def test_payouts_copied_on_construction(self):
        source = {"flush": 5}
        pt = Paytable(key="X", name="Copy", family="DDB", payouts=source)
        source["flush"] = 50
        assert pt.pay(Category.FLUSH) == 5


class TestResolvePreset:
    def test_key_returns_shared_instance(self):
        assert resolve_paytable("DDB_9_6") is PAYTABLES["DDB_9_6"]

    def test_key_case_insensitive(self):
        assert resolve_paytable(" ddb_8_5 ") is PAYTABLES["DDB_8_5"]

    def test_paytable_passthrough(self):
        pt = PAYTABLES["BP_6_5"]
        assert resolve_paytable(pt) is pt

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownPaytableError):
            resolve_paytable("JOB_9_6")

    @pytest.mark.parametrize("selection", [None, 42, ["DDB_9_6"]])
    def test_nothing_selected_raises(self, selection):
        with pytest.raises(UnknownPaytableError):
            resolve_paytable(selection)


class TestResolveCustom:
    def test_matching_preset_keeps_base_ev(self):
        pt = resolve_paytable({"family": "DDB", "full_house": 9, "flush": 6})
        assert pt is PAYTABLES["DDB_9_6"]
        assert pt.base_ev == DDB_9_6_BASE_EV

    def test_camel_case_full_house(self):
        pt = resolve_paytable({"family": "DDB", "fullHouse": 8, "flush": 5})
        assert pt is PAYTABLES["DDB_8_5"]

    def test_family_case_insensitive(self):
        assert resolve_paytable({"family": "ddb", "full_house": 9, "flush": 5}) is PAYTABLES["DDB_9_5"]

    def test_synthesised_table(self):
        pt = resolve_paytable({"family": "DDB", "full_house": 11, "flush": 4})
        assert pt.key == "DDB_11_4"
        assert pt.base_ev == 0.0
        assert not pt.calibrated
        assert pt.pay(Category.FULL_HOUSE) == 11
        assert pt.pay(Category.FLUSH) == 4
        assert pt.pay(Category.FOUR_ACES_234_KICKER) == 400

    def test_integral_float_and_string_accepted(self):
        pt = resolve_paytable({"family": "DDB", "full_house": 10.0, "flush": "7"})
        assert pt.key == "DDB_10_7"

    def test_range_edges_accepted(self):
        assert resolve_paytable({"family": "DDB", "full_house": 5, "flush": 4}).key == "DDB_5_4"
        assert resolve_paytable({"family": "DDB", "full_house": 12, "flush": 10}).key == "DDB_12_10"

    @pytest.mark.parametrize("full_house, flush, field", [
        (3, 6, "full_house"),
        (13, 6, "full_house"),
        (9, 3, "flush"),
        (12, 11, "flush"),
        (6, 7, "flush"),
        (9.5, 6, "full_house"),
        ("nine", 6, "full_house"),
        (None, 6, "full_house"),
        (True, 6, "full_house"),
        (9, None, "flush"),
    ])
    def test_invalid_pays_name_the_field(self, full_house, flush, field):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve_paytable({"family": "DDB", "full_house": full_house, "flush": flush})
        assert exc_info.value.field == field

    @pytest.mark.parametrize("family", ["JOB", "BP", "", None])
    def test_unsupported_family(self, family):
        with pytest.raises(UnsupportedFamilyError):
            resolve_paytable({"family": family, "full_house": 9, "flush": 6})

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            resolve_paytable({"family": "DDB", "full_house": 3, "flush": 6})
