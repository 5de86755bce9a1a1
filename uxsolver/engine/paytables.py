"""
Paytables: payout units per category plus the base EV used for carry-forward.

A paytable's ``payouts`` map category keys (Category.key) to payout units for
a single credit. Missing keys pay 0. ``base_ev`` is the long-run EV per hand
at multiplier 1; the EV estimator adds it for every qualifying outcome to
value the multiplier that outcome earns for the next hand. Presets whose base
EV is not known carry 0, which makes ev_without_multiplier figures advisory
only for those tables.

Preset keys follow <FAMILY>_<full house pay>_<flush pay>, e.g. DDB_9_6.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np

from .errors import InvalidParameterError, UnknownPaytableError, UnsupportedFamilyError
from .hand_classifier import Category

# ─── Paytable ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Paytable:
    """A named payout table.

    Attributes:
        key:     Lookup key, e.g. 'DDB_9_6'.
        name:    Display name, e.g. 'Double Double Bonus 9/6'.
        family:  Game family code, e.g. 'DDB'.
        payouts: {category key: payout units}. Read-only.
        base_ev: Average EV per hand at multiplier 1; 0.0 when uncalibrated.
    """

    key: str
    name: str
    family: str
    payouts: Mapping[str, float] = field(repr=False, hash=False)
    base_ev: float = 0.0
    _vector: np.ndarray = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        for k, v in self.payouts.items():
            if v < 0:
                raise InvalidParameterError(k, f"payout must be non-negative, got {v}")
        object.__setattr__(self, "payouts", MappingProxyType(dict(self.payouts)))
        vector = np.array([self.pay(c) for c in Category], dtype=np.float64)
        vector.flags.writeable = False
        object.__setattr__(self, "_vector", vector)

    @property
    def calibrated(self) -> bool:
        """True if base_ev is known for this table."""
        return self.base_ev > 0

    def pay(self, category: Category) -> float:
        """Payout units for ``category``; 0 if the table does not pay it.

        Examples:
            >>> PAYTABLES['DDB_9_6'].pay(Category.FULL_HOUSE)
            9
            >>> PAYTABLES['DDB_9_6'].pay(Category.NOTHING)
            0
        """
        return self.payouts.get(Category(category).key, 0)

    def payout_vector(self) -> np.ndarray:
        """Payout units as a float64 array indexed by Category value."""
        return self._vector


# ─── Presets ──────────────────────────────────────────────────────────────────

FAMILY_DDB: str = "DDB"
FAMILY_BP: str = "BP"

# Double Double Bonus pays shared by every full house / flush variant
DDB_STANDARD_PAYS: dict[str, int] = {
    Category.ROYAL_FLUSH.key: 800,
    Category.STRAIGHT_FLUSH.key: 50,
    Category.FOUR_ACES_234_KICKER.key: 400,
    Category.FOUR_ACES_OTHER.key: 160,
    Category.FOUR_234_ACE_KICKER.key: 160,
    Category.FOUR_234_OTHER.key: 80,
    Category.FOUR_5K.key: 50,
    Category.STRAIGHT.key: 4,
    Category.THREE_KIND.key: 3,
    Category.TWO_PAIR.key: 1,
    Category.JACKS_OR_BETTER.key: 1,
}

# Long-run base EV per hand for DDB 9/6
DDB_9_6_BASE_EV: float = 0.9861

DDB_FULL_HOUSE_RANGE: tuple[int, int] = (5, 12)
DDB_FLUSH_RANGE: tuple[int, int] = (4, 10)


def _ddb(full_house: int, flush: int, name: str, base_ev: float = 0.0) -> Paytable:
    payouts = dict(DDB_STANDARD_PAYS)
    payouts[Category.FULL_HOUSE.key] = full_house
    payouts[Category.FLUSH.key] = flush
    return Paytable(
        key=f"{FAMILY_DDB}_{full_house}_{flush}",
        name=name,
        family=FAMILY_DDB,
        payouts=payouts,
        base_ev=base_ev,
    )


# Bonus Poker 6/5 pays quads by rank only, so both kicker splits pay the same
_BP_6_5 = Paytable(
    key="BP_6_5",
    name="Bonus Poker 6/5",
    family=FAMILY_BP,
    payouts={
        Category.ROYAL_FLUSH.key: 800,
        Category.STRAIGHT_FLUSH.key: 50,
        Category.FOUR_ACES_234_KICKER.key: 80,
        Category.FOUR_ACES_OTHER.key: 80,
        Category.FOUR_234_ACE_KICKER.key: 40,
        Category.FOUR_234_OTHER.key: 40,
        Category.FOUR_5K.key: 25,
        Category.FULL_HOUSE.key: 6,
        Category.FLUSH.key: 5,
        Category.STRAIGHT.key: 4,
        Category.THREE_KIND.key: 3,
        Category.TWO_PAIR.key: 2,
        Category.JACKS_OR_BETTER.key: 1,
    },
)

PAYTABLES: Mapping[str, Paytable] = MappingProxyType({
    pt.key: pt
    for pt in (
        _ddb(9, 6, "Double Double Bonus 9/6", base_ev=DDB_9_6_BASE_EV),
        _ddb(9, 5, "Double Double Bonus 9/5"),
        _ddb(8, 5, "Double Double Bonus 8/5"),
        _ddb(7, 5, "Double Double Bonus 7/5"),
        _BP_6_5,
    )
})
"""Preset paytables by key. Read-only, shared by every evaluation."""

DEFAULT_PAYTABLE: str = "DDB_9_6"


# ─── Resolution ───────────────────────────────────────────────────────────────


def resolve_paytable(selection: str | Paytable | Mapping[str, object] | None) -> Paytable:
    """Turn a preset key or a custom specification into a Paytable.

    Args:
        selection: One of
            - a Paytable (returned unchanged),
            - a preset key such as 'DDB_9_6' (case-insensitive),
            - a mapping {'family': 'DDB', 'full_house': 9, 'flush': 6}; the
              camelCase spelling 'fullHouse' is accepted too.

    Returns:
        The matching preset when one exists (carrying its base EV), otherwise
        a synthesised table with base_ev = 0.0.

    Raises:
        UnknownPaytableError:   Unknown key, or nothing selected.
        UnsupportedFamilyError: Custom family other than DDB.
        InvalidParameterError:  full_house outside 5..12, flush outside 4..10,
                                flush above full_house, or a non-integer pay.

    Examples:
        >>> resolve_paytable('DDB_9_6') is PAYTABLES['DDB_9_6']
        True
        >>> resolve_paytable({'family': 'DDB', 'full_house': 9, 'flush': 6}).base_ev
        0.9861
        >>> resolve_paytable({'family': 'ddb', 'full_house': 11, 'flush': 4}).base_ev
        0.0
    """
    if isinstance(selection, Paytable):
        return selection
    if isinstance(selection, str):
        return _lookup_preset(selection)
    if isinstance(selection, Mapping):
        return _resolve_custom(selection)
    raise UnknownPaytableError(f"No paytable selected: {selection!r}")


def _lookup_preset(key: str) -> Paytable:
    normalised = key.strip().upper()
    try:
        return PAYTABLES[normalised]
    except KeyError:
        known = ", ".join(sorted(PAYTABLES))
        raise UnknownPaytableError(f"Unknown paytable {key!r} (known: {known})") from None


def _resolve_custom(selection: Mapping[str, object]) -> Paytable:
    family = str(selection.get("family") or "").strip().upper()
    if family != FAMILY_DDB:
        raise UnsupportedFamilyError(f"Unsupported custom paytable family: {family or '<none>'!r}")

    full_house = _to_int(selection.get("full_house", selection.get("fullHouse")), "full_house")
    flush = _to_int(selection.get("flush"), "flush")

    lo, hi = DDB_FULL_HOUSE_RANGE
    if not lo <= full_house <= hi:
        raise InvalidParameterError("full_house", f"expected integer {lo}..{hi}, got {full_house}")
    lo, hi = DDB_FLUSH_RANGE
    if not lo <= flush <= hi:
        raise InvalidParameterError("flush", f"expected integer {lo}..{hi}, got {flush}")
    if flush > full_house:
        raise InvalidParameterError("flush", f"flush ({flush}) cannot exceed full_house ({full_house})")

    preset = PAYTABLES.get(f"{FAMILY_DDB}_{full_house}_{flush}")
    if preset is not None:
        return preset
    return _ddb(full_house, flush, f"Custom DDB {full_house}/{flush}")


def _to_int(value: object, field_name: str) -> int:
    """Coerce an integral pay value; anything else is an InvalidParameterError."""
    if isinstance(value, bool) or value is None:
        raise InvalidParameterError(field_name, f"expected an integer, got {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        raise InvalidParameterError(field_name, f"expected an integer, got {value!r}")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise InvalidParameterError(field_name, f"expected an integer, got {value!r}") from None
    raise InvalidParameterError(field_name, f"expected an integer, got {value!r}")
