"""
Deck construction and hand validation.

FULL_DECK is built once at import and never mutated. Draw decks are numpy
int8 arrays holding the card integers still available, in ascending order:

    build_deck(hand)  ->  47 cards, none of which appears in ``hand``

Integer encoding: card // 4 = rank index, card % 4 = suit index.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from .cards import NUM_CARDS, is_card, str_to_card
from .errors import InvalidCardError, InvalidHandError

HAND_SIZE: int = 5

FULL_DECK: tuple[int, ...] = tuple(range(NUM_CARDS))
"""All 52 cards in ascending encoding order."""


def build_deck(exclude: Iterable[int] = ()) -> np.ndarray:
    """Return the draw deck: every card of FULL_DECK not present in ``exclude``.

    Exclusion compares card values, so any iterable of card integers works
    (tuple, list, numpy array). A malformed entry is an error, never skipped.

    Args:
        exclude: Cards already dealt.

    Returns:
        np.ndarray: int8 array of the remaining cards in ascending order.

    Raises:
        InvalidCardError: If ``exclude`` contains something that is not a card.

    Examples:
        >>> len(build_deck())
        52
        >>> len(build_deck((0, 1, 2, 3, 51)))
        47
    """
    used: set[int] = set()
    for card in exclude:
        used.add(_as_card(card))
    return np.array([c for c in FULL_DECK if c not in used], dtype=np.int8)


def _as_card(card: object) -> int:
    # numpy integer scalars are accepted as plain ints
    if isinstance(card, np.integer):
        card = int(card)
    if not is_card(card):
        raise InvalidCardError(f"Not a card: {card!r}")
    return card  # type: ignore[return-value]


def validate_hand(cards: Sequence[object]) -> tuple[int, ...]:
    """Check that ``cards`` is a legal dealt hand and return it as a tuple.

    A legal hand has exactly 5 cards, each a valid card integer, no two equal.

    Raises:
        InvalidHandError: On wrong length, invalid card, or duplicate card.

    Examples:
        >>> validate_hand([51, 47, 43, 39, 35])
        (51, 47, 43, 39, 35)
    """
    try:
        size = len(cards)
    except TypeError:
        raise InvalidHandError(f"Hand must be a sequence of cards, got {cards!r}") from None
    if size != HAND_SIZE:
        raise InvalidHandError(f"Hand must have exactly {HAND_SIZE} cards, got {size}")
    try:
        hand = tuple(_as_card(c) for c in cards)
    except InvalidCardError as exc:
        raise InvalidHandError(str(exc)) from exc
    if len(set(hand)) != HAND_SIZE:
        raise InvalidHandError(f"Hand contains a duplicate card: {hand!r}")
    return hand


def parse_hand(card_strs: Iterable[str] | str) -> tuple[int, ...]:
    """Parse and validate a hand given as card strings.

    Accepts either an iterable of strings or one whitespace/comma separated
    string.

    Raises:
        InvalidHandError: If any card string is malformed or the hand is illegal.

    Examples:
        >>> parse_hand('AS KS QS JS TS')
        (51, 47, 43, 39, 35)
        >>> parse_hand(['2c', '3d', '4h', '5s', '7c'])
        (0, 5, 10, 15, 20)
    """
    if isinstance(card_strs, str):
        card_strs = card_strs.replace(',', ' ').split()
    try:
        cards = [str_to_card(s) for s in card_strs]
    except InvalidCardError as exc:
        raise InvalidHandError(str(exc)) from exc
    return validate_hand(cards)
