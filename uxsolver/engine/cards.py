"""
Card constants, encoding, and human-readable I/O helpers.

Card encoding (integer 0–51):
    rank_index = card // 4  ->  0=2, 1=3, ..., 7=9, 8=T, 9=J, 10=Q, 11=K, 12=A
    suit_index = card % 4   ->  0=C, 1=D, 2=H, 3=S

Two cards are equal exactly when their (rank, suit) pairs are equal, so plain
integer equality is value equality. The integer form is what the vectorised
classifier and the sampling buffers operate on; strings are used exclusively
at I/O boundaries.
"""

from __future__ import annotations

from .errors import InvalidCardError

RANK_NAMES: list[str] = ['2', '3', '4', '5', '6', '7', '8', '9', 'T', 'J', 'Q', 'K', 'A']
SUIT_NAMES: list[str] = ['C', 'D', 'H', 'S']

NUM_RANKS: int = 13
NUM_SUITS: int = 4
NUM_CARDS: int = 52

# Rank index for special ranks
RANK_TWO: int = 0
RANK_THREE: int = 1
RANK_FOUR: int = 2
RANK_FIVE: int = 3
RANK_TEN: int = 8
RANK_JACK: int = 9
RANK_QUEEN: int = 10
RANK_KING: int = 11
RANK_ACE: int = 12

# Pairs of these ranks pay as "jacks or better"
HIGH_PAIR_RANKS: frozenset[int] = frozenset({RANK_JACK, RANK_QUEEN, RANK_KING, RANK_ACE})

# Input aliases accepted by str_to_card on top of RANK_NAMES
_RANK_ALIASES: dict[str, str] = {'10': 'T'}


def is_card(card: object) -> bool:
    """Return True if ``card`` is a valid card integer.

    Booleans are rejected even though they are ints.

    Examples:
        >>> is_card(51)
        True
        >>> is_card(52)
        False
    """
    return isinstance(card, int) and not isinstance(card, bool) and 0 <= card < NUM_CARDS


def card_rank(card: int) -> int:
    """Return the rank index (0–12) of a card.

    Examples:
        >>> card_rank(0)   # 2 of Clubs
        0
        >>> card_rank(51)  # Ace of Spades
        12
    """
    return card // 4


def card_suit(card: int) -> int:
    """Return the suit index (0–3) of a card.

    Examples:
        >>> card_suit(0)   # 2 of Clubs
        0
        >>> card_suit(51)  # Ace of Spades
        3
    """
    return card % 4


def make_card(rank: int, suit: int) -> int:
    """Build a card integer from rank and suit indices.

    Examples:
        >>> make_card(12, 3)
        51
    """
    return rank * 4 + suit


def card_to_str(card: int) -> str:
    """Convert a card integer to its human-readable string representation.

    Examples:
        >>> card_to_str(0)   # 2 of Clubs
        '2C'
        >>> card_to_str(51)  # Ace of Spades
        'AS'
        >>> card_to_str(32)  # Ten of Clubs
        'TC'
    """
    if not is_card(card):
        raise InvalidCardError(f"Not a card: {card!r}")
    return RANK_NAMES[card // 4] + SUIT_NAMES[card % 4]


def str_to_card(s: str) -> int:
    """Parse a human-readable card string to its integer encoding.

    The format is <rank><suit> where suit is the last character.
    Rank can be '2'-'9', 'T' (or '10'), 'J', 'Q', 'K', or 'A'.
    Suit can be 'C', 'D', 'H', or 'S'. Parsing is case-insensitive.

    Raises:
        InvalidCardError: If the string is not a card.

    Examples:
        >>> str_to_card('2C')
        0
        >>> str_to_card('AS')
        51
        >>> str_to_card('10C')
        32
        >>> str_to_card('th')
        34
    """
    if not isinstance(s, str) or len(s.strip()) < 2:
        raise InvalidCardError(f"Not a card string: {s!r}")
    text = s.strip().upper()
    rank_str = _RANK_ALIASES.get(text[:-1], text[:-1])
    suit_char = text[-1]
    if rank_str not in RANK_NAMES:
        raise InvalidCardError(f"Invalid rank in {s!r}")
    if suit_char not in SUIT_NAMES:
        raise InvalidCardError(f"Invalid suit in {s!r}")
    return make_card(RANK_NAMES.index(rank_str), SUIT_NAMES.index(suit_char))


def hand_to_str(cards: tuple[int, ...]) -> str:
    """Convert a hand (tuple of card ints) to a human-readable string.

    Examples:
        >>> hand_to_str((48, 51))
        'AC AS'
    """
    return ' '.join(card_to_str(c) for c in cards)
