"""
Exceptions raised by the hold solver.

Every error derives from ValueError: they all describe input that the engine
refuses to evaluate. None of them is recoverable by resubmitting the same data.
"""

from __future__ import annotations


class UxSolverError(ValueError):
    """Base class for all solver input errors."""


class InvalidCardError(UxSolverError):
    """A card value or card string is malformed."""


class InvalidHandError(UxSolverError):
    """A hand does not hold exactly five distinct, valid cards."""


class UnknownPaytableError(UxSolverError):
    """A paytable key does not name any preset."""


class UnsupportedFamilyError(UxSolverError):
    """A custom paytable names a family the resolver cannot build."""


class InvalidParameterError(UxSolverError):
    """A parameter is out of range or of the wrong type.

    Attributes:
        field: Name of the offending parameter, e.g. 'full_house'.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
