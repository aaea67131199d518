"""Exceptions raised by fitmetrics."""

from __future__ import annotations


class FitMetricsError(Exception):
    """Base exception for fitmetrics errors."""

    pass


class InvalidEntryError(FitMetricsError, ValueError):
    """Raised when an input record breaks a precondition the caller owns.

    Examples are a non-positive logged weight, a missing timestamp or a
    naive timestamp where a calendar day in a fixed zone is required.
    """

    pass
