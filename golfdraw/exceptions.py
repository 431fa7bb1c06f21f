"""Error types raised by the pairing draw and scoring utilities."""

from __future__ import annotations


class GolfDrawError(Exception):
    """Base class for every error raised by :mod:`golfdraw`."""


class ConfigurationError(GolfDrawError, ValueError):
    """Caller supplied settings that cannot be planned or drawn.

    Raised before any computation starts, e.g. a non-positive target group
    size, a negative participant count, or too few selected participants.
    """


class InvariantViolation(GolfDrawError, RuntimeError):
    """A contract between caller and draw sequence was broken.

    These are programming errors: a plan that does not add up to the
    participant count, a pool that runs dry mid-group, or a group confirmed
    out of order. The operation is aborted and nothing partial is returned.
    """


class RecoverableInputError(GolfDrawError, ValueError):
    """A raw score value could not be interpreted as a stroke count.

    Callers that tolerate bad input (see
    :meth:`golfdraw.records.ScoreEntry.from_raw`) normalize the value
    to ``0`` ("unscored") instead of propagating this error.
    """

    def __init__(self, member_name: str, value: object):
        self.member_name = member_name
        self.value = value
        super().__init__(f"Invalid score {value!r} for member {member_name!r}")


__all__ = [
    "ConfigurationError",
    "GolfDrawError",
    "InvariantViolation",
    "RecoverableInputError",
]
