"""Errors raised by the assessment state machine."""

from __future__ import annotations

from typing import Iterable, Optional

from revintel.models.enums import Tier


class AssessmentError(Exception):
    """Base class for interview sequencing errors."""


class InvalidSelectionError(AssessmentError, ValueError):
    """The submitted answer is not legal for the current tier.

    Reported to the caller as "selection not recognized, please choose
    again". The context passed in is left untouched.
    """

    def __init__(
        self,
        tier: Tier,
        value: object,
        options: Iterable[str] = (),
        message: Optional[str] = None,
    ):
        self.tier = tier
        self.value = value
        self.options = list(options)
        if message is None:
            message = (
                f"Selection '{value}' not recognized at tier {tier.value:g}, "
                "please choose again"
            )
        super().__init__(message)


class InvalidAnswerError(InvalidSelectionError):
    """A free-text answer was blank or too short."""

    def __init__(self, tier: Tier, value: object, reason: str):
        self.reason = reason
        super().__init__(tier, value, message=f"Invalid answer at tier {tier.value:g}: {reason}")


class PreconditionError(AssessmentError, RuntimeError):
    """An operation was invoked before the data it depends on exists.

    This is a sequencing bug in the caller, not a user-recoverable error.
    """

    def __init__(self, message: str, tier: Optional[Tier] = None, missing: Optional[str] = None):
        self.tier = tier
        self.missing = missing
        super().__init__(message)
