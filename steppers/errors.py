"""
errors.py — Stepper Exceptions
===============================
Raised only at construction / restore boundaries.  `step()` itself never
raises: degenerate inputs finish with a distinguished terminal event.
"""


class StepperError(Exception):
    """Base class for every error raised by the steppers package."""


class InvalidParameterError(StepperError, ValueError):
    """Construction parameters that no stepper can be built from."""


class SnapshotMismatchError(StepperError):
    """A snapshot was handed to a stepper with a different configuration."""

    def __init__(self, expected, actual):
        super().__init__(f"Snapshot taken from {actual!r} cannot restore {expected!r}")
        self.expected = expected
        self.actual   = actual
