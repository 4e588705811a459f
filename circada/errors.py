"""
Exception hierarchy.

Only structurally invalid input raises. Degenerate-but-valid input (empty
arrays, too few samples for a pattern) returns zero/empty results instead.
"""


class CircadaError(Exception):
    """Base class for every error raised by the engine."""


class MissingStreamError(CircadaError, ValueError):
    """A required stream is absent from the provider output."""

    def __init__(self, missing):
        self.missing = tuple(missing)
        names = " & ".join(self.missing)
        super().__init__(f"Provider did not supply required stream(s): {names}")


class EmptyInputError(CircadaError, ValueError):
    """A required series has zero samples."""


class InvalidSeriesError(CircadaError, ValueError):
    """A TimeSeries violates its shape invariants."""


class UnknownBackendError(CircadaError, ValueError):
    """No numeric backend is registered under the requested name."""
