from __future__ import annotations


class DispatchError(Exception):
    """Base class for every error raised by the dispatch core."""


class ValidationError(DispatchError, ValueError):
    """Caller input that does not describe a real floor, car or button."""


class InvariantViolation(DispatchError, RuntimeError):
    """A scheduler or caller contract was broken; the request is refused."""
