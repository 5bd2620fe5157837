from __future__ import annotations


class DovetailError(ValueError):
    """Base class for layout and part-geometry failures."""


class InvalidInputError(DovetailError):
    """Raised when a caller passes non-positive or non-finite parameters."""


class GeometryError(DovetailError):
    """
    Raised when valid-looking inputs produce a joint that cannot be drawn,
    e.g. pins that would invert at the board face.
    """
