"""Generation-time error types.

Every error raised while turning a document into client code derives from
GenerationError, so callers can abort the whole run with one except clause.
"""

from __future__ import annotations

__all__ = [
    "GenerationError",
    "InputMalformedError",
    "DanglingReferenceError",
    "UnmappedTypeShapeError",
    "UnsupportedSecurityError",
    "DuplicateNameError",
]


class GenerationError(Exception):
    """Base class for errors that abort a generation run."""


class InputMalformedError(GenerationError):
    """The document cannot be decoded into the schema model."""


class DanglingReferenceError(GenerationError):
    """A $ref points at a definition that does not exist."""

    def __init__(self, ref: str, where: str = "") -> None:
        self.ref = ref
        self.where = where
        location = f" (in {where})" if where else ""
        super().__init__(f"Dangling reference {ref!r}{location}")


class UnmappedTypeShapeError(GenerationError):
    """A type descriptor has a shape the type mapper does not support."""

    def __init__(self, shape: str, where: str = "") -> None:
        self.shape = shape
        self.where = where
        location = f" (in {where})" if where else ""
        super().__init__(f"Unsupported type shape: {shape}{location}")


class UnsupportedSecurityError(GenerationError):
    """A security requirement names a scheme with no known credential form."""


class DuplicateNameError(GenerationError):
    """Two schema elements map to the same generated identifier."""
