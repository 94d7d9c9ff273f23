"""
Error taxonomy for topology generation.

A request either produces a complete switch tree or fails with exactly one
TopologyError. The kind tells the caller who is at fault:

    REQUEST    the request itself is malformed or ambiguous (multi-region, bad page size)
    UPSTREAM   the location source (kubectl, label store, API) failed
    NOT_FOUND  filtering legitimately matched nothing
    INTERNAL   candidate records existed but none carried usable location labels

Per-record problems are MissingLabelsError; they are counted, never fatal on
their own.
"""

from enum import Enum


class ErrorKind(str, Enum):
    REQUEST = "request"
    UPSTREAM = "upstream"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class TopologyError(Exception):
    """Request-level failure carrying an error kind and a human readable message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"TopologyError({self.kind.value!r}, {self.message!r})"

    @classmethod
    def request(cls, message: str) -> "TopologyError":
        return cls(ErrorKind.REQUEST, message)

    @classmethod
    def upstream(cls, message: str) -> "TopologyError":
        return cls(ErrorKind.UPSTREAM, message)

    @classmethod
    def not_found(cls, message: str) -> "TopologyError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def internal(cls, message: str) -> "TopologyError":
        return cls(ErrorKind.INTERNAL, message)


class MissingLabelsError(ValueError):
    """Raised by an extractor when a candidate instance lacks required location labels."""
