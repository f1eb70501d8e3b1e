"""Errors raised while decoding RLP data."""

from __future__ import annotations

import enum


class DecoderErrorKind(enum.Enum):
    """The ways in which RLP decoding can fail."""

    RLP_IS_TOO_BIG = "RlpIsTooBig"
    """Data has additional bytes at the end of the valid RLP fragment."""
    RLP_IS_TOO_SHORT = "RlpIsTooShort"
    """Data has too few bytes for valid RLP."""
    RLP_EXPECTED_TO_BE_LIST = "RlpExpectedToBeList"
    """Expected an encoded list, RLP was something else."""
    RLP_EXPECTED_TO_BE_DATA = "RlpExpectedToBeData"
    """Expected encoded data, RLP was something else."""
    RLP_INCORRECT_LIST_LEN = "RlpIncorrectListLen"
    """Expected a list of a different size."""
    RLP_DATA_LEN_WITH_ZERO_PREFIX = "RlpDataLenWithZeroPrefix"
    """Data length number has a prefixed zero byte."""
    RLP_LIST_LEN_WITH_ZERO_PREFIX = "RlpListLenWithZeroPrefix"
    """List length number has a prefixed zero byte."""
    RLP_INVALID_INDIRECTION = "RlpInvalidIndirection"
    """Non-canonical (longer than necessary) representation."""
    RLP_INCONSISTENT_LENGTH_AND_DATA = "RlpInconsistentLengthAndData"
    """Declared length is inconsistent with the data after it."""
    RLP_INVALID_LENGTH = "RlpInvalidLength"
    """Declared length is invalid and results in overflow."""
    CUSTOM = "Custom"
    """A custom decoding error carrying a message."""


class DecoderError(Exception):
    """An RLP decoding failure of a given kind."""

    def __init__(self, kind: DecoderErrorKind, detail: str | None = None) -> None:
        if not isinstance(kind, DecoderErrorKind):
            raise TypeError(f"expected a DecoderErrorKind, got {kind!r}")
        if kind is DecoderErrorKind.CUSTOM and detail is None:
            raise ValueError("a custom decoder error needs a detail message")
        if kind is not DecoderErrorKind.CUSTOM and detail is not None:
            raise ValueError("only custom decoder errors carry a detail message")
        self.kind = kind
        self.detail = detail
        super().__init__(str(self))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecoderError):
            return NotImplemented
        return (self.kind, self.detail) == (other.kind, other.detail)

    def __hash__(self) -> int:
        return hash((self.kind, self.detail))

    def __str__(self) -> str:
        if self.kind is DecoderErrorKind.CUSTOM:
            return f'{self.kind.value}("{self.detail}")'
        return self.kind.value

    def __repr__(self) -> str:
        if self.detail is None:
            return f"DecoderError({self.kind.name})"
        return f"DecoderError({self.kind.name}, {self.detail!r})"