"""
Parser exceptions.
"""

from __future__ import annotations


class ParserError(ValueError):
    """Base class for errors raised while building a score."""


class InvalidInstrumentTypeError(ParserError):
    """An instrument type in a performer declaration is not in the vocabulary."""

    def __init__(self, performer_id: str, instrument_type: str) -> None:
        self.performer_id = performer_id
        self.instrument_type = instrument_type
        super().__init__(
            f"Invalid instrument type {instrument_type!r} in declaration of performer "
            f"{performer_id!r}"
        )


class MalformedTokenError(ParserError):
    """A handled identifier arrived with a payload it cannot carry."""

    def __init__(self, index: int, identifier: str, reason: str) -> None:
        self.index = index
        self.identifier = identifier
        super().__init__(f"Malformed {identifier} token at token[{index}]: {reason}")
