"""Token model, token source protocol, and the conversion fault."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Protocol, runtime_checkable


class TokenKind(Enum):
    TEXT = "text"
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    SELF_CLOSING_TAG = "self_closing_tag"
    COMMENT = "comment"
    DOCTYPE = "doctype"


@dataclass
class Token:
    """One lexical unit of markup.

    ``data`` holds the tag name for tag tokens and the raw text for text,
    comment and doctype tokens.
    """

    kind: TokenKind
    data: str = ""
    attrs: list[tuple[str, str | None]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.data.lower()

    @property
    def has_attributes(self) -> bool:
        return bool(self.attrs)

    def attributes(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs in source order; valueless attributes give ``""``."""
        for key, value in self.attrs:
            yield key.lower(), value or ""


@dataclass
class EndOfStream:
    """Normal termination of a token stream."""


@dataclass
class Fault:
    """The token source could not produce a next token."""

    error: BaseException


TokenResult = Token | EndOfStream | Fault


@runtime_checkable
class TokenSource(Protocol):
    def next(self) -> TokenResult: ...


class TokenizationFault(Exception):
    """Conversion aborted because the token stream failed.

    Output written before the fault is not rolled back.  The string entry
    point attaches what it had buffered as ``partial_output``.
    """

    def __init__(self, message: str, partial_output: str = "") -> None:
        super().__init__(message)
        self.partial_output = partial_output
