"""Pull-based HTML token source (stdlib only)."""

from __future__ import annotations

import codecs
import io
from collections import deque
from html.parser import HTMLParser
from typing import IO

from .base import EndOfStream, Fault, Token, TokenKind, TokenResult

DEFAULT_CHUNK_SIZE = 8192


class _TokenCollector(HTMLParser):
    """Turns HTMLParser callbacks into a queue of tokens.

    Character data arrives in arbitrary pieces depending on how the input was
    chunked, so it is buffered and emitted as one TEXT token when the next
    non-text event (or the end of input) is seen.
    """

    # Raw text elements: markup inside them is character data, not tags.
    CDATA_CONTENT_ELEMENTS = ("script", "style", "title", "iframe")

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.tokens: deque[Token] = deque()
        self._text_parts: list[str] = []

    def _flush_text(self) -> None:
        if self._text_parts:
            self.tokens.append(Token(TokenKind.TEXT, "".join(self._text_parts)))
            self._text_parts = []

    def _emit(self, token: Token) -> None:
        self._flush_text()
        self.tokens.append(token)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._emit(Token(TokenKind.START_TAG, tag, list(attrs)))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._emit(Token(TokenKind.SELF_CLOSING_TAG, tag, list(attrs)))

    def handle_endtag(self, tag: str) -> None:
        self._emit(Token(TokenKind.END_TAG, tag))

    def handle_data(self, data: str) -> None:
        self._text_parts.append(data)

    def handle_comment(self, data: str) -> None:
        self._emit(Token(TokenKind.COMMENT, data))

    def handle_pi(self, data: str) -> None:
        self._emit(Token(TokenKind.COMMENT, data))

    def handle_decl(self, decl: str) -> None:
        self._emit(Token(TokenKind.DOCTYPE, decl))

    def unknown_decl(self, data: str) -> None:
        # <![CDATA[...]]> and friends carry no readable flow in HTML
        self._emit(Token(TokenKind.COMMENT, data))

    def close(self) -> None:
        super().close()
        self._flush_text()


class HTMLTokenSource:
    """Pull tokens from an HTML document read incrementally from ``reader``.

    ``reader`` may be a binary stream (decoded with ``encoding``/``errors``),
    a text stream, or a plain ``str``/``bytes`` document.
    """

    def __init__(
        self,
        reader: IO[bytes] | IO[str] | str | bytes,
        encoding: str = "utf-8",
        errors: str = "strict",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if isinstance(reader, str):
            reader = io.StringIO(reader)
        elif isinstance(reader, (bytes, bytearray)):
            reader = io.BytesIO(reader)
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._reader = reader
        self._chunk_size = chunk_size
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._collector = _TokenCollector()
        self._exhausted = False
        self._fault: Fault | None = None

    def next(self) -> TokenResult:
        tokens = self._collector.tokens
        while not tokens:
            if self._fault is not None:
                return self._fault
            if self._exhausted:
                return EndOfStream()
            try:
                self._refill()
            except Exception as e:
                self._fault = Fault(e)
        return tokens.popleft()

    def _refill(self) -> None:
        chunk = self._reader.read(self._chunk_size)
        if not chunk:
            self._exhausted = True
            tail = self._decoder.decode(b"", final=True)
            if tail:
                self._collector.feed(tail)
            self._collector.close()
            return
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(chunk)
        self._collector.feed(chunk)
