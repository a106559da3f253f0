"""Single-pass HTML to plain text converter.

The converter is intended to leave text alone as much as possible, so that it
can be run on data which may or may not contain markup.  It is meant for small
snippets (emails, feed entries) and is not a layout engine: tables are not
aligned and nested lists get a single ``* `` marker.

Tags fall into four classes:

* handled tags change the vertical layout or contribute link/image references
* suppressed tags hide their text content (scripts, styles, embedded objects)
* ``head`` is strictly suppressed: links and images inside it are dropped too
* everything else is ignored and its text flows through unchanged
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import IO, Callable

from .base import EndOfStream, Fault, Token, TokenizationFault, TokenKind, TokenSource
from .tokenizer import DEFAULT_CHUNK_SIZE, HTMLTokenSource


class TagClass(Enum):
    IGNORED = "ignored"
    SUPPRESSED = "suppressed"
    STRICTLY_SUPPRESSED = "strictly_suppressed"
    HANDLED = "handled"


IGNORED_TAGS = frozenset({
    "abbr", "acronym", "address", "area", "article", "aside", "audio", "b",
    "base", "basefont", "bdi", "bdo", "big", "body", "button", "canvas",
    "caption", "center", "cite", "code", "col", "colgroup", "datalist", "dd",
    "del", "details", "dfn", "dialog", "dir", "dl", "dt", "em", "fieldset",
    "figcaption", "figure", "font", "footer", "form", "header", "html", "i",
    "input", "ins", "kbd", "keygen", "label", "legend", "main", "map", "mark",
    "menu", "menuitem", "meter", "nav", "noframes", "noscript", "optgroup",
    "option", "output", "param", "progress", "q", "rp", "rt", "ruby", "s",
    "samp", "section", "select", "small", "source", "span", "strike",
    "strong", "sub", "summary", "sup", "tbody", "textarea", "tfoot", "thead",
    "time", "track", "tt", "u", "var", "video", "wbr",
})

SUPPRESSED_TAGS = frozenset({
    "applet", "embed", "frame", "frameset", "iframe", "link", "meta",
    "object", "script", "style", "title",
})

# Void elements: a start tag never opens a window with content to hide.
VOID_SUPPRESSED_TAGS = frozenset({"link", "meta"})

STRICTLY_SUPPRESSED_TAGS = frozenset({"head"})

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

# Start tags
LINE_BREAK_TAGS = frozenset({"div", "ul", "tr", "ol", "p", "br", "table"})
BLANK_LINE_TAGS = HEADING_TAGS | {"pre", "blockquote"}
CELL_TAGS = frozenset({"td", "th"})

# End tags
BLOCK_END_TAGS = HEADING_TAGS | {"ul", "ol", "pre", "table", "blockquote"}

# Self-closing tags
SELF_CLOSING_BREAK_TAGS = frozenset({"div", "li", "br", "p"})

HANDLED_TAGS = (
    LINE_BREAK_TAGS | BLANK_LINE_TAGS | CELL_TAGS
    | {"li", "hr", "a", "img"}
)

_TAG_CLASSES = MappingProxyType({
    **{tag: TagClass.IGNORED for tag in IGNORED_TAGS},
    **{tag: TagClass.SUPPRESSED for tag in SUPPRESSED_TAGS},
    **{tag: TagClass.STRICTLY_SUPPRESSED for tag in STRICTLY_SUPPRESSED_TAGS},
    **{tag: TagClass.HANDLED for tag in HANDLED_TAGS},
})

MAX_NEWLINES = 2


def classify_tag(name: str) -> TagClass:
    """Return the class of a tag name; unknown tags are ignored."""
    return _TAG_CLASSES.get(name.lower(), TagClass.IGNORED)


@dataclass
class ConversionState:
    """Mutable state owned by exactly one conversion."""

    # Consecutive line breaks already written.  Starts saturated so that a
    # document never opens with blank lines.
    newlines: int = MAX_NEWLINES
    url: str | None = None
    suppressed: bool = False
    strictly_suppressed: bool = False


class _Converter:
    def __init__(self, write: Callable[[str], object]) -> None:
        self._write = write
        self.state = ConversionState()
        self._handlers = {
            TokenKind.TEXT: self._text,
            TokenKind.START_TAG: self._start_tag,
            TokenKind.END_TAG: self._end_tag,
            TokenKind.SELF_CLOSING_TAG: self._self_closing_tag,
            TokenKind.COMMENT: self._ignore,
            TokenKind.DOCTYPE: self._ignore,
        }

    def run(self, source: TokenSource) -> None:
        while True:
            result = source.next()
            if isinstance(result, EndOfStream):
                break
            if isinstance(result, Fault):
                raise TokenizationFault(str(result.error)) from result.error
            handler = self._handlers.get(getattr(result, "kind", None))
            if handler is None:
                raise TokenizationFault(f"Unhandled token type: {result!r}")
            handler(result)

        # An anchor with no text after it still gets its URL.
        if self.state.url:
            self._flush_url()

    # -- helpers ------------------------------------------------------------

    def _line_break(self) -> None:
        st = self.state
        if st.newlines < MAX_NEWLINES:
            self._write("\n")
            st.newlines += 1

    def _flush_url(self) -> None:
        self._write(f" ({self.state.url})")
        self.state.url = None

    def _capture_href(self, token: Token) -> None:
        if token.has_attributes:
            for key, value in token.attributes():
                if key == "href":
                    self.state.url = value

    def _image(self, token: Token) -> None:
        st = self.state
        if token.has_attributes:
            src = alt = ""
            for key, value in token.attributes():
                if key == "src":
                    src = value
                elif key == "alt":
                    alt = value
            if alt:
                prefix = "" if st.newlines > 0 else " "
                self._write(f"{prefix}{alt}")
                if src:
                    self._write(f" ({src})")

    # -- token handlers -----------------------------------------------------

    def _ignore(self, token: Token) -> None:
        pass

    def _text(self, token: Token) -> None:
        st = self.state
        if st.suppressed or st.strictly_suppressed:
            return
        text = token.data.strip()
        if text and st.newlines == 0:
            self._write(" ")
        self._write(text)
        if text or st.url:
            st.newlines = 0
        if st.url:
            self._flush_url()

    def _start_tag(self, token: Token) -> None:
        st = self.state
        tag = token.name
        if tag in STRICTLY_SUPPRESSED_TAGS:
            st.strictly_suppressed = True
        elif tag in SUPPRESSED_TAGS:
            if tag not in VOID_SUPPRESSED_TAGS:
                st.suppressed = True
        elif tag in LINE_BREAK_TAGS:
            self._line_break()
        elif tag in BLANK_LINE_TAGS:
            if st.newlines < MAX_NEWLINES:
                self._write("\n\n")
                st.newlines += 1
        elif tag == "li":
            if st.newlines < MAX_NEWLINES:
                self._write("\n")
            self._write("* ")
            st.newlines = MAX_NEWLINES
        elif tag == "hr":
            if st.newlines < MAX_NEWLINES:
                self._write("\n")
            self._write("---\n")
            st.newlines = 1
        elif tag in CELL_TAGS:
            st.newlines = 0
        elif tag == "a":
            if not st.strictly_suppressed:
                self._capture_href(token)
            st.newlines = 0
        elif tag == "img":
            if not st.strictly_suppressed:
                self._image(token)
            st.newlines = 0

    def _end_tag(self, token: Token) -> None:
        st = self.state
        tag = token.name
        if tag in STRICTLY_SUPPRESSED_TAGS:
            st.strictly_suppressed = False
        elif tag in SUPPRESSED_TAGS:
            st.suppressed = False
        elif tag in BLOCK_END_TAGS:
            if st.newlines < MAX_NEWLINES:
                self._write("\n\n")
                st.newlines = min(st.newlines + 2, MAX_NEWLINES)
        elif tag == "hr":
            self._line_break()

    def _self_closing_tag(self, token: Token) -> None:
        st = self.state
        tag = token.name
        if tag in SELF_CLOSING_BREAK_TAGS:
            self._line_break()
        elif tag == "hr":
            if st.newlines < MAX_NEWLINES:
                self._write("\n\n")
            self._write("---\n\n")
            st.newlines = MAX_NEWLINES
        elif tag == "a":
            if not st.strictly_suppressed:
                self._capture_href(token)
            st.newlines = 0
        elif tag == "img":
            if not st.strictly_suppressed:
                self._image(token)
            st.newlines = 0


def _writer_for(writer: IO[str] | IO[bytes]) -> Callable[[str], object]:
    """Return a ``write(str)`` callable for a text or binary stream."""
    if isinstance(writer, (io.RawIOBase, io.BufferedIOBase)):
        return lambda s: writer.write(s.encode("utf-8"))
    return writer.write


def convert(source: TokenSource, writer: IO[str] | IO[bytes]) -> None:
    """Convert the tokens pulled from ``source`` into plain text on ``writer``.

    Raises:
        TokenizationFault: If the source faults or yields an unknown token.
            Text already written is left in place.
    """
    _Converter(_writer_for(writer)).run(source)


def html_to_text(
    reader: IO[bytes] | IO[str],
    writer: IO[str] | IO[bytes],
    *,
    encoding: str = "utf-8",
    errors: str = "strict",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Convert the HTML read from ``reader`` to text written to ``writer``.

    Args:
        reader: Binary or text stream with the (possibly markup-free) input.
        writer: Text stream, or binary stream receiving UTF-8.
        encoding: Encoding of binary input.
        errors: Decode error handler for binary input.
        chunk_size: Read size used when pulling from ``reader``.

    Raises:
        TokenizationFault: If reading, decoding or tokenizing fails.
    """
    source = HTMLTokenSource(reader, encoding=encoding, errors=errors, chunk_size=chunk_size)
    convert(source, writer)


def html_to_text_string(html: str) -> str:
    """Convert a string of HTML into a string of plain text."""
    buf = io.StringIO()
    try:
        convert(HTMLTokenSource(html), buf)
    except TokenizationFault as e:
        e.partial_output = buf.getvalue()
        raise
    return buf.getvalue()
