"""unhtml: strip HTML tags from text with minimal reformatting."""

from __future__ import annotations

from .base import EndOfStream, Fault, Token, TokenizationFault, TokenKind, TokenSource
from .converter import convert, html_to_text, html_to_text_string
from .tokenizer import HTMLTokenSource

__all__ = [
    "EndOfStream",
    "Fault",
    "HTMLTokenSource",
    "Token",
    "TokenKind",
    "TokenSource",
    "TokenizationFault",
    "convert",
    "html_to_text",
    "html_to_text_string",
]
