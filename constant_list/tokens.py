"""Lexical token model consumed by the annotation scanner."""

from enum import Enum
from typing import NamedTuple


class TokenKind(str, Enum):
    """Token kinds the scanner distinguishes."""
    WHITESPACE = "WHITESPACE"
    INLINE_COMMENT = "INLINE_COMMENT"
    DOC_COMMENT = "DOC_COMMENT"
    CONSTANT_KEYWORD = "CONSTANT_KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    OTHER = "OTHER"


class Token(NamedTuple):
    """
    A single lexical unit.

    ``text`` carries the payload for DOC_COMMENT (comment body) and
    IDENTIFIER (the name); other kinds may leave it empty.
    """
    kind: TokenKind
    text: str = ""
