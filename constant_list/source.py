"""Python class source -> scanner tokens.

Constants are documented with Sphinx-style ``#:`` comment blocks placed
directly above an upper-case class attribute:

    class Document:
        #: Format PDF
        #: in multi line format
        #:
        #: @ConstantList format
        FORMAT_PDF = "PDF"

Python has no ``const`` keyword, so a class-body statement that starts with
an upper-case name bound to a value (``NAME = ...`` or ``NAME: type = ...``)
is reported as a CONSTANT_KEYWORD token followed by the IDENTIFIER. A bare
``NAME: type`` annotation binds nothing and is not a constant.
"""

import inspect
import io
import logging
import re
import textwrap
import tokenize
from functools import partial
from typing import Any, Callable, List

from .exceptions import SourceUnavailableError
from .tokens import Token, TokenKind

logger = logging.getLogger("constant_list.source")

DOC_COMMENT_MARKER = "#:"

CONSTANT_NAME_PATTERN = re.compile(r"[A-Z][A-Z0-9_]*")

# Class body statements sit one indentation level below the class line
CLASS_BODY_DEPTH = 1

_STATEMENT_BOUNDARIES = {tokenize.NEWLINE, tokenize.INDENT, tokenize.DEDENT}
_LAYOUT_TYPES = {tokenize.NEWLINE, tokenize.NL, tokenize.INDENT, tokenize.DEDENT}


def type_identifier(cls: type) -> str:
    """Fully qualified name used to key cached scans."""
    return f"{cls.__module__}.{cls.__qualname__}"


def read_class_source(cls: type) -> str:
    """
    Get the dedented source text of a class.

    Raises:
        SourceUnavailableError: For built-in classes or classes whose source
            file cannot be located
    """
    try:
        source = inspect.getsource(cls)
    except (OSError, TypeError) as e:
        raise SourceUnavailableError(
            f"Cannot read source for {type_identifier(cls)}: {e}"
        ) from e
    return textwrap.dedent(source)


def _is_constant_declaration(raw: List[tokenize.TokenInfo], index: int) -> bool:
    name = raw[index].string
    if not CONSTANT_NAME_PATTERN.fullmatch(name):
        return False
    if index + 1 >= len(raw):
        return False
    following = raw[index + 1]
    if following.type != tokenize.OP:
        return False
    if following.string == "=":
        return True
    # "NAME: type" declares without binding; only "NAME: type = value" counts
    return following.string == ":" and _annotation_binds_value(raw, index + 2)


def _annotation_binds_value(raw: List[tokenize.TokenInfo], start: int) -> bool:
    nesting = 0
    for tok in raw[start:]:
        if tok.type in (tokenize.NEWLINE, tokenize.ENDMARKER):
            return False
        if tok.type != tokenize.OP:
            continue
        if tok.string in ("(", "[", "{"):
            nesting += 1
        elif tok.string in (")", "]", "}"):
            nesting -= 1
        elif tok.string == "=" and nesting == 0:
            return True
    return False


def _is_own_line(tok: tokenize.TokenInfo) -> bool:
    return not tok.line[:tok.start[1]].strip()


def tokenize_source(source: str) -> List[Token]:
    """
    Convert Python class source into scanner tokens.

    Args:
        source: Source text starting at column 0

    Returns:
        Ordered list of Token
    """
    try:
        raw = list(tokenize.generate_tokens(io.StringIO(source).readline))
    except (tokenize.TokenError, SyntaxError) as e:
        raise SourceUnavailableError(f"Cannot tokenize source: {e}") from e

    tokens: List[Token] = []
    doc_lines: List[str] = []
    depth = 0
    at_statement_start = True

    def flush_doc_comment() -> None:
        if doc_lines:
            tokens.append(Token(TokenKind.DOC_COMMENT, "\n".join(doc_lines)))
            doc_lines.clear()

    for index, tok in enumerate(raw):
        if tok.type == tokenize.COMMENT:
            if _is_own_line(tok) and tok.string.startswith(DOC_COMMENT_MARKER):
                doc_lines.append(tok.string[len(DOC_COMMENT_MARKER):])
                continue
            flush_doc_comment()
            tokens.append(Token(TokenKind.INLINE_COMMENT, tok.string))
            continue

        # Line break closing a "#:" line; a blank line ends the block
        if tok.type == tokenize.NL and doc_lines and tok.line.strip():
            continue

        flush_doc_comment()

        if tok.type in _LAYOUT_TYPES:
            if tok.type == tokenize.INDENT:
                depth += 1
            elif tok.type == tokenize.DEDENT:
                depth -= 1
            if tok.type in _STATEMENT_BOUNDARIES:
                at_statement_start = True
            tokens.append(Token(TokenKind.WHITESPACE, tok.string))
            continue

        if (
            tok.type == tokenize.NAME
            and at_statement_start
            and depth == CLASS_BODY_DEPTH
            and _is_constant_declaration(raw, index)
        ):
            tokens.append(Token(TokenKind.CONSTANT_KEYWORD, ""))
            tokens.append(Token(TokenKind.IDENTIFIER, tok.string))
        else:
            tokens.append(Token(TokenKind.OTHER, tok.string))
        at_statement_start = False

    flush_doc_comment()
    return tokens


def tokenize_class(cls: type) -> List[Token]:
    """Read and tokenize the source of a class."""
    tokens = tokenize_source(read_class_source(cls))
    logger.debug(f"Tokenized {type_identifier(cls)}: {len(tokens)} tokens")
    return tokens


def resolver_for(cls: type) -> Callable[[str], Any]:
    """Resolve constant names to their values on the given class."""
    return partial(getattr, cls)
