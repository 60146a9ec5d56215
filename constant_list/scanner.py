"""
Annotation scanner.

Walks a token stream once and collects every constant whose doc comment
carries an ``@ConstantList <name>`` tag into a mapping of
list name -> {constant value -> label}.
"""
import logging
import re
from typing import Any, Callable, Dict, Iterable, Optional

from .exceptions import AnnotationError
from .tokens import TokenKind

logger = logging.getLogger("constant_list.scanner")

ANNOTATION_TAG = "@ConstantList"

# First match wins; the rest of the line is ignored
ANNOTATION_PATTERN = re.compile(r"@ConstantList ([A-Za-z_0-9-]+)")

# Comment decoration stripped from both ends of each label line
COMMENT_DECORATION = "/* \t\x0b\0"

# Kinds that never disturb a pending annotation
_TRANSPARENT_KINDS = (TokenKind.WHITESPACE, TokenKind.INLINE_COMMENT)

ConstantListMap = Dict[str, Dict[Any, str]]


def extract_label(comment_text: str) -> str:
    """
    Flatten a doc comment into a single label string.

    Each physical line is stripped of comment decoration; empty lines and the
    tag line itself are dropped, the rest are joined with a single space.

    Raises:
        AnnotationError: If no label line remains
    """
    label_lines = []
    for line in comment_text.splitlines():
        line = line.strip(COMMENT_DECORATION)
        if line and ANNOTATION_TAG not in line:
            label_lines.append(line)

    if not label_lines:
        raise AnnotationError(
            f"Constant annotation has no label: {comment_text!r}"
        )

    return " ".join(label_lines)


def _token_kind(raw_kind: Any) -> TokenKind:
    try:
        return TokenKind(raw_kind)
    except (ValueError, TypeError):
        return TokenKind.OTHER


def scan(
    tokens: Iterable[Any],
    resolve: Optional[Callable[[str], Any]] = None,
) -> ConstantListMap:
    """
    Build the constant lists declared in a token stream.

    A constant is collected when a DOC_COMMENT and a CONSTANT_KEYWORD (in
    either order) precede its IDENTIFIER with only whitespace or inline
    comments in between, and the comment carries an annotation tag. Any
    other token cancels the pending comment and keyword.

    Args:
        tokens: Ordered ``(kind, text)`` tokens; entries with fewer than two
            fields are skipped
        resolve: Maps an identifier to its bound constant value. Defaults to
            using the identifier itself.

    Returns:
        Mapping of list name to {constant value: label}, lists in order of
        first appearance

    Raises:
        AnnotationError: If a tagged comment carries no label text
    """
    constant_lists: ConstantListMap = {}
    pending_comment: Optional[str] = None
    after_const_keyword = False

    for token in tokens:
        if not isinstance(token, (tuple, list)) or len(token) < 2:
            continue

        kind = _token_kind(token[0])
        text = token[1]

        if kind in _TRANSPARENT_KINDS:
            continue

        if kind == TokenKind.DOC_COMMENT:
            pending_comment = text
            continue

        if kind == TokenKind.CONSTANT_KEYWORD:
            after_const_keyword = True
            continue

        if kind == TokenKind.IDENTIFIER and after_const_keyword and pending_comment:
            match = ANNOTATION_PATTERN.search(pending_comment)
            if match:
                list_name = match.group(1)
                entries = constant_lists.setdefault(list_name, {})
                label = extract_label(pending_comment)
                value = resolve(text) if resolve is not None else text
                entries[value] = label
                logger.debug(f"Collected {text} into list '{list_name}': {label!r}")

        # Identifiers and unrelated tokens both close the pending context
        pending_comment = None
        after_const_keyword = False

    return constant_lists
