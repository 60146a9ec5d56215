"""
Constant lists - labelled enumerations declared with ``@ConstantList``
annotations on class constants.

This package provides:
- A single-pass annotation scanner over lexical tokens
- A Python source adapter built on the standard tokenizer
- A TTL cache with a pluggable backend
- ConstantLists, which memoizes scans per class
"""

from .exceptions import (
    AnnotationError,
    ConstantListError,
    InvalidKeyError,
    SourceUnavailableError,
)
from .tokens import Token, TokenKind
from .scanner import ANNOTATION_PATTERN, extract_label, scan
from .source import resolver_for, tokenize_class, tokenize_source, type_identifier
from .registry import ConstantLists, cache_key_for, parse_class

__all__ = [
    # Errors
    "AnnotationError",
    "ConstantListError",
    "InvalidKeyError",
    "SourceUnavailableError",
    # Tokens
    "Token",
    "TokenKind",
    # Scanner
    "ANNOTATION_PATTERN",
    "extract_label",
    "scan",
    # Source adapter
    "resolver_for",
    "tokenize_class",
    "tokenize_source",
    "type_identifier",
    # Registry
    "ConstantLists",
    "cache_key_for",
    "parse_class",
]
