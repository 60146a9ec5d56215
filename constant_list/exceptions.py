"""
Exception types raised by the scanner, the cache and the source adapter.
"""


class ConstantListError(Exception):
    pass


class AnnotationError(ConstantListError):
    """An ``@ConstantList`` tag was found but its comment carries no label."""
    pass


class InvalidKeyError(ConstantListError, ValueError):
    """A cache key is malformed, or a batch argument is not iterable."""
    pass


class SourceUnavailableError(ConstantListError):
    pass
