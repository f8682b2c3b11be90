"""
Exception types raised by the parser, normalizer and bridge.
"""

from typing import Optional


class MySQLParserError(Exception):
    """Base class for all errors raised by this package."""
    pass


class ParseError(MySQLParserError):
    """
    Raised when SQL text cannot be parsed.

    This is the only failure a caller ever sees in an envelope: the message
    is surfaced verbatim as the envelope ``error``.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message or "syntax error")
        self.line = line
        self.column = column


class NormalizationError(MySQLParserError):
    """Raised when a syntax tree cannot be converted at all."""
    pass


class NormalizationDepthError(NormalizationError):
    """Raised when a tree nests deeper than the configured limit."""

    def __init__(self, max_depth: int):
        super().__init__(
            f"statement too deep: nesting exceeds {max_depth} levels"
        )
        self.max_depth = max_depth


class UnknownDialectError(MySQLParserError):
    """Raised when no plugin is registered for a dialect name."""
    pass


class BridgeError(MySQLParserError):
    """Raised on misuse of bridge result buffers (unknown or double release)."""
    pass
