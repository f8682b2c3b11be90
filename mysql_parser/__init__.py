"""
MySQL parser: converts MySQL text into uniform, serializable syntax trees.

Typical use::

    import mysql_parser

    envelope = mysql_parser.build_envelope("SELECT 1")
    result = mysql_parser.parse("SELECT * FROM users WHERE id = 1")
    result.tables()  # ['users']
"""

__version__ = "0.1.0"

from mysql_parser.client import (
    ASTNode,
    ParserResult,
    filter_columns,
    fingerprint,
    normalize,
    parse,
    scan,
    tables,
)
from mysql_parser.errors import (
    BridgeError,
    MySQLParserError,
    NormalizationDepthError,
    NormalizationError,
    ParseError,
    UnknownDialectError,
)
from mysql_parser.models import Envelope, NodeView
from mysql_parser.service import build_envelope, parse_sql_json

__all__ = [
    "__version__",
    # Envelope building
    "build_envelope",
    "parse_sql_json",
    "Envelope",
    "NodeView",
    # Client helpers
    "parse",
    "normalize",
    "fingerprint",
    "tables",
    "filter_columns",
    "scan",
    "ASTNode",
    "ParserResult",
    # Errors
    "MySQLParserError",
    "ParseError",
    "NormalizationError",
    "NormalizationDepthError",
    "UnknownDialectError",
    "BridgeError",
]
