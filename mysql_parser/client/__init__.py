"""
Client API over the bridge: decoded trees and query helpers.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from mysql_parser.client.ast_node import ASTNode
from mysql_parser.client.parser_result import ParserResult

TOKEN_PATTERN = re.compile(r"\w+|\d+|'[^']*'|[^\w\s]")


def parse(sql: str) -> ParserResult:
    """Parse SQL text into a ParserResult; raises ParseError on invalid SQL."""
    return ParserResult.parse(sql)


def normalize(sql: str) -> str:
    return parse(sql).normalize()


def fingerprint(sql: str) -> str:
    return parse(sql).fingerprint()


def tables(sql: str) -> List[str]:
    return parse(sql).tables()


def filter_columns(sql: str) -> List[Tuple[Optional[str], str]]:
    return parse(sql).filter_columns()


def scan(sql: str) -> Tuple[Dict[str, Any], List[str]]:
    """
    Split SQL text into rough tokens without parsing it.

    Returns:
        ``({"tokens": [...]}, warnings)``
    """
    return {"tokens": TOKEN_PATTERN.findall(sql)}, []


__all__ = [
    "ASTNode",
    "ParserResult",
    "parse",
    "normalize",
    "fingerprint",
    "tables",
    "filter_columns",
    "scan",
]
