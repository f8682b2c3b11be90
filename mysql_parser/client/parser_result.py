"""
Query helpers over a decoded parse result.
"""

import hashlib
import json
import re
from typing import Iterator, List, Optional, Tuple

from mysql_parser.client.ast_node import ASTNode
from mysql_parser.errors import ParseError
from mysql_parser.utils.logging import get_logger

logger = get_logger(__name__)

# Index hints trailing a rendered table name, e.g. "`t` FORCE INDEX (`idx`)"
INDEX_HINT_PATTERN = re.compile(
    r"\s+(FORCE|USE|IGNORE)\s+INDEX(\s+FOR\s+(JOIN|ORDER\s+BY|GROUP\s+BY))?\s*\([^)]+\).*$",
    re.IGNORECASE | re.DOTALL,
)

# Literals replaced by numbered placeholders, in order of appearance
LITERAL_PATTERN = re.compile(
    r"\b(?:0x[0-9a-fA-F]+|0b[01]+)\b"
    r"|\b[xXbB]'[0-9a-fA-F]*'"
    r"|'(?:[^'\\]|\\.|'')*'"
    r"|\b\d+(?:\.\d+)?\b"
)

FINGERPRINT_LENGTH = 16


class ParserResult:
    """A parsed query: the decoded statement trees plus the source text."""

    def __init__(self, tree: List[ASTNode], query: str, warnings: Optional[List[str]] = None):
        self.tree = tree
        self.query = query
        self.warnings = warnings or []

    @classmethod
    def parse(cls, sql: str, bridge=None) -> "ParserResult":
        """
        Parse SQL text through the bridge.

        Args:
            sql: SQL text holding zero or more statements
            bridge: Bridge to use; the process-wide one if omitted

        Returns:
            ParserResult holding one tree per statement

        Raises:
            ParseError: If the text is not valid SQL
        """
        if bridge is None:
            from mysql_parser.bridge import get_bridge

            bridge = get_bridge()

        address = bridge.parse_sql(sql)
        try:
            result = json.loads(bridge.read_string(address))
        finally:
            bridge.free_string(address)

        if not result["success"]:
            raise ParseError(result["error"])

        tree = [ASTNode.from_hash(node) for node in result.get("ast", [])]
        return cls(tree, sql, [])

    def walk(self) -> Iterator[ASTNode]:
        """Yield every node of every statement, statements in source order."""
        for node in self.tree:
            yield from node.walk()

    def tables(self) -> List[str]:
        """
        Return the distinct tables referenced by the query.

        Names are ``schema.table`` or ``table`` without quoting, in order of
        first appearance.
        """
        tables = []
        for node in self.walk():
            if node.is_table_reference():
                name = self._extract_table_name(node)
                if name and name not in tables:
                    tables.append(name)
        return tables

    def filter_columns(self) -> List[Tuple[Optional[str], str]]:
        """
        Return the distinct (table, column) pairs used in filtering conditions.

        The table is None when the column reference is unqualified.
        """
        columns = []
        for node in self.walk():
            if not node.is_where_clause():
                continue
            for child in node.walk():
                if child.short_type != "ColumnName":
                    continue
                column = self._split_column(child.text)
                if column and column not in columns:
                    columns.append(column)
        return columns

    def normalize(self) -> str:
        """Return the query with every string and number literal replaced by $1, $2, ..."""
        count = 0

        def _placeholder(match):
            nonlocal count
            count += 1
            return f"${count}"

        return LITERAL_PATTERN.sub(_placeholder, self.query)

    def fingerprint(self) -> str:
        """Return a short stable hash identifying the query's normalized shape."""
        digest = hashlib.sha256(self.normalize().encode("utf-8")).hexdigest()
        return digest[:FINGERPRINT_LENGTH]

    def deparse(self) -> str:
        """Return the query text."""
        return self.query

    @staticmethod
    def _extract_table_name(node: ASTNode) -> Optional[str]:
        if node.short_type != "TableName" or not node.text:
            return None
        text = INDEX_HINT_PATTERN.sub("", node.text.strip())
        return text.replace("`", "") or None

    @staticmethod
    def _split_column(text: str) -> Optional[Tuple[Optional[str], str]]:
        parts = [part.replace("``", "`") for part in re.findall(r"`((?:[^`]|``)*)`", text)]
        if not parts:
            return None
        table = parts[-2] if len(parts) > 1 else None
        return table, parts[-1]
