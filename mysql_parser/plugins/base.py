"""
Base interface for SQL dialect plugins.

A dialect plugin owns a parser and the syntax tree it produces. Besides
parsing, it exposes the per-node capabilities the generic normalizer relies
on, so the normalizer never has to know a concrete node kind.
"""

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Tuple

from mysql_parser.core.categories import CategoryRegistry


class DialectPlugin(ABC):
    """Base interface for SQL dialect plugins."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect name (e.g., 'mysql')."""
        pass

    @property
    def aliases(self) -> List[str]:
        """Return alternative names the dialect can be looked up by."""
        return []

    @property
    def version(self) -> str:
        return "0.0.0"

    @property
    @abstractmethod
    def categories(self) -> CategoryRegistry:
        """Return the semantic categories nodes of this dialect are tested against."""
        pass

    @abstractmethod
    def parse(self, sql: str) -> List[Any]:
        """
        Parse SQL text into top-level statement nodes.

        Args:
            sql: SQL text holding zero or more statements

        Returns:
            Statement nodes in source order (empty for empty input)

        Raises:
            ParseError: If the text is not valid in this dialect
        """
        pass

    @abstractmethod
    def is_node(self, value: Any) -> bool:
        """Return True when a value is a syntax tree node of this dialect."""
        pass

    @abstractmethod
    def render_text(self, node: Any) -> str:
        """
        Render the canonical source text of a node.

        May raise; the normalizer treats any failure as "no text".
        """
        pass

    def type_tag(self, node: Any) -> str:
        """
        Return the stable identity of a node's concrete kind.

        The default uses the fully qualified class name, which is distinct
        per class and identical across calls and processes.
        """
        cls = type(node)
        return f"{cls.__module__}.{cls.__qualname__}"

    def describe_children(self, node: Any) -> Iterable[Tuple[str, Any]]:
        """
        Enumerate a node's public members in declared order.

        The default handles dataclass nodes: every field in declaration
        order, paired with its current value. The normalizer decides which
        values are nodes, collections of nodes, or plain data.

        Args:
            node: Syntax tree node

        Returns:
            Ordered (member name, value) pairs
        """
        return [
            (field.name, getattr(node, field.name))
            for field in dataclasses.fields(node)
            if not field.name.startswith("_")
        ]
