"""
Generic syntax tree normalization.

The normalizer walks a dialect plugin's syntax tree without knowing any
concrete node kind. Everything it learns about a node comes from the
plugin's capability methods: the type tag, the canonical text, the semantic
categories, and the ordered list of members. Introspection failures degrade
the resulting NodeView instead of aborting the walk.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from mysql_parser.config import settings
from mysql_parser.errors import NormalizationDepthError
from mysql_parser.models.node_view import NodeView

logger = logging.getLogger(__name__)


@dataclass
class NormalizationStats:
    """Counters gathered while normalizing the statements of one call."""

    nodes: int = 0
    deepest_level: int = 0
    partial_nodes: int = 0


class Normalizer:
    """Converts plugin syntax tree nodes into NodeView trees."""

    def __init__(self, plugin, max_depth: Optional[int] = None):
        """
        Initialize the normalizer.

        Args:
            plugin: DialectPlugin providing the node capabilities
            max_depth: Deepest nesting level accepted; defaults to settings.max_depth
        """
        self.plugin = plugin
        self.max_depth = max_depth if max_depth is not None else settings.max_depth

    def normalize(
        self,
        node: Any,
        stats: Optional[NormalizationStats] = None
    ) -> Optional[NodeView]:
        """
        Normalize one node and everything reachable from it.

        Args:
            node: Syntax tree node, or None
            stats: Counters to update; a throwaway instance is used when omitted

        Returns:
            NodeView for the node, or None when the node is absent

        Raises:
            NormalizationDepthError: If nesting exceeds max_depth
        """
        if stats is None:
            stats = NormalizationStats()
        return self._visit(node, 1, stats)

    def _visit(self, node: Any, level: int, stats: NormalizationStats) -> Optional[NodeView]:
        if node is None:
            return None

        if level > self.max_depth:
            raise NormalizationDepthError(self.max_depth)

        stats.nodes += 1
        stats.deepest_level = max(stats.deepest_level, level)

        partial = False
        type_tag = self.plugin.type_tag(node)

        try:
            text = self.plugin.render_text(node)
        except Exception as e:
            logger.debug(f"Could not render {type_tag}: {e}")
            text = ""
            partial = True

        data = self.plugin.categories.markers(node)

        try:
            members = list(self.plugin.describe_children(node))
        except Exception as e:
            logger.debug(f"Could not enumerate members of {type_tag}: {e}")
            members = []
            partial = True

        children: List[NodeView] = []
        for field_name, value in members:
            if self.plugin.is_node(value):
                child = self._visit(value, level + 1, stats)
                children.append(child.tag_origin(field_name))
            elif isinstance(value, (list, tuple)):
                for index, element in enumerate(value):
                    if element is None or not self.plugin.is_node(element):
                        continue
                    child = self._visit(element, level + 1, stats)
                    children.append(child.tag_origin(field_name, index))
            # Scalars and foreign objects carry no structure

        if partial:
            stats.partial_nodes += 1

        return NodeView(
            type=type_tag,
            text=text,
            children=children,
            data=data,
            partial=partial,
        )
