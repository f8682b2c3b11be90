"""
Semantic categories a syntax tree node can satisfy.

A category is a capability: a base class (tested with ``isinstance``) or a
predicate. Categories are not exclusive, so a DDL statement satisfies both
``statement`` and ``ddl``. Each satisfied category becomes one
``<name>_type: <name>`` marker in a NodeView's data.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

Capability = Union[type, Callable[[Any], bool]]

# Baseline category names, in the order their markers are emitted
BASELINE_CATEGORIES = ("statement", "expression", "ddl", "dml")


@dataclass(frozen=True)
class Category:
    """One entry of a category registry."""

    name: str
    capability: Capability
    key: str
    marker: str

    def test(self, node: Any) -> bool:
        if isinstance(self.capability, type):
            return isinstance(node, self.capability)
        return bool(self.capability(node))


class CategoryRegistry:
    """Ordered, extensible set of semantic categories."""

    def __init__(self):
        self._categories: Dict[str, Category] = {}

    @classmethod
    def with_baseline(cls, **capabilities: Capability) -> "CategoryRegistry":
        """
        Build a registry holding the baseline categories.

        Args:
            **capabilities: One capability per name in BASELINE_CATEGORIES

        Raises:
            ValueError: If a baseline capability is missing
        """
        missing = [name for name in BASELINE_CATEGORIES if name not in capabilities]
        if missing:
            raise ValueError(f"Missing baseline categories: {', '.join(missing)}")

        registry = cls()
        for name in BASELINE_CATEGORIES:
            registry.register(name, capabilities.pop(name))
        for name, capability in capabilities.items():
            registry.register(name, capability)
        return registry

    def register(
        self,
        name: str,
        capability: Capability,
        key: Optional[str] = None,
        marker: Optional[str] = None,
    ) -> Category:
        """
        Register a category.

        Args:
            name: Category name
            capability: Base class or predicate a node must satisfy
            key: Data key for the marker (defaults to ``<name>_type``)
            marker: Marker value (defaults to the name)

        Returns:
            The registered Category
        """
        if name in self._categories:
            logger.warning(f"Category '{name}' already registered, overwriting")

        category = Category(
            name=name,
            capability=capability,
            key=key or f"{name}_type",
            marker=marker or name,
        )
        self._categories[name] = category
        return category

    def unregister(self, name: str) -> bool:
        return self._categories.pop(name, None) is not None

    @property
    def names(self) -> List[str]:
        return list(self._categories)

    def matches(self, node: Any) -> Iterator[Category]:
        """
        Yield every category the node satisfies, in registration order.

        A capability test that raises counts as not satisfied.
        """
        for category in self._categories.values():
            try:
                satisfied = category.test(node)
            except Exception:
                logger.debug(
                    f"Category test '{category.name}' failed for {type(node).__name__}",
                    exc_info=True,
                )
                continue
            if satisfied:
                yield category

    def markers(self, node: Any) -> Dict[str, str]:
        return {category.key: category.marker for category in self.matches(node)}
