"""Unit tests for the generic Normalizer."""

from dataclasses import dataclass, field
from typing import Any, List, Optional

import pytest

from mysql_parser.core.categories import CategoryRegistry
from mysql_parser.core.normalizer import NormalizationStats, Normalizer
from mysql_parser.errors import NormalizationDepthError
from mysql_parser.plugins.base import DialectPlugin
from mysql_parser.plugins.mysql import MySQLPlugin


class FakeNode:
    """Base class of the fake dialect's nodes."""


@dataclass
class Leaf(FakeNode):
    value: int = 0


@dataclass
class Pair(FakeNode):
    first: Optional[FakeNode] = None
    label: str = ""
    second: Optional[FakeNode] = None


@dataclass
class Bag(FakeNode):
    items: List[Any] = field(default_factory=list)


@dataclass
class Unrenderable(FakeNode):
    child: Optional[FakeNode] = None


@dataclass
class Opaque(FakeNode):
    child: Optional[FakeNode] = None


def explode(node):
    raise RuntimeError("capability test failed")


class FakePlugin(DialectPlugin):
    """Minimal dialect exercising the normalizer's capability contract."""

    def __init__(self):
        self._categories = CategoryRegistry.with_baseline(
            statement=Pair,
            expression=Leaf,
            ddl=lambda node: False,
            dml=lambda node: isinstance(node, Pair) and node.label == "dml",
        )

    @property
    def dialect_name(self) -> str:
        return "fake"

    @property
    def categories(self) -> CategoryRegistry:
        return self._categories

    def parse(self, sql: str) -> List[Any]:
        return []

    def is_node(self, value: Any) -> bool:
        return isinstance(value, FakeNode)

    def render_text(self, node: Any) -> str:
        if isinstance(node, Unrenderable):
            raise ValueError("cannot render")
        if isinstance(node, Leaf):
            return str(node.value)
        return type(node).__name__.lower()

    def describe_children(self, node: Any):
        if isinstance(node, Opaque):
            raise RuntimeError("cannot enumerate")
        return super().describe_children(node)


@pytest.fixture
def plugin():
    return FakePlugin()


@pytest.fixture
def normalizer(plugin):
    return Normalizer(plugin, max_depth=50)


def nested_pairs(depth):
    node = Leaf(1)
    for _ in range(depth - 1):
        node = Pair(first=node)
    return node


class TestNormalizer:
    """Test cases for Normalizer."""

    def test_absent_node(self, normalizer):
        """Test an absent node yields no view."""
        assert normalizer.normalize(None) is None

    def test_leaf(self, normalizer):
        """Test a node without node members."""
        view = normalizer.normalize(Leaf(7))

        assert view.type.endswith("Leaf")
        assert view.text == "7"
        assert view.children == []
        assert view.data == {"expression_type": "expression"}
        assert view.partial is False

    def test_children_in_declared_order(self, normalizer):
        """Test single-valued members become children in declaration order."""
        view = normalizer.normalize(Pair(first=Leaf(1), label="x", second=Leaf(2)))

        assert [child.text for child in view.children] == ["1", "2"]
        assert [child.field_name for child in view.children] == ["first", "second"]
        assert all(child.array_index is None for child in view.children)

    def test_absent_members_are_omitted(self, normalizer):
        """Test None members produce no child."""
        view = normalizer.normalize(Pair(second=Leaf(2)))

        assert len(view.children) == 1
        assert view.children[0].field_name == "second"

    def test_scalar_members_are_ignored(self, normalizer):
        """Test plain data members carry no structure."""
        view = normalizer.normalize(Pair(label="not a node"))

        assert view.children == []

    def test_collection_members(self, normalizer):
        """Test collection elements get increasing indices."""
        view = normalizer.normalize(Bag(items=[Leaf(1), Leaf(2), Leaf(3)]))

        assert [child.array_index for child in view.children] == [0, 1, 2]
        assert [child.field_name for child in view.children] == ["items"] * 3
        assert [child.text for child in view.children] == ["1", "2", "3"]

    def test_collection_skips_absent_and_foreign_elements(self, normalizer):
        """Test None and non-node elements are skipped, keeping source positions."""
        view = normalizer.normalize(Bag(items=[Leaf(1), None, "scalar", Leaf(2)]))

        assert [child.array_index for child in view.children] == [0, 3]

    def test_tuple_collections(self, normalizer):
        """Test tuples are treated like lists."""
        view = normalizer.normalize(Bag(items=(Leaf(1), Leaf(2))))

        assert len(view.children) == 2

    def test_empty_collection(self, normalizer):
        """Test an empty collection produces no children."""
        view = normalizer.normalize(Bag())

        assert view.children == []

    def test_multiple_categories(self, normalizer):
        """Test a node satisfying two categories carries both markers."""
        view = normalizer.normalize(Pair(label="dml"))

        assert view.data == {"statement_type": "statement", "dml_type": "dml"}

    def test_failing_category_is_skipped(self, plugin):
        """Test a capability test that raises counts as not satisfied."""
        plugin.categories.register("broken", explode)
        view = Normalizer(plugin).normalize(Leaf(1))

        assert view.data == {"expression_type": "expression"}

    def test_extra_category(self, plugin):
        """Test categories registered after the baseline are emitted."""
        plugin.categories.register("bag", Bag, key="container", marker="yes")
        view = Normalizer(plugin).normalize(Bag())

        assert view.data == {"container": "yes"}

    def test_render_failure_marks_partial(self, normalizer):
        """Test a render failure gives empty text but keeps children."""
        stats = NormalizationStats()
        view = normalizer.normalize(Unrenderable(child=Leaf(3)), stats)

        assert view.text == ""
        assert view.partial is True
        assert len(view.children) == 1
        assert view.children[0].partial is False
        assert stats.partial_nodes == 1

    def test_enumeration_failure_marks_partial(self, normalizer):
        """Test an enumeration failure gives no children but keeps the text."""
        view = normalizer.normalize(Opaque(child=Leaf(3)))

        assert view.text == "opaque"
        assert view.children == []
        assert view.partial is True

    def test_partial_child_inside_complete_parent(self, normalizer):
        """Test partial status is per node."""
        view = normalizer.normalize(Pair(first=Unrenderable()))

        assert view.partial is False
        assert view.children[0].partial is True

    def test_type_tags(self, normalizer):
        """Test same kind gives the same tag and different kinds differ."""
        view = normalizer.normalize(Pair(first=Leaf(1), second=Leaf(2)))

        assert view.children[0].type == view.children[1].type
        assert view.type != view.children[0].type

    def test_deterministic(self, normalizer):
        """Test normalizing the same tree twice gives equal views."""
        tree = Pair(first=Bag(items=[Leaf(1), Leaf(2)]), label="dml", second=Leaf(3))

        assert normalizer.normalize(tree).model_dump() == normalizer.normalize(tree).model_dump()

    def test_stats(self, normalizer):
        """Test node counting and depth tracking."""
        stats = NormalizationStats()
        normalizer.normalize(Pair(first=Bag(items=[Leaf(1), Leaf(2)]), second=Leaf(3)), stats)

        assert stats.nodes == 5
        assert stats.deepest_level == 3
        assert stats.partial_nodes == 0

    def test_depth_limit(self, plugin):
        """Test nesting beyond the limit is rejected."""
        normalizer = Normalizer(plugin, max_depth=5)

        assert normalizer.normalize(nested_pairs(5)) is not None
        with pytest.raises(NormalizationDepthError) as exc_info:
            normalizer.normalize(nested_pairs(6))

        assert exc_info.value.max_depth == 5
        assert "5" in str(exc_info.value)

    def test_default_depth_from_settings(self, plugin):
        """Test max_depth falls back to settings."""
        from mysql_parser.config import settings

        assert Normalizer(plugin).max_depth == settings.max_depth


class TestNormalizerWithMySQL:
    """Test normalization of real MySQL trees."""

    @pytest.fixture(scope="class")
    def mysql(self):
        return MySQLPlugin()

    def test_select_tree(self, mysql):
        """Test the shape of a normalized SELECT."""
        statement = mysql.parse("SELECT id, name FROM users WHERE id = 1")[0]
        view = Normalizer(mysql).normalize(statement)

        assert view.type == "mysql_parser.plugins.mysql.ast.SelectStmt"
        assert view.text == "SELECT `id`, `name` FROM `users` WHERE `id` = 1"
        assert view.data == {"statement_type": "statement", "dml_type": "dml"}
        assert [child.field_name for child in view.children] == ["fields", "from_clause", "where"]

        fields = view.children[0]
        assert [child.array_index for child in fields.children] == [0, 1]
        assert fields.children[1].text == "`name`"

    def test_where_expression_markers(self, mysql):
        """Test expressions carry the expression marker."""
        statement = mysql.parse("SELECT 1 FROM t WHERE a = 1")[0]
        where = Normalizer(mysql).normalize(statement).children[-1]

        assert where.field_name == "where"
        assert where.data["expression_type"] == "expression"
        assert where.text == "`a` = 1"

    def test_ddl_markers(self, mysql):
        """Test DDL statements are statements too."""
        statement = mysql.parse("CREATE TABLE t (a INT)")[0]
        view = Normalizer(mysql).normalize(statement)

        assert view.data == {"statement_type": "statement", "ddl_type": "ddl"}
