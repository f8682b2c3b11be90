"""Unit tests for CategoryRegistry."""

import pytest

from mysql_parser.core.categories import BASELINE_CATEGORIES, CategoryRegistry


class Statement:
    pass


class DDLStatement(Statement):
    pass


class Expression:
    pass


def baseline(**overrides):
    capabilities = dict(
        statement=Statement,
        expression=Expression,
        ddl=DDLStatement,
        dml=lambda node: False,
    )
    capabilities.update(overrides)
    return CategoryRegistry.with_baseline(**capabilities)


class TestCategoryRegistry:
    """Test cases for CategoryRegistry."""

    def test_baseline_order(self):
        registry = baseline()

        assert registry.names == list(BASELINE_CATEGORIES)

    def test_missing_baseline_category(self):
        with pytest.raises(ValueError, match="dml"):
            CategoryRegistry.with_baseline(statement=Statement, expression=Expression, ddl=DDLStatement)

    def test_extra_categories_follow_baseline(self):
        registry = baseline(query=lambda node: True)

        assert registry.names[-1] == "query"

    def test_markers_are_not_exclusive(self):
        """Test a subclass satisfies its own and its parent's category."""
        registry = baseline()

        assert registry.markers(DDLStatement()) == {
            "statement_type": "statement",
            "ddl_type": "ddl",
        }
        assert registry.markers(Expression()) == {"expression_type": "expression"}
        assert registry.markers(object()) == {}

    def test_predicate_capability(self):
        registry = baseline(dml=lambda node: getattr(node, "writes", False))
        node = Statement()
        node.writes = True

        assert "dml_type" in registry.markers(node)

    def test_custom_key_and_marker(self):
        registry = baseline()
        registry.register("readonly", Expression, key="access", marker="ro")

        assert registry.markers(Expression())["access"] == "ro"

    def test_raising_capability_is_not_satisfied(self):
        def broken(node):
            raise AttributeError("no such member")

        registry = baseline(dml=broken)

        assert registry.markers(Statement()) == {"statement_type": "statement"}

    def test_register_overwrite_warns(self, caplog):
        registry = baseline()
        registry.register("statement", Expression)

        assert registry.markers(Expression())["statement_type"] == "statement"
        assert any("already registered" in r.getMessage() for r in caplog.records)

    def test_unregister(self):
        registry = baseline()

        assert registry.unregister("ddl") is True
        assert registry.unregister("ddl") is False
        assert registry.markers(DDLStatement()) == {"statement_type": "statement"}
