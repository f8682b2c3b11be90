"""Unit tests for the client API."""

import pytest

import mysql_parser
from mysql_parser.bridge import Bridge
from mysql_parser.client import ASTNode, ParserResult, scan
from mysql_parser.core.envelope_builder import EnvelopeBuilder
from mysql_parser.errors import ParseError
from mysql_parser.plugins.mysql import MySQLPlugin


@pytest.fixture(scope="module")
def bridge():
    return Bridge(EnvelopeBuilder(MySQLPlugin()))


def parse(sql, bridge):
    return ParserResult.parse(sql, bridge=bridge)


class TestASTNode:
    """Test cases for ASTNode."""

    def test_from_hash_none(self):
        assert ASTNode.from_hash(None) is None

    def test_from_hash(self):
        """Test building a tree from decoded JSON."""
        node = ASTNode.from_hash({
            "type": "pkg.ast.SelectStmt",
            "text": "SELECT 1",
            "data": {"statement_type": "statement", "dml_type": "dml"},
            "children": [
                {"type": "pkg.ast.FieldList", "text": "1", "data": {"field_name": "fields"}},
            ],
        })

        assert node.short_type == "SelectStmt"
        assert node.is_statement() and node.is_dml() and not node.is_ddl()
        assert node.is_select_statement()
        assert node.partial is False
        assert node.children[0].field_name == "fields"
        assert node.children[0].array_index is None
        assert node.children[0].children == []

    def test_missing_optional_fields(self):
        """Test omitted wire fields take their defaults."""
        node = ASTNode.from_hash({"type": "pkg.ast.DefaultExpr"})

        assert node.text == ""
        assert node.children == []
        assert node.data == {}

    def test_table_reference_predicate(self):
        for kind in ("TableName", "TableSource", "TableRefsClause", "Join"):
            assert ASTNode(type=f"pkg.ast.{kind}").is_table_reference()
        assert not ASTNode(type="pkg.ast.ColumnName").is_table_reference()

    def test_where_clause_predicate(self):
        assert ASTNode(type="pkg.ast.OnCondition").is_where_clause()
        assert ASTNode(type="pkg.ast.BinaryOperationExpr", data={"field_name": "where"}).is_where_clause()
        assert not ASTNode(type="pkg.ast.BinaryOperationExpr", data={"field_name": "left"}).is_where_clause()

    def test_walk_preorder(self):
        node = ASTNode(
            type="a",
            children=[
                ASTNode(type="b", children=[ASTNode(type="c")]),
                ASTNode(type="d"),
            ],
        )

        assert [n.type for n in node.walk()] == ["a", "b", "c", "d"]


class TestParserResult:
    """Test cases for ParserResult."""

    def test_parse(self, bridge):
        result = parse("SELECT 1; SELECT 2", bridge)

        assert [node.text for node in result.tree] == ["SELECT 1", "SELECT 2"]
        assert result.warnings == []
        assert bridge.outstanding == 0

    def test_parse_error(self, bridge):
        with pytest.raises(ParseError, match="syntax error"):
            parse("SELEKT 1", bridge)

        assert bridge.outstanding == 0

    def test_statement_predicates(self, bridge):
        result = parse(
            "SELECT 1; INSERT INTO t VALUES (1); UPDATE t SET a = 1; DELETE FROM t; CREATE TABLE t (a INT)",
            bridge,
        )
        select, insert, update, delete, create = result.tree

        assert select.is_select_statement()
        assert insert.is_insert_statement()
        assert update.is_update_statement()
        assert delete.is_delete_statement()
        assert create.is_create_table_statement() and create.is_ddl()

    def test_tables(self, bridge):
        result = parse("SELECT * FROM users u JOIN orders o ON u.id = o.user_id JOIN users x", bridge)

        assert result.tables() == ["users", "orders"]

    def test_tables_strip_schema_quotes_and_hints(self, bridge):
        result = parse("SELECT * FROM `db`.`users` FORCE INDEX (idx)", bridge)

        assert result.tables() == ["db.users"]

    def test_tables_in_subquery_and_dml(self, bridge):
        result = parse(
            "INSERT INTO audit (id) SELECT id FROM events WHERE id IN (SELECT id FROM archive)",
            bridge,
        )

        assert result.tables() == ["audit", "events", "archive"]

    def test_filter_columns(self, bridge):
        result = parse(
            "SELECT u.name FROM users u JOIN orders o ON u.id = o.user_id "
            "WHERE u.age > 30 AND status = 'x'",
            bridge,
        )

        assert result.filter_columns() == [
            ("u", "id"),
            ("o", "user_id"),
            ("u", "age"),
            (None, "status"),
        ]

    def test_filter_columns_without_where(self, bridge):
        assert parse("SELECT a FROM t", bridge).filter_columns() == []

    def test_normalize(self):
        result = ParserResult([], "SELECT * FROM t1 WHERE a = 1 AND b = 'x' AND c = 2.5")

        assert result.normalize() == "SELECT * FROM t1 WHERE a = $1 AND b = $2 AND c = $3"

    def test_normalize_quoted_escapes(self):
        result = ParserResult([], "SELECT 'it''s', 'a\\'b'")

        assert result.normalize() == "SELECT $1, $2"

    def test_normalize_hex_and_bit_literals(self):
        result = ParserResult([], "SELECT * FROM t WHERE a = 0x1F AND b = X'0A' AND c = b'101'")

        assert result.normalize() == "SELECT * FROM t WHERE a = $1 AND b = $2 AND c = $3"

    def test_fingerprint(self):
        first = ParserResult([], "SELECT * FROM t WHERE a = 1").fingerprint()
        second = ParserResult([], "SELECT * FROM t WHERE a = 2").fingerprint()
        other = ParserResult([], "SELECT * FROM t WHERE b = 1").fingerprint()

        assert first == second
        assert first != other
        assert len(first) == 16

    def test_deparse(self):
        assert ParserResult([], "select 1").deparse() == "select 1"

    def test_walk_covers_all_statements(self, bridge):
        result = parse("SELECT 1; SELECT 2", bridge)
        statements = [node for node in result.walk() if node.is_statement()]

        assert len(statements) == 2


class TestModuleHelpers:
    """Test the package-level helpers."""

    def test_tables(self):
        assert mysql_parser.tables("SELECT * FROM a JOIN b ON a.id = b.id") == ["a", "b"]

    def test_filter_columns(self):
        assert mysql_parser.filter_columns("SELECT * FROM t WHERE t.x = 1") == [("t", "x")]

    def test_normalize_and_fingerprint(self):
        assert mysql_parser.normalize("SELECT * FROM t WHERE a = 5") == "SELECT * FROM t WHERE a = $1"
        assert mysql_parser.fingerprint("SELECT 1") == mysql_parser.fingerprint("SELECT 2")

    def test_parse_error(self):
        with pytest.raises(ParseError):
            mysql_parser.parse("SELECT FROM")

    @pytest.mark.parametrize("sql", ["SELECT FROM", "SELECT * FROM WHERE", "SELECT select"])
    def test_reserved_word_parse_error(self, sql):
        with pytest.raises(ParseError, match="syntax error"):
            mysql_parser.parse(sql)

    def test_scan(self):
        tokens, warnings = scan("SELECT a FROM t WHERE b = 'x y'")

        assert tokens == {"tokens": ["SELECT", "a", "FROM", "t", "WHERE", "b", "=", "'x y'"]}
        assert warnings == []
