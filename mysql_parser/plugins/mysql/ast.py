"""
MySQL syntax tree.

Every node is a dataclass whose fields are declared in source order, so the
generic member enumeration yields children in the order a reader sees them.
Nodes render themselves back to canonical SQL through ``restore``: keywords
upper-cased, identifiers back-quoted, strings single-quoted.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional


class RestoreContext:
    """Accumulates the canonical SQL text of a node."""

    def __init__(self):
        self._parts: List[str] = []

    def write_plain(self, text: str) -> None:
        self._parts.append(text)

    def write_keyword(self, keyword: str) -> None:
        self._parts.append(keyword.upper())

    def write_name(self, name: str) -> None:
        self._parts.append("`" + name.replace("`", "``") + "`")

    def write_string(self, value: str) -> None:
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        self._parts.append("'" + escaped + "'")

    def write_list(self, nodes: List["Node"], separator: str = ", ") -> None:
        for i, node in enumerate(nodes):
            if i:
                self._parts.append(separator)
            node.restore(self)

    def write_names(self, names: List[str]) -> None:
        for i, name in enumerate(names):
            if i:
                self._parts.append(", ")
            self.write_name(name)

    def getvalue(self) -> str:
        return "".join(self._parts)


class Node:
    """Base class of every syntax tree node."""

    def restore(self, ctx: RestoreContext) -> None:
        raise NotImplementedError(f"{type(self).__name__} cannot be restored")

    def text(self) -> str:
        """Return the canonical SQL text of this node."""
        ctx = RestoreContext()
        self.restore(ctx)
        return ctx.getvalue()


# Semantic categories. DDL and DML statements are statements too.

class StmtNode(Node):
    """A top-level statement."""


class ExprNode(Node):
    """A value expression."""


class DDLNode(StmtNode):
    """A data-definition statement."""


class DMLNode(StmtNode):
    """A data-manipulation statement."""


# Expressions

@dataclass(frozen=True)
class BinaryLiteral:
    """
    A hexadecimal (``0x1F``, ``X'1F'``) or bit (``0b101``, ``B'101'``) literal.

    Only the digits and their base are kept; both spellings render in the
    quoted form.
    """

    digits: str
    base: int = 16

    def __int__(self) -> int:
        return int(self.digits, self.base) if self.digits else 0

    def sql(self) -> str:
        prefix = "X" if self.base == 16 else "B"
        return f"{prefix}'{self.digits}'"


@dataclass
class ValueExpr(ExprNode):
    """A literal: number, string, hex or bit value, NULL, TRUE or FALSE."""

    value: Any = None

    def restore(self, ctx: RestoreContext) -> None:
        if self.value is None:
            ctx.write_keyword("NULL")
        elif isinstance(self.value, bool):
            ctx.write_keyword("TRUE" if self.value else "FALSE")
        elif isinstance(self.value, str):
            ctx.write_string(self.value)
        elif isinstance(self.value, (int, Decimal, float)):
            ctx.write_plain(str(self.value))
        elif isinstance(self.value, BinaryLiteral):
            ctx.write_plain(self.value.sql())
        else:
            raise TypeError(f"Unsupported literal {self.value!r}")


@dataclass
class ParamMarkerExpr(ExprNode):
    """A ``?`` placeholder; ``order`` is its zero-based position in the text."""

    order: int = 0

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_plain("?")


@dataclass
class VariableExpr(ExprNode):
    """A user (``@name``) or system (``@@name``) variable."""

    name: str = ""
    is_system: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_plain(("@@" if self.is_system else "@") + self.name)


@dataclass
class ColumnName(Node):
    schema: str = ""
    table: str = ""
    name: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        if self.schema:
            ctx.write_name(self.schema)
            ctx.write_plain(".")
        if self.table:
            ctx.write_name(self.table)
            ctx.write_plain(".")
        ctx.write_name(self.name)


@dataclass
class ColumnNameExpr(ExprNode):
    name: Optional[ColumnName] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.name.restore(ctx)


@dataclass
class BinaryOperationExpr(ExprNode):
    """``left op right``; ``op`` is the upper-case operator text."""

    op: str = ""
    left: Optional[ExprNode] = None
    right: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.left.restore(ctx)
        ctx.write_plain(" ")
        ctx.write_keyword(self.op)
        ctx.write_plain(" ")
        self.right.restore(ctx)


@dataclass
class UnaryOperationExpr(ExprNode):
    op: str = ""
    operand: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword(self.op)
        if self.op.isalpha():
            ctx.write_plain(" ")
        self.operand.restore(ctx)


@dataclass
class IsNullExpr(ExprNode):
    expr: Optional[ExprNode] = None
    negated: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        ctx.write_keyword(" IS NOT NULL" if self.negated else " IS NULL")


@dataclass
class IsTruthExpr(ExprNode):
    expr: Optional[ExprNode] = None
    negated: bool = False
    truth: bool = True

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        ctx.write_keyword(" IS NOT" if self.negated else " IS")
        ctx.write_keyword(" TRUE" if self.truth else " FALSE")


@dataclass
class PatternInExpr(ExprNode):
    """``expr [NOT] IN (list)`` or ``expr [NOT] IN (subquery)``."""

    expr: Optional[ExprNode] = None
    items: List[ExprNode] = field(default_factory=list)
    negated: bool = False
    subquery: Optional["SubqueryExpr"] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        ctx.write_keyword(" NOT IN " if self.negated else " IN ")
        if self.subquery is not None:
            self.subquery.restore(ctx)
        else:
            ctx.write_plain("(")
            ctx.write_list(self.items)
            ctx.write_plain(")")


@dataclass
class PatternLikeExpr(ExprNode):
    expr: Optional[ExprNode] = None
    pattern: Optional[ExprNode] = None
    negated: bool = False
    escape: Optional[str] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        ctx.write_keyword(" NOT LIKE " if self.negated else " LIKE ")
        self.pattern.restore(ctx)
        if self.escape is not None:
            ctx.write_keyword(" ESCAPE ")
            ctx.write_string(self.escape)


@dataclass
class PatternRegexpExpr(ExprNode):
    expr: Optional[ExprNode] = None
    pattern: Optional[ExprNode] = None
    negated: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        ctx.write_keyword(" NOT REGEXP " if self.negated else " REGEXP ")
        self.pattern.restore(ctx)


@dataclass
class BetweenExpr(ExprNode):
    expr: Optional[ExprNode] = None
    left: Optional[ExprNode] = None
    right: Optional[ExprNode] = None
    negated: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        ctx.write_keyword(" NOT BETWEEN " if self.negated else " BETWEEN ")
        self.left.restore(ctx)
        ctx.write_keyword(" AND ")
        self.right.restore(ctx)


@dataclass
class ParenthesesExpr(ExprNode):
    expr: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_plain("(")
        self.expr.restore(ctx)
        ctx.write_plain(")")


@dataclass
class RowExpr(ExprNode):
    """A row constructor, ``(a, b, ...)``; also one row of an INSERT."""

    values: List[ExprNode] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_plain("(")
        ctx.write_list(self.values)
        ctx.write_plain(")")


@dataclass
class DefaultExpr(ExprNode):
    """``DEFAULT`` in a VALUES row or assignment."""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("DEFAULT")


@dataclass
class SubqueryExpr(ExprNode):
    query: Optional[StmtNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_plain("(")
        self.query.restore(ctx)
        ctx.write_plain(")")


@dataclass
class ExistsSubqueryExpr(ExprNode):
    subquery: Optional[SubqueryExpr] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("EXISTS ")
        self.subquery.restore(ctx)


@dataclass
class WhenClause(Node):
    expr: Optional[ExprNode] = None
    result: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("WHEN ")
        self.expr.restore(ctx)
        ctx.write_keyword(" THEN ")
        self.result.restore(ctx)


@dataclass
class CaseExpr(ExprNode):
    value: Optional[ExprNode] = None
    when_clauses: List[WhenClause] = field(default_factory=list)
    else_clause: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("CASE")
        if self.value is not None:
            ctx.write_plain(" ")
            self.value.restore(ctx)
        for clause in self.when_clauses:
            ctx.write_plain(" ")
            clause.restore(ctx)
        if self.else_clause is not None:
            ctx.write_keyword(" ELSE ")
            self.else_clause.restore(ctx)
        ctx.write_keyword(" END")


@dataclass
class FuncCallExpr(ExprNode):
    name: str = ""
    args: List[ExprNode] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword(self.name)
        ctx.write_plain("(")
        ctx.write_list(self.args)
        ctx.write_plain(")")


@dataclass
class AggregateFuncExpr(ExprNode):
    """COUNT, SUM, AVG and friends; ``star`` marks ``COUNT(*)``."""

    name: str = ""
    args: List[ExprNode] = field(default_factory=list)
    distinct: bool = False
    star: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword(self.name)
        ctx.write_plain("(")
        if self.distinct:
            ctx.write_keyword("DISTINCT ")
        if self.star:
            ctx.write_plain("*")
        else:
            ctx.write_list(self.args)
        ctx.write_plain(")")


# SELECT building blocks

@dataclass
class WildCardField(Node):
    schema: str = ""
    table: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        if self.schema:
            ctx.write_name(self.schema)
            ctx.write_plain(".")
        if self.table:
            ctx.write_name(self.table)
            ctx.write_plain(".")
        ctx.write_plain("*")


@dataclass
class SelectField(Node):
    wildcard: Optional[WildCardField] = None
    expr: Optional[ExprNode] = None
    as_name: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        if self.wildcard is not None:
            self.wildcard.restore(ctx)
            return
        self.expr.restore(ctx)
        if self.as_name:
            ctx.write_keyword(" AS ")
            ctx.write_name(self.as_name)


@dataclass
class FieldList(Node):
    fields: List[SelectField] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_list(self.fields)


@dataclass
class IndexHint(Node):
    """``USE|FORCE|IGNORE INDEX [FOR scope] (names)``."""

    hint_type: str = "USE"
    scope: str = ""
    index_names: List[str] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword(self.hint_type + " INDEX")
        if self.scope:
            ctx.write_keyword(" FOR " + self.scope)
        ctx.write_plain(" (")
        ctx.write_names(self.index_names)
        ctx.write_plain(")")


@dataclass
class TableName(Node):
    schema: str = ""
    name: str = ""
    index_hints: List[IndexHint] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        if self.schema:
            ctx.write_name(self.schema)
            ctx.write_plain(".")
        ctx.write_name(self.name)
        for hint in self.index_hints:
            ctx.write_plain(" ")
            hint.restore(ctx)


@dataclass
class TableSource(Node):
    """A table or derived table in a FROM clause, with its alias."""

    source: Optional[Node] = None
    as_name: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        self.source.restore(ctx)
        if self.as_name:
            ctx.write_keyword(" AS ")
            ctx.write_name(self.as_name)


@dataclass
class OnCondition(Node):
    expr: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)


@dataclass
class Join(Node):
    """
    A join of two table references.

    A single table is a Join with no right side. ``tp`` is one of
    ``""`` (inner), ``"CROSS"``, ``"LEFT"`` or ``"RIGHT"``.
    """

    left: Optional[Node] = None
    right: Optional[Node] = None
    tp: str = ""
    on: Optional[OnCondition] = None
    using: List[ColumnName] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        self.left.restore(ctx)
        if self.right is None:
            return
        ctx.write_plain(" ")
        if self.tp:
            ctx.write_keyword(self.tp + " ")
        ctx.write_keyword("JOIN ")
        if isinstance(self.right, Join) and self.right.right is not None:
            ctx.write_plain("(")
            self.right.restore(ctx)
            ctx.write_plain(")")
        else:
            self.right.restore(ctx)
        if self.on is not None:
            ctx.write_keyword(" ON ")
            self.on.restore(ctx)
        if self.using:
            ctx.write_keyword(" USING ")
            ctx.write_plain("(")
            ctx.write_list(self.using)
            ctx.write_plain(")")


@dataclass
class TableRefsClause(Node):
    table_refs: Optional[Join] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.table_refs.restore(ctx)


@dataclass
class ByItem(Node):
    expr: Optional[ExprNode] = None
    desc: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        self.expr.restore(ctx)
        if self.desc:
            ctx.write_keyword(" DESC")


@dataclass
class GroupByClause(Node):
    items: List[ByItem] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("GROUP BY ")
        ctx.write_list(self.items)


@dataclass
class HavingClause(Node):
    expr: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("HAVING ")
        self.expr.restore(ctx)


@dataclass
class OrderByClause(Node):
    items: List[ByItem] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("ORDER BY ")
        ctx.write_list(self.items)


@dataclass
class Limit(Node):
    count: Optional[ExprNode] = None
    offset: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("LIMIT ")
        if self.offset is not None:
            self.offset.restore(ctx)
            ctx.write_plain(",")
        self.count.restore(ctx)


def _restore_tail(ctx: RestoreContext, where, order_by, limit) -> None:
    if where is not None:
        ctx.write_keyword(" WHERE ")
        where.restore(ctx)
    if order_by is not None:
        ctx.write_plain(" ")
        order_by.restore(ctx)
    if limit is not None:
        ctx.write_plain(" ")
        limit.restore(ctx)


# DML statements

@dataclass
class SelectStmt(DMLNode):
    distinct: bool = False
    fields: Optional[FieldList] = None
    from_clause: Optional[TableRefsClause] = None
    where: Optional[ExprNode] = None
    group_by: Optional[GroupByClause] = None
    having: Optional[HavingClause] = None
    order_by: Optional[OrderByClause] = None
    limit: Optional[Limit] = None
    lock: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("SELECT ")
        if self.distinct:
            ctx.write_keyword("DISTINCT ")
        self.fields.restore(ctx)
        if self.from_clause is not None:
            ctx.write_keyword(" FROM ")
            self.from_clause.restore(ctx)
        if self.where is not None:
            ctx.write_keyword(" WHERE ")
            self.where.restore(ctx)
        if self.group_by is not None:
            ctx.write_plain(" ")
            self.group_by.restore(ctx)
        if self.having is not None:
            ctx.write_plain(" ")
            self.having.restore(ctx)
        _restore_tail(ctx, None, self.order_by, self.limit)
        if self.lock:
            ctx.write_plain(" ")
            ctx.write_keyword(self.lock)


@dataclass
class SetOprStmt(DMLNode):
    """SELECTs combined with UNION, EXCEPT or INTERSECT."""

    selects: List[SelectStmt] = field(default_factory=list)
    operators: List[str] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        for i, select in enumerate(self.selects):
            if i:
                ctx.write_plain(" ")
                ctx.write_keyword(self.operators[i - 1])
                ctx.write_plain(" ")
            select.restore(ctx)


@dataclass
class Assignment(Node):
    column: Optional[ColumnName] = None
    expr: Optional[ExprNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        self.column.restore(ctx)
        ctx.write_plain("=")
        self.expr.restore(ctx)


@dataclass
class InsertStmt(DMLNode):
    is_replace: bool = False
    ignore: bool = False
    table: Optional[TableRefsClause] = None
    columns: List[ColumnName] = field(default_factory=list)
    lists: List[RowExpr] = field(default_factory=list)
    setlist: List[Assignment] = field(default_factory=list)
    select: Optional[StmtNode] = None
    on_duplicate: List[Assignment] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("REPLACE " if self.is_replace else "INSERT ")
        if self.ignore:
            ctx.write_keyword("IGNORE ")
        ctx.write_keyword("INTO ")
        self.table.restore(ctx)
        if self.columns:
            ctx.write_plain(" (")
            ctx.write_list(self.columns)
            ctx.write_plain(")")
        if self.setlist:
            ctx.write_keyword(" SET ")
            ctx.write_list(self.setlist)
        elif self.select is not None:
            ctx.write_plain(" ")
            self.select.restore(ctx)
        else:
            ctx.write_keyword(" VALUES ")
            ctx.write_list(self.lists)
        if self.on_duplicate:
            ctx.write_keyword(" ON DUPLICATE KEY UPDATE ")
            ctx.write_list(self.on_duplicate)


@dataclass
class UpdateStmt(DMLNode):
    ignore: bool = False
    table_refs: Optional[TableRefsClause] = None
    assignments: List[Assignment] = field(default_factory=list)
    where: Optional[ExprNode] = None
    order_by: Optional[OrderByClause] = None
    limit: Optional[Limit] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("UPDATE ")
        if self.ignore:
            ctx.write_keyword("IGNORE ")
        self.table_refs.restore(ctx)
        ctx.write_keyword(" SET ")
        ctx.write_list(self.assignments)
        _restore_tail(ctx, self.where, self.order_by, self.limit)


@dataclass
class DeleteStmt(DMLNode):
    ignore: bool = False
    table_refs: Optional[TableRefsClause] = None
    where: Optional[ExprNode] = None
    order_by: Optional[OrderByClause] = None
    limit: Optional[Limit] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("DELETE ")
        if self.ignore:
            ctx.write_keyword("IGNORE ")
        ctx.write_keyword("FROM ")
        self.table_refs.restore(ctx)
        _restore_tail(ctx, self.where, self.order_by, self.limit)


# DDL building blocks

@dataclass
class ColumnOption(Node):
    """
    One column attribute.

    ``tp`` is the upper-case option keyword (``NOT NULL``, ``DEFAULT``,
    ``COMMENT``...); ``expr`` holds the value of DEFAULT, ON UPDATE and
    COMMENT; ``str_value`` the name for COLLATE and CHARACTER SET.
    """

    tp: str = ""
    expr: Optional[ExprNode] = None
    str_value: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword(self.tp)
        if self.expr is not None:
            ctx.write_plain(" ")
            self.expr.restore(ctx)
        elif self.str_value:
            ctx.write_plain(" ")
            ctx.write_plain(self.str_value)


@dataclass
class ColumnDef(Node):
    name: Optional[ColumnName] = None
    type_name: str = ""
    options: List[ColumnOption] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        self.name.restore(ctx)
        ctx.write_plain(" ")
        ctx.write_plain(self.type_name)
        for option in self.options:
            ctx.write_plain(" ")
            option.restore(ctx)


@dataclass
class IndexPartSpecification(Node):
    column: Optional[ColumnName] = None
    length: int = 0
    desc: bool = False

    def restore(self, ctx: RestoreContext) -> None:
        self.column.restore(ctx)
        if self.length:
            ctx.write_plain(f"({self.length})")
        if self.desc:
            ctx.write_keyword(" DESC")


@dataclass
class ReferenceDef(Node):
    table: Optional[TableName] = None
    keys: List[IndexPartSpecification] = field(default_factory=list)
    on_delete: str = ""
    on_update: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("REFERENCES ")
        self.table.restore(ctx)
        ctx.write_plain("(")
        ctx.write_list(self.keys)
        ctx.write_plain(")")
        if self.on_delete:
            ctx.write_keyword(" ON DELETE " + self.on_delete)
        if self.on_update:
            ctx.write_keyword(" ON UPDATE " + self.on_update)


@dataclass
class Constraint(Node):
    """A table constraint; ``tp`` is PRIMARY KEY, UNIQUE KEY, INDEX or FOREIGN KEY."""

    tp: str = ""
    name: str = ""
    keys: List[IndexPartSpecification] = field(default_factory=list)
    refer: Optional[ReferenceDef] = None
    symbol: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        if self.symbol:
            ctx.write_keyword("CONSTRAINT ")
            ctx.write_name(self.symbol)
            ctx.write_plain(" ")
        ctx.write_keyword(self.tp)
        if self.name:
            ctx.write_plain(" ")
            ctx.write_name(self.name)
        ctx.write_plain("(")
        ctx.write_list(self.keys)
        ctx.write_plain(")")
        if self.refer is not None:
            ctx.write_plain(" ")
            self.refer.restore(ctx)


@dataclass
class TableOption(Node):
    tp: str = ""
    value: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword(self.tp)
        ctx.write_plain(" = ")
        if self.tp == "COMMENT":
            ctx.write_string(self.value)
        else:
            ctx.write_plain(self.value)


# DDL statements

@dataclass
class CreateTableStmt(DDLNode):
    if_not_exists: bool = False
    temporary: bool = False
    table: Optional[TableName] = None
    cols: List[ColumnDef] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    options: List[TableOption] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("CREATE TEMPORARY TABLE " if self.temporary else "CREATE TABLE ")
        if self.if_not_exists:
            ctx.write_keyword("IF NOT EXISTS ")
        self.table.restore(ctx)
        ctx.write_plain(" (")
        ctx.write_list(self.cols)
        if self.cols and self.constraints:
            ctx.write_plain(", ")
        ctx.write_list(self.constraints)
        ctx.write_plain(")")
        for option in self.options:
            ctx.write_plain(" ")
            option.restore(ctx)


@dataclass
class DropTableStmt(DDLNode):
    if_exists: bool = False
    temporary: bool = False
    tables: List[TableName] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("DROP TEMPORARY TABLE " if self.temporary else "DROP TABLE ")
        if self.if_exists:
            ctx.write_keyword("IF EXISTS ")
        ctx.write_list(self.tables)


@dataclass
class TruncateTableStmt(DDLNode):
    table: Optional[TableName] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("TRUNCATE TABLE ")
        self.table.restore(ctx)


@dataclass
class CreateIndexStmt(DDLNode):
    unique: bool = False
    index_name: str = ""
    table: Optional[TableName] = None
    parts: List[IndexPartSpecification] = field(default_factory=list)

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("CREATE UNIQUE INDEX " if self.unique else "CREATE INDEX ")
        ctx.write_name(self.index_name)
        ctx.write_keyword(" ON ")
        self.table.restore(ctx)
        ctx.write_plain(" (")
        ctx.write_list(self.parts)
        ctx.write_plain(")")


@dataclass
class DropIndexStmt(DDLNode):
    index_name: str = ""
    table: Optional[TableName] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("DROP INDEX ")
        ctx.write_name(self.index_name)
        ctx.write_keyword(" ON ")
        self.table.restore(ctx)


@dataclass
class CreateDatabaseStmt(DDLNode):
    if_not_exists: bool = False
    name: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("CREATE DATABASE ")
        if self.if_not_exists:
            ctx.write_keyword("IF NOT EXISTS ")
        ctx.write_name(self.name)


@dataclass
class DropDatabaseStmt(DDLNode):
    if_exists: bool = False
    name: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("DROP DATABASE ")
        if self.if_exists:
            ctx.write_keyword("IF EXISTS ")
        ctx.write_name(self.name)


# Other statements

@dataclass
class UseStmt(StmtNode):
    db_name: str = ""

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("USE ")
        ctx.write_name(self.db_name)


@dataclass
class BeginStmt(StmtNode):
    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("START TRANSACTION")


@dataclass
class CommitStmt(StmtNode):
    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("COMMIT")


@dataclass
class RollbackStmt(StmtNode):
    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("ROLLBACK")


@dataclass
class ExplainStmt(StmtNode):
    stmt: Optional[StmtNode] = None

    def restore(self, ctx: RestoreContext) -> None:
        ctx.write_keyword("EXPLAIN ")
        self.stmt.restore(ctx)
