"""
MySQL dialect plugin.

This plugin parses MySQL text with a lark LALR grammar and builds the typed
syntax tree defined in ``ast.py``. The node capabilities the normalizer needs
(rendering, categories, member enumeration) come straight from that tree.
"""

import logging
import math
import re
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

import yaml
from lark import Lark, Token, Transformer_NonRecursive, Tree, v_args
from lark.exceptions import UnexpectedInput, UnexpectedToken, VisitError

from mysql_parser.core.categories import CategoryRegistry
from mysql_parser.errors import ParseError
from mysql_parser.plugins.base import DialectPlugin
from mysql_parser.plugins.mysql import ast

logger = logging.getLogger(__name__)

# Functions rendered as AggregateFuncExpr
AGGREGATE_FUNCTIONS = {
    "AVG", "BIT_AND", "BIT_OR", "BIT_XOR", "COUNT", "GROUP_CONCAT",
    "JSON_ARRAYAGG", "JSON_OBJECTAGG", "MAX", "MIN", "STD", "STDDEV",
    "STDDEV_POP", "STDDEV_SAMP", "SUM", "VAR_POP", "VAR_SAMP", "VARIANCE",
}

_STRING_ESCAPES = {
    "0": "\0",
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "Z": "\x1a",
    "%": "\\%",
    "_": "\\_",
}

# Longest source fragment quoted in a syntax error
_NEAR_LENGTH = 40


def unquote_string(literal: str) -> str:
    """Decode a single- or double-quoted MySQL string literal."""
    quote = literal[0]
    body = literal[1:-1].replace(quote * 2, quote)
    return re.sub(
        r"\\(.)",
        lambda m: _STRING_ESCAPES.get(m.group(1), m.group(1)),
        body,
        flags=re.S,
    )


def unquote_name(token: Token) -> str:
    """Return the identifier a NAME, QUOTED_NAME or STRING token spells."""
    if token.type == "QUOTED_NAME":
        return token[1:-1].replace("``", "`")
    if token.type == "STRING":
        return unquote_string(token)
    return str(token)


def _token_error(token: Token, detail: str = "") -> ParseError:
    """Build a ParseError pointing at ``token``."""
    message = f'syntax error at line {token.line} column {token.column} near "{token}"'
    if detail:
        message += f": {detail}"
    return ParseError(message, line=token.line, column=token.column)


class _StarArg:
    """Marks ``*`` as the argument list of a function call."""


STAR_ARG = _StarArg()


@v_args(inline=True)
class MySQLTransformer(Transformer_NonRecursive):
    """
    Builds ``ast`` nodes from a lark parse tree.

    A new instance is used per parse call; the only state it carries is the
    running count of ``?`` markers.
    """

    def __init__(self):
        super().__init__()
        self._param_count = 0

    # Statements list

    def start(self, *statements):
        return list(statements)

    # SELECT

    def query(self, first, *rest):
        if not rest:
            return first
        return ast.SetOprStmt(
            selects=[first] + list(rest[1::2]),
            operators=list(rest[0::2]),
        )

    def set_op(self, kind, quantifier):
        if quantifier is not None and quantifier.type == "ALL":
            return f"{kind.upper()} ALL"
        return kind.upper()

    def select_core(self, quantifier, fields, from_clause, where, group_by,
                    having, order_by, limit, lock):
        return ast.SelectStmt(
            distinct=quantifier is not None and quantifier.type == "DISTINCT",
            fields=fields,
            from_clause=from_clause,
            where=where,
            group_by=group_by,
            having=having,
            order_by=order_by,
            limit=limit,
            lock=lock or "",
        )

    def select_fields(self, *fields):
        return ast.FieldList(fields=list(fields))

    def field_star(self, _star):
        return ast.SelectField(wildcard=ast.WildCardField())

    def field_table_star(self, table, _star):
        return ast.SelectField(wildcard=ast.WildCardField(table=unquote_name(table)))

    def field_schema_table_star(self, schema, table, _star):
        return ast.SelectField(
            wildcard=ast.WildCardField(schema=unquote_name(schema), table=unquote_name(table))
        )

    def field_expr(self, expr, alias):
        return ast.SelectField(expr=expr, as_name=unquote_name(alias) if alias else "")

    def table_refs(self, *refs):
        join = refs[0]
        for ref in refs[1:]:
            join = ast.Join(left=join, right=ref, tp="CROSS")
        if not isinstance(join, ast.Join):
            join = ast.Join(left=join)
        return ast.TableRefsClause(table_refs=join)

    def join_table(self, left, tp, right, spec):
        join = ast.Join(left=left, right=right, tp=tp)
        if isinstance(spec, ast.OnCondition):
            join.on = spec
        elif spec is not None:
            join.using = spec
        return join

    def join_inner(self):
        return ""

    def join_cross(self):
        return "CROSS"

    def join_left(self):
        return "LEFT"

    def join_right(self):
        return "RIGHT"

    def on_condition(self, expr):
        return ast.OnCondition(expr=expr)

    def using_columns(self, names):
        return [ast.ColumnName(name=name) for name in names]

    def table_source(self, table, alias, hints):
        if hints:
            table.index_hints = hints
        return ast.TableSource(source=table, as_name=unquote_name(alias) if alias else "")

    def derived_table(self, subquery, alias):
        return ast.TableSource(source=subquery, as_name=unquote_name(alias))

    def table_name(self, first, second):
        if second is None:
            return ast.TableName(name=unquote_name(first))
        return ast.TableName(schema=unquote_name(first), name=unquote_name(second))

    def index_hints(self, *hints):
        return list(hints)

    def index_hint(self, hint_type, scope, names):
        return ast.IndexHint(
            hint_type=hint_type.upper(),
            scope=scope or "",
            index_names=names or [],
        )

    def scope_join(self):
        return "JOIN"

    def scope_order_by(self):
        return "ORDER BY"

    def scope_group_by(self):
        return "GROUP BY"

    def group_by(self, *items):
        return ast.GroupByClause(items=list(items))

    def having(self, expr):
        return ast.HavingClause(expr=expr)

    def order_by(self, *items):
        return ast.OrderByClause(items=list(items))

    def by_item(self, expr, direction):
        return ast.ByItem(expr=expr, desc=direction is not None and direction.type == "DESC")

    def limit_count(self, count):
        return ast.Limit(count=count)

    def limit_offset_count(self, offset, count):
        return ast.Limit(count=count, offset=offset)

    def limit_count_offset(self, count, offset):
        return ast.Limit(count=count, offset=offset)

    def lock_for_update(self):
        return "FOR UPDATE"

    def lock_in_share_mode(self):
        return "LOCK IN SHARE MODE"

    def subquery(self, query):
        return ast.SubqueryExpr(query=query)

    # Expressions

    def logic_or(self, left, right):
        return ast.BinaryOperationExpr(op="OR", left=left, right=right)

    def logic_xor(self, left, right):
        return ast.BinaryOperationExpr(op="XOR", left=left, right=right)

    def logic_and(self, left, right):
        return ast.BinaryOperationExpr(op="AND", left=left, right=right)

    def logic_not(self, _not, operand):
        return ast.UnaryOperationExpr(op="NOT", operand=operand)

    def is_null(self, expr, negation, _null):
        return ast.IsNullExpr(expr=expr, negated=negation is not None)

    def is_truth(self, expr, negation, truth):
        return ast.IsTruthExpr(expr=expr, negated=negation is not None, truth=truth.type == "TRUE")

    def comparison(self, left, op, right):
        return ast.BinaryOperationExpr(op=str(op), left=left, right=right)

    def in_list(self, expr, negation, items):
        return ast.PatternInExpr(expr=expr, items=items, negated=negation is not None)

    def in_subquery(self, expr, negation, subquery):
        return ast.PatternInExpr(expr=expr, negated=negation is not None, subquery=subquery)

    def between(self, expr, negation, low, high):
        return ast.BetweenExpr(expr=expr, left=low, right=high, negated=negation is not None)

    def like(self, expr, negation, pattern, escape):
        return ast.PatternLikeExpr(
            expr=expr,
            pattern=pattern,
            negated=negation is not None,
            escape=unquote_string(escape) if escape is not None else None,
        )

    def regexp(self, expr, negation, pattern):
        return ast.PatternRegexpExpr(expr=expr, pattern=pattern, negated=negation is not None)

    def binary(self, left, op, right):
        return ast.BinaryOperationExpr(op=str(op).upper(), left=left, right=right)

    def unary_op(self, op, operand):
        return ast.UnaryOperationExpr(op=str(op), operand=operand)

    def paren(self, expr):
        return ast.ParenthesesExpr(expr=expr)

    def row(self, first, rest):
        return ast.RowExpr(values=[first] + rest)

    def exists(self, subquery):
        return ast.ExistsSubqueryExpr(subquery=subquery)

    def param_marker(self):
        marker = ast.ParamMarkerExpr(order=self._param_count)
        self._param_count += 1
        return marker

    def variable(self, token):
        is_system = token.startswith("@@")
        return ast.VariableExpr(name=token[2:] if is_system else token[1:], is_system=is_system)

    def number(self, token):
        text = str(token)
        if "e" in text or "E" in text:
            value = float(text)
            if math.isinf(value):
                raise _token_error(token, "number out of range")
            return ast.ValueExpr(value=value)
        if "." in text:
            return ast.ValueExpr(value=Decimal(text))
        try:
            return ast.ValueExpr(value=int(text))
        except ValueError:
            # Past the interpreter's int/str digit limit
            return ast.ValueExpr(value=Decimal(text))

    def hex_number(self, token):
        digits = token[2:] if token.startswith("0x") else token[2:-1]
        return ast.ValueExpr(value=ast.BinaryLiteral(digits=digits.upper(), base=16))

    def bit_number(self, token):
        digits = token[2:] if token.startswith("0b") else token[2:-1]
        return ast.ValueExpr(value=ast.BinaryLiteral(digits=digits, base=2))

    def string(self, token):
        return ast.ValueExpr(value=unquote_string(token))

    def null(self, _token):
        return ast.ValueExpr(value=None)

    def true(self, _token):
        return ast.ValueExpr(value=True)

    def false(self, _token):
        return ast.ValueExpr(value=False)

    def column_ref(self, *parts):
        names = [unquote_name(part) for part in parts]
        if len(names) == 3:
            column = ast.ColumnName(schema=names[0], table=names[1], name=names[2])
        elif len(names) == 2:
            column = ast.ColumnName(table=names[0], name=names[1])
        else:
            column = ast.ColumnName(name=names[0])
        return ast.ColumnNameExpr(name=column)

    def func_call(self, name, distinct, args):
        func_name = unquote_name(name).upper()
        star = args is STAR_ARG
        arg_list = [] if star or args is None else args

        if func_name in AGGREGATE_FUNCTIONS:
            return ast.AggregateFuncExpr(
                name=func_name,
                args=arg_list,
                distinct=distinct is not None,
                star=star,
            )
        if distinct is not None or star:
            raise _token_error(name)
        return ast.FuncCallExpr(name=func_name, args=arg_list)

    def func_keyword(self, name):
        return name

    def star_arg(self, _star):
        return STAR_ARG

    def case_expr(self, value, *rest):
        return ast.CaseExpr(value=value, when_clauses=list(rest[:-1]), else_clause=rest[-1])

    def when_clause(self, expr, result):
        return ast.WhenClause(expr=expr, result=result)

    def expr_list(self, *exprs):
        return list(exprs)

    def ident_list(self, *names):
        return [unquote_name(name) for name in names]

    # DML

    def insert_stmt(self, verb, ignore, table, columns, source, on_duplicate):
        return ast.InsertStmt(
            is_replace=verb.type == "REPLACE",
            ignore=ignore is not None,
            table=ast.TableRefsClause(table_refs=ast.Join(left=ast.TableSource(source=table))),
            columns=columns or [],
            on_duplicate=on_duplicate or [],
            **source,
        )

    def column_list(self, names=None):
        return [ast.ColumnName(name=name) for name in names or []]

    def insert_values(self, *rows):
        return {"lists": list(rows)}

    def insert_select(self, query):
        return {"select": query}

    def insert_set(self, *assignments):
        return {"setlist": list(assignments)}

    def value_row(self, *values):
        return ast.RowExpr(values=list(values))

    def default(self):
        return ast.DefaultExpr()

    def on_duplicate(self, *assignments):
        return list(assignments)

    def assignment(self, column, _eq, value):
        return ast.Assignment(column=column.name, expr=value)

    def update_stmt(self, ignore, table_refs, *rest):
        where, order_by, limit = rest[-3:]
        return ast.UpdateStmt(
            ignore=ignore is not None,
            table_refs=table_refs,
            assignments=list(rest[:-3]),
            where=where,
            order_by=order_by,
            limit=limit,
        )

    def delete_stmt(self, ignore, table_refs, where, order_by, limit):
        return ast.DeleteStmt(
            ignore=ignore is not None,
            table_refs=table_refs,
            where=where,
            order_by=order_by,
            limit=limit,
        )

    # DDL

    def create_table_stmt(self, temporary, if_not_exists, table, *rest):
        stmt = ast.CreateTableStmt(
            if_not_exists=bool(if_not_exists),
            temporary=temporary is not None,
            table=table,
        )
        for item in rest:
            if isinstance(item, ast.ColumnDef):
                stmt.cols.append(item)
            elif isinstance(item, ast.Constraint):
                stmt.constraints.append(item)
            else:
                stmt.options.append(item)
        return stmt

    def if_not_exists(self, _not):
        return True

    def if_exists(self):
        return True

    def column_def(self, name, type_name, *options):
        return ast.ColumnDef(
            name=ast.ColumnName(name=unquote_name(name)),
            type_name=type_name,
            options=list(options),
        )

    def data_type(self, name, args, *attributes):
        type_name = name.upper()
        if args:
            type_name += "(" + ",".join(args) + ")"
        for attribute in attributes:
            type_name += " " + attribute.upper()
        return type_name

    def type_args(self, *args):
        return [
            ast.ValueExpr(value=unquote_string(arg)).text() if arg.type == "STRING" else str(arg)
            for arg in args
        ]

    def col_not_null(self, _not, _null):
        return ast.ColumnOption(tp="NOT NULL")

    def col_null(self, _null):
        return ast.ColumnOption(tp="NULL")

    def col_default(self, value):
        return ast.ColumnOption(tp="DEFAULT", expr=value)

    def col_auto_increment(self):
        return ast.ColumnOption(tp="AUTO_INCREMENT")

    def col_primary_key(self):
        return ast.ColumnOption(tp="PRIMARY KEY")

    def col_unique_key(self, _unique):
        return ast.ColumnOption(tp="UNIQUE KEY")

    def col_comment(self, comment):
        return ast.ColumnOption(tp="COMMENT", expr=ast.ValueExpr(value=unquote_string(comment)))

    def col_on_update(self, value):
        return ast.ColumnOption(tp="ON UPDATE", expr=value)

    def col_collate(self, name):
        return ast.ColumnOption(tp="COLLATE", str_value=unquote_name(name))

    def col_charset(self, name):
        return ast.ColumnOption(tp="CHARACTER SET", str_value=unquote_name(name))

    def signed_number(self, sign, number):
        value = self.number(number)
        if sign.type == "MINUS":
            return ast.UnaryOperationExpr(op="-", operand=value)
        return value

    def default_name(self, name):
        return ast.FuncCallExpr(name=name.upper())

    def named_constraint(self, symbol, constraint):
        constraint.symbol = unquote_name(symbol) if symbol else ""
        return constraint

    def pk_constraint(self, keys):
        return ast.Constraint(tp="PRIMARY KEY", keys=keys)

    def unique_constraint(self, _unique, name, keys):
        return ast.Constraint(tp="UNIQUE KEY", name=unquote_name(name) if name else "", keys=keys)

    def index_constraint(self, name, keys):
        return ast.Constraint(tp="INDEX", name=unquote_name(name) if name else "", keys=keys)

    def fk_constraint(self, name, keys, refer):
        return ast.Constraint(
            tp="FOREIGN KEY",
            name=unquote_name(name) if name else "",
            keys=keys,
            refer=refer,
        )

    def key_parts(self, *parts):
        return list(parts)

    def key_part(self, name, length, direction):
        return ast.IndexPartSpecification(
            column=ast.ColumnName(name=unquote_name(name)),
            length=int(length) if length is not None else 0,
            desc=direction is not None and direction.type == "DESC",
        )

    def reference_def(self, table, keys, *actions):
        refer = ast.ReferenceDef(table=table, keys=keys)
        for attribute, option in actions:
            setattr(refer, attribute, option)
        return refer

    def on_delete(self, option):
        return "on_delete", option

    def on_update(self, option):
        return "on_update", option

    def ref_option(self, *words):
        return " ".join(word.upper() for word in words)

    def opt_engine(self, _eq, value):
        return ast.TableOption(tp="ENGINE", value=unquote_name(value))

    def opt_charset(self, _eq, value):
        return ast.TableOption(tp="DEFAULT CHARSET", value=unquote_name(value))

    def opt_collate(self, _eq, value):
        return ast.TableOption(tp="COLLATE", value=unquote_name(value))

    def opt_comment(self, _eq, value):
        return ast.TableOption(tp="COMMENT", value=unquote_string(value))

    def opt_auto_increment(self, _eq, value):
        return ast.TableOption(tp="AUTO_INCREMENT", value=str(value))

    def drop_table_stmt(self, temporary, if_exists, *tables):
        return ast.DropTableStmt(
            if_exists=bool(if_exists),
            temporary=temporary is not None,
            tables=list(tables),
        )

    def truncate_stmt(self, table):
        return ast.TruncateTableStmt(table=table)

    def create_index_stmt(self, unique, name, table, parts):
        return ast.CreateIndexStmt(
            unique=unique is not None,
            index_name=unquote_name(name),
            table=table,
            parts=parts,
        )

    def drop_index_stmt(self, name, table):
        return ast.DropIndexStmt(index_name=unquote_name(name), table=table)

    def create_database_stmt(self, if_not_exists, name):
        return ast.CreateDatabaseStmt(if_not_exists=bool(if_not_exists), name=unquote_name(name))

    def drop_database_stmt(self, if_exists, name):
        return ast.DropDatabaseStmt(if_exists=bool(if_exists), name=unquote_name(name))

    # Other statements

    def use_stmt(self, _use, name):
        return ast.UseStmt(db_name=unquote_name(name))

    def begin_stmt(self):
        return ast.BeginStmt()

    def commit_stmt(self):
        return ast.CommitStmt()

    def rollback_stmt(self):
        return ast.RollbackStmt()

    def explain_stmt(self, stmt):
        return ast.ExplainStmt(stmt=stmt)


class MySQLPlugin(DialectPlugin):
    """MySQL dialect plugin backed by a lark LALR parser."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize the MySQL plugin.

        Args:
            config_path: Path to config.yaml file. If None, uses default location.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        with open(config_path, 'r') as f:
            self._config = yaml.safe_load(f)

        grammar_path = config_path.parent / self._config.get('grammar', 'grammar.lark')
        if not grammar_path.exists():
            raise FileNotFoundError(f"MySQL grammar not found at {grammar_path}")

        self._parser = Lark(
            grammar_path.read_text(encoding="utf-8"),
            parser="lalr",
            lexer="contextual",
            maybe_placeholders=True,
        )

        self._categories = CategoryRegistry.with_baseline(
            statement=ast.StmtNode,
            expression=ast.ExprNode,
            ddl=ast.DDLNode,
            dml=ast.DMLNode,
        )

        logger.info("MySQL plugin initialized successfully")

    @property
    def dialect_name(self) -> str:
        """Return the dialect name."""
        return self._config.get('name', 'mysql')

    @property
    def aliases(self) -> List[str]:
        return list(self._config.get('aliases', []))

    @property
    def version(self) -> str:
        return str(self._config.get('version', '0.0.0'))

    @property
    def categories(self) -> CategoryRegistry:
        return self._categories

    def parse(self, sql: str) -> List[ast.StmtNode]:
        """
        Parse MySQL text into statement nodes.

        Args:
            sql: SQL text holding zero or more ``;``-separated statements

        Returns:
            Statement nodes in source order

        Raises:
            ParseError: If the text is not valid MySQL
        """
        try:
            tree = self._parser.parse(sql)
        except UnexpectedInput as e:
            raise self._syntax_error(sql, e) from e

        try:
            statements = MySQLTransformer().transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, ParseError):
                raise e.orig_exc from e
            raise self._build_error(e) from e

        logger.debug(f"Parsed {len(statements)} MySQL statement(s)")
        return statements

    def is_node(self, value: Any) -> bool:
        return isinstance(value, ast.Node)

    def render_text(self, node: Any) -> str:
        return node.text()

    def _syntax_error(self, sql: str, error: UnexpectedInput) -> ParseError:
        """Build a ParseError pointing at the offending position."""
        at_end = (
            error.pos_in_stream is None
            or error.pos_in_stream < 0
            or (isinstance(error, UnexpectedToken) and error.token.type == "$END")
        )

        if at_end:
            line = sql.count("\n") + 1
            column = len(sql) - (sql.rfind("\n") + 1) + 1
            message = f"syntax error at line {line} column {column}: unexpected end of input"
        else:
            line, column = error.line, error.column
            near = sql[error.pos_in_stream:error.pos_in_stream + _NEAR_LENGTH]
            message = f'syntax error at line {line} column {column} near "{near}"'

        logger.debug(f"MySQL syntax error: {message}")
        return ParseError(message, line=line, column=column)

    def _build_error(self, error: VisitError) -> ParseError:
        """Turn a failure while building the tree into a ParseError at the failing rule."""
        logger.warning(
            f"Failed to build MySQL tree at rule {error.rule}: {error.orig_exc}",
            exc_info=error.orig_exc,
        )
        obj = error.obj
        if isinstance(obj, Tree):
            obj = next(obj.scan_values(lambda value: isinstance(value, Token)), None)
        if isinstance(obj, Token):
            return _token_error(obj, str(error.orig_exc))
        return ParseError(f"syntax error: {error.orig_exc}")
