"""Client-side syntax tree rebuilt from the wire form."""

from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field

from mysql_parser.models.node_view import ARRAY_INDEX_KEY, FIELD_NAME_KEY


class ASTNode(BaseModel):
    """A node of a decoded Envelope ``ast``."""

    type: str = Field(..., description="Type tag of the node's concrete kind")
    text: str = Field("", description="Canonical SQL text of the node")
    children: List['ASTNode'] = Field(default_factory=list, description="Child nodes in member order")
    data: Dict[str, Any] = Field(default_factory=dict, description="Category markers and provenance")
    partial: bool = Field(False, description="True when some node information was dropped")

    @classmethod
    def from_hash(cls, value: Optional[Dict[str, Any]]) -> Optional["ASTNode"]:
        """Build a node from a decoded JSON object; ``None`` stays ``None``."""
        if value is None:
            return None
        return cls(
            type=value["type"],
            text=value.get("text") or "",
            children=[cls.from_hash(child) for child in value.get("children") or []],
            data=value.get("data") or {},
            partial=value.get("partial", False),
        )

    @property
    def short_type(self) -> str:
        """The type tag without its module path."""
        return self.type.rsplit(".", 1)[-1]

    @property
    def field_name(self) -> Optional[str]:
        return self.data.get(FIELD_NAME_KEY)

    @property
    def array_index(self) -> Optional[int]:
        return self.data.get(ARRAY_INDEX_KEY)

    # Semantic categories

    def is_statement(self) -> bool:
        return self.data.get("statement_type") == "statement"

    def is_expression(self) -> bool:
        return self.data.get("expression_type") == "expression"

    def is_ddl(self) -> bool:
        return self.data.get("ddl_type") == "ddl"

    def is_dml(self) -> bool:
        return self.data.get("dml_type") == "dml"

    # Statement kinds

    def is_select_statement(self) -> bool:
        return "SelectStmt" in self.type

    def is_insert_statement(self) -> bool:
        return "InsertStmt" in self.type

    def is_update_statement(self) -> bool:
        return "UpdateStmt" in self.type

    def is_delete_statement(self) -> bool:
        return "DeleteStmt" in self.type

    def is_create_table_statement(self) -> bool:
        return "CreateTableStmt" in self.type

    def is_table_reference(self) -> bool:
        return any(kind in self.short_type for kind in ("TableName", "From", "Join", "Table"))

    def is_where_clause(self) -> bool:
        """
        True for a filtering condition.

        Covers nodes whose kind names a condition (``ON`` conditions) and
        any expression held in a ``where`` member.
        """
        if self.field_name == "where":
            return True
        return "Where" in self.short_type or "Condition" in self.short_type

    def walk(self) -> Iterator["ASTNode"]:
        """Yield this node and its descendants depth-first, parents first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def __repr__(self) -> str:
        return f"<ASTNode type={self.type!r} text={self.text!r} children={len(self.children)}>"


ASTNode.model_rebuild()
