"""Generic serializable syntax tree node."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


# Provenance keys a parent stamps onto each child's data
FIELD_NAME_KEY = "field_name"
ARRAY_INDEX_KEY = "array_index"


class NodeView(BaseModel):
    """
    Uniform representation of one syntax tree node.

    ``data`` holds one marker per semantic category the node satisfies plus
    the name (and, for collection members, the position) of the parent
    member the node was found in.
    """

    type: str
    text: str = ""
    children: List['NodeView'] = []
    data: Dict[str, Any] = {}
    partial: bool = False

    @property
    def field_name(self) -> Optional[str]:
        return self.data.get(FIELD_NAME_KEY)

    @property
    def array_index(self) -> Optional[int]:
        return self.data.get(ARRAY_INDEX_KEY)

    def tag_origin(self, field_name: str, index: Optional[int] = None) -> "NodeView":
        """Record which parent member this node came from."""
        self.data[FIELD_NAME_KEY] = field_name
        if index is not None:
            self.data[ARRAY_INDEX_KEY] = index
        return self


# Enable forward references for recursive model
NodeView.model_rebuild()
