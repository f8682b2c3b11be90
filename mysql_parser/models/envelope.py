"""Response envelope data models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, model_validator

from .node_view import NodeView


class Envelope(BaseModel):
    """
    The single response object returned per parse call.

    Exactly one of ``error`` and ``ast`` is populated: ``error`` when
    ``success`` is false, ``ast`` (possibly empty) when it is true.
    """

    success: bool
    error: Optional[str] = None
    ast: Optional[List[NodeView]] = None

    @model_validator(mode="after")
    def check_outcome(self) -> "Envelope":
        if self.success:
            if self.ast is None or self.error is not None:
                raise ValueError("successful envelope needs ast and no error")
        elif not self.error or self.ast is not None:
            raise ValueError("failed envelope needs a non-empty error and no ast")
        return self

    @classmethod
    def ok(cls, ast: List[NodeView]) -> "Envelope":
        return cls(success=True, ast=ast)

    @classmethod
    def failure(cls, error: str) -> "Envelope":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: fields holding their default value are omitted."""
        return self.model_dump(exclude_defaults=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_defaults=True)
