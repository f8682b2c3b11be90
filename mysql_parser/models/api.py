"""API request and response data models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    """Body of a parse request."""

    sql: str = Field(..., description="SQL text, one or more statements")
    dialect: Optional[str] = Field(None, description="Dialect name or alias; defaults to the configured dialect")


class DialectInfo(BaseModel):
    """A registered dialect plugin."""

    name: str
    version: str
    aliases: List[str] = []


class DialectListResponse(BaseModel):
    """Registered dialects and plugin statistics."""

    default_dialect: str
    dialects: List[DialectInfo] = []
    statistics: Dict[str, int] = {}
