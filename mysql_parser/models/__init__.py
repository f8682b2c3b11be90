"""Data models for the MySQL parser."""

from .api import DialectInfo, DialectListResponse, ParseRequest
from .envelope import Envelope
from .node_view import ARRAY_INDEX_KEY, FIELD_NAME_KEY, NodeView

__all__ = [
    # Tree models
    "NodeView",
    "FIELD_NAME_KEY",
    "ARRAY_INDEX_KEY",
    # Response models
    "Envelope",
    # API models
    "ParseRequest",
    "DialectInfo",
    "DialectListResponse",
]
