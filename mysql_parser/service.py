"""
Entry points that turn SQL text into an Envelope using the registered dialects.
"""

import threading
from typing import Dict, Optional

from mysql_parser.config import settings
from mysql_parser.core.envelope_builder import EnvelopeBuilder
from mysql_parser.models.envelope import Envelope
from mysql_parser.plugins.manager import get_plugin_manager

_builders: Dict[str, EnvelopeBuilder] = {}
_builders_lock = threading.Lock()


def get_envelope_builder(dialect: Optional[str] = None) -> EnvelopeBuilder:
    """
    Return the envelope builder for a dialect.

    Args:
        dialect: Dialect name or alias; defaults to settings.default_dialect

    Raises:
        UnknownDialectError: If no plugin is registered for the dialect
    """
    plugin = get_plugin_manager().require_plugin(dialect or settings.default_dialect)
    with _builders_lock:
        builder = _builders.get(plugin.dialect_name)
        if builder is None or builder.plugin is not plugin:
            builder = EnvelopeBuilder(plugin)
            _builders[plugin.dialect_name] = builder
    return builder


def build_envelope(sql: str, dialect: Optional[str] = None) -> Envelope:
    """Parse SQL text and return its Envelope."""
    return get_envelope_builder(dialect).build(sql)


def parse_sql_json(sql: str, dialect: Optional[str] = None) -> str:
    """Parse SQL text and return the encoded Envelope."""
    return build_envelope(sql, dialect).to_json()
