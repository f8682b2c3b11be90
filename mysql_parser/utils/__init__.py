"""
Utility modules for the MySQL parser.
"""

from mysql_parser.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_parse_result,
    log_error_with_context,
)
from mysql_parser.utils.metrics import (
    ParseMetrics,
    track_phase,
    emit_metric,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_parse_result",
    "log_error_with_context",
    "ParseMetrics",
    "track_phase",
    "emit_metric",
]
