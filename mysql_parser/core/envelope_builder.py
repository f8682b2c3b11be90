"""
Envelope building: one parse call in, one Envelope out.
"""

from typing import List, Optional

from mysql_parser.config import settings
from mysql_parser.core.normalizer import NormalizationStats, Normalizer
from mysql_parser.errors import NormalizationDepthError, ParseError
from mysql_parser.models.envelope import Envelope
from mysql_parser.models.node_view import NodeView
from mysql_parser.utils.logging import get_logger, log_parse_result
from mysql_parser.utils.metrics import ParseMetrics, emit_metric, track_phase

logger = get_logger(__name__)


class EnvelopeBuilder:
    """Runs a dialect plugin's parser and normalizes every statement it returns."""

    def __init__(
        self,
        plugin,
        normalizer: Optional[Normalizer] = None,
        max_sql_length: Optional[int] = None,
    ):
        """
        Initialize the builder.

        Args:
            plugin: DialectPlugin used for parsing and node capabilities
            normalizer: Normalizer to use; one bound to the plugin is created if omitted
            max_sql_length: Longest accepted input; defaults to settings.max_sql_length
        """
        self.plugin = plugin
        self.normalizer = normalizer or Normalizer(plugin)
        self.max_sql_length = (
            max_sql_length if max_sql_length is not None else settings.max_sql_length
        )

    def build(self, sql: str) -> Envelope:
        """
        Parse SQL text and produce exactly one Envelope.

        Input failures (oversized text, syntax errors, nesting beyond the
        depth limit) give ``success=False`` with the diagnostic as ``error``.
        Otherwise every top-level statement is normalized in source order.

        Args:
            sql: SQL text holding zero or more statements

        Returns:
            Envelope describing the outcome
        """
        dialect = self.plugin.dialect_name
        metrics = ParseMetrics(dialect)
        metrics.start()

        if len(sql) > self.max_sql_length:
            return self._reject(
                metrics,
                f"SQL text too long: {len(sql)} characters exceeds {self.max_sql_length}",
            )

        try:
            with track_phase(metrics, "parse"):
                statements = self.plugin.parse(sql)
        except ParseError as e:
            return self._reject(metrics, str(e))

        ast: List[NodeView] = []
        try:
            with track_phase(metrics, "normalize"):
                for statement in statements:
                    stats = NormalizationStats()
                    view = self.normalizer.normalize(statement, stats)
                    if view is None:
                        continue
                    ast.append(view)
                    metrics.record_tree(stats.nodes, stats.partial_nodes, stats.deepest_level)
        except NormalizationDepthError as e:
            return self._reject(metrics, str(e))

        metrics.complete("completed")
        log_parse_result(
            logger,
            dialect,
            success=True,
            statement_count=len(ast),
            duration_ms=sum(metrics.phase_durations.values()),
        )
        emit_metric("parse.nodes", metrics.node_count, dialect=dialect)
        if metrics.partial_count:
            emit_metric("parse.partial_nodes", metrics.partial_count, dialect=dialect)

        return Envelope.ok(ast)

    def _reject(self, metrics: ParseMetrics, error: str) -> Envelope:
        metrics.complete("rejected", error)
        log_parse_result(logger, metrics.dialect, success=False, error=error)
        emit_metric("parse.rejected", 1, dialect=metrics.dialect)
        return Envelope.failure(error)
