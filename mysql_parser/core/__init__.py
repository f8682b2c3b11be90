"""
Core conversion: syntax tree normalization and envelope building.
"""

from mysql_parser.core.categories import BASELINE_CATEGORIES, Category, CategoryRegistry
from mysql_parser.core.envelope_builder import EnvelopeBuilder
from mysql_parser.core.normalizer import NormalizationStats, Normalizer

__all__ = [
    "BASELINE_CATEGORIES",
    "Category",
    "CategoryRegistry",
    "EnvelopeBuilder",
    "NormalizationStats",
    "Normalizer",
]
