"""
SQL dialect plugin architecture.

This package provides the plugin system for dialect-specific parsing,
including the base plugin interface and plugin manager.
"""

from mysql_parser.plugins.base import DialectPlugin
from mysql_parser.plugins.manager import PluginManager, get_plugin_manager

__all__ = ['DialectPlugin', 'PluginManager', 'get_plugin_manager']
