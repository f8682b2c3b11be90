"""
MySQL dialect plugin.

This plugin provides MySQL parsing into a typed syntax tree and the node
capabilities the normalizer relies on.
"""

from mysql_parser.plugins.mysql.plugin import MySQLPlugin

__all__ = ['MySQLPlugin']
