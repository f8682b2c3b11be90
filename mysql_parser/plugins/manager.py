"""
Plugin Manager for SQL dialect plugins.

This module manages plugin registration, discovery, and selection by dialect
name or alias.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from mysql_parser.errors import UnknownDialectError
from mysql_parser.plugins.base import DialectPlugin

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages dialect plugin registration and selection."""

    def __init__(self):
        """Initialize the plugin manager."""
        self._plugins: Dict[str, DialectPlugin] = {}
        self._alias_map: Dict[str, str] = {}
        self._config_cache: Dict[str, Dict] = {}

    def register_plugin(self, plugin: DialectPlugin) -> None:
        """
        Register a dialect plugin.

        Args:
            plugin: DialectPlugin instance to register
        """
        dialect_name = plugin.dialect_name.lower()

        if dialect_name in self._plugins:
            logger.warning(f"Plugin for dialect '{dialect_name}' already registered, overwriting")

        self._plugins[dialect_name] = plugin

        # Map aliases to dialect
        for alias in plugin.aliases:
            alias = alias.lower()
            if alias in self._alias_map:
                logger.warning(
                    f"Alias '{alias}' already mapped to '{self._alias_map[alias]}', "
                    f"overwriting with '{dialect_name}'"
                )
            self._alias_map[alias] = dialect_name

        logger.info(
            f"Registered plugin for dialect '{dialect_name}' "
            f"with aliases: {plugin.aliases}"
        )

    def get_plugin(self, dialect_name: str) -> Optional[DialectPlugin]:
        """
        Get plugin by dialect name or alias.

        Args:
            dialect_name: Name or alias of the dialect (case-insensitive)

        Returns:
            DialectPlugin instance if found, None otherwise
        """
        key = dialect_name.lower()
        plugin = self._plugins.get(key)
        if plugin is None and key in self._alias_map:
            plugin = self._plugins.get(self._alias_map[key])

        if plugin is None:
            logger.debug(f"No plugin found for dialect '{dialect_name}'")
        return plugin

    def require_plugin(self, dialect_name: str) -> DialectPlugin:
        """
        Get plugin by dialect name or alias, failing when none is registered.

        Raises:
            UnknownDialectError: If no plugin matches
        """
        plugin = self.get_plugin(dialect_name)
        if plugin is None:
            raise UnknownDialectError(f"Unknown SQL dialect: {dialect_name}")
        return plugin

    def list_supported_dialects(self) -> List[str]:
        """
        List all registered dialect plugins.

        Returns:
            List of dialect names
        """
        return list(self._plugins.keys())

    def list_supported_aliases(self) -> List[str]:
        return list(self._alias_map.keys())

    def load_plugin_config(self, plugin_dir: Path) -> Dict:
        """
        Load plugin configuration from YAML file.

        Args:
            plugin_dir: Directory containing the plugin and config.yaml

        Returns:
            Dictionary containing plugin configuration

        Raises:
            FileNotFoundError: If config.yaml is not found
            ValueError: If a required field is missing
            yaml.YAMLError: If config.yaml is malformed
        """
        config_path = plugin_dir / "config.yaml"

        # Check cache first
        cache_key = str(config_path)
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        if not config_path.exists():
            raise FileNotFoundError(f"Plugin configuration not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse plugin configuration {config_path}: {e}")
            raise

        # Validate required fields
        required_fields = ['name', 'version', 'aliases']
        for field in required_fields:
            if not isinstance(config, dict) or field not in config:
                raise ValueError(f"Missing required field '{field}' in {config_path}")

        self._config_cache[cache_key] = config

        logger.info(f"Loaded plugin configuration from {config_path}")
        return config

    def discover_plugins(self, plugins_dir: Path) -> List[Dict[str, Any]]:
        """
        Discover plugin configurations under a directory.

        Scans subdirectories for config.yaml files and validates them.
        Instantiation is left to the plugin modules themselves.

        Args:
            plugins_dir: Path to the plugins directory

        Returns:
            The valid plugin configurations found
        """
        if not plugins_dir.exists():
            logger.warning(f"Plugins directory not found: {plugins_dir}")
            return []

        logger.info(f"Discovering plugins in {plugins_dir}")

        configs = []
        for plugin_dir in sorted(plugins_dir.iterdir()):
            if not plugin_dir.is_dir():
                continue

            if not (plugin_dir / "config.yaml").exists():
                logger.debug(f"Skipping {plugin_dir.name}: no config.yaml found")
                continue

            try:
                config = self.load_plugin_config(plugin_dir)
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.error(f"Failed to load plugin from {plugin_dir}: {e}")
                continue

            logger.info(f"Found plugin configuration: {config['name']} v{config['version']}")
            configs.append(config)

        return configs

    def unregister_plugin(self, dialect_name: str) -> bool:
        """
        Unregister a plugin.

        Args:
            dialect_name: Name of the dialect plugin to unregister

        Returns:
            True if plugin was unregistered, False if not found
        """
        dialect_name = dialect_name.lower()
        if dialect_name not in self._plugins:
            return False

        plugin = self._plugins[dialect_name]

        # Remove alias mappings
        for alias in plugin.aliases:
            alias = alias.lower()
            if self._alias_map.get(alias) == dialect_name:
                del self._alias_map[alias]

        del self._plugins[dialect_name]

        logger.info(f"Unregistered plugin for dialect '{dialect_name}'")
        return True

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get plugin manager statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "total_plugins": len(self._plugins),
            "total_aliases": len(self._alias_map),
            "dialects": list(self._plugins.keys())
        }


_plugin_manager: Optional[PluginManager] = None
_plugin_manager_lock = threading.Lock()


def get_plugin_manager() -> PluginManager:
    """Return the process-wide plugin manager with the built-in dialects registered."""
    global _plugin_manager
    with _plugin_manager_lock:
        if _plugin_manager is None:
            from mysql_parser.plugins.mysql import MySQLPlugin

            manager = PluginManager()
            manager.register_plugin(MySQLPlugin())
            _plugin_manager = manager
        return _plugin_manager
