"""
Configuration management for the arena-lru demo.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import arena_lru.utils as utils
from arena_lru.lru import CacheConfig

from .types import DemoConfig

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholders with actual values.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute environment variable placeholders in configuration values.

    Placeholders have the form ${VAR_NAME}. Strings, dicts and lists are
    processed, other types are returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Manages configuration loading and validation for the demo, dood!"""

    def __init__(
        self,
        configPath: str = "config.toml",
        configDirs: Optional[List[str]] = None,
        dotEnvFile: str = ".env",
        defaults: Optional[Dict[str, Any]] = None,
    ):
        """Initialize ConfigManager with config file path and optional config directories.

        Values from ``defaults`` are overridden by the loaded files. When
        defaults are given, a missing main config file is not an error.

        Raises:
            ConfigError: If nothing can be loaded or the [cache] or [demo] table is invalid
        """
        self.configPath = configPath
        self.configDirs = configDirs or []
        self.defaults = defaults
        utils.loadDotenv(path=dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())
        self._validateCacheConfig(self.getCacheConfig())
        self._validateDemoConfig(self.getDemoConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        tomlFiles: List[Path] = []
        dirPath = Path(directory)

        if not dirPath.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return tomlFiles

        if not dirPath.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return tomlFiles

        for tomlFile in dirPath.rglob("*.toml"):
            if tomlFile.is_file():
                tomlFiles.append(tomlFile)
                logger.debug(f"Found config file: {tomlFile}")

        return sorted(tomlFiles)  # Sort for consistent ordering

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, dood!"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                # Recursively merge nested dictionaries
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                # Override with new value
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories.

        A broken file inside a config directory is logged and skipped, a
        broken main file is fatal.
        """
        configFile = Path(self.configPath)
        hasConfigFile = configFile.exists()
        if not hasConfigFile and not self.configDirs and self.defaults is None:
            raise ConfigError(f"Configuration file {self.configPath} not found!")

        config: Dict[str, Any] = self._mergeConfigs({}, self.defaults or {})
        if hasConfigFile:
            try:
                with open(configFile, "rb") as f:
                    config = self._mergeConfigs(config, tomli.load(f))
            except (OSError, tomli.TOMLDecodeError) as e:
                raise ConfigError(f"Failed to load configuration {self.configPath}: {e}") from e
            logger.info(f"Loaded main config from {self.configPath}")

        # Load and merge configs from directories
        if self.configDirs:
            logger.info(f"Scanning {len(self.configDirs)} config directories for .toml files, dood!")

            for configDir in self.configDirs:
                tomlFiles = self._findTomlFilesRecursive(configDir)
                logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

                for tomlFile in tomlFiles:
                    try:
                        with open(tomlFile, "rb") as f:
                            dirConfig = tomli.load(f)
                    except (OSError, tomli.TOMLDecodeError) as e:
                        logger.error(f"Failed to load config file {tomlFile}: {e}")
                        # Continue with other files
                        continue

                    config = self._mergeConfigs(config, dirConfig)
                    logger.info(f"Merged config from {tomlFile}")

        logger.info("Configuration loaded and merged successfully, dood!")
        return config

    def _validateCacheConfig(self, cacheConfig: Dict[str, Any]) -> None:
        """Check the [cache] table, raise ConfigError on bad values."""
        capacity = cacheConfig.get("capacity")
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 0:
            raise ConfigError(f"cache.capacity must be a non-negative integer, got {capacity!r}")

        ttl = cacheConfig.get("ttl")
        if ttl is None:
            return
        if isinstance(ttl, str):
            try:
                ttl = utils.parseDuration(ttl)
            except ValueError as e:
                raise ConfigError(f"cache.ttl: {e}") from e
        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or ttl <= 0:
            raise ConfigError(f"cache.ttl must be a positive duration, got {cacheConfig.get('ttl')!r}")

    def _validateDemoConfig(self, demoConfig: Dict[str, Any]) -> None:
        """Check the [demo] table, raise ConfigError on bad values."""
        if not isinstance(demoConfig, dict):
            raise ConfigError(f"[demo] must be a table, got {demoConfig!r}")

        keys = demoConfig.get("keys")
        if keys is not None and (not isinstance(keys, int) or isinstance(keys, bool) or keys < 1):
            raise ConfigError(f"demo.keys must be a positive integer, got {keys!r}")

        pause = demoConfig.get("pause")
        if pause is None:
            return
        if isinstance(pause, str):
            try:
                pause = utils.parseDuration(pause)
            except ValueError as e:
                raise ConfigError(f"demo.pause: {e}") from e
        if isinstance(pause, bool) or not isinstance(pause, (int, float)) or pause < 0:
            raise ConfigError(f"demo.pause must be a non-negative duration, got {demoConfig.get('pause')!r}")

    def updateCacheConfig(self, overrides: Dict[str, Any]) -> None:
        """Override [cache] values (e.g. from the command line) and re-validate them."""
        cacheConfig = {**self.get("cache", {}), **overrides}
        self._validateCacheConfig({"capacity": 0, **cacheConfig})
        self.config["cache"] = cacheConfig

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getCacheConfig(self) -> CacheConfig:
        """Get cache configuration, capacity defaults to 0."""
        cacheConfig = dict(self.get("cache", {}))
        cacheConfig.setdefault("capacity", 0)
        return cacheConfig  # type: ignore[return-value]

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getDemoConfig(self) -> DemoConfig:
        """Get demo walkthrough configuration."""
        return self.get("demo", {})
