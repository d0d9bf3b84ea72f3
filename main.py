"""
arena-lru demo - walks through the LRU/TTL cache operations with TOML configuration.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from arena_lru.demo.config import ConfigError, ConfigManager
from arena_lru.demo.runner import DemoRunner
from arena_lru.logging_utils import initLogging
from arena_lru.lru import LruCache

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "cache": {"capacity": 5, "ttl": "1s"},
    "logging": {"level": "WARNING"},
}


def parseArguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="arena-lru demo - exercises an arena-backed LRU cache with TTL expiry, dood!"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml, built-in defaults if missing)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times), dood!",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        help="Override cache.capacity",
    )
    parser.add_argument(
        "--ttl",
        help="Override cache.ttl (seconds or duration like 1500ms, 1m30s)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit, dood!",
    )
    args = parser.parse_args(argv)
    args.config = os.path.abspath(args.config)

    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    return args


def buildConfigManager(args: argparse.Namespace) -> ConfigManager:
    """Load configuration and apply command line overrides."""
    overrides: Dict[str, Any] = {}
    if args.capacity is not None:
        overrides["capacity"] = args.capacity
    if args.ttl is not None:
        overrides["ttl"] = args.ttl

    configManager = ConfigManager(configPath=args.config, configDirs=args.config_dir, defaults=DEFAULT_CONFIG)
    if overrides:
        configManager.updateCacheConfig(overrides)
    return configManager


def prettyPrintConfig(configManager: ConfigManager) -> None:
    """Pretty-print the loaded configuration, dood!"""
    print("=== arena-lru Configuration ===")
    print()
    print(json.dumps(configManager.config, indent=2, ensure_ascii=False, sort_keys=True))
    print()
    print("=== Configuration loaded successfully, dood! ===")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parseArguments(argv)

    try:
        configManager = buildConfigManager(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if args.print_config:
        prettyPrintConfig(configManager)
        return 0

    initLogging(configManager.getLoggingConfig())

    cache: LruCache[int, int] = LruCache.fromConfig(configManager.getCacheConfig())
    runner = DemoRunner.fromConfig(cache, configManager.getDemoConfig())
    try:
        runner.run()
    except KeyboardInterrupt:
        logger.info("Demo stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
