"""
Logging setup for arena-lru programs.

The cache library under arena_lru.lru only emits records through module
loggers and never installs handlers. Programs call initLogging() with their
[logging] table:

    [logging]
    level = "INFO"
    format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    console = true
    file = "logs/arena-lru.log"
    rotate = true

    [logging.logger."arena_lru.lru"]
    level = "DEBUG"
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_ROOT_LEVEL = logging.INFO

# The core logs every eviction and sweep at DEBUG, keep it quiet unless a
# [logging.logger.<name>] table asks for more
DEFAULT_LOGGER_CONFIGS: Dict[str, Dict[str, Any]] = {
    "arena_lru.lru": {"level": "WARNING"},
}

# Daily files kept by the rotating handler
ROTATE_BACKUP_DAYS = 7


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Map a level name like "debug" to its logging constant, ``default`` if unknown."""
    level = logging.getLevelNamesMapping().get(str(levelStr).upper())
    if level is None:
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def createHandlers(config: Dict[str, Any], level: int) -> List[logging.Handler]:
    """Build the console and file handlers a [logging] table asks for.

    A log file that cannot be opened is reported and skipped, so a bad path
    never stops the program.
    """
    handlers: List[logging.Handler] = []

    if config.get("console", False):
        handlers.append(logging.StreamHandler())

    logFile = config.get("file")
    if logFile:
        try:
            Path(logFile).parent.mkdir(parents=True, exist_ok=True)
            if config.get("rotate", False):
                handlers.append(
                    TimedRotatingFileHandler(
                        filename=logFile,
                        when="midnight",
                        backupCount=ROTATE_BACKUP_DAYS,
                        encoding="utf-8",
                    )
                )
            else:
                handlers.append(logging.FileHandler(logFile, encoding="utf-8"))
        except OSError as e:
            logger.error(f"Cannot log to {logFile}: {e}")

    formatter = logging.Formatter(config.get("format", DEFAULT_FORMAT))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """Apply one [logging] or [logging.logger.<name>] table to a logger.

    Handlers from an earlier call are replaced, so configuring twice does not
    duplicate output. An unknown level name leaves the current level alone.
    """
    if "level" in config:
        level = getLogLevelByStr(config["level"])
        if level is not None:
            localLogger.setLevel(level)

    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)

    for handler in createHandlers(config, localLogger.getEffectiveLevel()):
        localLogger.addHandler(handler)
        logger.debug(f"Added {type(handler).__name__} to logger '{localLogger.name}'")


def initLogging(config: Dict[str, Any]) -> None:
    """Configure the root logger and the per-logger overrides, dood!"""
    rootLogger = logging.getLogger()
    rootLogger.setLevel(DEFAULT_ROOT_LEVEL)
    configureLogger(rootLogger, config)

    loggerConfigs = {name: dict(loggerConfig) for name, loggerConfig in DEFAULT_LOGGER_CONFIGS.items()}
    for loggerName, loggerConfig in config.get("logger", {}).items():
        loggerConfigs[loggerName] = {**loggerConfigs.get(loggerName, {}), **loggerConfig}

    for loggerName, loggerConfig in loggerConfigs.items():
        configureLogger(logging.getLogger(loggerName), loggerConfig)

    logger.info(
        f"Logging configured: root level={logging.getLevelName(rootLogger.level)}, "
        f"overrides={sorted(loggerConfigs)}"
    )
