from .manager import ConfigError, ConfigManager
from .types import DemoConfig

__all__ = ["ConfigManager", "ConfigError", "DemoConfig"]
