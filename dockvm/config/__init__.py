from .manager import APP_NAME, DEFAULT_SSH_PORT, ConfigError, ConfigManager

__all__ = ["APP_NAME", "DEFAULT_SSH_PORT", "ConfigError", "ConfigManager"]
