#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management module for dockvm.
This module locates the app directory, loads and persists user settings and
resolves values that come from the environment.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from dockvm.models import Settings
from dockvm.utils.filesystem import AppPaths, ensure_dirs, paths
from dockvm.utils.validation import deep_update, read_json

logger = logging.getLogger("dockvm")

APP_NAME = "dockvm"
DEFAULT_SSH_PORT = 41122
VM_RESOURCES = ("cpu", "memory", "disk")


class ConfigError(Exception):
    """Settings could not be read, parsed or validated."""


class ConfigManager:
    """Manager for configuration operations."""

    def __init__(self, app_dir: Optional[Path] = None):
        self._app_dir = Path(app_dir) if app_dir else None

    @staticmethod
    def app_name() -> str:
        return APP_NAME

    def app_dir(self) -> Path:
        """App directory. Precedence: constructor argument > DOCKVM_HOME > ~/.dockvm."""
        if self._app_dir:
            return self._app_dir
        env_dir = os.environ.get("DOCKVM_HOME", "").strip()
        if env_dir:
            return Path(env_dir).expanduser()
        return Path.home() / f".{APP_NAME}"

    def paths(self) -> AppPaths:
        return paths(self.app_dir())

    def ssh_port(self) -> int:
        """SSH port forwarded to the guest. DOCKVM_SSH_PORT overrides the default."""
        raw = os.environ.get("DOCKVM_SSH_PORT", "").strip()
        if not raw:
            return DEFAULT_SSH_PORT
        try:
            port = int(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid DOCKVM_SSH_PORT '{raw}'") from e
        if not 0 < port < 65536:
            raise ConfigError(f"Invalid DOCKVM_SSH_PORT '{raw}'")
        return port

    def load_settings(self) -> Settings:
        """Load settings from the app directory. A missing file yields the defaults;
        a syntax or validation error is fatal.
        """
        settings_file = self.paths().settings_file
        if not settings_file.exists():
            logger.debug("no settings at %s, using defaults", settings_file)
            return Settings()
        try:
            data = read_json(settings_file)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return self._validate(data, settings_file)

    def save_settings(self, settings: Settings) -> None:
        """Write settings to the app directory."""
        app_paths = self.paths()
        ensure_dirs(app_paths)
        with app_paths.settings_file.open("w", encoding="utf-8") as f:
            json.dump(settings.model_dump(), f, indent=2)
        logger.debug("saved settings to %s", app_paths.settings_file)

    def update_settings(self, overrides: Dict[str, Any]) -> Tuple[Settings, bool]:
        """Merge non-empty overrides into the stored settings, validate and persist them.

        Returns the new settings and whether a VM resource (cpu, memory, disk) changed.
        """
        previous = self.load_settings()
        changes = {k: v for k, v in (overrides or {}).items() if v is not None}
        merged = self._validate(deep_update(previous.model_dump(), changes), self.paths().settings_file)
        self.save_settings(merged)
        changed = any(getattr(previous, k) != getattr(merged, k) for k in VM_RESOURCES)
        if changed:
            logger.info("vm resources changed: cpu=%s memory=%s disk=%s", merged.cpu, merged.memory, merged.disk)
        return merged, changed

    @staticmethod
    def _validate(data: Dict[str, Any], source: Path) -> Settings:
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in '{source}': {e}") from e
