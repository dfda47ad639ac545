#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI commands module for dockvm.
This module contains the command-line interface commands for app operations.
"""
import logging
from typing import Callable, Optional

from dockvm.config import ConfigManager
from dockvm.orchestration import App, new_app
from dockvm.utils.validation import fail, succeed

logger = logging.getLogger("dockvm")

AppFactory = Callable[..., App]


class CLICommands:
    """CLI commands handler."""

    def __init__(self, config_manager: Optional[ConfigManager] = None, app_factory: Optional[AppFactory] = None):
        self.config_manager = config_manager or ConfigManager()
        self.app_factory = app_factory or new_app

    def _app(self) -> App:
        settings = self.config_manager.load_settings()
        return self.app_factory(settings, self.config_manager)

    def start(self, cpu: Optional[int] = None, memory: Optional[int] = None, disk: Optional[int] = None):
        """Start the VM and every configured container runtime."""
        try:
            settings, changed = self.config_manager.update_settings({"cpu": cpu, "memory": memory, "disk": disk})
            app = self.app_factory(settings, self.config_manager, changed=changed)
            app.start()
        except Exception as e:
            logger.debug("start failed", exc_info=True)
            fail(f"start failed: {e}")
        succeed({"status": "success", "message": f"{self.config_manager.app_name()} started"})

    def stop(self):
        """Stop the container runtimes and the VM."""
        try:
            self._app().stop()
        except Exception as e:
            logger.debug("stop failed", exc_info=True)
            fail(f"stop failed: {e}")
        succeed({"status": "success", "message": f"{self.config_manager.app_name()} stopped"})

    def delete(self):
        """Tear down the container runtimes and delete the VM."""
        try:
            self._app().delete()
        except Exception as e:
            logger.debug("delete failed", exc_info=True)
            fail(f"delete failed: {e}")
        succeed({"status": "success", "message": f"{self.config_manager.app_name()} deleted"})

    def status(self):
        """Report VM and runtime status."""
        try:
            result = self._app().status()
        except Exception as e:
            fail(f"status check failed: {e}")
        succeed({"status": "success", **result})
