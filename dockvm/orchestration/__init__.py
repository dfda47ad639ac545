# Orchestration module for the app lifecycle
from .app import App, LifecycleError, new_app

__all__ = ["App", "LifecycleError", "new_app"]
