# backend/container/__init__.py
from __future__ import annotations

from typing import Callable, Dict, List

from dockvm.backend.host import HostActions
from dockvm.backend.vm import VMRuntime
from dockvm.utils.filesystem import AppPaths

from . import docker
from .base import ContainerError, ContainerRuntime

RuntimeFactory = Callable[[HostActions, VMRuntime, AppPaths], ContainerRuntime]

# Map of supported runtimes
_RUNTIMES: Dict[str, RuntimeFactory] = {
    "docker": docker.new,
}


def available_runtimes() -> List[str]:
    return sorted(_RUNTIMES)


def get_runtime_by_name(name: str, host: HostActions, guest: VMRuntime, app_paths: AppPaths) -> ContainerRuntime:
    """
    Returns a container runtime instance for the specified 'name'.
    """
    key = (name or "").strip().lower()
    factory = _RUNTIMES.get(key)
    if not factory:
        raise ContainerError(f"Unsupported container runtime '{name}' (available: {', '.join(available_runtimes())})")
    return factory(host, guest, app_paths)


__all__ = ["ContainerError", "ContainerRuntime", "available_runtimes", "get_runtime_by_name"]
