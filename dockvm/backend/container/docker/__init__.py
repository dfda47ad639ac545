from typing import Optional

from dockvm.backend.host import HostActions
from dockvm.backend.vm import VMRuntime
from dockvm.config import APP_NAME
from dockvm.utils.filesystem import AppPaths
from dockvm.utils.tmux import TmuxManager

from .forwarder import SocketForwarder
from .runtime import DockerRuntime


def new(host: HostActions, guest: VMRuntime, app_paths: AppPaths, tmux: Optional[TmuxManager] = None) -> DockerRuntime:
    """Create a docker runtime bound to the given host and guest."""
    forwarder = SocketForwarder(app_paths, guest.config.ssh_port, f"{APP_NAME}-docker-forward", tmux=tmux)
    return DockerRuntime(host, guest, forwarder)


__all__ = ["DockerRuntime", "SocketForwarder", "new"]
