"""
Host-side socket forwarding for the docker runtime.

The guest's /var/run/docker.sock is exposed on the host as <app dir>/docker.sock
by an ssh tunnel. The tunnel command lives in a small script in the app
directory and runs in a detached tmux session, which is loaded on start and
unloaded on stop.
"""
import getpass
import logging
import shlex
from pathlib import Path
from typing import Optional

from dockvm.backend.vm.lima import lima_home
from dockvm.utils.filesystem import AppPaths, ensure_dirs, remove_file
from dockvm.utils.tmux import TmuxManager

from ..base import ContainerError

logger = logging.getLogger("dockvm")

# standard engine socket path, in the guest and as the host symlink
DOCKER_SOCKET = "/var/run/docker.sock"


class SocketForwarder:
    """Socket forwarding script plus the tmux session that runs it."""

    def __init__(
        self,
        app_paths: AppPaths,
        ssh_port: int,
        session: str,
        tmux: Optional[TmuxManager] = None,
        user: Optional[str] = None,
        identity: Optional[Path] = None,
    ):
        self.app_paths = app_paths
        self.ssh_port = ssh_port
        self.session = session
        self.tmux = tmux or TmuxManager()
        self.user = user or getpass.getuser()
        self.identity = identity or lima_home() / "_config" / "user"

    @property
    def file(self) -> Path:
        return self.app_paths.forward_script

    @property
    def socket(self) -> Path:
        return self.app_paths.docker_socket

    def script(self) -> str:
        ssh = [
            "ssh",
            "-p", str(self.ssh_port),
            "-i", str(self.identity),
            "-o", "StrictHostKeyChecking=no",
            "-o", "UserKnownHostsFile=/dev/null",
            "-o", "ExitOnForwardFailure=yes",
            "-L", f"{self.socket}:{DOCKER_SOCKET}",
            "-N",
            f"{self.user}@127.0.0.1",
        ]
        return "\n".join(
            [
                "#!/bin/sh",
                f"rm -f {shlex.quote(str(self.socket))}",
                "exec " + " ".join(shlex.quote(arg) for arg in ssh),
                "",
            ]
        )

    def write(self) -> None:
        ensure_dirs(self.app_paths)
        self.file.write_text(self.script(), encoding="utf-8")
        self.file.chmod(0o755)
        logger.debug("wrote socket forwarding script %s", self.file)

    def load(self) -> None:
        if not self.file.is_file():
            raise ContainerError(f"socket forwarding script not found at {self.file}")
        self.tmux.kill_session(self.session)
        self.tmux.new_session(self.session, "forward", ["sh", str(self.file)])
        logger.debug("loaded socket forwarder in tmux session %s", self.session)

    def unload(self) -> None:
        self.tmux.kill_session(self.session)

    def remove(self) -> None:
        remove_file(self.file)

    def pid(self) -> Optional[int]:
        """PID of the running ssh tunnel, matched by the forwarded socket path."""
        return self.tmux.find_pid(f"{self.socket}:{DOCKER_SOCKET}")
