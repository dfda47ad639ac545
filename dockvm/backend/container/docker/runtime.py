#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Docker runtime for dockvm.
Installs the Docker engine inside the guest, authorizes the guest user and
forwards the engine socket to the host.
"""
import logging
import os
from typing import Any, Dict, Sequence

from dockvm.backend.host import HostActions
from dockvm.backend.vm import VMRuntime
from dockvm.runner import TaskRunner
from dockvm.utils.filesystem import remove_file

from ..base import ContainerRuntime
from .forwarder import DOCKER_SOCKET, SocketForwarder

logger = logging.getLogger("dockvm")


class DockerRuntime(ContainerRuntime):
    """Docker engine in the guest, reachable on the host through a forwarded socket."""

    def __init__(
        self, host: HostActions, guest: VMRuntime, forwarder: SocketForwarder, socket_link: str = DOCKER_SOCKET
    ):
        self.host = host
        self.guest = guest
        self.forwarder = forwarder
        self.socket_link = socket_link

    @property
    def name(self) -> str:
        return "docker"

    def dependencies(self) -> Sequence[str]:
        return ("docker", "ssh", "tmux")

    def is_installed(self) -> bool:
        return self.guest.check("command", "-v", "docker")

    def is_user_permission_fixed(self) -> bool:
        return self.guest.check("sh", "-c", r'getent group docker | grep "\b${USER}\b"')

    def setup_socket_symlink(self) -> None:
        self.host.run("sudo", "ln", "-sfn", str(self.forwarder.socket), self.socket_link)

    def owns_socket_link(self) -> bool:
        """True when the host socket path is our symlink to the forwarded socket."""
        if not os.path.islink(self.socket_link):
            return False
        return os.readlink(self.socket_link) == str(self.forwarder.socket)

    def remove_socket_link(self) -> None:
        self.host.run("sudo", "rm", "-f", self.socket_link)

    def fix_user_permission(self) -> None:
        self.guest.run("sh", "-c", 'sudo usermod -aG docker "${USER}"')

    def _provision_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        r.stage("provisioning")

        if not self.is_installed():
            r.stage("setting up socket")
            r.add(self.setup_socket_symlink)

            r.stage("provisioning in VM")
            r.add(lambda: self.guest.run("sudo", "apt-get", "update"))
            r.add(
                lambda: self.guest.run(
                    "sudo", "env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "install", "-y", "docker.io"
                )
            )

        # group membership only applies to new logins, hence the restart
        if not self.is_user_permission_fixed():
            r.add(self.fix_user_permission)

            r.stage("restarting VM to complete setup")
            r.add(self.guest.stop)
            r.add(self.guest.start)

        r.stage("setting up socket forwarding")
        r.add(self.forwarder.write)
        return r

    def _start_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        r.stage("starting")
        r.add(lambda: self.guest.run("sudo", "service", "docker", "start"))
        r.add(self.forwarder.load)
        return r

    def _stop_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        r.stage("stopping")
        # the engine goes down with the guest; only confirm it is reachable
        r.add(lambda: self.guest.run("service", "docker", "status"))
        r.add(self.forwarder.unload)
        return r

    def _teardown_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        r.stage("teardown")
        if self.forwarder.file.is_file():
            r.add(self.forwarder.unload)
            r.add(self.forwarder.remove)
        if self.forwarder.socket.exists():
            r.add(lambda: remove_file(self.forwarder.socket))
        # a link replaced by another docker install is left alone
        if self.owns_socket_link():
            r.add(self.remove_socket_link)
        return r

    def provision(self) -> None:
        self._provision_tasks().run()

    def start(self) -> None:
        self._start_tasks().run()

    def stop(self) -> None:
        self._stop_tasks().run()

    def teardown(self) -> None:
        self._teardown_tasks().run()

    def status(self) -> Dict[str, Any]:
        return {"socket": str(self.forwarder.socket), "forwarder_pid": self.forwarder.pid()}
