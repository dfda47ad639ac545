#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
App lifecycle module for dockvm.
This module sequences the guest VM and the container runtimes it hosts.

The order for start is:
    vm start -> provision every runtime -> start every runtime
The order for stop is:
    stop every runtime (best-effort) -> vm stop
The order for delete is:
    teardown every runtime (best-effort) -> vm teardown
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from dockvm.backend.container import ContainerRuntime, get_runtime_by_name
from dockvm.backend.host import HostActions, LocalHost, check_dependencies
from dockvm.backend.vm import LimaVM, VMRuntime
from dockvm.config import ConfigManager
from dockvm.models import Settings

logger = logging.getLogger("dockvm")


class LifecycleError(Exception):
    """A component operation failed; names the phase and the component."""

    def __init__(self, phase: str, component: str, cause: BaseException):
        self.phase = phase
        self.component = component
        self.cause = cause
        super().__init__(f"error {phase} {component}: {cause}")


class App:
    """One guest VM and an ordered, fixed list of container runtimes."""

    def __init__(self, guest: VMRuntime, containers: Sequence[ContainerRuntime]):
        if guest is None:
            raise ValueError("a guest VM is required")
        self.guest = guest
        self.containers = tuple(containers)

    @staticmethod
    def _attempt(phase: str, component: str, operation: Callable[[], None]) -> Optional[LifecycleError]:
        """Run a component operation and return its failure instead of raising it."""
        try:
            operation()
        except Exception as e:
            err = LifecycleError(phase, component, e)
            err.__cause__ = e
            return err
        return None

    def start(self) -> None:
        err = self._attempt("starting", self.guest.name, self.guest.start)
        if err:
            raise err

        # every runtime is provisioned before any of them is started
        for cont in self.containers:
            err = self._attempt("provisioning", cont.name, cont.provision)
            if err:
                raise err

        for cont in self.containers:
            err = self._attempt("starting", cont.name, cont.start)
            if err:
                raise err

        logger.info("started %s with %d container runtime(s)", self.guest.name, len(self.containers))

    def stop(self) -> None:
        for cont in self.containers:
            err = self._attempt("stopping", cont.name, cont.stop)
            if err:
                # not fatal, the VM stop below takes the runtime down anyway
                logger.warning("%s", err)

        err = self._attempt("stopping", self.guest.name, self.guest.stop)
        if err:
            raise err
        logger.info("stopped %s", self.guest.name)

    def delete(self) -> None:
        # runtimes may have created files on the host that only they know about
        for cont in self.containers:
            err = self._attempt("teardown of", cont.name, cont.teardown)
            if err:
                logger.warning("%s", err)

        err = self._attempt("teardown of", self.guest.name, self.guest.teardown)
        if err:
            raise err
        logger.info("deleted %s", self.guest.name)

    def status(self) -> Dict[str, Any]:
        runtimes: Dict[str, Any] = {}
        for cont in self.containers:
            try:
                runtimes[cont.name] = cont.status()
            except Exception as e:
                logger.warning("unable to get status of %s: %s", cont.name, e)
                runtimes[cont.name] = {"error": str(e)}
        return {"vm": self.guest.status(), "runtimes": runtimes}


def new_app(
    settings: Settings,
    config: Optional[ConfigManager] = None,
    host: Optional[HostActions] = None,
    changed: bool = False,
) -> App:
    """Build the app from user settings. Dependencies of the VM and of every
    runtime are checked here; a missing one aborts construction with DependencyError.
    When changed is set, an existing VM is reconfigured on start.
    """
    config = config or ConfigManager()
    host = host or LocalHost()
    app_paths = config.paths()

    guest = LimaVM(host, settings.vm_config(config.ssh_port(), changed), app_paths, config.app_name())
    check_dependencies(guest)

    containers: List[ContainerRuntime] = []
    for name in settings.runtimes:
        runtime = get_runtime_by_name(name, host, guest, app_paths)
        check_dependencies(runtime)
        containers.append(runtime)

    return App(guest, containers)
