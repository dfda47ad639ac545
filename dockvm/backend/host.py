#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Host execution module for dockvm.
This module runs commands on the host machine and performs the preflight
dependency check for runtimes before the app is constructed.
"""
from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

logger = logging.getLogger("dockvm")


class CommandError(Exception):
    """A host or guest command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        msg = f"command '{shlex.join(self.argv)}' failed with exit code {returncode}"
        if self.stderr:
            msg = f"{msg}: {self.stderr}"
        super().__init__(msg)


class DependencyError(Exception):
    """Required host commands for a component are missing."""

    def __init__(self, component: str, missing: Sequence[str]):
        self.component = component
        self.missing = list(missing)
        super().__init__(f"dependency check failed for {component}: {', '.join(self.missing)} not found on host")


@runtime_checkable
class HostActions(Protocol):
    """Minimal contract for running commands on the host.
    Semantics:
      - run(): execute and raise CommandError on failure.
      - check(): execute and report success as a bool, never raising for a non-zero exit.
      - output(): execute and return stdout; raise CommandError on failure.
    """

    def run(self, *args: str) -> None:
        ...

    def check(self, *args: str) -> bool:
        ...

    def output(self, *args: str) -> str:
        ...


class LocalHost:
    """Runs commands on the local machine with subprocess."""

    def _exec(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        logger.debug("host: %s", shlex.join(args))
        try:
            return subprocess.run(list(args), stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, check=False)
        except FileNotFoundError as e:
            raise CommandError(args, 127, str(e)) from e

    def run(self, *args: str) -> None:
        res = self._exec(args)
        if res.returncode != 0:
            raise CommandError(args, res.returncode, res.stderr)

    def check(self, *args: str) -> bool:
        try:
            return self._exec(args).returncode == 0
        except CommandError:
            return False

    def output(self, *args: str) -> str:
        res = self._exec(args)
        if res.returncode != 0:
            raise CommandError(args, res.returncode, res.stderr)
        return res.stdout


def missing_dependencies(names: Iterable[str], which: Optional[Callable[[str], Optional[str]]] = None) -> List[str]:
    """Return the names that cannot be resolved on the host PATH, in declaration order."""
    which = which or shutil.which
    return [name for name in names if not which(name)]


def check_dependencies(component, which: Optional[Callable[[str], Optional[str]]] = None) -> None:
    """Preflight check of `component.dependencies()`. Raise DependencyError when any is missing."""
    missing = missing_dependencies(component.dependencies(), which=which)
    if missing:
        raise DependencyError(component.name, missing)
    logger.debug("dependencies satisfied for %s", component.name)
