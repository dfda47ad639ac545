# backend/vm/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from dockvm.backend.host import HostActions
from dockvm.models import VMConfig


class VMError(Exception):
    """Guest VM backend error."""


class VMRuntime(ABC):
    """Common interface for guest VM backends.
    Semantics:
      - start(): boot the guest (creating it on first use).
      - stop(): shut the guest down; the authoritative stop of the app.
      - teardown(): delete the guest and its host-side files (idempotent).
      - run()/check(): guest command execution, same contract as HostActions.
    """

    def __init__(self, host: HostActions, config: VMConfig):
        self._host = host
        self._config = config

    @property
    def name(self) -> str:
        return "vm"

    @property
    def host(self) -> HostActions:
        """Host execution capability the guest was built on."""
        return self._host

    @property
    def config(self) -> VMConfig:
        return self._config

    @abstractmethod
    def dependencies(self) -> Sequence[str]:
        raise NotImplementedError

    @abstractmethod
    def start(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def teardown(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def run(self, *args: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def check(self, *args: str) -> bool:
        raise NotImplementedError

    def status(self) -> str:
        return "unknown"
