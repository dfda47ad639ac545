# backend/container/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence


class ContainerError(Exception):
    """Container runtime backend error."""


class ContainerRuntime(ABC):
    """Common interface for container engines running inside the guest.
    Every fallible operation builds its own task list from checks made at call
    time and runs it; provision() enqueues only what is not already in place.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier used in error messages and stage labels."""
        raise NotImplementedError

    @abstractmethod
    def dependencies(self) -> Sequence[str]:
        """Host commands required by this runtime."""
        raise NotImplementedError

    @abstractmethod
    def provision(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def start(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def teardown(self) -> None:
        """Remove host-side integration if present. Must be idempotent."""
        raise NotImplementedError

    def status(self) -> Dict[str, Any]:
        return {}
