"""Shared fakes for dockvm tests. Nothing here touches the real host."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from dockvm.backend.container.base import ContainerRuntime
from dockvm.backend.host import CommandError
from dockvm.backend.vm.base import VMRuntime
from dockvm.models import VMConfig
from dockvm.utils.filesystem import paths


class FakeHost:
    """Records commands; commands whose argv starts with a registered prefix fail."""

    def __init__(self):
        self.commands: List[Tuple[str, ...]] = []
        self.failing: List[Tuple[str, ...]] = []
        self.outputs: Dict[Tuple[str, ...], str] = {}

    def fail_on(self, *prefix: str) -> None:
        self.failing.append(tuple(prefix))

    def _fails(self, args: Tuple[str, ...]) -> bool:
        return any(args[: len(p)] == p for p in self.failing)

    def run(self, *args: str) -> None:
        self.commands.append(args)
        if self._fails(args):
            raise CommandError(args, 1, "boom")

    def check(self, *args: str) -> bool:
        self.commands.append(args)
        return not self._fails(args)

    def output(self, *args: str) -> str:
        self.run(*args)
        return self.outputs.get(args, "")


class FakeGuest(VMRuntime):
    def __init__(self, calls: List[str], host: Optional[FakeHost] = None, fail: Sequence[str] = ()):
        super().__init__(host or FakeHost(), VMConfig(cpu=2, disk=60, memory=2, ssh_port=41122))
        self.calls = calls
        self.fail = set(fail)
        self.guest_commands: List[Tuple[str, ...]] = []
        self.failing_checks: List[Tuple[str, ...]] = []

    def _op(self, op: str) -> None:
        self.calls.append(f"vm.{op}")
        if op in self.fail:
            raise RuntimeError(f"vm {op} failed")

    def dependencies(self):
        return ("limactl",)

    def start(self):
        self._op("start")

    def stop(self):
        self._op("stop")

    def teardown(self):
        self._op("teardown")

    def run(self, *args):
        self.guest_commands.append(args)
        if "run" in self.fail:
            raise CommandError(args, 1, "guest failure")

    def check(self, *args):
        self.guest_commands.append(args)
        return not any(args[: len(p)] == p for p in self.failing_checks)

    def status(self):
        return "running"


class FakeRuntime(ContainerRuntime):
    def __init__(self, name: str, calls: List[str], fail: Sequence[str] = ()):
        self._name = name
        self.calls = calls
        self.fail = set(fail)

    @property
    def name(self):
        return self._name

    def _op(self, op: str) -> None:
        self.calls.append(f"{self._name}.{op}")
        if op in self.fail:
            raise RuntimeError(f"{self._name} {op} failed")

    def dependencies(self):
        return (self._name,)

    def provision(self):
        self._op("provision")

    def start(self):
        self._op("start")

    def stop(self):
        self._op("stop")

    def teardown(self):
        self._op("teardown")

    def status(self):
        if "status" in self.fail:
            raise RuntimeError("status unavailable")
        return {"ok": True}


class FakeTmux:
    def __init__(self):
        self.sessions: Dict[str, List[str]] = {}
        self.killed: List[str] = []
        self.pid: Optional[int] = None

    def session_exists(self, name):
        return name in self.sessions

    def kill_session(self, name):
        self.killed.append(name)
        self.sessions.pop(name, None)

    def new_session(self, name, window_name, command):
        self.sessions[name] = list(command)

    def find_pid(self, marker):
        return self.pid


@pytest.fixture
def calls() -> List[str]:
    return []


@pytest.fixture
def app_paths(tmp_path):
    return paths(tmp_path / "app")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DOCKVM_HOME", str(tmp_path / "app"))
    monkeypatch.setenv("LIMA_HOME", str(tmp_path / "lima"))
    monkeypatch.delenv("DOCKVM_SSH_PORT", raising=False)
