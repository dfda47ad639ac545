"""Tests for the preflight dependency check and app construction."""

from __future__ import annotations

import subprocess

import pytest

from conftest import FakeHost, FakeRuntime
from dockvm.backend.container import ContainerError, get_runtime_by_name
from dockvm.backend.container.docker import DockerRuntime
from dockvm.backend.host import CommandError, DependencyError, LocalHost, check_dependencies, missing_dependencies
from dockvm.backend.vm import LimaVM
from dockvm.config import ConfigManager
from dockvm.models import Settings
from dockvm.orchestration import App, new_app


def _which(available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestMissingDependencies:
    def test_reports_missing_in_order(self):
        assert missing_dependencies(["docker", "ssh", "tmux"], which=_which({"ssh"})) == ["docker", "tmux"]

    def test_nothing_missing(self):
        assert missing_dependencies(["ssh"], which=_which({"ssh"})) == []


class TestNewApp:
    def test_builds_guest_and_runtimes(self, monkeypatch):
        monkeypatch.setattr("shutil.which", _which({"limactl", "docker", "ssh", "tmux"}))
        app = new_app(Settings(cpu=3), ConfigManager(), host=FakeHost())
        assert isinstance(app, App)
        assert isinstance(app.guest, LimaVM)
        assert app.guest.config.cpu == 3
        assert app.guest.config.changed is False
        assert [c.name for c in app.containers] == ["docker"]
        assert isinstance(app.containers[0], DockerRuntime)

    def test_changed_flag_reaches_vm_config(self, monkeypatch):
        monkeypatch.setattr("shutil.which", _which({"limactl", "docker", "ssh", "tmux"}))
        app = new_app(Settings(), ConfigManager(), host=FakeHost(), changed=True)
        assert app.guest.config.changed is True

    def test_missing_vm_dependency_aborts(self, monkeypatch):
        monkeypatch.setattr("shutil.which", _which({"docker", "ssh", "tmux"}))
        with pytest.raises(DependencyError) as excinfo:
            new_app(Settings(), ConfigManager(), host=FakeHost())
        assert excinfo.value.component == "vm"
        assert str(excinfo.value) == "dependency check failed for vm: limactl not found on host"

    def test_missing_runtime_dependency_aborts(self, monkeypatch):
        monkeypatch.setattr("shutil.which", _which({"limactl", "ssh", "tmux"}))
        with pytest.raises(DependencyError) as excinfo:
            new_app(Settings(), ConfigManager(), host=FakeHost())
        assert excinfo.value.component == "docker"
        assert excinfo.value.missing == ["docker"]

    def test_ssh_port_from_environment(self, monkeypatch):
        monkeypatch.setattr("shutil.which", _which({"limactl", "docker", "ssh", "tmux"}))
        monkeypatch.setenv("DOCKVM_SSH_PORT", "50022")
        app = new_app(Settings(), ConfigManager(), host=FakeHost())
        assert app.guest.config.ssh_port == 50022
        assert app.containers[0].forwarder.ssh_port == 50022


def test_check_dependencies_passes(calls):
    check_dependencies(FakeRuntime("ssh", calls), which=_which({"ssh"}))


def test_unknown_runtime(app_paths):
    with pytest.raises(ContainerError) as excinfo:
        get_runtime_by_name("podman", FakeHost(), None, app_paths)
    assert "available: docker" in str(excinfo.value)


class TestLocalHost:
    def test_non_zero_exit_raises(self, monkeypatch):
        def fake_run(args, **kwargs):
            return subprocess.CompletedProcess(args, 3, stdout="", stderr="nope\n")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(CommandError) as excinfo:
            LocalHost().run("false")
        assert excinfo.value.returncode == 3
        assert str(excinfo.value) == "command 'false' failed with exit code 3: nope"
        assert LocalHost().check("false") is False

    def test_output(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", lambda args, **kw: subprocess.CompletedProcess(args, 0, "ok\n", ""))
        assert LocalHost().output("echo", "ok") == "ok\n"

    def test_missing_executable(self, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError(2, "No such file or directory")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(CommandError) as excinfo:
            LocalHost().run("nothere")
        assert excinfo.value.returncode == 127
        assert LocalHost().check("nothere") is False
