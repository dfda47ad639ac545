import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Sequence

from dockvm.backend.host import CommandError, HostActions
from dockvm.models import VMConfig
from dockvm.runner import TaskRunner
from dockvm.utils.filesystem import AppPaths, ensure_dirs, remove_file
from dockvm.utils.validation import validate_name

from .base import VMError, VMRuntime

logger = logging.getLogger("dockvm")

UBUNTU_IMAGES = {
    "x86_64": "https://cloud-images.ubuntu.com/releases/22.04/release/ubuntu-22.04-server-cloudimg-amd64.img",
    "aarch64": "https://cloud-images.ubuntu.com/releases/22.04/release/ubuntu-22.04-server-cloudimg-arm64.img",
}


def lima_home() -> Path:
    return Path(os.environ.get("LIMA_HOME", "") or Path.home() / ".lima")


class LimaVM(VMRuntime):
    def __init__(self, host: HostActions, config: VMConfig, app_paths: AppPaths, instance: str):
        validate_name("instance", instance)
        super().__init__(host, config)
        self.app_paths = app_paths
        self.instance = instance

    def dependencies(self) -> Sequence[str]:
        return ("limactl",)

    def is_created(self) -> bool:
        return (lima_home() / self.instance).is_dir()

    def template(self) -> Dict[str, Any]:
        """Lima instance template for the configured resources."""
        return {
            "images": [{"location": url, "arch": arch} for arch, url in UBUNTU_IMAGES.items()],
            "cpus": self.config.cpu,
            "memory": f"{self.config.memory}GiB",
            "disk": f"{self.config.disk}GiB",
            "ssh": {"localPort": self.config.ssh_port, "loadDotSSHPubKeys": False},
            "containerd": {"system": False, "user": False},
        }

    def write_template(self) -> None:
        ensure_dirs(self.app_paths)
        with self.app_paths.lima_template.open("w", encoding="utf-8") as f:
            json.dump(self.template(), f, indent=2)
        logger.debug("wrote vm template %s", self.app_paths.lima_template)

    def apply_resources(self) -> None:
        self.host.run(
            "limactl",
            "edit",
            "--tty=false",
            f"--cpus={self.config.cpu}",
            f"--memory={self.config.memory}",
            f"--disk={self.config.disk}",
            self.instance,
        )

    def _start_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        if not self.is_created():
            r.stage("creating")
            r.add(self.write_template)
            r.add(
                lambda: self.host.run(
                    "limactl", "start", f"--name={self.instance}", "--tty=false", str(self.app_paths.lima_template)
                )
            )
            return r

        if self.config.changed:
            # limactl edit only applies to a stopped instance
            r.stage("reconfiguring")
            if self.status() == "running":
                r.add(lambda: self.host.run("limactl", "stop", self.instance))
            r.add(self.write_template)
            r.add(self.apply_resources)

        r.stage("starting")
        r.add(lambda: self.host.run("limactl", "start", self.instance))
        return r

    def _stop_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        r.stage("stopping")
        r.add(lambda: self.host.run("limactl", "stop", self.instance))
        return r

    def _teardown_tasks(self) -> TaskRunner:
        r = TaskRunner(self.name)
        r.stage("deleting")
        if self.is_created():
            r.add(lambda: self.host.run("limactl", "delete", "--force", self.instance))
        if self.app_paths.lima_template.exists():
            r.add(lambda: remove_file(self.app_paths.lima_template))
        return r

    def start(self) -> None:
        self._start_tasks().run()

    def stop(self) -> None:
        self._stop_tasks().run()

    def teardown(self) -> None:
        self._teardown_tasks().run()

    def run(self, *args: str) -> None:
        self.host.run("limactl", "shell", self.instance, *args)

    def check(self, *args: str) -> bool:
        return self.host.check("limactl", "shell", self.instance, *args)

    def status(self) -> str:
        if not self.is_created():
            return "absent"
        try:
            out = self.host.output("limactl", "list", self.instance, "--format", "{{.Status}}")
        except CommandError as e:
            raise VMError(f"unable to query {self.instance}: {e}") from e
        return out.strip().lower() or "unknown"
