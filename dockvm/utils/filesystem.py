#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Filesystem utilities module for dockvm.
This module computes the well-known files kept in the app directory.
"""
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("dockvm")


@dataclass
class AppPaths:
    """Computed file paths (settings, VM template, docker socket, forwarding script) for the app."""

    app_dir: Path
    settings_file: Path
    lima_template: Path
    docker_socket: Path
    forward_script: Path


def paths(app_dir: Path) -> AppPaths:
    """Generate AppPaths for an app directory."""
    app_dir = Path(app_dir)
    return AppPaths(
        app_dir=app_dir,
        settings_file=app_dir / "config.json",
        # JSON is a subset of YAML, limactl reads it as-is
        lima_template=app_dir / "lima.yaml",
        docker_socket=app_dir / "docker.sock",
        forward_script=app_dir / "docker-forward.sh",
    )


def ensure_dirs(app_paths: AppPaths) -> None:
    """Ensure the app directory exists."""
    app_paths.app_dir.mkdir(parents=True, exist_ok=True)


def remove_file(path: Path) -> None:
    """Remove a file; a missing file is not an error."""
    try:
        path.unlink()
        logger.debug("removed %s", path)
    except FileNotFoundError:
        pass
