#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tmux management utilities for dockvm.
Long-running host helpers (the docker socket forwarder) run inside detached
tmux sessions so they outlive the CLI process.
"""
import shlex
from typing import List, Optional

import psutil
from libtmux import Server as TmuxServer


class TmuxManager:
    """Manager for tmux session operations."""

    def __init__(self, server: Optional[TmuxServer] = None):
        self._server = server

    @property
    def server(self) -> TmuxServer:
        if self._server is None:
            self._server = TmuxServer()
        return self._server

    def session_exists(self, name: str) -> bool:
        """Return True if a tmux session exists, using `has-session` to avoid deprecated APIs."""
        try:
            res = self.server.cmd("has-session", "-t", name)
            # tmux returns exit code 0 if session exists
            return getattr(res, "returncode", None) == 0 or (hasattr(res, "proc") and res.proc.returncode == 0)
        except Exception:
            return False

    def kill_session(self, name: str) -> None:
        """Kill a tmux session by name; a missing session is not an error."""
        if not self.session_exists(name):
            return
        self.server.cmd("kill-session", "-t", name)

    def new_session(self, name: str, window_name: str, command: List[str]) -> None:
        """Create a detached tmux session running the provided command."""
        try:
            # `sh -lc` so $PATH and shell expansions behave as expected
            cmd_str = " ".join(shlex.quote(x) for x in command)
            self.server.cmd("new-session", "-d", "-s", name, "-n", window_name, "sh", "-lc", cmd_str)
        except Exception as e:
            raise RuntimeError(f"Failed to create tmux session: {e}") from e

    @staticmethod
    def find_pid(marker: str) -> Optional[int]:
        """Best-effort discovery of a process whose command line mentions `marker`."""
        for proc in psutil.process_iter(["pid", "cmdline"]):
            try:
                cmdline = proc.info.get("cmdline") or []
                if any(marker in arg for arg in cmdline):
                    return proc.info["pid"]
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
        return None
