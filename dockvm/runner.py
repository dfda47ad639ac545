#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Staged task runner for dockvm.
Runtimes describe an operation as an ordered list of steps grouped under
progress labels, then run it fail-fast. A runner is built fresh for every
operation call and is not reused.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger("dockvm")

Step = Callable[[], None]


class StepError(Exception):
    """A step failed; carries the runner name and the stage it was enqueued under."""

    def __init__(self, runner: str, stage: Optional[str], cause: BaseException):
        self.runner = runner
        self.stage = stage
        self.cause = cause
        label = f"{runner}: {stage}" if stage else runner
        super().__init__(f"{label}: {cause}")


class TaskRunner:
    """Ordered fail-fast list of steps with stage labels."""

    def __init__(self, name: str):
        self.name = name
        self._stage: Optional[str] = None
        self._steps: List[Tuple[Optional[str], Step]] = []

    def stage(self, label: str) -> "TaskRunner":
        """Set the label attached to steps added from now on."""
        self._stage = label
        return self

    def add(self, step: Step) -> "TaskRunner":
        """Append a step under the current stage."""
        self._steps.append((self._stage, step))
        return self

    @property
    def steps(self) -> Tuple[Tuple[Optional[str], Step], ...]:
        return tuple(self._steps)

    @property
    def stages(self) -> List[Optional[str]]:
        """Distinct stage labels of the enqueued steps, in order of first use."""
        seen: List[Optional[str]] = []
        for label, _ in self._steps:
            if label not in seen:
                seen.append(label)
        return seen

    def run(self) -> None:
        """Run every step in order. The first failure stops the run and raises StepError."""
        active: Optional[str] = None
        for index, (label, step) in enumerate(self._steps):
            if label and label != active:
                logger.info("%s: %s", self.name, label)
            active = label
            try:
                step()
            except Exception as e:
                logger.debug("%s: step %d failed: %s", self.name, index + 1, e)
                raise StepError(self.name, label, e) from e
