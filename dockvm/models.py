#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for dockvm.
This module contains the VM configuration value and the user settings model.
"""
import dataclasses
import re
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclasses.dataclass(frozen=True)
class VMConfig:
    """Guest VM resources. Built once when the app is constructed."""

    cpu: int
    disk: int
    memory: int
    ssh_port: int
    changed: bool = False


class Settings(BaseModel):
    """User settings persisted in the app directory (sizes in GiB)."""

    model_config = ConfigDict(extra="forbid")

    cpu: int = Field(default=2, ge=1)
    memory: int = Field(default=2, ge=1)
    disk: int = Field(default=60, ge=10)
    runtimes: List[str] = Field(default_factory=lambda: ["docker"], min_length=1)
    log_level: str = "INFO"

    @field_validator("runtimes")
    @classmethod
    def _runtime_names(cls, value: List[str]) -> List[str]:
        for name in value:
            if not re.match(r"^[a-z0-9-]+$", name or ""):
                raise ValueError(f"Invalid runtime name '{name}'")
        if len(set(value)) != len(value):
            raise ValueError("runtimes must not contain duplicates")
        return value

    @field_validator("log_level")
    @classmethod
    def _level(cls, value: str) -> str:
        level = (value or "").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level '{value}'")
        return level

    def vm_config(self, ssh_port: int, changed: bool = False) -> VMConfig:
        return VMConfig(cpu=self.cpu, disk=self.disk, memory=self.memory, ssh_port=ssh_port, changed=changed)
