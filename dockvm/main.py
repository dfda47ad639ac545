#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
from __future__ import annotations

import logging
from typing import Optional

import typer

from dockvm.cli.commands import CLICommands
from dockvm.config import ConfigError, ConfigManager

logger = logging.getLogger("dockvm")
_DEF_HANDLER_SET = False

cli = typer.Typer(help="Run container runtimes inside a local virtual machine.", no_args_is_help=True)


def _apply_logging(level: str) -> None:
    """Attach the console handler once and set the level."""
    global _DEF_HANDLER_SET
    try:
        logger.setLevel(getattr(logging, level.upper()))
    except AttributeError:
        logger.setLevel(logging.INFO)
    if _DEF_HANDLER_SET:
        return
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    _DEF_HANDLER_SET = True


@cli.callback()
def setup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else "INFO"
    if not verbose:
        try:
            level = ConfigManager().load_settings().log_level
        except ConfigError:
            # the command itself reports the invalid settings
            pass
    _apply_logging(level)


@cli.command()
def start(
    cpu: Optional[int] = typer.Option(None, help="Number of CPUs for the VM."),
    memory: Optional[int] = typer.Option(None, help="Memory of the VM in GiB."),
    disk: Optional[int] = typer.Option(None, help="Disk size of the VM in GiB."),
):
    """Start the VM and its container runtimes."""
    CLICommands().start(cpu=cpu, memory=memory, disk=disk)


@cli.command()
def stop():
    """Stop the container runtimes and the VM."""
    CLICommands().stop()


@cli.command()
def delete():
    """Delete the VM and remove host-side runtime files."""
    CLICommands().delete()


@cli.command()
def status():
    """Show VM and container runtime status."""
    CLICommands().status()


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
