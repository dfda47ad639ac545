#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utilities module for dockvm.
This module contains common utility functions used across the application.
"""
import json
import re
from pathlib import Path
from typing import Any, Dict

import typer


def fail(msg: str) -> None:
    """Print the error as JSON and exit with code 1."""
    typer.echo(json.dumps({"error": msg}))
    raise typer.Exit(code=1)


def succeed(data: Dict[str, Any]) -> None:
    """Print the result as JSON and exit with code 0."""
    typer.echo(json.dumps(data))
    raise typer.Exit(code=0)


def validate_name(entity: str, name: str) -> None:
    """Validate a resource name (alnum and dashes only). Raise ValueError on error."""
    if not re.match(r"^[A-Za-z0-9-]+$", name or ""):
        raise ValueError(f"Invalid {entity} name '{name}'. Only A-Z, a-z, 0-9 and '-' allowed")


def read_json(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON object from a file. Raise ValueError on failure."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Invalid JSON '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid JSON '{path}': expected an object")
    return data


def deep_update(dst: Dict[str, Any], src: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge src into dst and return dst. Dicts are merged recursively; lists/scalars are replaced."""
    for k, v in (src or {}).items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            deep_update(dst[k], v)
        else:
            dst[k] = v
    return dst
