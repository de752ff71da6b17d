"""SPDX-License-Identifier: GPL-3.0-only

Test configuration: add project root to sys.path for package imports.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import stat
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest


@pytest.fixture
def write_tool(tmp_path):
    """Return a factory writing an executable ``/bin/sh`` script into tmp_path.

    The factory returns the script path quoted for use inside a command line.
    Every script records its argv (one per line) to ``<name>.args``.
    """

    def _write(name: str, body: str) -> str:
        path = tmp_path / name
        args_file = tmp_path / f"{name}.args"
        path.write_text(
            "#!/bin/sh\n"
            f"printf '%s\\n' \"$@\" > {shlex.quote(str(args_file))}\n"
            f"{body}\n",
            encoding="utf-8",
        )
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return shlex.quote(str(path))

    return _write


@pytest.fixture
def recorded_args(tmp_path):
    """Read the argv a script written by ``write_tool`` was called with."""

    def _read(name: str):
        args_file = tmp_path / f"{name}.args"
        if not args_file.exists():
            return None
        return args_file.read_text(encoding="utf-8").splitlines()

    return _read


@pytest.fixture
def spawned(monkeypatch):
    """Record every process started through asyncio.create_subprocess_exec."""
    procs = []
    real = asyncio.create_subprocess_exec

    async def _tracking(*args, **kwargs):
        proc = await real(*args, **kwargs)
        procs.append(proc)
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _tracking)
    yield procs


@pytest.fixture
def restore_root_logging():
    """Undo provider.logging_config changes to the root logger after a test."""
    from provider import logging_config

    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    logging_config.reset_logging()
    yield logging_config
    logging_config.reset_logging()
    root.setLevel(level)
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
