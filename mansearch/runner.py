"""SPDX-License-Identifier: GPL-3.0-only

Run-and-Parse: spawn a lookup command, collect its output and parse it.

``run_and_parse`` never raises to its caller for tool failures. Every
failure (bad command line, missing program, cancellation, unparseable
output) is logged and reported as ``None``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
import signal
from typing import List, Optional, Tuple

from .cancellation import CancellationToken, OperationCancelled
from .parser import ManPageInfo, parse_output

LOGGER = logging.getLogger("mansearch.runner")

_EXIT_POLL = 0.02


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def _kill(proc: asyncio.subprocess.Process) -> None:
    """Forcefully terminate the child and anything it started in its session."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass


async def _wait_for_exit(proc: asyncio.subprocess.Process) -> None:
    # returncode is set once the leader exits, even while a background
    # descendant still holds the output pipes open.
    while proc.returncode is None:
        await asyncio.sleep(_EXIT_POLL)


async def _collect(proc: asyncio.subprocess.Process) -> Tuple[bytes, bytes]:
    """Read stdout/stderr until the leader exits, then kill what it left behind."""
    reads = asyncio.gather(proc.stdout.read(), proc.stderr.read())
    try:
        await _wait_for_exit(proc)
        _kill(proc)
        stdout, stderr = await reads
        return stdout, stderr
    finally:
        if not reads.done():
            reads.cancel()


async def _reap(proc: asyncio.subprocess.Process) -> None:
    LOGGER.debug("Force exit of subprocess session pid=%s", proc.pid)
    _kill(proc)
    await proc.wait()


async def run_and_parse(command: str, token: Optional[CancellationToken] = None) -> Optional[List[ManPageInfo]]:
    """Run ``command`` and parse its stdout into records.

    Args:
        command: Command line; split with POSIX shell rules but without any
            expansion (no globbing, variables or command substitution).
        token: Optional cancellation token. Cancelling it kills the child and
            makes the call return None.

    Returns:
        list[ManPageInfo] | None: Parsed records, or None on any failure or cancellation.
    """
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        LOGGER.error("Failed to parse command %r: %s", command, exc)
        return None
    if not argv:
        LOGGER.error("Empty command line")
        return None

    if token is not None and token.is_cancelled():
        LOGGER.debug("Cancelled before spawning %r", argv[0])
        return None

    LOGGER.debug("Run subprocess: %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as exc:
        LOGGER.error("Failed to spawn %r: %s", argv[0], exc)
        return None

    loop = asyncio.get_running_loop()

    def _kill_soon() -> None:
        # Runs on whichever thread cancelled the token.
        try:
            loop.call_soon_threadsafe(_kill, proc)
        except RuntimeError:
            LOGGER.debug("Event loop closed before cancellation of pid=%s", proc.pid)

    handler_id = 0
    try:
        if token is not None:
            handler_id = token.connect(_kill_soon)
        stdout, stderr = await _collect(proc)
        if token is not None and token.is_cancelled():
            LOGGER.debug("Subprocess %r cancelled", argv[0])
            return None
        err_text = _decode(stderr).strip()
        if err_text:
            LOGGER.warning("Subprocess %r error message: %s", argv[0], err_text)
        return list(parse_output(_decode(stdout), token))
    except OperationCancelled:
        LOGGER.debug("Subprocess %r output parsing cancelled", argv[0])
        return None
    except Exception:
        LOGGER.exception("Unexpected error running %r", argv[0])
        return None
    finally:
        if token is not None and handler_id:
            token.disconnect(handler_id)
        await _reap(proc)
