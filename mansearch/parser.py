"""SPDX-License-Identifier: GPL-3.0-only

Parser for ``apropos`` / ``whatis`` output lines.

Each record line has the shape ``name (section) - description``, e.g.::

    ls (1)               - list directory contents

This shape holds under the C/English locales the tools normally run with;
locale is not negotiated here.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, NamedTuple, Optional

from .cancellation import CancellationToken, OperationCancelled

LOGGER = logging.getLogger("mansearch.parser")

LINE_RE = re.compile(r"^(\S+)\s*\(([^)]+)\)\s*-\s*(.*)$")
_SEPARATORS = re.compile(r"[\n\0]")


class ManPageInfo(NamedTuple):
    """One parsed record: page name, section and (possibly empty) description."""

    name: str
    section: str
    description: str


def parse_line(line: str) -> Optional[ManPageInfo]:
    """Parse a single record line, or return None if it does not match."""
    m = LINE_RE.match(line.strip())
    if not m:
        return None
    name, section, description = m.groups()
    return ManPageInfo(name.strip(), section.strip(), description.strip())


def parse_output(output: str, token: Optional[CancellationToken] = None) -> Iterator[ManPageInfo]:
    """Yield records from newline or NUL separated command output.

    Args:
        output: Raw stdout text of ``apropos`` or ``whatis``.
        token: Optional cancellation token, checked before every line.

    Yields:
        ManPageInfo: Records in input order. Unparseable lines are logged and skipped.

    Raises:
        OperationCancelled: If the token is cancelled while parsing.
    """
    count = 0
    for line in _SEPARATORS.split(output):
        if token is not None and token.is_cancelled():
            LOGGER.debug("Parsing cancelled after %s record(s)", count)
            raise OperationCancelled()
        if not line.strip():
            continue
        info = parse_line(line)
        if info is None:
            LOGGER.warning("Could not parse line: %r", line)
            continue
        count += 1
        yield info
    LOGGER.debug("Parsed %s record(s)", count)
