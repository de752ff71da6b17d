"""SPDX-License-Identifier: GPL-3.0-only

Manual page search engine.

Two stages, each evaluated fresh per call:
    * ``search``   - ``apropos --and TERMS`` -> list of ``section|name`` identifiers
    * ``describe`` - ``whatis -l -s SECTION NAME`` -> ``("name (section)", description)``

Both return an empty list / None instead of raising.
"""

from __future__ import annotations

import logging
import shlex
from typing import List, Optional, Sequence, Tuple

from .cancellation import CancellationToken
from .runner import run_and_parse

LOGGER = logging.getLogger("mansearch.engine")

MAX_RESULTS = 7
SEPARATOR = "|"


def make_identifier(section: str, name: str) -> str:
    return f"{section}{SEPARATOR}{name}"


def split_identifier(identifier: str) -> Optional[Tuple[str, str]]:
    """Split ``section|name`` into ``(section, name)``; None if malformed."""
    section, sep, name = identifier.partition(SEPARATOR)
    if not sep or not section or not name or SEPARATOR in name:
        return None
    return section, name


def _cancelled(token: Optional[CancellationToken]) -> bool:
    return token is not None and token.is_cancelled()


def filter_results(identifiers: Sequence[str], max_results: Optional[int] = None) -> List[str]:
    """Return at most ``MAX_RESULTS`` leading identifiers.

    The caller-suggested ``max_results`` is accepted for interface
    compatibility and ignored.
    """
    return list(identifiers[:MAX_RESULTS])


class ManPageEngine:
    """Query and describe manual pages through ``apropos`` and ``whatis``.

    Args:
        apropos: Program (or command prefix) used for the query stage.
        whatis: Program (or command prefix) used for the detail stage.
    """

    def __init__(self, apropos: str = "apropos", whatis: str = "whatis") -> None:
        self.apropos = apropos
        self.whatis = whatis

    async def search(self, terms: Sequence[str], token: Optional[CancellationToken] = None) -> List[str]:
        """Find pages whose name or description contains all ``terms``.

        Terms are passed as-is; the command line is tokenized without shell
        expansion so they must not be pre-quoted.

        Returns:
            list[str]: ``section|name`` identifiers in ``apropos`` order (never None).
        """
        if _cancelled(token):
            return []
        if not terms:
            return []

        records = await run_and_parse(f"{self.apropos} --and {' '.join(terms)}", token)
        if not records or _cancelled(token):
            LOGGER.debug("apropos cancelled or returned empty results")
            return []

        # apropos may truncate descriptions; describe() fetches the full text.
        identifiers = [make_identifier(section, name) for name, section, _ in records]

        # The token may have been cancelled from another thread meanwhile.
        if _cancelled(token):
            return []
        return identifiers

    async def describe(self, identifier: str, token: Optional[CancellationToken] = None) -> Optional[Tuple[str, str]]:
        """Fetch the untruncated description of one ``section|name`` identifier.

        Returns:
            tuple[str, str] | None: ``("name (section)", description)`` or None.
        """
        if _cancelled(token):
            return None
        parts = split_identifier(identifier)
        if parts is None:
            LOGGER.warning("Malformed identifier %r", identifier)
            return None
        section, name = parts

        records = await run_and_parse(f"{self.whatis} -l -s {shlex.quote(section)} {shlex.quote(name)}", token)
        if not records or _cancelled(token):
            LOGGER.debug("whatis cancelled or returned empty results")
            return None

        page = records[0]
        if _cancelled(token):
            return None
        return f"{page.name} ({page.section})", page.description
