"""SPDX-License-Identifier: GPL-3.0-only

Search provider adapter over the manual page engine.

Implements the callback surface a desktop search overlay drives:
initial/sub searches, result truncation, result metadata and activation.
Nothing here raises to the host; failures become empty results or log lines.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from mansearch import CancellationToken, ManPageEngine, filter_results, split_identifier

from .config import ProviderSettings, load_settings

LOGGER = logging.getLogger("provider.search_provider")

DEFAULT_PROVIDER_ID = "mansearch@provider"


@dataclass
class ResultMeta:
    """Display metadata for one result.

    Attributes:
        id: Result identifier (``section|name``).
        name: Title, ``"name (section)"``.
        description: Full one-line page description.
        icon_name: Themed icon to render next to the result.
        clipboard_text: Optional text a host copies on activation.
    """

    id: str
    name: str
    description: str
    icon_name: str = "system-help"
    clipboard_text: Optional[str] = None


class ManSearchProvider:
    """Delegates host callbacks to a :class:`ManPageEngine`.

    Args:
        provider_id: Unique id the host uses to tell providers apart.
        settings: Provider settings; loaded from the environment when omitted.
        engine: Engine to delegate to; built from ``settings`` when omitted.
    """

    def __init__(
        self,
        provider_id: str = DEFAULT_PROVIDER_ID,
        settings: Optional[ProviderSettings] = None,
        engine: Optional[ManPageEngine] = None,
    ) -> None:
        self._id = provider_id
        self.settings = settings or load_settings()
        self.engine = engine or ManPageEngine(apropos=self.settings.apropos, whatis=self.settings.whatis)

    @property
    def id(self) -> str:
        return self._id

    @property
    def app_id(self) -> str:
        return self.settings.terminal_app_id

    @property
    def can_launch_search(self) -> bool:
        return True

    async def get_initial_result_set(self, terms: Sequence[str], token: CancellationToken) -> List[str]:
        if token.is_cancelled():
            return []
        if not terms or len(terms[0]) < self.settings.min_term_length:
            return []
        identifiers = await self.engine.search(terms, token)
        LOGGER.debug("Initial search for %r found %s result(s)", list(terms), len(identifiers))
        if token.is_cancelled():
            return []
        return identifiers

    async def get_subsearch_result_set(
        self, previous: Sequence[str], terms: Sequence[str], token: CancellationToken
    ) -> List[str]:
        """Refine a search; ``apropos`` output is cheap so this searches afresh."""
        if token.is_cancelled():
            return []
        return await self.get_initial_result_set(terms, token)

    def filter_results(self, identifiers: Sequence[str], max_results: int) -> List[str]:
        return filter_results(identifiers, max_results)

    async def get_result_metas(self, identifiers: Sequence[str], token: CancellationToken) -> List[ResultMeta]:
        """Describe every identifier, or return [] if any lookup fails or is cancelled."""
        if token.is_cancelled():
            return []
        details = await asyncio.gather(*(self.engine.describe(i, token) for i in identifiers))
        if token.is_cancelled():
            return []
        metas: List[ResultMeta] = []
        for identifier, detail in zip(identifiers, details):
            if detail is None:
                LOGGER.debug("No metadata for %r; dropping result set", identifier)
                return []
            title, description = detail
            metas.append(ResultMeta(id=identifier, name=title, description=description))
        return metas

    def create_result_object(self, meta: ResultMeta) -> None:
        """Custom result rendering hook; None selects the host's default."""
        return None

    def _spawn_in_terminal(self, argv: List[str]) -> None:
        full = shlex.split(self.settings.terminal) + argv
        LOGGER.debug("Spawning %s", " ".join(full))
        subprocess.Popen(
            full,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )

    def activate_result(self, identifier: str, terms: Sequence[str]) -> None:
        """Open the chosen page with ``man`` in a terminal."""
        parts = split_identifier(identifier)
        if parts is None:
            LOGGER.error("Cannot activate malformed identifier %r", identifier)
            return
        section, name = parts
        try:
            self._spawn_in_terminal(["man", section, name])
        except (ValueError, OSError) as exc:
            LOGGER.error("Error activating result %r: %s", identifier, exc)

    def launch_search(self, terms: Sequence[str]) -> None:
        """Show the full ``apropos`` listing for ``terms`` in a terminal."""
        query = " ".join(shlex.quote(t) for t in terms)
        script = f"{self.settings.apropos} {query}; echo; read -r -p 'Press Enter to close...'"
        try:
            self._spawn_in_terminal(["bash", "-c", script])
        except (ValueError, OSError) as exc:
            LOGGER.error("Error launching search for %r: %s", list(terms), exc)
