"""SPDX-License-Identifier: GPL-3.0-only

Provider settings sourced from ``MANSEARCH_*`` environment variables.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

LOGGER = logging.getLogger("provider.config")

DEFAULT_TERMINAL = "gnome-terminal --"
DEFAULT_TERMINAL_APP_ID = "org.gnome.Terminal.desktop"


@dataclass
class ProviderSettings:
    """Tunable provider parameters.

    Attributes:
        terminal: Command prefix that opens a terminal running the rest of argv.
        terminal_app_id: Desktop id of the terminal, used by hosts to group results.
        apropos: Query program.
        whatis: Detail program.
        min_term_length: Searches whose first term is shorter return nothing.
        log_level: Root logging level.
        log_json: Emit JSON log lines.
        base_dir: Directory holding ``mansearch.log``.
    """
    terminal: str = DEFAULT_TERMINAL
    terminal_app_id: str = DEFAULT_TERMINAL_APP_ID
    apropos: str = "apropos"
    whatis: str = "whatis"
    min_term_length: int = 2
    log_level: str = "INFO"
    log_json: bool = False
    base_dir: Path = field(default_factory=lambda: Path("data"))

    @property
    def log_path(self) -> Path:
        return self.base_dir / "mansearch.log"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Ignoring invalid %s=%r (using %s)", name, raw, default)
        return default
    if value < 0:
        LOGGER.warning("Ignoring negative %s=%r (using %s)", name, raw, default)
        return default
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ProviderSettings:
    """Build settings from the environment (``os.environ`` when omitted)."""
    env = os.environ if environ is None else environ
    return ProviderSettings(
        terminal=env.get("MANSEARCH_TERMINAL", "").strip() or DEFAULT_TERMINAL,
        terminal_app_id=env.get("MANSEARCH_TERMINAL_APP_ID", "").strip() or DEFAULT_TERMINAL_APP_ID,
        apropos=env.get("MANSEARCH_APROPOS", "").strip() or "apropos",
        whatis=env.get("MANSEARCH_WHATIS", "").strip() or "whatis",
        min_term_length=_int_env(env, "MANSEARCH_MIN_TERM_LENGTH", 2),
        log_level=(env.get("MANSEARCH_LOG_LEVEL", "").strip() or "INFO").upper(),
        log_json=env.get("MANSEARCH_LOG_JSON", "0").strip().upper() in {"1", "TRUE", "YES", "Y"},
        base_dir=Path(env.get("MANSEARCH_BASE_DIR", "").strip() or "data"),
    )
