"""SPDX-License-Identifier: GPL-3.0-only

Desktop search provider for manual pages.

Re-exports key primitives for external callers.
"""

from .config import ProviderSettings, load_settings  # noqa: F401
from .search_provider import ManSearchProvider, ResultMeta  # noqa: F401
from .logging_config import configure_logging  # noqa: F401
