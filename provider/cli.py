"""SPDX-License-Identifier: GPL-3.0-only

Minimal CLI to drive the manual page search provider from a terminal.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import threading
from typing import List, Sequence, Tuple

from mansearch import MAX_RESULTS, CancellationToken

from .config import load_settings
from .logging_config import configure_logging
from .search_provider import ManSearchProvider, ResultMeta

LOGGER = logging.getLogger("provider.cli")


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Search manual pages the way the desktop search provider does")
    p.add_argument("terms", nargs="+", help="Search terms (all must match)")
    p.add_argument("--log-level", default=None, help="Logging level (default: MANSEARCH_LOG_LEVEL or INFO)")
    p.add_argument("--verbose", action="store_true", help="Also write log lines to stderr")
    p.add_argument("--timeout", type=float, default=None, help="Cancel the search after this many seconds")
    p.add_argument("--describe", action="store_true", help="Print title and full description for each result")
    p.add_argument("--open", dest="open_index", type=int, default=None, metavar="N", help="Open the N-th result (1-based) in a terminal")
    p.add_argument("--more", action="store_true", help="Show every match in a terminal")
    return p.parse_args(argv)


async def _search(
    provider: ManSearchProvider, terms: Sequence[str], token: CancellationToken, describe: bool
) -> Tuple[List[str], List[ResultMeta]]:
    identifiers = await provider.get_initial_result_set(terms, token)
    identifiers = provider.filter_results(identifiers, MAX_RESULTS)
    metas: List[ResultMeta] = []
    if describe and identifiers:
        metas = await provider.get_result_metas(identifiers, token)
    return identifiers, metas


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = load_settings()
    configure_logging(
        args.log_level or settings.log_level,
        json_mode=settings.log_json,
        log_path=settings.log_path,
        console=args.verbose,
    )
    provider = ManSearchProvider(settings=settings)
    token = CancellationToken()

    timer = None
    if args.timeout is not None and args.timeout > 0:
        # Cancels from a timer thread, exactly as a host would.
        timer = threading.Timer(args.timeout, token.cancel)
        timer.daemon = True
        timer.start()
    try:
        identifiers, metas = asyncio.run(_search(provider, args.terms, token, args.describe))
    except KeyboardInterrupt:
        token.cancel()
        LOGGER.info("Search interrupted")
        return 130
    finally:
        if timer is not None:
            timer.cancel()

    if not identifiers:
        print("No matching manual pages", file=sys.stderr)
        return 1

    if metas:
        for meta in metas:
            print(f"{meta.name} - {meta.description}")
    else:
        for identifier in identifiers:
            print(identifier)

    if args.open_index is not None:
        if not 1 <= args.open_index <= len(identifiers):
            print(f"--open must be between 1 and {len(identifiers)}", file=sys.stderr)
            return 2
        provider.activate_result(identifiers[args.open_index - 1], args.terms)
    if args.more:
        provider.launch_search(args.terms)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
