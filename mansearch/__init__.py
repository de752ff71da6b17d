"""SPDX-License-Identifier: GPL-3.0-only

Manual page search core.

Exposes the cancellable query/describe pipeline over ``apropos`` and ``whatis``:
    * Line parsing of ``name (section) - description`` output
    * Run-and-Parse process runner with cooperative cancellation
    * Query and detail stages plus result truncation
"""

from .cancellation import CancellationToken, OperationCancelled
from .parser import ManPageInfo, parse_output
from .runner import run_and_parse
from .engine import (
    ManPageEngine,
    MAX_RESULTS,
    filter_results,
    make_identifier,
    split_identifier,
)

__all__ = [
    'CancellationToken', 'OperationCancelled',
    'ManPageInfo', 'parse_output',
    'run_and_parse',
    'ManPageEngine', 'MAX_RESULTS', 'filter_results', 'make_identifier', 'split_identifier',
]
