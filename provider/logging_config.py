"""SPDX-License-Identifier: GPL-3.0-only

Centralized logging configuration for the search provider.
Provides:
  configure_logging(level:str='INFO', json_mode:bool=False, rotate_mb:int=2, log_path=None, console=False)
  set_runtime_level(level:str)
  get_runtime_level() -> str

Features:
  * Singleton root logger setup (idempotent).
  * Level threshold control and runtime adjustment.
  * Optional JSON structured log lines (side-by-side human format).
  * Basic size-based rotation (single .1 rollover).
"""
from __future__ import annotations
import logging, os, sys, json, threading, time
from pathlib import Path
from typing import Optional

_LOCK = threading.Lock()
_CONFIGURED = False
_CURRENT_LEVEL = 'INFO'
_JSON_MODE = False
_ROTATE_MB = 2
_LOG_PATH: Optional[Path] = None

TRACE = 5
LEVEL_ORDER = ['TRACE','DEBUG','INFO','WARNING','ERROR','CRITICAL']


def normalize_level(level: Optional[str]) -> str:
    l = (level or 'INFO').upper()
    return l if l in LEVEL_ORDER else 'INFO'


class _SizedRotatingHandler(logging.Handler):
    def __init__(self, path: Path, rotate_mb: int) -> None:
        super().__init__()
        self.path = path
        self.rotate_bytes = max(1, min(rotate_mb, 64)) * 1024 * 1024
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _rollover_if_needed(self, incoming: int) -> None:
        if not self.path.exists() or self.path.stat().st_size + incoming <= self.rotate_bytes:
            return
        rolled = self.path.with_suffix(self.path.suffix + '.1')
        rolled.unlink(missing_ok=True)
        self.path.rename(rolled)

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        try:
            data = self.format(record) + '\n'
            self._rollover_if_needed(len(data.encode('utf-8')))
            with self.path.open('a', encoding='utf-8') as fh:
                fh.write(data)
        except Exception:  # pragma: no cover
            self.handleError(record)


class _DualFormatter(logging.Formatter):
    def __init__(self, json_mode: bool):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        base = {
            'ts': time.strftime('%Y-%m-%dT%H:%M:%S', time.localtime(record.created)) + f".{int(record.msecs):03d}",
            'level': record.levelname,
            'logger': record.name,
            'msg': record.getMessage(),
        }
        if record.exc_info:
            base['exc'] = self.formatException(record.exc_info)
        if self.json_mode:
            return json.dumps(base, ensure_ascii=False)
        line = f"[{base['ts']}] {base['level']} {base['logger']}: {base['msg']}"
        if 'exc' in base:
            line += '\n' + base['exc']
        return line


def configure_logging(
    level: str = 'INFO',
    json_mode: bool = False,
    rotate_mb: int = 2,
    log_path: Optional[Path] = None,
    console: bool = False,
) -> None:
    global _CONFIGURED, _CURRENT_LEVEL, _JSON_MODE, _ROTATE_MB, _LOG_PATH
    with _LOCK:
        _CURRENT_LEVEL = normalize_level(level)
        _JSON_MODE = bool(json_mode)
        _ROTATE_MB = rotate_mb if rotate_mb and rotate_mb > 0 else 2
        if _ROTATE_MB > 64: _ROTATE_MB = 64
        if _CONFIGURED:
            logging.getLogger().setLevel(_CURRENT_LEVEL)
            return
        logging.addLevelName(TRACE, 'TRACE')
        if not log_path:
            base_dir = Path(os.environ.get('MANSEARCH_BASE_DIR') or 'data')
            log_path = base_dir / 'mansearch.log'
        _LOG_PATH = log_path
        formatter = _DualFormatter(_JSON_MODE)
        handler = _SizedRotatingHandler(log_path, _ROTATE_MB)
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.setLevel(_CURRENT_LEVEL)
        # Remove default handlers to avoid duplicate lines
        for h in list(root.handlers):
            root.removeHandler(h)
        root.addHandler(handler)
        if console:
            stream = logging.StreamHandler(sys.stderr)
            stream.setFormatter(formatter)
            root.addHandler(stream)
        _CONFIGURED = True


def set_runtime_level(level: str) -> None:
    global _CURRENT_LEVEL
    with _LOCK:
        _CURRENT_LEVEL = normalize_level(level)
        logging.getLogger().setLevel(_CURRENT_LEVEL)


def get_runtime_level() -> str:
    return _CURRENT_LEVEL


def get_log_path() -> Optional[Path]:
    return _LOG_PATH


def reset_logging() -> None:
    """Drop handlers installed by ``configure_logging`` (used by tests)."""
    global _CONFIGURED, _LOG_PATH
    with _LOCK:
        root = logging.getLogger()
        for h in list(root.handlers):
            if isinstance(h.formatter, _DualFormatter):
                root.removeHandler(h)
                h.close()
        _CONFIGURED = False
        _LOG_PATH = None

__all__ = ['configure_logging','set_runtime_level','get_runtime_level','get_log_path','reset_logging']
