"""Tests for provider.logging_config."""

from __future__ import annotations

import json
import logging


def test_configure_writes_human_lines(tmp_path, restore_root_logging):
    lc = restore_root_logging
    log_path = tmp_path / "logs" / "mansearch.log"
    lc.configure_logging("debug", log_path=log_path)
    logging.getLogger("mansearch.runner").debug("Run subprocess: apropos --and ls")
    text = log_path.read_text(encoding="utf-8")
    assert "DEBUG mansearch.runner: Run subprocess: apropos --and ls" in text
    assert lc.get_runtime_level() == "DEBUG"
    assert lc.get_log_path() == log_path


def test_configure_json_mode(tmp_path, restore_root_logging):
    lc = restore_root_logging
    log_path = tmp_path / "mansearch.log"
    lc.configure_logging("INFO", json_mode=True, log_path=log_path)
    logging.getLogger("provider.search_provider").warning("Could not parse line: %r", "junk")
    entry = json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "provider.search_provider"
    assert entry["msg"] == "Could not parse line: 'junk'"


def test_configure_is_idempotent_and_adjusts_level(tmp_path, restore_root_logging):
    lc = restore_root_logging
    first = tmp_path / "first.log"
    lc.configure_logging("INFO", log_path=first)
    lc.configure_logging("ERROR", log_path=tmp_path / "second.log")
    assert lc.get_log_path() == first
    assert logging.getLogger().level == logging.ERROR
    lc.set_runtime_level("bogus")
    assert lc.get_runtime_level() == "INFO"


def test_default_path_uses_base_dir_env(tmp_path, monkeypatch, restore_root_logging):
    lc = restore_root_logging
    monkeypatch.setenv("MANSEARCH_BASE_DIR", str(tmp_path))
    lc.configure_logging("INFO")
    assert lc.get_log_path() == tmp_path / "mansearch.log"


def test_rotation_rolls_over(tmp_path, restore_root_logging):
    lc = restore_root_logging
    log_path = tmp_path / "mansearch.log"
    log_path.write_bytes(b"x" * (1024 * 1024))
    lc.configure_logging("INFO", rotate_mb=1, log_path=log_path)
    logging.getLogger("mansearch.engine").info("after rollover")
    assert (tmp_path / "mansearch.log.1").stat().st_size == 1024 * 1024
    assert "after rollover" in log_path.read_text(encoding="utf-8")
