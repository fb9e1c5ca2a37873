"""Pytest configuration for test isolation.

The CLI resolves its default inputs (``credit.csv``, ``debit.csv``,
``categories.json``) and output relative to the working directory, reads
``EC_*`` settings from the environment, and configures the package logger
once per process. Each test gets its own working directory, a clean
environment, and an unconfigured logger so runs never leak into each other.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import expense_categorizer.logging_setup as logging_setup

_ENV_VARS = (
    "EC_SOURCES",
    "EC_CATEGORIES_PATH",
    "EC_OUTPUT_PATH",
    "EC_SUMMARY_MODE",
    "EC_TRANSFER_FALLBACK",
    "EXPENSE_CATEGORIZER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("expense_categorizer")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False
