"""Pytest configuration and fixtures for dyadt tests."""
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _reset_dyadt_logger():
    """Undo handlers and propagation changes made by configure_logging."""
    logger = logging.getLogger("dyadt")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _clean_dyadt_env(monkeypatch):
    for name in ("DYADT_LOG_LEVEL", "DYADT_MAX_READ_BYTES", "DYADT_LOAD_PLUGINS", "DYADT_COLOR"):
        monkeypatch.delenv(name, raising=False)


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)

    if not cov_enabled:
        return

    cwd = Path.cwd()
    coverage_files = list(cwd.glob(".coverage*"))

    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'dyadt' (the package) not 'src/dyadt' (filesystem path).",
            returncode=1
        )
