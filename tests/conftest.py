"""Pytest configuration for minilog tests."""
import json
import sys
from pathlib import Path

# Add src/ to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC = _PROJECT_ROOT / 'src'
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import pytest

from minilog import LoggerConfig, new


@pytest.fixture
def log_path(tmp_path):
    """Path of a log file inside the test's temporary directory."""
    return tmp_path / 'app.log'


@pytest.fixture
def read_records(log_path):
    """Return a callable parsing every JSON line written so far."""
    def _read():
        if not log_path.exists():
            return []
        return [json.loads(line) for line in log_path.read_text().splitlines() if line]
    return _read


@pytest.fixture
def file_logger(log_path):
    """Build a debug-level JSON logger writing to ``log_path``."""
    loggers = []

    def _build(**overrides):
        conf = LoggerConfig(output_paths=[str(log_path)], level='debug')
        for key, value in overrides.items():
            setattr(conf, key, value)
        logger = new(conf)
        loggers.append(logger)
        return logger

    yield _build
    for logger in loggers:
        logger.engine.close()
