import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for tests
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / 'src'
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def _clean_run_state():
    from pyinicfg import errors, log

    log.reset_run_state()
    errors.clear_error_message()
    yield
    log.reset_run_state()
    errors.clear_error_message()
