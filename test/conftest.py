"""
Test Configuration and Fixtures

Architecture:
- Unit tests (test/**/unit/): every port faked, no network, no database
- Everything not marked `integration` is treated as a unit test
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('POSTGRES_DB', 'seat_booking_test_db')
    os.environ.setdefault('DEPLOY_ENV', 'test')
    os.environ.setdefault('BOOKING_API_BASE_URL', 'http://allocation.test')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

import pytest  # noqa: E402


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'integration' not in markers and 'unit' not in markers:
            item.add_marker(pytest.mark.unit)
