"""
Pytest configuration and shared fixtures.
"""

import json
import os
import tempfile
from datetime import date

import pytest

# Keep test log files out of the project tree
os.environ.setdefault("CALBOT_LOG_DIR", tempfile.mkdtemp(prefix="calbot-logs-"))


@pytest.fixture
def reference_date():
    """Tuesday 2025-01-28."""
    return date(2025, 1, 28)


@pytest.fixture
def record_fields():
    """Reply fields for the ACM club meeting example."""
    return {
        "title": "acm club meeting",
        "date": "_mon",
        "starttime": "1700",
        "endtime": "1800",
        "location": "OCNL 239",
        "description": None,
    }


@pytest.fixture
def reply_text(record_fields):
    """The ACM club meeting example as raw reply text."""
    return json.dumps(record_fields)
