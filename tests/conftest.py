"""
Root Test Configuration

Structure:
    tests/
    ├── fixtures/     Shared factories and test doubles
    ├── unit/         Single component, in-memory store, no I/O
    └── component/    Fully wired membership stack

Usage:
    pytest tests -v
    pytest tests/unit -m unit -v
    pytest tests/component -m component -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any teamdesk imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("DOCUMENT_STORE_BACKEND", "memory")

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "component: marks tests that run the fully wired stack"
    )
