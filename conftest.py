"""
Pytest configuration for the Pecha gateway
"""

import os

import pytest

# Logging is left to pytest; set before the app is imported
os.environ["ENVIRONMENT"] = "testing"

pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )
