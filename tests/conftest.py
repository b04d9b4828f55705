"""Shared fixtures for openwrt-connect tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_logging():
    """cli.main() disables logging when no log file is set; undo that per test."""
    yield
    logging.disable(logging.NOTSET)
