"""Shared fixtures."""

import logging

import pytest

from env_guard.audit import reset_logging
from env_guard.config import ProjectContext
from env_guard.storage import SecretStore


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Drop handlers and level changes made by setup_logging."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    reset_logging()
    root_logger.setLevel(level)


@pytest.fixture
def context(tmp_path) -> ProjectContext:
    """Identity context rooted in a temporary project directory."""
    return ProjectContext(account_name="tester", working_directory=str(tmp_path))


@pytest.fixture
def store(context) -> SecretStore:
    """Store in a temporary project directory."""
    return SecretStore(context)
