"""Pytest configuration and fixtures for room registry tests."""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from core.config import RegistryConfig
from core.workbook import LocalWorkbook, create_workbook


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def registry_config():
    """Default registry configuration (no budgeting options)."""
    return RegistryConfig()


@pytest.fixture
def budget_config():
    """Registry configuration with two budgeting options."""
    return RegistryConfig(budgeting_suffixes=(('Fixed price', ' (fixed)'), ('Hourly', ' (hourly)')))


@pytest.fixture
def workbook_file(tmp_path, registry_config):
    """Create a local workbook with Kitchen and Bathroom templates."""
    path = tmp_path / 'workbook.json'
    create_workbook(path, registry_config, ['Kitchen', 'Bathroom'])
    return path


@pytest.fixture
def workbook(workbook_file, registry_config):
    """Open the local workbook created by workbook_file."""
    return LocalWorkbook(workbook_file, registry_config)


@pytest.fixture
def operator():
    """Mock operator that confirms and never prompts unless told to."""
    op = MagicMock()
    op.confirm.return_value = True
    op.prompt_text.return_value = None
    return op
