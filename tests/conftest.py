# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Tests - Fixtures shared across test modules
# PURPOSE: Execution contexts, readers and canned templates
# CREATED: 19 OCT 2026
# ============================================================================

import pytest

from cluster import InMemoryClusterReader
from core.config import reset_defaults
from process import ExecutionContext


@pytest.fixture(autouse=True)
def fresh_defaults():
    """Re-read environment defaults for every test."""
    reset_defaults()
    yield
    reset_defaults()


@pytest.fixture
def ctx():
    """Execution context for component 'frontend' of app 'shop'."""
    return ExecutionContext("frontend", "shop")


@pytest.fixture
def reader():
    return InMemoryClusterReader()
