"""
Global test configuration and fixtures
"""

import time

import pytest

from tests.fakes.shop_workspace import WORKSPACE_PATH, build_shop_service
from unigraph_engine.semantic_graph.ports import Workspace
from unigraph_shared.config import Settings

SLOW_TEST_THRESHOLD = 5.0


@pytest.fixture(autouse=True)
def track_test_duration(request):
    """Warn about slow tests."""
    start_time = time.time()

    yield

    duration = time.time() - start_time
    if duration > SLOW_TEST_THRESHOLD:
        print(f"\nSLOW TEST ({duration:.2f}s): {request.node.nodeid}")


@pytest.fixture
def settings() -> Settings:
    """Explicit settings, independent of the process environment."""
    return Settings(max_concurrency=4, log_level="WARNING")


@pytest.fixture
def workspace() -> Workspace:
    return Workspace(path=WORKSPACE_PATH)


@pytest.fixture
def shop():
    """(in-memory service, ShopSymbols) for the sample Shop workspace."""
    return build_shop_service()


# Pytest hooks
def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (medium speed)")
    config.addinivalue_line("markers", "slow: Slow tests (>5s)")


def pytest_collection_modifyitems(config, items):
    """Path-based markers."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
