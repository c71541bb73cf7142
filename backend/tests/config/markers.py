"""
Pytest markers and collection hooks for the Kiliniks test suite.

Markers are also declared in pyproject.toml; tests are tagged from their
location so ``-m unit`` / ``-m integration`` work without decorating
every module.
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "repositories: mark test as repository test")
    config.addinivalue_line("markers", "services: mark test as service layer test")
    config.addinivalue_line("markers", "api: mark test as API endpoint test")
    config.addinivalue_line("markers", "events: mark test as event publishing test")
    config.addinivalue_line("markers", "logging: mark test as logging-related")


def pytest_collection_modifyitems(config, items):
    """Modify test items during collection."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)

        if "integration" in path:
            item.add_marker(pytest.mark.integration)

        if "repositor" in path:
            item.add_marker(pytest.mark.repositories)

        if "api" in path:
            item.add_marker(pytest.mark.api)
