"""
Root pytest configuration for the Django project.

pytest-django loads config.settings_test (see pyproject.toml) and sets up
Django. App-specific fixtures are defined in each app's tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_handlers.py, test_orchestrator.py, etc. → integration
    - test_stripe_adapter.py, test_verifier.py, test_types.py, etc. → unit
    - Unmatched files → unit (services run against a mocked adapter)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_handlers.py",
        "test_orchestrator.py",
        "test_exception_handler.py",
        "test_health.py",
    ]

    unit_patterns = [
        "test_stripe_adapter.py",
        "test_verifier.py",
        "test_types.py",
        "test_exceptions.py",
        "test_serializers.py",
    ]

    for item in items:
        # Skip if test already has unit/integration marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.unit)
