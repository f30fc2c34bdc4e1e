"""
Root pytest configuration.

Package-specific fixtures are defined in each package's tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_bank_transfer.py, test_cli.py → integration (several components wired together)
    - everything else → unit

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_bank_transfer.py",
        "test_cli.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = item.path.name

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
