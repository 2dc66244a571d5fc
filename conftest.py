"""
Root conftest.py for pytest configuration

Registers domain markers and applies them based on test location.
"""
import pytest

DOMAIN_MARKERS = {
    "core": "Configuration, logging and CLI tests",
    "d0_gateway": "Gateway/API integration tests",
    "d2_sourcing": "Dataset parsing and serialization tests",
    "d4_enrichment": "Data enrichment tests",
    "d11_orchestration": "Orchestration and workflow tests",
}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")
    for marker, description in DOMAIN_MARKERS.items():
        config.addinivalue_line("markers", f"{marker}: {description}")


def pytest_collection_modifyitems(config, items):
    """Apply unit and domain markers from the test's directory"""
    for item in items:
        path = str(item.fspath)
        if "/tests/unit/" in path:
            item.add_marker(pytest.mark.unit)
        for marker in DOMAIN_MARKERS:
            if f"/{marker}/" in path:
                item.add_marker(getattr(pytest.mark, marker))
