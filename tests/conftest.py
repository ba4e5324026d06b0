import os

import pytest

# Directory under tests/ordering/ -> marker applied to every test in it
_LAYER_MARKERS = {
    "domain": pytest.mark.domain,
    "application": pytest.mark.application,
    "integration": pytest.mark.integration,
    "bdd": pytest.mark.bdd,
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="PROTEAN_ENV for the run: selects the overlay in domain.toml (test, sqlite, production)",
    )


def pytest_sessionstart(session):
    """Set PROTEAN_ENV before the ordering domain is imported and initialised."""
    os.environ["PROTEAN_ENV"] = session.config.getoption("env")


def pytest_collection_modifyitems(config, items):
    for item in items:
        layer = next((part for part in item.path.parts if part in _LAYER_MARKERS), None)
        if layer is None:
            continue
        item.add_marker(_LAYER_MARKERS[layer])
        if layer == "integration" and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)
