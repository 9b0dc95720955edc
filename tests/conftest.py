"""Pytest configuration — fast-by-default TDD setup.

Slow tests (selective search, SIFT + SVM training) are skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import pytest

from fakes import make_scene


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that need opencv-contrib or train models",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped — pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def scene():
    """100x200 black BGR image with a white 40x40 square at (20, 30)."""
    return make_scene()
