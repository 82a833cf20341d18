"""
Shared fixtures.

Every test runs against a fresh process-wide guard context with no
simulated platform and no PLATGUARD_* settings from the environment.
"""

import pytest

from platguard import get_context, reset_context, set_context


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop PLATGUARD_* variables so the host environment cannot leak in."""
    for key in ("PLATGUARD_CONFIG", "PLATGUARD_ENABLED", "PLATGUARD_GUARD_WRITES", "PLATGUARD_PLATFORM"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def guard_context():
    """Install a fresh guard context and restore the previous one afterwards."""
    previous = get_context()
    context = reset_context()
    yield context
    set_context(previous)


@pytest.fixture
def on_node(guard_context):
    guard_context.simulate("node")
    return guard_context


@pytest.fixture
def on_web(guard_context):
    guard_context.simulate("web")
    return guard_context
