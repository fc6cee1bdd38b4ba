"""Test configuration and shared fixtures.

Provide isolated test settings and client fixtures for the application test
suite. Every client gets fresh health state, volume paths under ``tmp_path``
and load generators that never outlive the test.
"""
import threading
from typing import Generator, Optional
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from app.apitester.core.stress import CpuBurster, MemoryAccumulator
from app.config import Settings, get_settings
from app.main import app, init_state

# ==============================================================================
# TEST DOUBLES
# ==============================================================================


class StoppableAccumulator(MemoryAccumulator):
    """Accumulator with tiny blocks whose threads stop at fixture teardown."""

    def __init__(self, state) -> None:
        super().__init__(state, block_size=16)
        self.stop_event = threading.Event()
        self.threads: list[threading.Thread] = []

    def trigger(self, stop: Optional[threading.Event] = None) -> threading.Thread:
        worker = super().trigger(stop or self.stop_event)
        self.threads.append(worker)
        return worker

    def shutdown(self) -> None:
        self.stop_event.set()
        for worker in self.threads:
            worker.join(timeout=2)


# ==============================================================================
# CONFIGURATION FIXTURES
# ==============================================================================


@pytest.fixture
def mock_settings(tmp_path) -> Settings:
    """Provide isolated test configuration without external dependencies.

    Returns:
        Settings: Development configuration with volume paths under
            ``tmp_path`` and a secret path that does not exist.
    """
    return Settings(
        ENVIRONMENT="development",
        LOG_LEVEL="debug",
        APPLICATION_VERSION="Api Tester v9.9.9-test",
        VOLUME_PATH_PERSISTENT_VOLUME_DATA=str(tmp_path / "pv"),
        VOLUME_PATH_POD_VOLUME_DATA=str(tmp_path / "pod"),
        POSTGRESQL_FILEPATH=str(tmp_path / "secret" / "postgresql.yaml"),
        _env_file=None,  # Bypass any local environment file
    )


# ==============================================================================
# APPLICATION FIXTURES
# ==============================================================================


@pytest.fixture
def spawned() -> list:
    """Collect the fake workers handed out by the test CPU burster."""
    return []


@pytest.fixture
def app_state(mock_settings: Settings, spawned: list, monkeypatch):
    """Reset ``app.state`` and route settings to the isolated configuration.

    Yields:
        The application ``State`` with fresh health flags and test generators.
    """
    init_state(app)
    accumulator = StoppableAccumulator(app.state.health)
    app.state.memory = accumulator

    def fake_spawn(target, args):
        worker = mock.Mock(name=f"worker-{args[0]}")
        worker.target = target
        worker.args = args
        spawned.append(worker)
        return worker

    app.state.cpu = CpuBurster(spawn=fake_spawn)

    # Preserve original dependency state
    original_override = app.dependency_overrides.get(get_settings)
    app.dependency_overrides[get_settings] = lambda: mock_settings
    monkeypatch.setattr("app.main.get_settings", lambda: mock_settings)

    yield app.state

    accumulator.shutdown()
    if original_override:
        app.dependency_overrides[get_settings] = original_override
    else:
        app.dependency_overrides.pop(get_settings, None)


@pytest.fixture
def client(app_state) -> Generator[TestClient, None, None]:
    """Provide an HTTP test client after the lifespan has completed startup.

    Yields:
        TestClient: Client whose application reports ready and live.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unstarted_client(app_state) -> TestClient:
    """Provide an HTTP test client whose lifespan has not run.

    Returns:
        TestClient: Client whose application still has both flags down.
    """
    return TestClient(app)
