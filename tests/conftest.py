"""Shared test fixtures for box-harness tests.

This module provides:
- fake_box: in-memory Box backend with admin and user handles
- harness_config: config without a pre-existing user
- controller: LifecycleController wired to the fake backend
- running_controller: the same controller after run start
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from box_harness.config import ENV_CONFIG_JSON, ENV_CONFIG_PATH, HarnessConfig
from box_harness.lifecycle import LifecycleController
from tests.mocks import FakeAuthenticator, FakeBox

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real Box config out of the tests."""
    monkeypatch.delenv(ENV_CONFIG_JSON, raising=False)
    monkeypatch.delenv(ENV_CONFIG_PATH, raising=False)


@pytest.fixture
def fake_box() -> FakeBox:
    return FakeBox()


@pytest.fixture
def authenticator(fake_box: FakeBox) -> FakeAuthenticator:
    return FakeAuthenticator(fake_box)


@pytest.fixture
def harness_config() -> HarnessConfig:
    return HarnessConfig(client_id="cid", client_secret="secret", enterprise_id="E1")


@pytest.fixture
def controller(authenticator: FakeAuthenticator) -> LifecycleController:
    return LifecycleController(lambda config: authenticator)


@pytest_asyncio.fixture
async def running_controller(
    controller: LifecycleController, harness_config: HarnessConfig
) -> AsyncGenerator[LifecycleController, None]:
    await controller.start_run(harness_config)
    yield controller


@pytest.fixture
def command_log() -> list[tuple[str, str, Any]]:
    """Log shared by RecordingCommand / PlainCommand instances."""
    return []
