"""pytest plugin binding the lifecycle controller to pytest's scopes.

Enable it from a conftest.py::

    pytest_plugins = ["box_harness.plugin"]

Every test then runs inside a run scope (session fixture), a class scope and
a test scope. All fixtures share the session event loop, so async tests must
run on it too::

    pytestmark = pytest.mark.asyncio(loop_scope="session")

Resources shared by a test class come from a class fixture::

    @pytest_asyncio.fixture(scope="class", loop_scope="session")
    async def folder(self, box):
        return await box.create_folder(scope=CommandScope.CLASS)

Module-level test functions have no class node; pytest gives each of them
its own class scope.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from .auth import BoxAuthenticator
from .client import BoxClient
from .config import HarnessConfig, load_config
from .helpers import BoxResources
from .lifecycle import AuthenticatorFactory, LifecycleController
from .logging import configure_logging


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("box-harness", "Box integration test harness")
    group.addoption(
        "--box-config",
        action="store",
        default=None,
        help="Path to the Box app config (JSON or YAML). "
        "INTEGRATION_TESTING_CONFIG takes precedence.",
    )
    group.addoption(
        "--box-log-level",
        action="store",
        default=None,
        help="Configure harness logging at this level (debug, info, warning, ...)",
    )
    group.addoption(
        "--box-log-file",
        action="store",
        default=None,
        help="Write harness logs to this file (JSON lines unless --box-log-json=no)",
    )
    group.addoption(
        "--box-log-json",
        action="store",
        choices=["yes", "no"],
        default=None,
        help="Render harness logs as JSON (default: yes for --box-log-file, no for stderr)",
    )


def pytest_configure(config: pytest.Config) -> None:
    level = config.getoption("--box-log-level")
    log_file = config.getoption("--box-log-file")
    json_option = config.getoption("--box-log-json")
    if level or log_file or json_option:
        configure_logging(
            level or "info",
            log_file=log_file,
            json_output=None if json_option is None else json_option == "yes",
        )


@pytest.fixture(scope="session")
def box_config(pytestconfig: pytest.Config) -> HarnessConfig:
    """Harness configuration. Override to supply config programmatically."""
    return load_config(pytestconfig.getoption("--box-config"))


@pytest.fixture(scope="session")
def box_authenticator_factory() -> AuthenticatorFactory:
    """Session collaborator factory. Override to inject fake clients."""
    return BoxAuthenticator


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def box_controller(
    box_config: HarnessConfig,
    box_authenticator_factory: AuthenticatorFactory,
) -> AsyncGenerator[LifecycleController, None]:
    """Run scope: one session and one shared user for the whole run."""
    controller = LifecycleController(box_authenticator_factory)
    await controller.start_run(box_config)
    yield controller
    await controller.end_run()


@pytest_asyncio.fixture(scope="class", loop_scope="session", autouse=True)
async def _box_class_scope(
    box_controller: LifecycleController,
) -> AsyncGenerator[None, None]:
    box_controller.start_class()
    yield
    await box_controller.end_class()


@pytest_asyncio.fixture(loop_scope="session", autouse=True)
async def _box_test_scope(
    box_controller: LifecycleController,
    _box_class_scope: None,
) -> AsyncGenerator[None, None]:
    box_controller.start_test()
    yield
    await box_controller.end_test()


@pytest.fixture(scope="session")
def box(box_controller: LifecycleController) -> BoxResources:
    """Resource helpers bound to the run's controller.

    Session-scoped so class fixtures can create class-scoped resources.
    """
    return BoxResources(box_controller)


@pytest.fixture(scope="session")
def admin_client(box_controller: LifecycleController) -> BoxClient:
    return box_controller.session.admin_client


@pytest.fixture(scope="session")
def user_client(box_controller: LifecycleController) -> BoxClient:
    return box_controller.session.user_client
