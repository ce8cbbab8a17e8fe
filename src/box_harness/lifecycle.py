"""LifecycleController - Orchestrates the run, class and test lifetimes.

Handles:
- Run start: session establishment and shared user resolution
- Fresh scope stacks at every class and test start
- Command execution and registration on the owning stack
- Reverse-order draining at test end and class end
- Run end: tolerated deletion of the shared user
"""

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from .auth import BoxAuthenticator
from .commands import Command, CommandScope, DisposableCommand
from .config import HarnessConfig
from .errors import LifecycleError
from .logging import get_logger
from .router import ClientRouter
from .session import Session, SessionAuthenticator, close_session, open_session
from .stack import ScopeStack

if TYPE_CHECKING:
    from .client import BoxClient

logger = get_logger(__name__)

AuthenticatorFactory = Callable[[HarnessConfig], SessionAuthenticator]


class LifecyclePhase(Enum):
    """Position in the run -> class -> test nesting."""

    UNINITIALIZED = "uninitialized"
    RUN_ACTIVE = "run_active"
    CLASS_ACTIVE = "class_active"
    TEST_ACTIVE = "test_active"
    TORN_DOWN = "torn_down"


class LifecycleController:
    """Owns the session and the two scope stacks for one test run.

    Not thread-safe: tests are expected to run sequentially on one event loop.
    """

    def __init__(self, authenticator_factory: AuthenticatorFactory = BoxAuthenticator):
        """Initialize LifecycleController.

        Args:
            authenticator_factory: Builds the session collaborator from config
        """
        self._authenticator_factory = authenticator_factory
        self._phase = LifecyclePhase.UNINITIALIZED
        self._session: Session | None = None
        self._router: ClientRouter | None = None
        self._class_stack: ScopeStack | None = None
        self._test_stack: ScopeStack | None = None
        self._leaked: tuple[DisposableCommand, ...] = ()

    @property
    def phase(self) -> LifecyclePhase:
        return self._phase

    @property
    def session(self) -> Session:
        if self._session is None:
            raise LifecycleError("Run has not started")
        return self._session

    @property
    def router(self) -> ClientRouter:
        if self._router is None:
            raise LifecycleError("Run has not started")
        return self._router

    @property
    def class_stack(self) -> ScopeStack | None:
        return self._class_stack

    @property
    def test_stack(self) -> ScopeStack | None:
        return self._test_stack

    @property
    def leaked(self) -> tuple[DisposableCommand, ...]:
        """Commands left undisposed by the most recent failed drain."""
        return self._leaked

    def _require(self, *phases: LifecyclePhase, action: str) -> None:
        if self._phase not in phases:
            expected = " or ".join(phase.value for phase in phases)
            raise LifecycleError(
                f"Cannot {action} in phase {self._phase.value} (expected {expected})"
            )

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    async def start_run(self, config: HarnessConfig) -> Session:
        """Establish the session. Any failure is fatal to the run."""
        self._require(LifecyclePhase.UNINITIALIZED, action="start the run")
        logger.info("run_starting", source=config.source)

        authenticator = self._authenticator_factory(config)
        self._session = await open_session(config, authenticator)
        self._router = ClientRouter(self._session)
        self._phase = LifecyclePhase.RUN_ACTIVE

        logger.info(
            "run_started",
            user_id=self._session.user_id,
            user_created=self._session.user_created,
        )
        return self._session

    async def end_run(self) -> None:
        """Close the session. Never raises for a failed shared-user delete."""
        self._require(LifecyclePhase.RUN_ACTIVE, action="end the run")
        try:
            await close_session(self.session)
        finally:
            self._phase = LifecyclePhase.TORN_DOWN
        logger.info("run_ended")

    # -------------------------------------------------------------------------
    # Class
    # -------------------------------------------------------------------------

    def start_class(self) -> ScopeStack:
        self._require(LifecyclePhase.RUN_ACTIVE, action="start a class")
        self._discard_leaked(self._class_stack)
        self._class_stack = ScopeStack(CommandScope.CLASS)
        self._phase = LifecyclePhase.CLASS_ACTIVE
        return self._class_stack

    async def end_class(self) -> int:
        """Drain the class stack. A disposal failure propagates."""
        self._require(LifecyclePhase.CLASS_ACTIVE, action="end a class")
        try:
            return await self._drain(self._class_stack)
        finally:
            self._phase = LifecyclePhase.RUN_ACTIVE

    # -------------------------------------------------------------------------
    # Test
    # -------------------------------------------------------------------------

    def start_test(self) -> ScopeStack:
        self._require(LifecyclePhase.CLASS_ACTIVE, action="start a test")
        self._discard_leaked(self._test_stack)
        self._test_stack = ScopeStack(CommandScope.TEST)
        self._phase = LifecyclePhase.TEST_ACTIVE
        return self._test_stack

    async def end_test(self) -> int:
        """Drain the test stack. A disposal failure propagates."""
        self._require(LifecyclePhase.TEST_ACTIVE, action="end a test")
        try:
            return await self._drain(self._test_stack)
        finally:
            self._phase = LifecyclePhase.CLASS_ACTIVE

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def client_for(self, command: Command) -> "BoxClient":
        return self.router.for_command(command)

    async def execute(self, command: Command) -> str:
        """Run a command and track it for cleanup if it is disposable.

        Returns:
            Resource id returned by the command

        Raises:
            LifecycleError: If the command's scope is not active
            Exception: Whatever the command raised; nothing is tracked then
        """
        stack = self._stack_for(command) if isinstance(command, DisposableCommand) else None
        if stack is None:
            self._require(
                LifecyclePhase.RUN_ACTIVE,
                LifecyclePhase.CLASS_ACTIVE,
                LifecyclePhase.TEST_ACTIVE,
                action=f"execute {command.describe()}",
            )

        resource_id = await command.execute(self.client_for(command))

        if stack is not None:
            stack.push(command)
        logger.info(
            "command_executed",
            command=command.describe(),
            resource_id=resource_id,
            access_level=command.access_level.value,
            scope=stack.scope.value if stack is not None else None,
        )
        return resource_id

    def _stack_for(self, command: DisposableCommand) -> ScopeStack:
        if command.scope == CommandScope.TEST:
            self._require(
                LifecyclePhase.TEST_ACTIVE,
                action=f"execute test-scoped {command.describe()}",
            )
            return self._test_stack
        self._require(
            LifecyclePhase.CLASS_ACTIVE,
            LifecyclePhase.TEST_ACTIVE,
            action=f"execute class-scoped {command.describe()}",
        )
        return self._class_stack

    async def _drain(self, stack: ScopeStack) -> int:
        try:
            disposed = await stack.drain(self.client_for)
        except Exception:
            self._leaked = stack.leaked
            raise
        logger.debug("scope_drained", scope=stack.scope.value, disposed=disposed)
        return disposed

    def _discard_leaked(self, previous: ScopeStack | None) -> None:
        # Leaked entries are reported, never carried into the next scope
        if previous is not None and previous.leaked:
            logger.warning(
                "leaked_commands_discarded",
                scope=previous.scope.value,
                leaked=[command.describe() for command in previous.leaked],
            )
