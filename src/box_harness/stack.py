"""LIFO ledger of disposable commands for one scope instance."""

from collections.abc import Callable
from typing import TYPE_CHECKING

from .commands import CommandScope, DisposableCommand
from .errors import LifecycleError
from .logging import get_logger

if TYPE_CHECKING:
    from .client import BoxClient

logger = get_logger(__name__)

ClientResolver = Callable[[DisposableCommand], "BoxClient"]


class ScopeStack:
    """Disposable commands executed during one test or one test class.

    Entries are disposed strictly in reverse push order, so a file created
    inside a folder is deleted before the folder.
    """

    def __init__(self, scope: CommandScope):
        self.scope = scope
        self._entries: list[DisposableCommand] = []
        self._leaked: tuple[DisposableCommand, ...] = ()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"ScopeStack(scope={self.scope.value}, size={len(self._entries)})"

    @property
    def leaked(self) -> tuple[DisposableCommand, ...]:
        """Entries left undisposed by a failed drain, top first."""
        return self._leaked

    def entries(self) -> tuple[DisposableCommand, ...]:
        """Snapshot in push order."""
        return tuple(self._entries)

    def push(self, command: DisposableCommand) -> None:
        if command.scope != self.scope:
            raise LifecycleError(
                f"Cannot track {command.scope.value}-scoped {command.describe()} "
                f"on the {self.scope.value} stack"
            )
        self._entries.append(command)

    def pop(self) -> DisposableCommand:
        if not self._entries:
            raise LifecycleError(f"The {self.scope.value} stack is empty")
        return self._entries.pop()

    def peek(self) -> DisposableCommand | None:
        return self._entries[-1] if self._entries else None

    async def drain(self, resolve_client: ClientResolver) -> int:
        """Pop and dispose every entry until the stack is empty.

        Stops at the first disposal failure: the failing entry and everything
        still on the stack are recorded in ``leaked`` and the error is
        re-raised unchanged.

        Args:
            resolve_client: Returns the client that disposes a command

        Returns:
            Number of entries disposed
        """
        disposed = 0
        while self._entries:
            command = self._entries.pop()
            try:
                await command.dispose(resolve_client(command))
            except Exception as e:
                self._leaked = (command, *reversed(self._entries))
                self._entries.clear()
                logger.error(
                    "scope_drain_failed",
                    scope=self.scope.value,
                    command=command.describe(),
                    disposed=disposed,
                    leaked=[entry.describe() for entry in self._leaked],
                    error=str(e),
                )
                raise
            disposed += 1
            logger.debug("command_disposed", scope=self.scope.value, command=command.describe())
        return disposed
