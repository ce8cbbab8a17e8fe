"""Command abstraction.

A command is one unit of provisioning work. Every command declares which
credentialed client must run it. Disposable commands also declare the scope
whose stack owns them once executed, and know how to undo themselves.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import BoxClient


class AccessLevel(Enum):
    """Which client handle executes a command."""

    ADMIN = "admin"
    USER = "user"


class CommandScope(Enum):
    """Which lifetime owns a disposable command's cleanup."""

    TEST = "test"
    CLASS = "class"


class Command(ABC):
    """Executable unit of provisioning work."""

    def __init__(self, access_level: AccessLevel = AccessLevel.USER):
        self._access_level = access_level

    @property
    def access_level(self) -> AccessLevel:
        return self._access_level

    @abstractmethod
    async def execute(self, client: "BoxClient") -> str:
        """Perform the remote side effect and return the resource id."""

    def describe(self) -> str:
        """Short label used in log events."""
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{type(self).__name__}(access_level={self._access_level.value})"


class DisposableCommand(Command):
    """Command whose side effect is undone when its scope ends."""

    def __init__(
        self,
        scope: CommandScope = CommandScope.TEST,
        access_level: AccessLevel = AccessLevel.USER,
    ):
        super().__init__(access_level)
        self._scope = scope

    @property
    def scope(self) -> CommandScope:
        return self._scope

    @abstractmethod
    async def dispose(self, client: "BoxClient") -> None:
        """Undo the side effect performed by ``execute``."""

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(scope={self._scope.value}, "
            f"access_level={self._access_level.value})"
        )
