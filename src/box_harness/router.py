"""Route commands to the client handle matching their access level."""

from typing import TYPE_CHECKING

from .commands import AccessLevel, Command

if TYPE_CHECKING:
    from .client import BoxClient
    from .session import Session


class ClientRouter:
    """Pure lookup from access level to session client."""

    def __init__(self, session: "Session"):
        self._session = session

    def for_level(self, access_level: AccessLevel) -> "BoxClient":
        if access_level == AccessLevel.ADMIN:
            return self._session.admin_client
        return self._session.user_client

    def for_command(self, command: Command) -> "BoxClient":
        return self.for_level(command.access_level)
