"""User commands."""

from typing import TYPE_CHECKING

from .base import AccessLevel, Command

if TYPE_CHECKING:
    from ..client import BoxClient


class DeleteUserCommand(Command):
    """Delete an enterprise user as admin. Not tracked."""

    def __init__(self, user_id: str, notify: bool = False, force: bool = True):
        super().__init__(AccessLevel.ADMIN)
        self.user_id = user_id
        self.notify = notify
        self.force = force

    async def execute(self, client: "BoxClient") -> str:
        await client.delete_enterprise_user(self.user_id, notify=self.notify, force=self.force)
        return self.user_id

    def describe(self) -> str:
        return f"delete user {self.user_id}"
