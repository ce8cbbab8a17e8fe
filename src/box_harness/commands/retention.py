"""Retention policy commands.

Retention policies are enterprise objects, so these always run as admin.
"""

from typing import TYPE_CHECKING, Any

from .base import AccessLevel, CommandScope, DisposableCommand

if TYPE_CHECKING:
    from ..client import BoxClient

ROOT_FOLDER_ID = "0"


class CreateRetentionPolicyCommand(DisposableCommand):
    """Create a finite retention policy, assigned to a folder unless it is root.

    Disposal retires the policy.
    """

    def __init__(
        self,
        folder_id: str,
        name: str,
        scope: CommandScope = CommandScope.TEST,
        retention_length: int = 1,
    ):
        super().__init__(scope, AccessLevel.ADMIN)
        self.folder_id = folder_id
        self.name = name
        self.retention_length = retention_length
        self.policy: dict[str, Any] | None = None
        self.assignment: dict[str, Any] | None = None

    async def execute(self, client: "BoxClient") -> str:
        self.policy = await client.create_retention_policy(
            self.name, retention_length=self.retention_length
        )
        if self.folder_id != ROOT_FOLDER_ID:
            self.assignment = await client.assign_retention_policy(
                self.policy["id"], self.folder_id
            )
        return self.policy["id"]

    async def dispose(self, client: "BoxClient") -> None:
        await client.retire_retention_policy(self.policy["id"])

    def describe(self) -> str:
        return f"retention policy {self.name!r}"
