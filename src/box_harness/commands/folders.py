"""Folder commands."""

from typing import TYPE_CHECKING, Any

from .base import AccessLevel, CommandScope, DisposableCommand

if TYPE_CHECKING:
    from ..client import BoxClient


class CreateFolderCommand(DisposableCommand):
    """Create a folder; disposal deletes it recursively."""

    def __init__(
        self,
        name: str,
        parent_id: str = "0",
        scope: CommandScope = CommandScope.TEST,
        access_level: AccessLevel = AccessLevel.USER,
    ):
        super().__init__(scope, access_level)
        self.name = name
        self.parent_id = parent_id
        self.folder: dict[str, Any] | None = None

    @property
    def folder_id(self) -> str | None:
        return self.folder["id"] if self.folder else None

    async def execute(self, client: "BoxClient") -> str:
        self.folder = await client.create_folder(self.name, parent_id=self.parent_id)
        return self.folder["id"]

    async def dispose(self, client: "BoxClient") -> None:
        await client.delete_folder(self.folder["id"], recursive=True)

    def describe(self) -> str:
        return f"folder {self.name!r}"
