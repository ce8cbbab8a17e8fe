"""File commands."""

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .base import AccessLevel, Command, CommandScope, DisposableCommand

if TYPE_CHECKING:
    from ..client import BoxClient


class CreateFileCommand(DisposableCommand):
    """Upload a local file; deleting it undoes the upload."""

    def __init__(
        self,
        name: str,
        file_path: str | Path,
        parent_id: str = "0",
        scope: CommandScope = CommandScope.TEST,
        access_level: AccessLevel = AccessLevel.USER,
    ):
        super().__init__(scope, access_level)
        self.name = name
        self.file_path = Path(file_path)
        self.parent_id = parent_id
        self.file: dict[str, Any] | None = None

    @property
    def file_id(self) -> str | None:
        return self.file["id"] if self.file else None

    async def execute(self, client: "BoxClient") -> str:
        with self.file_path.open("rb") as f:
            self.file = await client.upload_file(self.name, f, parent_id=self.parent_id)
        return self.file["id"]

    async def dispose(self, client: "BoxClient") -> None:
        await client.delete_file(self.file["id"])

    def describe(self) -> str:
        return f"file {self.name!r}"


class DeleteFileCommand(Command):
    """Delete a file. Not tracked: there is nothing to undo."""

    def __init__(self, file_id: str, access_level: AccessLevel = AccessLevel.USER):
        super().__init__(access_level)
        self.file_id = file_id

    async def execute(self, client: "BoxClient") -> str:
        await client.delete_file(self.file_id)
        return self.file_id

    def describe(self) -> str:
        return f"delete file {self.file_id}"
