"""Resource helpers used by test bodies.

Each helper builds a uniquely named request, wraps it in a command, runs it
through the lifecycle controller and returns the API object the command
captured.
"""

import io
import os
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .commands import (
    AccessLevel,
    CommandScope,
    CreateFileCommand,
    CreateFolderCommand,
    CreateRetentionPolicyCommand,
    DeleteFileCommand,
)

if TYPE_CHECKING:
    from .lifecycle import LifecycleController

DATA_DIR = Path(__file__).parent / "data"
ROOT_FOLDER_ID = "0"


def unique_name(label: str) -> str:
    """Return ``"<label> - <uuid4>"``.

    Collisions are astronomically unlikely, not impossible, and nothing
    checks for them.
    """
    return f"{label} - {uuid.uuid4()}"


def small_file_path() -> Path:
    return DATA_DIR / "smalltest.pdf"


def small_file_v2_path() -> Path:
    """Second revision of the small file, for version uploads."""
    return DATA_DIR / "smalltestV2.pdf"


def random_stream(size: int) -> io.BytesIO:
    """In-memory stream of ``size`` random bytes, for chunked upload tests."""
    return io.BytesIO(os.urandom(size))


class BoxResources:
    """Factories for tracked Box resources bound to one controller."""

    def __init__(self, controller: "LifecycleController"):
        self.controller = controller

    async def create_small_file(
        self,
        parent_id: str = ROOT_FOLDER_ID,
        scope: CommandScope = CommandScope.TEST,
        access_level: AccessLevel = AccessLevel.USER,
    ) -> dict[str, Any]:
        command = CreateFileCommand(
            unique_name("file"), small_file_path(), parent_id, scope, access_level
        )
        await self.controller.execute(command)
        return command.file

    async def create_small_file_as_admin(self, parent_id: str) -> dict[str, Any]:
        return await self.create_small_file(parent_id, CommandScope.TEST, AccessLevel.ADMIN)

    async def delete_file(self, file_id: str) -> None:
        await self.controller.execute(DeleteFileCommand(file_id))

    async def create_folder(
        self,
        parent_id: str = ROOT_FOLDER_ID,
        scope: CommandScope = CommandScope.TEST,
        access_level: AccessLevel = AccessLevel.USER,
    ) -> dict[str, Any]:
        command = CreateFolderCommand(unique_name("folder"), parent_id, scope, access_level)
        await self.controller.execute(command)
        return command.folder

    async def create_folder_as_admin(self, parent_id: str) -> dict[str, Any]:
        return await self.create_folder(parent_id, CommandScope.TEST, AccessLevel.ADMIN)

    async def create_retention_policy(
        self,
        folder_id: str = ROOT_FOLDER_ID,
        scope: CommandScope = CommandScope.TEST,
    ) -> dict[str, Any]:
        command = CreateRetentionPolicyCommand(folder_id, unique_name("policy"), scope)
        await self.controller.execute(command)
        return command.policy
