"""Provisioning commands executed through the lifecycle controller."""

from .base import AccessLevel, Command, CommandScope, DisposableCommand
from .files import CreateFileCommand, DeleteFileCommand
from .folders import CreateFolderCommand
from .retention import CreateRetentionPolicyCommand
from .users import DeleteUserCommand

__all__ = [
    # Base
    "AccessLevel",
    "CommandScope",
    "Command",
    "DisposableCommand",
    # Concrete
    "CreateFileCommand",
    "DeleteFileCommand",
    "CreateFolderCommand",
    "CreateRetentionPolicyCommand",
    "DeleteUserCommand",
]
