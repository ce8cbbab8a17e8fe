"""box-harness - Scoped Box resource lifecycle for integration tests."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("box-harness")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for editable installs without metadata

from .commands import (
    AccessLevel,
    Command,
    CommandScope,
    CreateFileCommand,
    CreateFolderCommand,
    CreateRetentionPolicyCommand,
    DeleteFileCommand,
    DeleteUserCommand,
    DisposableCommand,
)
from .config import HarnessConfig, load_config
from .errors import BoxAPIError, ConfigError, HarnessError, LifecycleError
from .helpers import BoxResources, unique_name
from .lifecycle import LifecycleController, LifecyclePhase
from .session import Session

__all__ = [
    "__version__",
    # Commands
    "AccessLevel",
    "CommandScope",
    "Command",
    "DisposableCommand",
    "CreateFileCommand",
    "CreateFolderCommand",
    "CreateRetentionPolicyCommand",
    "DeleteFileCommand",
    "DeleteUserCommand",
    # Lifecycle
    "LifecycleController",
    "LifecyclePhase",
    "Session",
    "BoxResources",
    "unique_name",
    # Config
    "HarnessConfig",
    "load_config",
    # Errors
    "HarnessError",
    "ConfigError",
    "LifecycleError",
    "BoxAPIError",
]
