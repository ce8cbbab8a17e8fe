"""Test doubles for box-harness tests."""

from .fake_box import (
    FakeAuthenticator,
    FakeBox,
    FakeBoxClient,
    PlainCommand,
    RecordingCommand,
)

__all__ = [
    "FakeAuthenticator",
    "FakeBox",
    "FakeBoxClient",
    "PlainCommand",
    "RecordingCommand",
]
