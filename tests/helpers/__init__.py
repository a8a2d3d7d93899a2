"""Fakes and builders shared by the unit tests."""

from .settings import make_settings
from .fakes import (
    FakeSession,
    FakeConnector,
    FakeBrowserSocket,
    FakeUpstreamSocket,
    RecordingSleep,
    wait_until,
)

__all__ = [
    "FakeBrowserSocket",
    "FakeConnector",
    "FakeSession",
    "FakeUpstreamSocket",
    "RecordingSleep",
    "make_settings",
    "wait_until",
]
