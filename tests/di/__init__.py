"""Mock providers for testing."""

from .directory import MockDirectoryProvider
from .notification import MockNotificationProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockDirectoryProvider",
    "MockNotificationProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
