from .runtime import RuntimeDeps
from .settings import AppSettings
from .connection import Connection

__all__ = ["AppSettings", "Connection", "RuntimeDeps"]
