"""Storage backends, the typed storage facade and sign-in sessions."""

from .facade import LogtoStorage
from .session import SignInSession, SignInSessionManager, SignInStart
from .storage import FileStorage, MemoryStorage, Storage

__all__ = [
    "FileStorage",
    "LogtoStorage",
    "MemoryStorage",
    "SignInSession",
    "SignInSessionManager",
    "SignInStart",
    "Storage",
]
