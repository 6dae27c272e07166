"""Raw key-value storage backends.

A ``Storage`` is anything with ``get_item``/``set_item``/``remove_item``.
Two implementations ship with the client: an in-memory one and a JSON file
with optional Fernet encryption at rest.
"""

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken

from ..constants import STORAGE_KEY_PREFIX

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Synchronous string key-value store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage backed by a dict."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """
    File-based storage with optional encryption.

    All items for one app live in a single JSON object, keyed
    ``logto:<app_id>:<key>``. The file is rewritten on every change.

    Security considerations:
    - Items are encrypted at rest using Fernet when a key is given
    - The file is created with 0600 permissions
    """

    def __init__(self, path: Path, app_id: str, encryption_key: str | None = None):
        """
        Initialize file storage.

        Args:
            path: File holding the stored items
            app_id: Client ID used to namespace keys
            encryption_key: Optional encryption key (base64-encoded Fernet key)
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.app_id = app_id

        self.cipher: Fernet | None = None
        if encryption_key:
            self.cipher = Fernet(encryption_key.encode())
            logger.info("Storage encryption enabled")
        else:
            logger.warning("No encryption key provided. Tokens will be stored unencrypted.")

    def _key(self, key: str) -> str:
        return f"{STORAGE_KEY_PREFIX}:{self.app_id}:{key}"

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        data = self.path.read_bytes()
        if not data:
            return {}

        if self.cipher:
            try:
                data = self.cipher.decrypt(data)
            except InvalidToken:
                logger.error(f"Failed to decrypt storage file {self.path}; ignoring its contents")
                return {}

        try:
            items = json.loads(data.decode())
        except ValueError:
            logger.error(f"Storage file {self.path} is not valid JSON; ignoring its contents")
            return {}

        return items if isinstance(items, dict) else {}

    def _dump(self, items: dict[str, str]) -> None:
        data = json.dumps(items).encode()

        if self.cipher:
            data = self.cipher.encrypt(data)

        # Using os.open ensures permissions are set atomically during file creation
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(data)

    def get_item(self, key: str) -> str | None:
        return self._load().get(self._key(key))

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[self._key(key)] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(self._key(key), None) is not None:
            self._dump(items)

    @staticmethod
    def generate_encryption_key() -> str:
        """Generate a new Fernet encryption key."""
        return Fernet.generate_key().decode()
