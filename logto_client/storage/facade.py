"""Typed access to the three durable storage slots."""

from ..constants import StorageKey
from .storage import Storage


class LogtoStorage:
    """Wraps a raw ``Storage``; assigning None to a slot removes it."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _get(self, key: StorageKey) -> str | None:
        return self.storage.get_item(key.value) or None

    def _set(self, key: StorageKey, value: str | None) -> None:
        if not value:
            self.storage.remove_item(key.value)
            return

        self.storage.set_item(key.value, value)

    @property
    def id_token(self) -> str | None:
        return self._get(StorageKey.ID_TOKEN)

    @id_token.setter
    def id_token(self, value: str | None) -> None:
        self._set(StorageKey.ID_TOKEN, value)

    @property
    def refresh_token(self) -> str | None:
        return self._get(StorageKey.REFRESH_TOKEN)

    @refresh_token.setter
    def refresh_token(self, value: str | None) -> None:
        self._set(StorageKey.REFRESH_TOKEN, value)

    @property
    def sign_in_session(self) -> str | None:
        return self._get(StorageKey.SIGN_IN_SESSION)

    @sign_in_session.setter
    def sign_in_session(self, value: str | None) -> None:
        self._set(StorageKey.SIGN_IN_SESSION, value)
