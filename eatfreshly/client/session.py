"""Credential storage for the API client."""

import json
from collections.abc import Iterator, MutableMapping
from pathlib import Path
from typing import Any

SCOPES: dict[str, tuple[str, str]] = {
    "customer": ("token", "user"),
    "admin": ("adminToken", "adminUser"),
}


class JsonFileStore(MutableMapping):
    """Dict-like store persisted to a JSON file after every write."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = {}
        if self.path.exists():
            self._data = json.loads(self.path.read_text(encoding="utf-8") or "{}")

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._flush()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class CredentialStore:
    """Token and user profile kept under fixed keys of a mutable mapping.

    Customer sessions use ``token``/``user`` and back-office sessions use
    ``adminToken``/``adminUser``, so both can share one storage backend
    (a plain dict, a :class:`JsonFileStore` or Streamlit's session state).
    """

    def __init__(self, storage: MutableMapping | None = None, scope: str = "customer") -> None:
        if scope not in SCOPES:
            raise ValueError(f"Unknown credential scope: {scope}")
        self.storage = storage if storage is not None else {}
        self.scope = scope
        self.token_key, self.user_key = SCOPES[scope]

    @property
    def token(self) -> str | None:
        return self.storage.get(self.token_key)

    @property
    def user(self) -> dict[str, Any] | None:
        return self.storage.get(self.user_key)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.storage[self.token_key] = token
        self.storage[self.user_key] = user

    def clear(self) -> None:
        self.storage.pop(self.token_key, None)
        self.storage.pop(self.user_key, None)
