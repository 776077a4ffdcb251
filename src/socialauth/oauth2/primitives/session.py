"""Session storage contract for per-flow authorization state."""

from __future__ import annotations

from typing import Protocol


class SessionStore(Protocol):
    """Key/value store scoped by flow name.

    The scope keeps keys from different providers sharing one end-user
    session apart. Implementations own any locking.
    """

    def get(self, key: str, scope: str) -> str | None: ...

    def set(self, key: str, value: str, scope: str) -> None: ...


class InMemorySessionStore:
    """Dictionary-backed session store for a single process."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], str] = {}

    def get(self, key: str, scope: str) -> str | None:
        return self._data.get((scope, key))

    def set(self, key: str, value: str, scope: str) -> None:
        self._data[(scope, key)] = value
