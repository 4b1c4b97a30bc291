# Overview: Key-value store over the storage_entries table; whole-entry reads and writes only.

"""
Persistent key-value store for the terminal.

Every collection (products, sales, users, current_user) is one entry
holding JSON text. Callers always read the whole entry, mutate it in
memory and write the whole entry back. Each write commits on its own:
two writes are never atomic together, and two processes writing the
same key can lose updates. That is the consistency model of the
terminal, not something this module tries to fix.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from ..models import StorageEntry
from ..time_utils import epoch_millis
from .concurrency import run_with_retry


PRODUCTS_KEY = "products"
SALES_KEY = "sales"
USERS_KEY = "users"
CURRENT_USER_KEY = "current_user"

COLLECTION_KEYS = (PRODUCTS_KEY, SALES_KEY, USERS_KEY, CURRENT_USER_KEY)


class StorageError(ValueError):
    """Raised when a stored entry cannot be decoded."""


def next_record_id(records: Iterable[dict]) -> int:
    """
    Creation-time id: the millisecond clock, bumped past the largest
    existing id so two records created in the same millisecond differ.
    """
    candidate = epoch_millis()
    highest = max((r.get("id", 0) for r in records), default=0)
    if candidate <= highest:
        candidate = highest + 1
    return candidate


class KeyValueStore:
    """
    String storage keyed by collection name, namespaced with a prefix.

    Args:
        session: SQLAlchemy session (db.session inside an app context)
        prefix: prepended to every key, e.g. "spos_" -> "spos_products"
    """

    def __init__(self, session, prefix: str = ""):
        self.session = session
        self.prefix = prefix

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def get_item(self, name: str) -> str | None:
        entry = self.session.get(StorageEntry, self._key(name))
        return entry.value if entry is not None else None

    def set_item(self, name: str, value: str) -> None:
        key = self._key(name)

        def _op():
            entry = self.session.get(StorageEntry, key)
            if entry is None:
                self.session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
            self.session.commit()

        run_with_retry(_op, session=self.session)

    def remove_item(self, name: str) -> None:
        key = self._key(name)

        def _op():
            entry = self.session.get(StorageEntry, key)
            if entry is None:
                return
            self.session.delete(entry)
            self.session.commit()

        run_with_retry(_op, session=self.session)

    def keys(self) -> list[str]:
        rows = (
            self.session.query(StorageEntry.key)
            .filter(StorageEntry.key.startswith(self.prefix, autoescape=True))
            .order_by(StorageEntry.key.asc())
            .all()
        )
        return [key[len(self.prefix):] for (key,) in rows]

    def read_json(self, name: str, default: Any = None) -> Any:
        raw = self.get_item(name)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Stored entry {self._key(name)!r} is not valid JSON: {exc}") from exc

    def write_json(self, name: str, value: Any) -> None:
        self.set_item(name, json.dumps(value))

    def read_collection(self, name: str) -> list[dict]:
        value = self.read_json(name, default=[])
        if not isinstance(value, list):
            raise StorageError(f"Stored entry {self._key(name)!r} is not a list")
        return value

    def write_collection(self, name: str, records: list[dict]) -> None:
        self.write_json(name, records)
