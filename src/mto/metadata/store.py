"""Attachment metadata storage.

An attachment keeps all of its per-style records in one serialized JSON
document under a single field. AttachmentMetadata performs the
read-modify-write merge; the MetadataStore only reads and writes strings.

There is no locking around the merge: concurrent runs for different
styles of the same attachment can lose each other's writes.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from mto.core.json_utils import parse_json_object, serialize_json
from mto.metadata.record import MetadataRecord

logger = logging.getLogger(__name__)

DEFAULT_FIELD = "meta"


class MetadataStore(Protocol):
    """Key-value storage for an attachment's serialized metadata fields."""

    def read(self, key: str) -> str | None:
        """Return the stored value for key, or None if unset."""
        ...

    def write(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...


class InMemoryMetadataStore:
    """MetadataStore backed by a dict. Used for standalone runs and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value


_SCHEMA = """
CREATE TABLE IF NOT EXISTS attachment_metadata (
    attachment_id TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    PRIMARY KEY (attachment_id, key)
)
"""


class SqliteMetadataStore:
    """MetadataStore persisting one attachment's fields in SQLite.

    Each read or write opens its own connection, so an instance can be
    shared between runs without holding a connection open.
    """

    def __init__(self, db_path: Path, attachment_id: str, timeout: float = 30.0) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file. Created if missing.
            attachment_id: Identifier of the attachment whose fields are stored.
            timeout: How long to wait for database locks (seconds).
        """
        self.db_path = db_path
        self.attachment_id = attachment_id
        self._timeout = timeout
        with self._connect() as conn:
            conn.execute(_SCHEMA)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), timeout=self._timeout)
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA synchronous = NORMAL")
        conn.execute("PRAGMA busy_timeout = 10000")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def read(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM attachment_metadata "
                "WHERE attachment_id = ? AND key = ?",
                (self.attachment_id, key),
            ).fetchone()
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO attachment_metadata (attachment_id, key, value) "
                "VALUES (?, ?, ?) "
                "ON CONFLICT(attachment_id, key) DO UPDATE SET "
                "value = excluded.value, "
                "updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')",
                (self.attachment_id, key, value),
            )


class AttachmentMetadata:
    """Style name to MetadataRecord mapping stored in a single field."""

    def __init__(self, store: MetadataStore, field: str = DEFAULT_FIELD) -> None:
        self.store = store
        self.field = field

    def read_raw(self) -> dict[str, dict]:
        """Return the stored mapping as plain dicts (empty if none)."""
        result = parse_json_object(self.store.read(self.field), context=self.field)
        if not result.success:
            logger.warning(
                "Discarding unreadable metadata in field '%s': %s",
                self.field,
                result.error,
            )
        return result.value or {}

    def records(self) -> dict[str, MetadataRecord]:
        """Return the stored mapping as MetadataRecords."""
        return {
            style: MetadataRecord.from_dict(data)
            for style, data in self.read_raw().items()
            if isinstance(data, dict)
        }

    def get(self, style: str) -> MetadataRecord | None:
        data = self.read_raw().get(style)
        return MetadataRecord.from_dict(data) if isinstance(data, dict) else None

    def merge(self, style: str, record: MetadataRecord) -> dict[str, dict]:
        """Set the record for style, keeping every other style untouched.

        Args:
            style: Style name to set or overwrite.
            record: Record produced by this run.

        Returns:
            The full mapping as written.
        """
        mapping = self.read_raw()
        mapping[style] = record.to_dict()
        self.store.write(self.field, serialize_json(mapping, context=self.field))
        logger.debug("Stored metadata for style '%s' in field '%s'", style, self.field)
        return mapping
