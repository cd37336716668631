"""Corpus store: append-only persistence for signatures and embeddings.

The matching engine needs only ``append_all`` and a bounded ``scan_recent``
ordered newest first. Records are never updated or deleted here.
"""

from __future__ import annotations

import sqlite3
import threading
from array import array
from contextlib import contextmanager
from typing import Iterator, Literal, Protocol, Sequence, Union

import orjson

from syllabus_match.core.config import Settings
from syllabus_match.core.errors import CorpusUnavailable
from syllabus_match.core.metrics import CORPUS_WRITES
from syllabus_match.db.sqlite import SQLiteDatabase
from syllabus_match.models.entities import Embedding, Signature

Kind = Literal["signature", "embedding"]
CorpusRecord = Union[Signature, Embedding]

KINDS: tuple[str, ...] = ("signature", "embedding")
_RECORD_TYPES = {"signature": Signature, "embedding": Embedding}


class CorpusStore(Protocol):
    def append(self, kind: Kind, record: CorpusRecord) -> str: ...

    def append_all(self, items: Sequence[tuple[Kind, CorpusRecord]]) -> list[str]: ...

    def scan_recent(self, kind: Kind, limit: int) -> list[CorpusRecord]: ...

    def get(self, kind: Kind, record_id: str) -> CorpusRecord | None: ...

    def count(self, kind: Kind) -> int: ...

    def close(self) -> None: ...


def _check_kind(kind: str, record: object | None = None) -> None:
    if kind not in _RECORD_TYPES:
        raise ValueError(f"Unknown corpus kind: {kind!r}")
    if record is not None and not isinstance(record, _RECORD_TYPES[kind]):
        raise ValueError(f"Expected {_RECORD_TYPES[kind].__name__} for kind {kind!r}")


class InMemoryCorpusStore:
    """Process-local store, for tests and single-process development."""

    def __init__(self) -> None:
        self._records: dict[str, list[CorpusRecord]] = {kind: [] for kind in KINDS}
        self._index: dict[str, dict[str, CorpusRecord]] = {kind: {} for kind in KINDS}
        self._lock = threading.Lock()

    def append(self, kind: Kind, record: CorpusRecord) -> str:
        return self.append_all([(kind, record)])[0]

    def append_all(self, items: Sequence[tuple[Kind, CorpusRecord]]) -> list[str]:
        """Append every item or none of them."""
        for kind, record in items:
            _check_kind(kind, record)
        with self._lock:
            pending = {record.id for kind, record in items if kind == "signature"}
            for kind, record in items:
                if isinstance(record, Embedding) and not (
                    record.signature_id in self._index["signature"] or record.signature_id in pending
                ):
                    raise CorpusUnavailable(
                        f"Embedding {record.id} references unknown signature {record.signature_id}"
                    )
            for kind, record in items:
                self._records[kind].append(record)
                self._index[kind][record.id] = record
        for kind, _ in items:
            CORPUS_WRITES.labels(kind=kind).inc()
        return [record.id for _, record in items]

    def scan_recent(self, kind: Kind, limit: int) -> list[CorpusRecord]:
        _check_kind(kind)
        if limit <= 0:
            return []
        with self._lock:
            records = list(self._records[kind])
        # Stable sort on the reversed insertion order keeps later writes first on ties.
        records.reverse()
        records.sort(key=lambda item: item.created_at, reverse=True)
        return records[:limit]

    def get(self, kind: Kind, record_id: str) -> CorpusRecord | None:
        _check_kind(kind)
        with self._lock:
            return self._index[kind].get(record_id)

    def count(self, kind: Kind) -> int:
        _check_kind(kind)
        with self._lock:
            return len(self._records[kind])

    def close(self) -> None:
        pass


class SQLiteCorpusStore:
    """Corpus store backed by the SQLite schema in ``schema.sql``."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db
        self._lock = threading.RLock()
        with self._guard():
            self.db.ensure_schema()

    def append(self, kind: Kind, record: CorpusRecord) -> str:
        return self.append_all([(kind, record)])[0]

    def append_all(self, items: Sequence[tuple[Kind, CorpusRecord]]) -> list[str]:
        """Insert every item in one transaction; a failure rolls all of them back."""
        for kind, record in items:
            _check_kind(kind, record)
        with self._guard():
            with self.db.transaction() as cursor:
                for _, record in items:
                    _insert(cursor, record)
        for kind, _ in items:
            CORPUS_WRITES.labels(kind=kind).inc()
        return [record.id for _, record in items]

    def scan_recent(self, kind: Kind, limit: int) -> list[CorpusRecord]:
        _check_kind(kind)
        if limit <= 0:
            return []
        table = "signatures" if kind == "signature" else "embeddings"
        with self._guard():
            rows = self.db.query(
                f"SELECT * FROM {table} ORDER BY created_at DESC, rowid DESC LIMIT ?",
                [limit],
            )
        return [_row_to_record(kind, row) for row in rows]

    def get(self, kind: Kind, record_id: str) -> CorpusRecord | None:
        _check_kind(kind)
        table = "signatures" if kind == "signature" else "embeddings"
        with self._guard():
            row = self.db.execute(f"SELECT * FROM {table} WHERE id = ?", [record_id]).fetchone()
        return _row_to_record(kind, row) if row else None

    def count(self, kind: Kind) -> int:
        _check_kind(kind)
        table = "signatures" if kind == "signature" else "embeddings"
        with self._guard():
            row = self.db.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()
        return int(row["count"]) if row else 0

    def close(self) -> None:
        with self._lock:
            self.db.close()

    @contextmanager
    def _guard(self) -> Iterator[None]:
        """Serialize connection access and surface sqlite errors as CorpusUnavailable."""
        with self._lock:
            try:
                yield
            except sqlite3.Error as exc:
                raise CorpusUnavailable(f"Corpus store error: {exc}") from exc


def _insert(cursor: sqlite3.Cursor, record: CorpusRecord) -> None:
    if isinstance(record, Signature):
        cursor.execute(
            """
            INSERT INTO signatures (
              id, course_code, course_title, semester, year, university,
              signature_text, owner_id, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                record.id,
                record.course_code,
                record.course_title,
                record.semester,
                record.year,
                record.university,
                record.signature_text,
                record.owner_id,
                record.created_at,
            ],
        )
        return
    cursor.execute(
        """
        INSERT INTO embeddings (
          id, signature_id, model, dim, vector, source_text, meta_json, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            record.id,
            record.signature_id,
            record.model,
            record.dim,
            array("d", record.vector).tobytes(),
            record.source_text,
            orjson.dumps(record.metadata).decode("utf-8"),
            record.created_at,
        ],
    )


def _row_to_record(kind: str, row: sqlite3.Row) -> CorpusRecord:
    if kind == "signature":
        return Signature(
            id=row["id"],
            course_code=row["course_code"],
            course_title=row["course_title"],
            semester=row["semester"],
            year=row["year"],
            university=row["university"],
            signature_text=row["signature_text"],
            owner_id=row["owner_id"],
            created_at=int(row["created_at"]),
        )
    floats = array("d")
    floats.frombytes(row["vector"])
    return Embedding(
        id=row["id"],
        signature_id=row["signature_id"],
        vector=tuple(floats),
        source_text=row["source_text"],
        metadata=orjson.loads(row["meta_json"]),
        model=row["model"],
        created_at=int(row["created_at"]),
    )


def build_store(settings: Settings) -> CorpusStore:
    """Create the store selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        return InMemoryCorpusStore()
    return SQLiteCorpusStore(SQLiteDatabase(settings.db_path))


__all__ = [
    "Kind",
    "CorpusRecord",
    "CorpusStore",
    "InMemoryCorpusStore",
    "SQLiteCorpusStore",
    "build_store",
]
