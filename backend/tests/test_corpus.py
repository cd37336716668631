"""Tests for the corpus stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from syllabus_match.core.config import Settings
from syllabus_match.core.errors import CorpusUnavailable
from syllabus_match.db.corpus import InMemoryCorpusStore, SQLiteCorpusStore, build_store
from syllabus_match.db.sqlite import SQLiteDatabase
from syllabus_match.models.entities import Embedding, Signature


def _sig(sig_id: str, created_at: int) -> Signature:
    return Signature(
        id=sig_id,
        course_code="CS101",
        course_title="Intro",
        semester="fall",
        year="2024",
        university="Springfield University",
        signature_text="cs101|intro|fall|2024|springfielduniversity",
        owner_id="owner",
        created_at=created_at,
    )


def _emb(emb_id: str, signature_id: str, created_at: int) -> Embedding:
    return Embedding(
        id=emb_id,
        signature_id=signature_id,
        vector=(0.6, 0.0, 0.8),
        source_text="CS101 Intro",
        metadata={"course_code": "CS101", "year": "2024"},
        model="hashed",
        created_at=created_at,
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        yield InMemoryCorpusStore()
        return
    db = SQLiteDatabase(tmp_path / "corpus.db")
    yield SQLiteCorpusStore(db)
    db.close()


def test_append_and_get_round_trip(store) -> None:
    signature = _sig("sig_1", 10)
    embedding = _emb("emb_1", "sig_1", 11)
    assert store.append("signature", signature) == "sig_1"
    assert store.append("embedding", embedding) == "emb_1"

    assert store.get("signature", "sig_1") == signature
    assert store.get("embedding", "emb_1") == embedding
    assert store.get("signature", "missing") is None
    assert store.count("signature") == 1
    assert store.count("embedding") == 1


def test_scan_recent_is_newest_first_and_bounded(store) -> None:
    for idx, created_at in enumerate([5, 30, 10, 30, 20]):
        store.append("signature", _sig(f"sig_{idx}", created_at))

    recent = store.scan_recent("signature", 3)

    # equal timestamps come back latest write first
    assert [sig.id for sig in recent] == ["sig_3", "sig_1", "sig_4"]
    assert len(store.scan_recent("signature", 100)) == 5
    assert store.scan_recent("signature", 0) == []
    assert store.scan_recent("embedding", 10) == []


def test_unknown_kind_is_rejected(store) -> None:
    with pytest.raises(ValueError):
        store.append("syllabus", _sig("sig_1", 1))
    with pytest.raises(ValueError):
        store.scan_recent("syllabus", 10)
    with pytest.raises(ValueError):
        store.append("embedding", _sig("sig_1", 1))


def test_embedding_requires_existing_signature(store) -> None:
    with pytest.raises(CorpusUnavailable):
        store.append("embedding", _emb("emb_1", "sig_missing", 1))
    assert store.count("embedding") == 0


def test_sqlite_failure_surfaces_as_corpus_unavailable(tmp_path: Path) -> None:
    db = SQLiteDatabase(tmp_path / "corpus.db")
    store = SQLiteCorpusStore(db)
    db.execute("DROP TABLE embeddings")
    with pytest.raises(CorpusUnavailable):
        store.scan_recent("embedding", 10)
    db.close()


def test_sqlite_store_persists_across_connections(tmp_path: Path) -> None:
    path = tmp_path / "corpus.db"
    first = SQLiteDatabase(path)
    SQLiteCorpusStore(first).append("signature", _sig("sig_1", 1))
    first.close()

    second = SQLiteDatabase(path)
    reopened = SQLiteCorpusStore(second)
    assert [sig.id for sig in reopened.scan_recent("signature", 10)] == ["sig_1"]
    second.close()


def test_build_store_selects_backend(tmp_path: Path) -> None:
    assert isinstance(build_store(Settings(store_backend="memory")), InMemoryCorpusStore)
    sqlite_store = build_store(Settings(db_path=tmp_path / "c.db"))
    assert isinstance(sqlite_store, SQLiteCorpusStore)
    sqlite_store.close()


def test_append_all_returns_ids_in_order(store) -> None:
    ids = store.append_all([("signature", _sig("sig_1", 1)), ("embedding", _emb("emb_1", "sig_1", 2))])
    assert ids == ["sig_1", "emb_1"]
    assert store.count("signature") == 1
    assert store.count("embedding") == 1


def test_append_all_is_all_or_nothing(store) -> None:
    with pytest.raises(CorpusUnavailable):
        store.append_all([("signature", _sig("sig_1", 1)), ("embedding", _emb("emb_1", "sig_missing", 2))])
    assert store.count("signature") == 0
    assert store.count("embedding") == 0
    assert store.get("signature", "sig_1") is None
