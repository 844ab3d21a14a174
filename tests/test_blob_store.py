"""Tests for the blob store persistence adapter."""
import json
import logging
import threading

import pytest

from rankinglop.database.models import StoredBlob
from rankinglop.database.schemas import AthleteRecord
from rankinglop.storage.blob_store import ReadRequest, ReadResult, StorageError


class TestStoredBlobModel:
    def test_size_and_repr(self, sample_blob):
        assert sample_blob.size == len(sample_blob.data)
        assert "athletes" in repr(sample_blob)

    def test_unique_name_per_container(self, test_session_factory):
        with test_session_factory() as db:
            db.add(StoredBlob(container="athletes", name="a.json", data=b"{}"))
            db.add(StoredBlob(container="athletes", name="a.json", data=b"{}"))
            with pytest.raises(Exception):  # IntegrityError
                db.commit()


class TestReadRequest:
    def test_iterates_until_finished(self):
        request = ReadRequest(container="athletes", pattern=".*")
        request.send(ReadResult(name="a.json", data=b"1"))
        request.send(ReadResult(name="b.json", data=b"2"))
        request.finish()

        assert [r.name for r in request] == ["a.json", "b.json"]
        assert request.finished

    def test_finish_is_idempotent(self):
        request = ReadRequest(container="athletes", pattern=".*")
        request.finish()
        request.finish()

        assert list(request) == []

    def test_send_after_finish(self):
        request = ReadRequest(container="athletes", pattern=".*")
        request.finish()

        with pytest.raises(StorageError):
            request.send(ReadResult(name="late.json", data=b""))

    def test_streams_from_producer_thread(self):
        request = ReadRequest(container="athletes", pattern=".*")

        def produce():
            for i in range(100):
                request.send(ReadResult(name=f"{i}.json", data=b""))
            request.finish()

        producer = threading.Thread(target=produce)
        producer.start()
        names = [r.name for r in request]
        producer.join()

        assert len(names) == 100


class TestBlobStore:
    def test_write_and_get(self, blob_store):
        blob_store.write("athletes", "a.json", b'{"a": 1}')
        assert blob_store.get("athletes", "a.json") == b'{"a": 1}'

    def test_write_replaces(self, blob_store, test_session_factory):
        blob_store.write("athletes", "a.json", b"old")
        blob_store.write("athletes", "a.json", b"new")

        assert blob_store.get("athletes", "a.json") == b"new"
        with test_session_factory() as db:
            assert db.query(StoredBlob).count() == 1

    def test_get_missing(self, blob_store):
        assert blob_store.get("athletes", "missing.json") is None

    def test_read_filters_container_and_pattern(self, blob_store):
        blob_store.write("athletes", "a1.json", b"1")
        blob_store.write("athletes", "notes.txt", b"2")
        blob_store.write("competitions", "a2.json", b"3")

        request = ReadRequest(container="athletes", pattern=r"\.json$")
        blob_store.read(request)

        results = list(request)
        assert [r.name for r in results] == ["a1.json"]
        assert results[0].data == b"1"

    def test_read_invalid_pattern_finishes(self, blob_store, caplog):
        request = ReadRequest(container="athletes", pattern="(")

        with caplog.at_level(logging.ERROR, logger="rankinglop.storage.blob_store"):
            blob_store.read(request)

        assert request.finished
        assert list(request) == []
        assert "athletes" in caplog.text

    def test_persist_athlete(self, blob_store, test_settings):
        athlete = AthleteRecord(id="a-1", fingerprint="c2hh", name="Kari Nordmann", club="IL Geoform")

        blob_store.persist_athlete(athlete)

        data = json.loads(blob_store.get(test_settings.athletes_container, "a-1.json"))
        assert data == {"id": "a-1", "sha": "c2hh", "name": "Kari Nordmann", "club": "IL Geoform"}

    def test_fetch_competitions_empty(self, blob_store):
        assert blob_store.fetch_competitions() == []

    def test_competitions_round_trip(self, blob_store, make_event):
        from rankinglop.competitions.courses import build_competition

        competitions = [build_competition("20190512-ab12", make_event())]

        blob_store.persist_competitions(competitions)

        assert blob_store.fetch_competitions() == competitions

    def test_malformed_competitions(self, blob_store, test_settings):
        blob_store.write(test_settings.competitions_container, test_settings.competitions_file, b"[{")

        with pytest.raises(StorageError, match="Malformed"):
            blob_store.fetch_competitions()

    def test_container_counts(self, blob_store, test_settings):
        blob_store.write(test_settings.athletes_container, "a-1.json", b"{}")
        blob_store.write(test_settings.athletes_container, "a-2.json", b"{}")
        blob_store.write("scratch", "other.json", b"{}")

        assert blob_store.container_counts() == {
            test_settings.athletes_container: 2,
            test_settings.competitions_container: 0,
        }
