"""
Tests for DesignManager: desk builds and synchronization.
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
import requests

from ddoc_sync.desk.resource import DeskResources
from ddoc_sync.errors import CouchDbError, NoDocumentError, UnknownDesignDocumentError
from ddoc_sync.sync import DesignManager, SyncAction


@pytest.fixture
def manager(make_desk, sample_files, fake_db):
    files = dict(sample_files)
    files["other/filters/f.js"] = "function(doc, req) { return true; }"
    return DesignManager(fake_db, DeskResources([make_desk(files)]))


class TestDesk:

    def test_every_catalog_name_builds(self, manager):
        for name in manager.catalog.names:
            doc = manager.get_from_desk(name)
            assert doc.id == "_design/" + name

    def test_get_all_from_desk(self, manager):
        docs = manager.get_all_from_desk()
        assert [d.id for d in docs] == ["_design/example", "_design/other"]

    def test_unknown_name(self, manager):
        with pytest.raises(UnknownDesignDocumentError):
            manager.get_from_desk("missing")

    def test_catalog_is_built_once(self, manager):
        with patch.object(manager.resources, "enumerate", wraps=manager.resources.enumerate) as spy:
            manager.get_from_desk("example")
            manager.get_from_desk("other")
            manager.get_all_from_desk()
        assert spy.call_count == 1

    def test_catalog_is_built_once_concurrently(self, manager):
        calls = []
        original = manager.resources.enumerate
        barrier = threading.Barrier(8)

        def slow_enumerate():
            calls.append(1)
            return original()

        manager.resources.enumerate = slow_enumerate
        catalogs = []

        def worker():
            barrier.wait()
            catalogs.append(manager.catalog)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert all(c is catalogs[0] for c in catalogs)

    def test_refresh(self, manager):
        first = manager.catalog
        manager.refresh()
        assert manager.catalog is not first

    def test_events(self, make_desk, make_archive, fake_db):
        loose = make_desk({"foo/filters/f.js": "a"})
        bundle = make_archive({"foo/filters/f.js": "b"})
        manager = DesignManager(fake_db, DeskResources([loose, bundle]))

        assert [e.kind for e in manager.events] == ["duplicate"]
        assert manager.get_from_desk("foo").filters == {"f": "a"}


class TestSynchronizeWithDb:

    def test_creates_when_absent(self, manager, fake_db):
        doc = manager.get_from_desk("example")

        response = manager.synchronize_with_db(doc)

        assert response.id == "_design/example"
        assert [c[0] for c in fake_db.writes()] == ["save"]

    def test_second_run_takes_no_action(self, manager, fake_db):
        manager.synchronize_with_db(manager.get_from_desk("example"))

        response = manager.synchronize_with_db(manager.get_from_desk("example"))

        assert response is None
        assert [c[0] for c in fake_db.writes()] == ["save"]

    def test_updates_with_remote_revision(self, manager, fake_db):
        fake_db.docs["_design/example"] = {
            "_id": "_design/example",
            "_rev": "7-remote",
            "language": "javascript",
            "filters": {"important": "function() { return false; }"},
        }
        doc = manager.get_from_desk("example")
        expected = doc.to_dict()

        response = manager.synchronize_with_db(doc)

        assert response is not None
        writes = fake_db.writes()
        assert [c[0] for c in writes] == ["update"]
        sent = writes[0][2]
        assert sent["_rev"] == "7-remote"
        assert {k: v for k, v in sent.items() if k != "_rev"} == expected
        assert doc.revision == "7-remote"

    def test_equal_documents_with_different_revisions(self, manager, fake_db):
        doc = manager.get_from_desk("example")
        remote = doc.to_dict()
        remote["_rev"] = "3-x"
        fake_db.docs["_design/example"] = remote

        assert manager.synchronize_with_db(manager.get_from_desk("example")) is None
        assert fake_db.writes() == []

    def test_none_document(self, manager):
        with pytest.raises(ValueError):
            manager.synchronize_with_db(None)

    def test_fetch_failure_propagates(self, manager):
        client = MagicMock()
        client.get.side_effect = CouchDbError(500, "internal", "boom")
        manager._client = client

        with pytest.raises(CouchDbError):
            manager.synchronize_with_db(manager.get_from_desk("example"))
        client.save.assert_not_called()
        client.update.assert_not_called()

    def test_network_failure_propagates(self, manager):
        client = MagicMock()
        client.get.side_effect = requests.ConnectionError("refused")
        manager._client = client

        with pytest.raises(requests.ConnectionError):
            manager.synchronize_with_db(manager.get_from_desk("example"))


class TestSynchronizeAllWithDb:

    def test_report(self, manager, fake_db):
        fake_db.docs["_design/other"] = {"_id": "_design/other", "_rev": "1-a", "language": "javascript"}

        report = manager.synchronize_all_with_db()

        assert report.created == ["_design/example"]
        assert report.updated == ["_design/other"]
        assert report.unchanged == []

        again = manager.synchronize_all_with_db()
        assert again.unchanged == ["_design/example", "_design/other"]
        assert len(again) == 2

    def test_first_failure_halts_batch(self, manager):
        client = MagicMock()
        client.get.side_effect = NoDocumentError(404)
        client.save.side_effect = [CouchDbError(500, "internal"), MagicMock()]
        manager._client = client

        with pytest.raises(CouchDbError):
            manager.synchronize_all_with_db()
        assert client.save.call_count == 1

    def test_synchronize_names(self, manager, fake_db):
        report = manager.synchronize_names_with_db(["other"])

        assert report.created == ["_design/other"]
        assert list(fake_db.docs) == ["_design/other"]


class TestGetFromDb:

    def test_get(self, manager, fake_db):
        fake_db.docs["_design/x"] = {"_id": "_design/x", "_rev": "2-b", "shows": {"s": "f"}}

        doc = manager.get_from_db("_design/x")

        assert doc.revision == "2-b"
        assert doc.shows == {"s": "f"}

    def test_get_with_revision(self, manager, fake_db):
        fake_db.docs["_design/x"] = {"_id": "_design/x", "_rev": "2-b"}

        assert manager.get_from_db("_design/x", "2-b").revision == "2-b"
        assert fake_db.calls[-1] == ("get", "_design/x", "2-b")

    def test_missing(self, manager):
        with pytest.raises(NoDocumentError):
            manager.get_from_db("_design/nothing")


def test_sync_action_values():
    assert SyncAction.CREATED.value == "created"
