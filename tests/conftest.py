"""
Pytest configuration and shared fixtures.
"""

import os
import shutil
import sys
import tempfile
import zipfile
from typing import Callable, Dict, Generator

import pytest

# Add src/ to path so the tests run without an installed package
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from ddoc_sync.errors import NoDocumentError  # noqa: E402


def write_files(root: str, files: Dict[str, str]) -> None:
    """Write ``{relative/path: text}`` below ``root``."""
    for rel_path, text in files.items():
        path = os.path.join(root, *rel_path.split("/"))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary search root."""
    path = tempfile.mkdtemp(prefix="test_desk_")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def make_desk(temp_dir) -> Callable[..., str]:
    """Return a factory that lays out a design-docs tree in a fresh directory."""
    counter = [0]

    def _make(files: Dict[str, str], root_name: str = "design-docs") -> str:
        counter[0] += 1
        location = os.path.join(temp_dir, f"root{counter[0]}")
        os.makedirs(os.path.join(location, root_name))
        write_files(os.path.join(location, root_name), files)
        return location

    return _make


@pytest.fixture
def make_archive(temp_dir) -> Callable[..., str]:
    """Return a factory that writes a zip archive with a design-docs tree.

    Only file entries are stored unless ``directories`` is True.
    """
    counter = [0]

    def _make(files: Dict[str, str], root_name: str = "design-docs", directories: bool = False) -> str:
        counter[0] += 1
        location = os.path.join(temp_dir, f"bundle{counter[0]}.zip")
        with zipfile.ZipFile(location, "w") as archive:
            if directories:
                dirs = set()
                for rel_path in files:
                    parts = rel_path.split("/")[:-1]
                    for i in range(1, len(parts) + 1):
                        dirs.add("/".join(parts[:i]) + "/")
                archive.writestr(root_name + "/", "")
                for d in sorted(dirs):
                    archive.writestr(f"{root_name}/{d}", "")
            for rel_path, text in files.items():
                archive.writestr(f"{root_name}/{rel_path}", text.encode("utf-8"))
        return location

    return _make


class FakeCouchDb:
    """In-memory stand-in for CouchDbClient that records every call."""

    def __init__(self):
        self.docs: Dict[str, dict] = {}
        self.calls = []
        self._rev = 0

    def _next_rev(self) -> str:
        self._rev += 1
        return f"{self._rev}-abc{self._rev}"

    def get(self, doc_id, rev=None):
        self.calls.append(("get", doc_id, rev))
        if doc_id not in self.docs:
            raise NoDocumentError(404, "not_found", "missing")
        doc = self.docs[doc_id]
        if rev is not None and rev != doc["_rev"]:
            raise NoDocumentError(404, "not_found", "missing")
        return dict(doc)

    def save(self, document):
        from ddoc_sync.couchdb.client import Response
        data = document.to_dict()
        self.calls.append(("save", data["_id"], dict(data)))
        data["_rev"] = self._next_rev()
        self.docs[data["_id"]] = data
        return Response(data["_id"], data["_rev"])

    def update(self, document):
        from ddoc_sync.couchdb.client import Response
        data = document.to_dict()
        self.calls.append(("update", data["_id"], dict(data)))
        data["_rev"] = self._next_rev()
        self.docs[data["_id"]] = data
        return Response(data["_id"], data["_rev"])

    def writes(self):
        return [c for c in self.calls if c[0] in ("save", "update")]


@pytest.fixture
def fake_db() -> FakeCouchDb:
    return FakeCouchDb()


@pytest.fixture
def sample_files() -> Dict[str, str]:
    """A small desk with one design document using every category."""
    return {
        "example/views/byDate/map.js": "function(doc) { emit(doc.date, null); }",
        "example/views/byDate/reduce.js": "_count",
        "example/views/byDate/notes.txt": "not a function",
        "example/filters/important.js": "function(doc, req) { return doc.important; }",
        "example/lists/asHtml.js": "function(head, req) { send('<ul>'); }",
        "example/shows/detail.js": "function(doc, req) { return doc.title; }",
        "example/validate_doc_update/check.js": "function(newDoc, oldDoc, userCtx) {}",
        "example/fulltext/byTitle/index.js": "function(doc) { return new Document(); }",
        "example/fulltext/byTitle/analyzer.js": "standard",
    }
