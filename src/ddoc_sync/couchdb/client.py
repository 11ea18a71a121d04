"""
CouchDB Client Module

Thin document CRUD over the CouchDB HTTP API. No retries or connection
management: network errors from requests propagate to the caller.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ddoc_sync import config
from ddoc_sync.constants import DESIGN_PREFIX
from ddoc_sync.errors import CouchDbError, DocumentConflictError, NoDocumentError
from ddoc_sync.logger import logger


class Response:
    """Outcome of a document write: the id and the new revision."""

    def __init__(self, id: str, rev: str, ok: bool = True):
        self.id = id
        self.rev = rev
        self.ok = ok

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Response":
        return cls(data.get("id"), data.get("rev"), bool(data.get("ok", True)))

    def __eq__(self, other):
        if not isinstance(other, Response):
            return NotImplemented
        return (self.id, self.rev, self.ok) == (other.id, other.rev, other.ok)

    def __repr__(self):
        return f"Response(id={self.id!r}, rev={self.rev!r}, ok={self.ok!r})"


def _assert_not_empty(value, prefix: str):
    if value is None:
        raise ValueError(f"{prefix} may not be null.")
    if isinstance(value, str) and not value:
        raise ValueError(f"{prefix} may not be empty.")


def _as_dict(document) -> Dict[str, Any]:
    if hasattr(document, "to_dict"):
        return document.to_dict()
    return dict(document)


def quote_doc_id(doc_id: str) -> str:
    """URL-quote a document id, keeping the slash of ``_design/`` ids."""
    if doc_id.startswith(DESIGN_PREFIX):
        return DESIGN_PREFIX + quote(doc_id[len(DESIGN_PREFIX):], safe="")
    return quote(doc_id, safe="")


class CouchDbClient:
    """Document access for a single CouchDB database."""

    def __init__(self, base_url: Optional[str] = None, database: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or config.COUCHDB_URL).rstrip("/")
        self.database = database or config.COUCHDB_DATABASE
        _assert_not_empty(self.database, "database")
        self.timeout = timeout if timeout is not None else config.COUCHDB_TIMEOUT
        self.session = session or requests.Session()

    @property
    def db_url(self) -> str:
        return f"{self.base_url}/{quote(self.database, safe='')}"

    def _doc_url(self, doc_id: str) -> str:
        return f"{self.db_url}/{quote_doc_id(doc_id)}"

    def _check(self, resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code < 400:
            return data

        error, reason = data.get("error"), data.get("reason")
        if resp.status_code == 404:
            raise NoDocumentError(resp.status_code, error, reason)
        if resp.status_code == 409:
            raise DocumentConflictError(resp.status_code, error, reason)
        raise CouchDbError(resp.status_code, error, reason)

    def get(self, doc_id: str, rev: Optional[str] = None) -> Dict[str, Any]:
        """Fetch a document, optionally at a given revision.

        Raises:
            NoDocumentError: the document (or revision) does not exist
        """
        _assert_not_empty(doc_id, "id")
        params = None
        if rev is not None:
            _assert_not_empty(rev, "rev")
            params = {"rev": rev}

        logger.debug(f"GET {self._doc_url(doc_id)}")
        resp = self.session.get(self._doc_url(doc_id), params=params, timeout=self.timeout)
        return self._check(resp)

    def _put(self, data: Dict[str, Any]) -> Response:
        url = self._doc_url(data["_id"])
        logger.debug(f"PUT {url}")
        resp = self.session.put(url, json=data, timeout=self.timeout)
        return Response.from_json(self._check(resp))

    def save(self, document) -> Response:
        """Create a new document. It must carry an id and no revision."""
        data = _as_dict(document)
        _assert_not_empty(data.get("_id"), "Document id")
        if data.get("_rev") is not None:
            raise ValueError("Document revision should be null.")
        return self._put(data)

    def update(self, document) -> Response:
        """Update an existing document. It must carry an id and its current revision."""
        data = _as_dict(document)
        _assert_not_empty(data.get("_id"), "Document id")
        _assert_not_empty(data.get("_rev"), "Document revision")
        return self._put(data)
