"""
Design Manager Module

Builds design documents from the desk and keeps CouchDB in step with them.

Usage:
    manager = DesignManager(CouchDbClient(database="example"))
    example = manager.get_from_desk("example")
    response = manager.synchronize_with_db(example)
    from_db = manager.get_from_db("_design/example")
"""

import threading
from enum import Enum
from typing import List, Optional, Tuple

from ddoc_sync.couchdb.client import CouchDbClient, Response
from ddoc_sync.desk.builder import DesignDocumentBuilder
from ddoc_sync.desk.catalog import DesignCatalog
from ddoc_sync.desk.resource import DeskResources, ResourceEvent
from ddoc_sync.document import DesignDocument
from ddoc_sync.errors import NoDocumentError
from ddoc_sync.logger import logger


class SyncAction(Enum):
    """What synchronizing one design document did to the database."""
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class SyncReport:
    """Ids handled by a batch synchronization, by outcome."""

    def __init__(self):
        self.created: List[str] = []
        self.updated: List[str] = []
        self.unchanged: List[str] = []

    def add(self, action: SyncAction, doc_id: str) -> None:
        getattr(self, action.value).append(doc_id)

    def __len__(self):
        return len(self.created) + len(self.updated) + len(self.unchanged)


class DesignManager:
    """
    Design documents on the desk and in the database.

    The desk catalog is built lazily on first use, exactly once per manager
    even under concurrent first use, and kept until ``refresh()``. Document
    bodies are read again on every ``get_from_desk``.
    """

    def __init__(self, client: Optional[CouchDbClient] = None, resources: Optional[DeskResources] = None):
        self._client = client
        self.resources = resources or DeskResources()
        self._catalog: Optional[DesignCatalog] = None
        self._catalog_lock = threading.Lock()

    @property
    def client(self) -> CouchDbClient:
        if self._client is None:
            self._client = CouchDbClient()
        return self._client

    @property
    def catalog(self) -> DesignCatalog:
        if self._catalog is None:
            with self._catalog_lock:
                if self._catalog is None:
                    self._catalog = self._build_catalog()
        return self._catalog

    def _build_catalog(self) -> DesignCatalog:
        logger.debug(f"Enumerating design resources in {self.resources.root_name}")
        resources, events = self.resources.enumerate()
        catalog = DesignCatalog.from_resources(resources, events)
        logger.debug(f"Found design documents: {sorted(catalog.names)}")
        return catalog

    @property
    def events(self) -> List[ResourceEvent]:
        """Advisories recorded while the catalog was built."""
        return self.catalog.events

    def refresh(self) -> None:
        """Discard the catalog; the next access enumerates the desk again."""
        with self._catalog_lock:
            self._catalog = None

    # ------------------------------------------------------------------ desk

    def get_from_desk(self, name: str) -> DesignDocument:
        """Build a design document from desk sources.

        Args:
            name: document name, without the ``_design/`` prefix
        """
        return DesignDocumentBuilder(self.catalog, self.resources).build(name)

    def get_all_from_desk(self) -> List[DesignDocument]:
        """Build every design document on the desk, ordered by name."""
        builder = DesignDocumentBuilder(self.catalog, self.resources)
        return [builder.build(name) for name in sorted(self.catalog.names)]

    # -------------------------------------------------------------- database

    def get_from_db(self, id: str, rev: Optional[str] = None) -> DesignDocument:
        """Fetch a design document from the database.

        Raises:
            NoDocumentError: no document with that id (and revision)
        """
        return DesignDocument.from_dict(self.client.get(id, rev))

    def _synchronize(self, document: DesignDocument) -> Tuple[SyncAction, Optional[Response]]:
        if document is None:
            raise ValueError("Document may not be null.")

        try:
            document_from_db = self.get_from_db(document.id)
        except NoDocumentError:
            logger.info(f"Creating {document.id}", icon="📤")
            return SyncAction.CREATED, self.client.save(document)

        if document == document_from_db:
            logger.debug(f"{document.id} is up to date")
            return SyncAction.UNCHANGED, None

        logger.info(f"Updating {document.id} (rev {document_from_db.revision})", icon="🔄")
        document.revision = document_from_db.revision
        return SyncAction.UPDATED, self.client.update(document)

    def synchronize_with_db(self, document: DesignDocument) -> Optional[Response]:
        """Synchronize a design document to the database.

        Saves the document when the database has none with its id. Otherwise
        compares both copies and, only when they differ, stamps the document
        with the database revision and updates it.

        Returns:
            the save or update Response, or None when the database copy is
            already up to date
        """
        return self._synchronize(document)[1]

    def _synchronize_documents(self, documents: List[DesignDocument]) -> SyncReport:
        report = SyncReport()
        for document in documents:
            action, _ = self._synchronize(document)
            report.add(action, document.id)
        return report

    def synchronize_all_with_db(self) -> SyncReport:
        """Synchronize every desk design document, stopping at the first failure."""
        return self._synchronize_documents(self.get_all_from_desk())

    def synchronize_names_with_db(self, names: List[str]) -> SyncReport:
        """Synchronize the named desk design documents, stopping at the first failure."""
        return self._synchronize_documents([self.get_from_desk(name) for name in names])
