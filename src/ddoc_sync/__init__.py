"""
ddoc-sync: build CouchDB design documents from local sources and keep the
database in step with them.

Usage:
    from ddoc_sync import DesignManager, CouchDbClient

    manager = DesignManager(CouchDbClient(database="example"))
    manager.synchronize_all_with_db()
"""

__version__ = "1.0.0"

from ddoc_sync.couchdb import CouchDbClient, Response
from ddoc_sync.desk import DeskResources, DesignCatalog, ResourceEvent
from ddoc_sync.document import DesignDocument
from ddoc_sync.sync import DesignManager, SyncAction, SyncReport

__all__ = ['CouchDbClient', 'Response', 'DeskResources', 'DesignCatalog', 'ResourceEvent',
           'DesignDocument', 'DesignManager', 'SyncAction', 'SyncReport']
