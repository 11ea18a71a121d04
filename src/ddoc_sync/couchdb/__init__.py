"""
CouchDB Package

Usage:
    from ddoc_sync.couchdb import CouchDbClient
"""

from ddoc_sync.couchdb.client import CouchDbClient, Response, quote_doc_id

__all__ = ['CouchDbClient', 'Response', 'quote_doc_id']
