"""
Sync Module Package

Keeps CouchDB design documents in step with the desk.

Structure:
    - manager.py: DesignManager - desk builds, database reads, synchronization

Usage:
    from ddoc_sync.sync import DesignManager
"""

from ddoc_sync.sync.manager import DesignManager, SyncAction, SyncReport

__all__ = ['DesignManager', 'SyncAction', 'SyncReport']
