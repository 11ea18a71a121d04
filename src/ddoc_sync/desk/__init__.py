"""
Desk Package

Builds design documents from the local source hierarchy ("the desk").

Structure:
    - resource.py: DeskResources - search roots, enumeration, reads
    - catalog.py: DesignCatalog - classification of the resource set
    - macro.py: process_code_macros - // !code inlining
    - builder.py: DesignDocumentBuilder - document assembly

Usage:
    from ddoc_sync.desk import DeskResources, DesignCatalog, DesignDocumentBuilder
"""

from ddoc_sync.desk.resource import (
    ArchiveResourceSource,
    DeskResources,
    DirectoryResourceSource,
    ResourceEvent,
    ResourceSource,
    source_for,
)
from ddoc_sync.desk.catalog import DesignCatalog
from ddoc_sync.desk.macro import process_code_macros
from ddoc_sync.desk.builder import DesignDocumentBuilder

__all__ = ['ArchiveResourceSource', 'DeskResources', 'DirectoryResourceSource', 'ResourceEvent',
           'ResourceSource', 'source_for', 'DesignCatalog', 'process_code_macros', 'DesignDocumentBuilder']
