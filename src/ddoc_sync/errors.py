"""
Errors Module

Exception hierarchy shared by the desk builder, the CouchDB client and the
synchronizer.
"""

from typing import Optional


class DdocSyncError(Exception):
    """Base class for every error raised by ddoc-sync."""


class UnknownDesignDocumentError(DdocSyncError, ValueError):
    """A design document name was requested that the desk does not contain."""

    def __init__(self, name: str):
        super().__init__(f"No design document found: {name}")
        self.name = name


class DesignConfigurationError(DdocSyncError, ValueError):
    """The desk layout of a design document is invalid."""


class ResourceNotFoundError(DdocSyncError, LookupError):
    """A resource listed in the catalog could not be read from any search root."""

    def __init__(self, name: str):
        super().__init__(f"Resource not found on any search root: {name}")
        self.name = name


class MacroFileNotFoundError(DdocSyncError, RuntimeError):
    """A ``// !code`` directive references a file that does not exist."""

    def __init__(self, path: str, referenced_by: str, directive: str):
        super().__init__(
            f"Code file '{path}' not found on any search root; "
            f"referenced by {referenced_by} :: '{directive}'"
        )
        self.path = path
        self.referenced_by = referenced_by
        self.directive = directive


class CouchDbError(DdocSyncError):
    """Non-successful response from CouchDB."""

    def __init__(self, status_code: int, error: Optional[str] = None, reason: Optional[str] = None):
        message = f"CouchDB returned {status_code}"
        if error:
            message += f" ({error})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.reason = reason


class NoDocumentError(CouchDbError):
    """The requested document does not exist (404)."""


class DocumentConflictError(CouchDbError):
    """The document revision is stale or the document already exists (409)."""
