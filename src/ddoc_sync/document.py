"""
Design Document Module

In-memory model of a CouchDB design document and its JSON field mapping.
"""

from typing import Any, Dict, Optional

from ddoc_sync.constants import DESIGN_PREFIX, JAVASCRIPT

# Attribute name -> CouchDB field name, in serialization order
FIELDS = (
    ("id", "_id"),
    ("revision", "_rev"),
    ("language", "language"),
    ("views", "views"),
    ("filters", "filters"),
    ("lists", "lists"),
    ("shows", "shows"),
    ("validate_doc_update", "validate_doc_update"),
    ("fulltext", "fulltext"),
)

# Fields compared by __eq__ (the revision never is)
_COMPARED = tuple(attr for attr, _ in FIELDS if attr != "revision")


class DesignDocument:
    """
    A design document: functions bundled under a ``_design/`` id.

    Categories that were not populated stay None and are left out of
    ``to_dict()``. Two documents are equal when every field except the
    revision is equal.
    """

    def __init__(self, id: Optional[str] = None, revision: Optional[str] = None,
                 language: Optional[str] = JAVASCRIPT,
                 views: Optional[Dict[str, Dict[str, str]]] = None,
                 filters: Optional[Dict[str, str]] = None,
                 lists: Optional[Dict[str, str]] = None,
                 shows: Optional[Dict[str, str]] = None,
                 validate_doc_update: Optional[str] = None,
                 fulltext: Optional[Dict[str, Dict[str, str]]] = None,
                 extra: Optional[Dict[str, Any]] = None):
        self.id = id
        self.revision = revision
        self.language = language
        self.views = views
        self.filters = filters
        self.lists = lists
        self.shows = shows
        self.validate_doc_update = validate_doc_update
        self.fulltext = fulltext
        # Server-side fields this model does not manage (e.g. options, updates)
        self.extra: Dict[str, Any] = dict(extra or {})

    @property
    def name(self) -> Optional[str]:
        """Design document name without the ``_design/`` prefix."""
        if self.id and self.id.startswith(DESIGN_PREFIX):
            return self.id[len(DESIGN_PREFIX):]
        return self.id

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with CouchDB field names, omitting unset fields."""
        data = {}
        for attr, field in FIELDS:
            value = getattr(self, attr)
            if value is not None:
                data[field] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DesignDocument":
        known = {field for _, field in FIELDS}
        kwargs = {attr: data.get(field) for attr, field in FIELDS}
        kwargs["extra"] = {k: v for k, v in data.items() if k not in known}
        return cls(**kwargs)

    def copy(self) -> "DesignDocument":
        return DesignDocument.from_dict({**self.to_dict(), **self.extra})

    def __eq__(self, other):
        if not isinstance(other, DesignDocument):
            return NotImplemented
        return all(getattr(self, a) == getattr(other, a) for a in _COMPARED)

    def __repr__(self):
        return f"DesignDocument(id={self.id!r}, revision={self.revision!r})"
