"""
Constants Module

Defines constants used across the ddoc-sync project.
"""

# =============================================================================
# Desk Layout
# =============================================================================

# Directory holding one sub-directory per design document
DESIGN_DOCS_DIR = "design-docs"

# Only files with this extension are treated as function sources
SOURCE_EXTENSION = ".js"

# Both conventions are accepted when classifying resource paths
PATH_SEPARATORS = ("/", "\\")


# =============================================================================
# Design Document Fields
# =============================================================================

DESIGN_PREFIX = "_design/"
JAVASCRIPT = "javascript"


class Category:
    """Single-level function categories."""
    LISTS = "lists"
    FILTERS = "filters"
    SHOWS = "shows"
    VALIDATE_DOC_UPDATE = "validate_doc_update"


class Group:
    """Two-level function groups (named subgroups with fixed roles)."""
    VIEWS = "views"
    FULLTEXT = "fulltext"


FUNCTION_CATEGORIES = (
    Category.LISTS,
    Category.FILTERS,
    Category.SHOWS,
    Category.VALIDATE_DOC_UPDATE,
)

# Group name to the role files recognised inside each subgroup
GROUP_ROLES = {
    Group.VIEWS: ("map", "reduce"),
    Group.FULLTEXT: ("index", "defaults", "analyzer"),
}


# =============================================================================
# Macro Markers
# =============================================================================

MACRO_BEGIN_MARKER = "// ==> {path}"
MACRO_END_MARKER = "// <== {path}"


# =============================================================================
# CouchDB Defaults
# =============================================================================

DEFAULT_COUCHDB_URL = "http://127.0.0.1:5984"
DEFAULT_REQUEST_TIMEOUT = 30.0
