"""
Design Document Builder Module
Assembles one design document from its classified desk sources.
"""

from typing import Dict, List, Optional

from ddoc_sync.constants import Category, DESIGN_PREFIX, Group, JAVASCRIPT
from ddoc_sync.desk.catalog import DesignCatalog, function_name
from ddoc_sync.desk.macro import process_code_macros
from ddoc_sync.desk.resource import DeskResources
from ddoc_sync.document import DesignDocument
from ddoc_sync.errors import DesignConfigurationError, ResourceNotFoundError, UnknownDesignDocumentError


class DesignDocumentBuilder:
    """Reads, macro-expands and assembles desk sources into DesignDocuments.

    Sources are read again on every build; nothing but the catalog is cached.
    """

    def __init__(self, catalog: DesignCatalog, resources: DeskResources):
        self.catalog = catalog
        self.resources = resources

    def build(self, name: str) -> DesignDocument:
        """Build the design document ``name``.

        Raises:
            ValueError: ``name`` is empty
            UnknownDesignDocumentError: no such document on the desk
            DesignConfigurationError: more than one validate_doc_update file
            MacroFileNotFoundError: a ``// !code`` file is missing
        """
        if not name:
            raise ValueError("id may not be empty.")
        if name not in self.catalog:
            raise UnknownDesignDocumentError(name)

        validators = self.catalog.get_functions(name, Category.VALIDATE_DOC_UPDATE)
        if len(validators) > 1:
            raise DesignConfigurationError(
                f"Expecting exactly one validate_doc_update function file: {name}")

        doc = DesignDocument(id=DESIGN_PREFIX + name, language=JAVASCRIPT)
        doc.lists = self._read_functions(name, Category.LISTS)
        doc.filters = self._read_functions(name, Category.FILTERS)
        doc.shows = self._read_functions(name, Category.SHOWS)
        if validators:
            doc.validate_doc_update = self._read_function(name, validators[0])
        doc.views = self._read_function_groups(name, Group.VIEWS)
        doc.fulltext = self._read_function_groups(name, Group.FULLTEXT)
        return doc

    def _read_function(self, name: str, path: str) -> str:
        body = self.resources.read_text(path)
        if body is None:
            raise ResourceNotFoundError(path)
        return process_code_macros(name, path, body, self.resources.read_text)

    def _read_all(self, name: str, paths: List[str]) -> Dict[str, str]:
        return {function_name(path): self._read_function(name, path) for path in paths}

    def _read_functions(self, name: str, category: str) -> Optional[Dict[str, str]]:
        paths = self.catalog.get_functions(name, category)
        if not paths:
            return None
        return self._read_all(name, paths)

    def _read_function_groups(self, name: str, group: str) -> Optional[Dict[str, Dict[str, str]]]:
        subgroups = self.catalog.get_groups(name, group)
        if not subgroups:
            return None
        return {subgroup: self._read_all(name, paths) for subgroup, paths in subgroups.items()}
