"""
Design Catalog Module
Classifies the flat desk resource set into design documents.

Classification works on path segments rather than patterns: a path is split
on runs of ``/`` or ``\\`` and each segment is matched against its fixed role
(document, category or group, subgroup, file).
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from ddoc_sync.constants import FUNCTION_CATEGORIES, GROUP_ROLES, SOURCE_EXTENSION
from ddoc_sync.desk.resource import ResourceEvent
from ddoc_sync.logger import logger

_SEPARATORS = re.compile(r"[/\\]+")


def split_resource_path(path: str) -> Tuple[List[str], bool]:
    """Split a resource path into segments.

    Returns:
        (segments, is_directory)
    """
    is_directory = path.endswith(("/", "\\"))
    segments = [s for s in _SEPARATORS.split(path) if s]
    return segments, is_directory


def function_name(path: str) -> str:
    """Base name of a function source file, without directory or extension."""
    segments, _ = split_resource_path(path)
    name = segments[-1]
    if name.endswith(SOURCE_EXTENSION):
        name = name[:-len(SOURCE_EXTENSION)]
    return name


class DesignCatalog:
    """
    Design documents found on the desk and the source files of each.

    ``functions[category][doc]`` lists the member files of a simple category;
    ``groups[group][doc][subgroup]`` lists the role files of a subgroup.
    Documents with nothing in a category have no entry for it.
    """

    def __init__(self, names: Iterable[str] = (), events: Iterable[ResourceEvent] = ()):
        self.names = set(names)
        self.events: List[ResourceEvent] = list(events)
        self.functions: Dict[str, Dict[str, List[str]]] = {c: {} for c in FUNCTION_CATEGORIES}
        self.groups: Dict[str, Dict[str, Dict[str, List[str]]]] = {g: {} for g in GROUP_ROLES}

    @classmethod
    def from_resources(cls, resources: Iterable[str], events: Iterable[ResourceEvent] = ()) -> "DesignCatalog":
        parsed = [(path,) + split_resource_path(path) for path in resources]

        catalog = cls(events=events)
        for path, segments, is_directory in parsed:
            if is_directory and len(segments) == 1:
                logger.debug(f"Adding design resource {segments[0]}")
                catalog.names.add(segments[0])

        # Subgroup directories first, so empty subgroups still get an entry
        for path, segments, is_directory in parsed:
            if not is_directory or len(segments) != 3:
                continue
            doc, group, subgroup = segments
            if doc in catalog.names and group in GROUP_ROLES:
                catalog.groups[group].setdefault(doc, {}).setdefault(subgroup, [])

        for path, segments, is_directory in parsed:
            if is_directory or len(segments) < 3 or segments[0] not in catalog.names:
                continue
            if not segments[-1].endswith(SOURCE_EXTENSION):
                continue
            catalog._classify_file(path, segments)

        logger.debug(f"Classified {len(catalog.names)} design documents")
        return catalog

    def _classify_file(self, path: str, segments: List[str]) -> None:
        doc, kind = segments[0], segments[1]

        if kind in self.functions:
            self.functions[kind].setdefault(doc, []).append(path)
            return

        roles = GROUP_ROLES.get(kind)
        if roles is None or len(segments) != 4:
            return
        subgroups = self.groups[kind].get(doc, {})
        subgroup, role = segments[2], function_name(path)
        if subgroup in subgroups and role in roles and segments[3] == role + SOURCE_EXTENSION:
            subgroups[subgroup].append(path)

    def __contains__(self, name) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def get_functions(self, doc: str, category: str) -> List[str]:
        return self.functions[category].get(doc, [])

    def get_groups(self, doc: str, group: str) -> Optional[Dict[str, List[str]]]:
        return self.groups[group].get(doc)
