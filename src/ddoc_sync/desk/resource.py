"""
Desk Resource Module
Enumerates and reads design document sources across several search roots.

A search root is either a plain directory or a zip archive (for example a
wheel or a packaged bundle). Both expose the same flat contract: relative
resource paths under the design docs root, ``/``-separated, with directories
marked by a trailing ``/``.
"""

import os
import posixpath
import zipfile
from typing import Iterable, List, Optional, Tuple

from ddoc_sync import config
from ddoc_sync.logger import logger


class ResourceEvent:
    """Advisory raised while enumerating the desk (never fatal)."""

    DUPLICATE = "duplicate"
    UNSUPPORTED = "unsupported"
    UNREADABLE = "unreadable"
    MISSING_ROOT = "missing_root"

    def __init__(self, kind: str, message: str, location: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.location = location

    def __eq__(self, other):
        if not isinstance(other, ResourceEvent):
            return NotImplemented
        return (self.kind, self.message, self.location) == (other.kind, other.message, other.location)

    def __repr__(self):
        return f"ResourceEvent({self.kind!r}, {self.message!r}, {self.location!r})"


class ResourceSource:
    """One search root the desk can be enumerated from."""

    def __init__(self, location: str):
        self.location = os.path.abspath(location)

    def has_root(self, root_name: str) -> bool:
        raise NotImplementedError

    def list_resources(self, root_name: str) -> List[str]:
        """Return every resource below ``root_name``, relative to it."""
        raise NotImplementedError

    def read_text(self, name: str) -> Optional[str]:
        """Read ``name`` (relative to the search root) as UTF-8, or None if absent."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.location!r})"


class DirectoryResourceSource(ResourceSource):
    """Search root backed by a directory on the filesystem."""

    def _path(self, name: str) -> str:
        return os.path.join(self.location, *name.split("/"))

    def has_root(self, root_name: str) -> bool:
        return os.path.isdir(self._path(root_name))

    def list_resources(self, root_name: str) -> List[str]:
        root = self._path(root_name)
        resources = []

        def _raise(error: OSError):
            raise error

        # real paths of each pending directory and its ancestors, for cycle detection
        ancestors = {root: {os.path.realpath(root)}}

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise, followlinks=True):
            seen = ancestors.pop(dirpath)
            rel = os.path.relpath(dirpath, root)
            prefix = "" if rel == os.curdir else rel.replace(os.sep, "/") + "/"
            for dirname in list(dirnames):
                resources.append(prefix + dirname + "/")
                path = os.path.join(dirpath, dirname)
                real = os.path.realpath(path)
                if real in seen:
                    logger.warning(f"Not following symlink cycle at {path}")
                    dirnames.remove(dirname)
                else:
                    ancestors[path] = seen | {real}
            for filename in filenames:
                resources.append(prefix + filename)

        logger.debug(f"Enumerated {len(resources)} resources in {root}")
        return sorted(resources)

    def read_text(self, name: str) -> Optional[str]:
        path = self._path(name)
        if not os.path.isfile(path):
            return None
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()


class ArchiveResourceSource(ResourceSource):
    """Search root backed by a zip archive with flat, ``/``-separated entries."""

    def has_root(self, root_name: str) -> bool:
        prefix = root_name + "/"
        with zipfile.ZipFile(self.location) as archive:
            return any(n.startswith(prefix) for n in archive.namelist())

    def list_resources(self, root_name: str) -> List[str]:
        prefix = root_name + "/"
        with zipfile.ZipFile(self.location) as archive:
            names = archive.namelist()

        resources = set()
        for name in names:
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):]
            if not rest:
                continue
            resources.add(rest)
            # Archives are not required to store directory entries
            parts = rest.rstrip("/").split("/")
            for i in range(1, len(parts)):
                resources.add("/".join(parts[:i]) + "/")

        logger.debug(f"Enumerated {len(resources)} resources in {self.location}")
        return sorted(resources)

    def read_text(self, name: str) -> Optional[str]:
        with zipfile.ZipFile(self.location) as archive:
            try:
                data = archive.read(name)
            except KeyError:
                return None
        return data.decode("utf-8")


def source_for(location: str) -> Optional[ResourceSource]:
    """Pick the source variant for a search root, or None if unsupported."""
    if os.path.isdir(location):
        return DirectoryResourceSource(location)
    if os.path.isfile(location) and zipfile.is_zipfile(location):
        return ArchiveResourceSource(location)
    return None


class DeskResources:
    """
    The desk: every search root that may hold a design docs root.

    Enumeration merges all roots in search order; when the same file shows up
    on more than one root the first occurrence wins and a duplicate advisory
    is recorded. Reads follow the same order.
    """

    def __init__(self, search_roots: Optional[Iterable[str]] = None, root_name: Optional[str] = None):
        self.search_roots = list(search_roots) if search_roots is not None else list(config.SEARCH_PATH)
        self.root_name = (root_name or config.ROOT_NAME).strip("/")

    def _record(self, events: List[ResourceEvent], kind: str, message: str, location: str, log=None):
        events.append(ResourceEvent(kind, message, location))
        (log or logger.warning)(message)

    def enumerate(self) -> Tuple[List[str], List[ResourceEvent]]:
        """Enumerate the desk.

        Returns:
            (resource paths in merged order, advisory events)
        """
        resources = []
        seen = set()
        events: List[ResourceEvent] = []
        found_root = False

        for location in self.search_roots:
            source = source_for(location)
            if source is None:
                self._record(events, ResourceEvent.UNSUPPORTED,
                             f"Not enumerating design resources in {location}: not a directory or zip archive",
                             location, log=logger.debug)
                continue

            try:
                if not source.has_root(self.root_name):
                    logger.debug(f"No {self.root_name} resource in {source.location}")
                    continue
                names = source.list_resources(self.root_name)
            except (OSError, zipfile.BadZipFile) as e:
                self._record(events, ResourceEvent.UNREADABLE,
                             f"Cannot read entries in {source.location}: {e}", source.location)
                continue

            found_root = True
            for name in names:
                if name in seen:
                    if not name.endswith("/"):
                        self._record(events, ResourceEvent.DUPLICATE,
                                     f"Design resource duplicate: {name} in {source.location}", source.location)
                    continue
                seen.add(name)
                resources.append(name)

        if not found_root:
            self._record(events, ResourceEvent.MISSING_ROOT,
                         f"No {self.root_name} resource found on any search root", None, log=logger.debug)

        return resources, events

    def read_text(self, name: str) -> Optional[str]:
        """Read a resource relative to the design docs root, or None if no root has it."""
        name = posixpath.normpath(name.replace("\\", "/"))
        if name.startswith("../") or name in (os.curdir, os.pardir) or posixpath.isabs(name):
            logger.debug(f"Refusing resource outside {self.root_name}: {name}")
            return None

        full_name = f"{self.root_name}/{name}"
        for location in self.search_roots:
            source = source_for(location)
            if source is None:
                continue
            try:
                text = source.read_text(full_name)
            except (OSError, zipfile.BadZipFile) as e:
                logger.debug(f"Cannot read {full_name} from {source.location}: {e}")
                continue
            if text is not None:
                return text

        logger.debug(f"No resource found on search roots: '{full_name}'")
        return None
