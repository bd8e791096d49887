from __future__ import annotations

"""
Manifest Parsing and Tree Traversal.

Provides the single parse primitive that turns a YAML manifest document
into a ManifestNode, and the ManifestTree that links nodes together through
the Location Registry. The tree supports two traversal strategies built on
the same primitive: a depth-limited descent (used by lookups) and a full
enumeration walk (used by indexing).
"""

import logging
import os
from typing import Any, Dict, Iterator, List, Optional, Sequence

import yaml
from yaml.constructor import ConstructorError

from hearth.core.registry import LocationRegistry
from hearth.domain.constants import (
    DEFAULT_DIRECTORY_SEPARATOR,
    DEFAULT_MANIFEST_NAME,
    ENTRY_KIND_MANIFEST,
    ENTRY_KIND_TARGET,
    KEY_CLASS,
    KEY_FILE,
    KEY_MANIFEST,
    TARGET_PATH_SEPARATOR,
)
from hearth.domain.errors import ManifestNotFoundError, ManifestParseError, TargetNotFoundError
from hearth.domain.models import IndexEntry, ManifestEntry, ManifestNode
from hearth.infra.fs import to_native

logger = logging.getLogger(__name__)

_KEY_DESCRIPTION = "description"
_TARGET_KEYS = {KEY_FILE, KEY_CLASS}
_ALLOWED_KEYS = _TARGET_KEYS | {KEY_MANIFEST, _KEY_DESCRIPTION}
_MERGE_TAG = "tag:yaml.org,2002:merge"


# -----------------------------------------------------------------------------
# YAML LOADER
# -----------------------------------------------------------------------------

class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate keys instead of keeping the last one."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> Dict[Any, Any]:
        # Only keys written in this mapping count; '<<' merges are expanded by
        # the base constructor and local keys may override merged ones
        seen = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable keys are reported by the base constructor
                continue
            if duplicate:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found duplicate key '{key}'", key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


# -----------------------------------------------------------------------------
# PARSE PRIMITIVE
# -----------------------------------------------------------------------------

def parse_manifest(path: str) -> ManifestNode:
    """
    Parse one manifest document into a ManifestNode.

    Args:
        path: Path to the YAML document.

    Returns:
        ManifestNode: The validated node, entries in document order.

    Raises:
        ManifestParseError: On unreadable files, YAML syntax errors,
            duplicate names or malformed entries.
    """
    abs_path = os.path.abspath(path)
    try:
        with open(abs_path, "r", encoding="utf-8") as f:
            data = yaml.load(f, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise ManifestParseError(abs_path, str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(abs_path, f"unreadable document ({e})") from e

    if data is None:
        logger.debug(f"Empty manifest: {abs_path}")
        return ManifestNode(path=abs_path, entries={})

    if not isinstance(data, dict):
        raise ManifestParseError(
            abs_path, f"top level must be a mapping, found {type(data).__name__}"
        )

    entries: Dict[str, ManifestEntry] = {}
    for name, raw in data.items():
        entries[name] = _build_entry(abs_path, name, raw)

    logger.debug(f"Parsed manifest {abs_path} ({len(entries)} entries)")
    return ManifestNode(path=abs_path, entries=entries)


def _build_entry(path: str, name: Any, raw: Any) -> ManifestEntry:
    """Validate a raw document entry and convert it to a ManifestEntry."""
    if not isinstance(name, str) or not name:
        raise ManifestParseError(path, f"target names must be non-empty strings, found {name!r}")
    if TARGET_PATH_SEPARATOR in name:
        raise ManifestParseError(path, f"target name '{name}' must not contain '{TARGET_PATH_SEPARATOR}'")
    if not isinstance(raw, dict):
        raise ManifestParseError(path, f"entry '{name}' must be a mapping")

    unknown = sorted(str(k) for k in set(raw) - _ALLOWED_KEYS)
    if unknown:
        raise ManifestParseError(path, f"entry '{name}' has unknown keys: {', '.join(unknown)}")

    for key, value in raw.items():
        if not isinstance(value, str) or not value.strip():
            raise ManifestParseError(path, f"entry '{name}': '{key}' must be a non-empty string")

    has_target = bool(_TARGET_KEYS & set(raw))
    has_manifest = KEY_MANIFEST in raw
    description = raw.get(_KEY_DESCRIPTION, "")

    if has_target and has_manifest:
        raise ManifestParseError(
            path, f"entry '{name}' declares both a target and a nested manifest"
        )

    if has_manifest:
        return ManifestEntry(
            name=name,
            kind=ENTRY_KIND_MANIFEST,
            manifest=raw[KEY_MANIFEST].strip(),
            description=description,
        )

    if has_target:
        missing = sorted(_TARGET_KEYS - set(raw))
        if missing:
            raise ManifestParseError(path, f"target '{name}' is missing: {', '.join(missing)}")
        return ManifestEntry(
            name=name,
            kind=ENTRY_KIND_TARGET,
            file=raw[KEY_FILE].strip(),
            class_name=raw[KEY_CLASS].strip(),
            description=description,
        )

    raise ManifestParseError(
        path, f"entry '{name}' needs either '{KEY_FILE}'/'{KEY_CLASS}' or '{KEY_MANIFEST}'"
    )


# -----------------------------------------------------------------------------
# MANIFEST TREE
# -----------------------------------------------------------------------------

class ManifestTree:
    """
    Addressable tree of manifest nodes rooted at the initial manifest.

    Nodes are parsed on first access and cached by absolute path, so a
    lookup only ever parses the branch it descends into.
    """

    def __init__(
            self,
            root_path: str,
            locations: LocationRegistry,
            manifest_name: str = DEFAULT_MANIFEST_NAME,
            separator: str = DEFAULT_DIRECTORY_SEPARATOR,
    ) -> None:
        self.root_path = os.path.abspath(root_path)
        self.locations = locations
        self.manifest_name = manifest_name
        self.separator = separator
        self._nodes: Dict[str, ManifestNode] = {}

    # --- Node access ---

    def root(self) -> ManifestNode:
        """
        Parse (or fetch) the initial manifest.

        Raises:
            ManifestNotFoundError: If the initial manifest does not exist.
        """
        if not os.path.isfile(self.root_path):
            raise ManifestNotFoundError(self.root_path)
        return self.node(self.root_path)

    def node(self, path: str) -> ManifestNode:
        abs_path = os.path.abspath(path)
        if abs_path not in self._nodes:
            self._nodes[abs_path] = parse_manifest(abs_path)
        return self._nodes[abs_path]

    def parsed_paths(self) -> List[str]:
        return list(self._nodes)

    # --- Reference resolution ---

    def resolve_manifest(self, entry: ManifestEntry, walked: Sequence[str]) -> str:
        """
        Locate the document referenced by a nested-manifest entry.

        A reference naming a directory resolves to the manifest file inside it.

        Raises:
            TargetNotFoundError: If no registered location holds the reference.
        """
        relative = to_native(entry.manifest, self.separator)
        found = self.locations.find(relative, self._is_manifest_candidate)
        if found is None:
            raise TargetNotFoundError(
                entry.name, walked,
                reason=f"manifest '{entry.manifest}' not found in any location",
            )
        if os.path.isdir(found):
            found = os.path.join(found, self.manifest_name)
        return found

    def resolve_source(self, entry: ManifestEntry, walked: Sequence[str]) -> str:
        """
        Locate the task-unit source file of a target entry.

        Raises:
            TargetNotFoundError: If no registered location holds the file.
        """
        relative = to_native(entry.file, self.separator)
        found = self.locations.find(relative, os.path.isfile)
        if found is None:
            raise TargetNotFoundError(
                entry.name, walked,
                reason=f"source file '{entry.file}' not found in any location",
            )
        return found

    def _is_manifest_candidate(self, candidate: str) -> bool:
        if os.path.isdir(candidate):
            return os.path.isfile(os.path.join(candidate, self.manifest_name))
        return os.path.isfile(candidate)

    # --- Full enumeration ---

    def walk(self) -> Iterator[IndexEntry]:
        """
        Enumerate every target reachable from the initial manifest.

        Yields depth-first in document order. Every nested manifest is
        parsed, so malformed or missing branches surface here.

        Raises:
            ManifestParseError: On malformed documents or circular references.
        """
        root = self.root()
        yield from self._walk_node(root, [], [root.path])

    def _walk_node(
            self,
            node: ManifestNode,
            prefix: List[str],
            stack: List[str],
    ) -> Iterator[IndexEntry]:
        for name, entry in node.entries.items():
            segments = prefix + [name]
            if entry.is_target:
                yield IndexEntry(
                    path=TARGET_PATH_SEPARATOR.join(segments),
                    file=self.resolve_source(entry, prefix),
                    class_name=entry.class_name,
                    description=entry.description,
                )
                continue

            child_path = os.path.abspath(self.resolve_manifest(entry, prefix))
            if child_path in stack:
                raise ManifestParseError(
                    node.path, f"circular manifest reference through '{entry.name}'"
                )
            child = self.node(child_path)
            yield from self._walk_node(child, segments, stack + [child_path])
