from __future__ import annotations

"""
Target Resolver.

Translates a target path (sequence of segments) into a ResolvedTarget by
walking the manifest tree, and builds the full target listing when no
target path is given.
"""

import logging
import os
from typing import Any, List, Optional, Sequence

from hearth.core.manifest import ManifestTree
from hearth.core.registry import LocationRegistry
from hearth.domain.constants import DEFAULT_DIRECTORY_SEPARATOR, DEFAULT_MANIFEST_NAME
from hearth.domain.errors import IllegalStateError, InvalidArgumentError, TargetNotFoundError
from hearth.domain.models import IndexEntry, ResolvedTarget, StyleConfig

logger = logging.getLogger(__name__)

_LISTING_STYLE = StyleConfig(foreground="green")


class Resolver:
    """
    Resolves target paths against the manifest tree.

    Configured builder-style; every setter returns the resolver itself.
    """

    def __init__(self, locations: Optional[LocationRegistry] = None) -> None:
        self._locations = locations if locations is not None else LocationRegistry()
        self._separator: str = DEFAULT_DIRECTORY_SEPARATOR
        self._output: Any = None
        self._initial_manifest: str = DEFAULT_MANIFEST_NAME
        self._resolved: Optional[ResolvedTarget] = None
        self._index: Optional[List[IndexEntry]] = None

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    def set_initial_manifest_path(self, path: str) -> "Resolver":
        if not isinstance(path, str) or not path.strip():
            raise InvalidArgumentError("The initial manifest path must be a non-empty string.")
        self._initial_manifest = path
        return self

    def set_directory_separator(self, separator: str) -> "Resolver":
        if not isinstance(separator, str) or not separator:
            raise InvalidArgumentError("The directory separator must be a non-empty string.")
        self._separator = separator
        return self

    def set_output(self, output: Any) -> "Resolver":
        self._output = output
        return self

    def set_locations(self, locations: LocationRegistry) -> "Resolver":
        self._locations = locations
        return self

    def get_initial_manifest_path(self) -> str:
        """Absolute path of the initial manifest, relative to the working directory."""
        return os.path.abspath(self._initial_manifest)

    # -------------------------------------------------------------------------
    # TRAVERSALS
    # -------------------------------------------------------------------------

    def index(self) -> None:
        """
        Eagerly parse the whole manifest tree and record every target.

        The listing is printed to the output sink when one is configured
        and is available afterwards through get_index().

        Raises:
            ManifestNotFoundError: If the initial manifest is missing.
            ManifestParseError: If any reachable manifest is malformed.
            TargetNotFoundError: If a nested reference cannot be located.
        """
        tree = self._build_tree()
        entries = list(tree.walk())
        self._index = entries
        logger.info(
            f"Indexed {len(entries)} targets across {len(tree.parsed_paths())} manifests."
        )

        if self._output is None:
            return
        if not entries:
            self._output.print_line("No targets defined.")
            return
        for entry in entries:
            line = f"  {entry.path}"
            if entry.description:
                line = f"{line}  - {entry.description}"
            self._output.print_line(line, _LISTING_STYLE)

    def lookup(self, target_path: Sequence[str]) -> None:
        """
        Resolve a target path segment by segment, parsing only the needed branch.

        Args:
            target_path: Non-empty sequence of path segments.

        Raises:
            InvalidArgumentError: If target_path is a bare string.
            ManifestNotFoundError: If the initial manifest is missing.
            ManifestParseError: If a manifest on the walked branch is malformed.
            TargetNotFoundError: If a segment cannot be resolved.
        """
        if isinstance(target_path, str):
            raise InvalidArgumentError("A target path must be a sequence of segments.")

        self._resolved = None
        segments = list(target_path)
        if not segments:
            raise TargetNotFoundError("", (), reason="empty target path")

        tree = self._build_tree()
        node = tree.root()
        walked: List[str] = []

        for position, segment in enumerate(segments):
            entry = node.get(segment)
            if entry is None:
                raise TargetNotFoundError(segment, walked)

            remaining = segments[position + 1:]
            if entry.is_target:
                if remaining:
                    raise TargetNotFoundError(
                        remaining[0], walked + [segment],
                        reason=f"'{segment}' is a target, not a manifest",
                    )
                self._resolved = ResolvedTarget(
                    file=tree.resolve_source(entry, walked),
                    class_name=entry.class_name,
                    path=tuple(walked + [segment]),
                )
                logger.debug(
                    f"Resolved '{'/'.join(segments)}' to {self._resolved.class_name} "
                    f"({self._resolved.file})"
                )
                return

            node = tree.node(tree.resolve_manifest(entry, walked))
            walked.append(segment)

        raise TargetNotFoundError(
            segments[-1], walked[:-1], reason="names a manifest, not a target"
        )

    # -------------------------------------------------------------------------
    # RESOLVED STATE
    # -------------------------------------------------------------------------

    def get_resolved(self) -> ResolvedTarget:
        if self._resolved is None:
            raise IllegalStateError("No target has been resolved; call lookup() first.")
        return self._resolved

    def get_target_file(self) -> str:
        return self.get_resolved().file

    def get_target_class_name(self) -> str:
        return self.get_resolved().class_name

    def get_index(self) -> List[IndexEntry]:
        if self._index is None:
            raise IllegalStateError("The manifest tree has not been indexed; call index() first.")
        return list(self._index)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _build_tree(self) -> ManifestTree:
        """Create a fresh tree; an empty registry falls back to the manifest's directory."""
        root_path = self.get_initial_manifest_path()
        locations = self._locations
        if not len(locations):
            locations = LocationRegistry(os.path.dirname(root_path))

        return ManifestTree(
            root_path,
            locations,
            manifest_name=os.path.basename(root_path),
            separator=self._separator,
        )
