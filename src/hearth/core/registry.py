from __future__ import annotations

"""
Location Registry.

Ordered, duplicate-free collection of filesystem roots that are searched
for nested manifests and task-unit sources. Insertion order defines the
lookup priority: the first registered location holding a match wins.
"""

import logging
import os
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from hearth.domain.errors import InvalidConfigurationError
from hearth.infra.fs import find_in_roots

logger = logging.getLogger(__name__)


class LocationRegistry:
    """
    Append-only registry of search locations.

    Existence of a location is never checked when it is added; missing
    roots simply never match during resolution.
    """

    def __init__(self, locations: Optional[Union[str, Iterable[str]]] = None) -> None:
        self._locations: List[str] = []
        if locations is not None:
            self.add_locations(locations)

    def add_locations(self, locations: Union[str, Iterable[str]]) -> "LocationRegistry":
        """
        Register one location or a sequence of locations.

        Args:
            locations: A single path or an iterable of paths.

        Returns:
            LocationRegistry: The registry itself, for chained configuration.

        Raises:
            InvalidConfigurationError: If any candidate is not a string. The
                registry is left untouched in that case.
        """
        if isinstance(locations, str):
            candidates = [locations]
        else:
            try:
                candidates = list(locations)
            except TypeError:
                raise InvalidConfigurationError(
                    f"A location must be a string, received {type(locations).__name__}."
                ) from None

        for location in candidates:
            if not isinstance(location, str):
                raise InvalidConfigurationError(
                    f"A location must be a string, received {type(location).__name__}."
                )

        for location in candidates:
            if location in self._locations:
                logger.debug(f"Location already registered, skipping: {location}")
                continue
            self._locations.append(location)
            logger.debug(f"Registered location #{len(self._locations)}: {location}")

        return self

    @property
    def locations(self) -> Tuple[str, ...]:
        return tuple(self._locations)

    def find(
            self,
            relative: str,
            predicate: Callable[[str], bool] = os.path.exists,
    ) -> Optional[str]:
        """
        Search every location in priority order for a relative path.

        Args:
            relative: Path relative to a location root.
            predicate: Acceptance test for a candidate (defaults to existence).

        Returns:
            Optional[str]: Absolute path of the first match, or None.
        """
        return find_in_roots(self._locations, relative, predicate)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._locations))

    def __len__(self) -> int:
        return len(self._locations)

    def __contains__(self, location: object) -> bool:
        return location in self._locations

    def __repr__(self) -> str:
        return f"LocationRegistry({self._locations!r})"
