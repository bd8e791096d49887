from __future__ import annotations

"""
Error Taxonomy.

Configuration and state errors signal programmer mistakes and are never
caught by the engine. Resolution errors and build errors abort the current
run and are reported through the driver's failure path.
"""

from typing import Optional, Sequence, Tuple


class HearthError(Exception):
    """Base class for every error raised by Hearth."""


# -----------------------------------------------------------------------------
# PROGRAMMER ERRORS
# -----------------------------------------------------------------------------

class InvalidConfigurationError(HearthError):
    """Malformed configuration input, such as a non-string location."""


class InvalidArgumentError(HearthError):
    """A build state accessor received a value of the wrong type."""


class IllegalStateError(HearthError):
    """A value was read before it was set, or set twice."""


# -----------------------------------------------------------------------------
# RESOLUTION ERRORS
# -----------------------------------------------------------------------------

class ResolutionError(HearthError):
    """Base class for failures while locating a target."""


class ManifestNotFoundError(ResolutionError):
    """The initial manifest does not exist in the working directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Manifest not found: {path}")
        self.path = path


class ManifestParseError(ResolutionError):
    """A manifest exists but is not a valid target document."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid manifest '{path}': {reason}")
        self.path = path
        self.reason = reason


class TargetNotFoundError(ResolutionError):
    """
    A target path segment could not be resolved.

    Attributes:
        segment: The segment that failed to resolve (may be empty).
        walked: Segments successfully consumed before the failure.
    """

    def __init__(
            self,
            segment: str,
            walked: Sequence[str] = (),
            reason: Optional[str] = None,
    ) -> None:
        self.segment = segment
        self.walked: Tuple[str, ...] = tuple(walked)
        location = "/".join(self.walked) or "<root>"
        message = f"Target '{segment}' not found under '{location}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# -----------------------------------------------------------------------------
# BUILD ERRORS
# -----------------------------------------------------------------------------

class BuildError(HearthError):
    """Any failure raised inside a task unit or a task primitive."""
