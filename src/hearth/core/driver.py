from __future__ import annotations

"""
Execution Driver.

Owns the build state of a single invocation (arguments, directory
separator, output sink, failure flag), orchestrates resolution and runs
the resolved task unit. Resolution and build errors are turned into a
failed-build report; the final BuildResult is handed back to the caller,
which alone decides the process exit status.
"""

import logging
import os
import traceback
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Union

from hearth.core.loader import TaskUnitFactory
from hearth.core.registry import LocationRegistry
from hearth.core.resolver import Resolver
from hearth.domain.constants import (
    DEFAULT_BANNER_STYLE,
    DEFAULT_FAILURE_STYLE,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_SUCCESS_STYLE,
    FAILURE_BANNER,
    SUCCESS_BANNER,
    TARGET_PATH_SEPARATOR,
)
from hearth.domain.errors import (
    BuildError,
    IllegalStateError,
    InvalidArgumentError,
    ResolutionError,
)
from hearth.domain.models import BuildResult, StyleConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# BUILD STATE
# -----------------------------------------------------------------------------

@dataclass
class BuildState:
    """
    Mutable state of a single invocation.

    Attributes:
        arguments: CLI arguments, argument[0] being the program name.
        directory_separator: Separator used for filesystem paths.
        output: Sink exposing print_line(text, style).
        failed: Monotonic failure flag.
        last_error: Message of the most recent recorded failure.
    """
    arguments: Optional[List[str]] = None
    directory_separator: Optional[str] = None
    output: Any = None
    failed: bool = False
    last_error: str = ""


@dataclass
class DriverStyles:
    banner: StyleConfig = field(default_factory=lambda: StyleConfig.from_value(DEFAULT_BANNER_STYLE))
    failure: StyleConfig = field(default_factory=lambda: StyleConfig.from_value(DEFAULT_FAILURE_STYLE))
    success: StyleConfig = field(default_factory=lambda: StyleConfig.from_value(DEFAULT_SUCCESS_STYLE))


# -----------------------------------------------------------------------------
# CORE DRIVER
# -----------------------------------------------------------------------------

class Core:
    """
    Resolve-and-run engine for a single target.

    Typical use::

        result = (
            Core()
            .set_arguments(["hearth", "group/target"])
            .set_directory_separator(os.sep)
            .set_output(ConsoleOutput())
            .run()
            .close()
        )
    """

    def __init__(
            self,
            locations: Optional[LocationRegistry] = None,
            factory: Optional[TaskUnitFactory] = None,
    ) -> None:
        self._state = BuildState()
        self._locations = locations if locations is not None else LocationRegistry()
        self._factory = factory if factory is not None else TaskUnitFactory()
        self._initial_manifest = DEFAULT_MANIFEST_NAME
        self._styles = DriverStyles()
        self._closed = False

    # -------------------------------------------------------------------------
    # STATE ACCESSORS
    # -------------------------------------------------------------------------

    def set_arguments(self, arguments: Iterable[str]) -> "Core":
        if self._state.arguments is not None:
            raise IllegalStateError("Arguments have already been set.")
        if isinstance(arguments, (str, bytes)) or not isinstance(arguments, (list, tuple)):
            raise InvalidArgumentError(
                f"Arguments must be a list of strings, received {type(arguments).__name__}."
            )
        if not all(isinstance(a, str) for a in arguments):
            raise InvalidArgumentError("Every argument must be a string.")
        self._state.arguments = list(arguments)
        return self

    def get_arguments(self, index: Optional[int] = None) -> Union[List[str], str]:
        """
        Read all arguments, or a single one by position.

        Raises:
            IllegalStateError: If arguments were never set.
            InvalidArgumentError: If index is not an int.
            IndexError: If index is out of range.
        """
        if self._state.arguments is None:
            raise IllegalStateError("Arguments have not been set.")
        if index is None:
            return list(self._state.arguments)
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgumentError("Argument index must be an integer.")
        return self._state.arguments[index]

    def set_directory_separator(self, separator: str) -> "Core":
        if self._state.directory_separator is not None:
            raise IllegalStateError("The directory separator has already been set.")
        if not isinstance(separator, str) or not separator:
            raise InvalidArgumentError("The directory separator must be a non-empty string.")
        self._state.directory_separator = separator
        return self

    def get_directory_separator(self) -> str:
        if self._state.directory_separator is None:
            raise IllegalStateError("The directory separator has not been set.")
        return self._state.directory_separator

    def set_output(self, output: Any) -> "Core":
        if self._state.output is not None:
            raise IllegalStateError("The output sink has already been set.")
        if output is None or not callable(getattr(output, "print_line", None)):
            raise InvalidArgumentError("The output sink must provide print_line(text, style).")
        self._state.output = output
        return self

    def get_output(self) -> Any:
        if self._state.output is None:
            raise IllegalStateError("The output sink has not been set.")
        return self._state.output

    def set_failed(self, failed: bool) -> "Core":
        if not isinstance(failed, bool):
            raise InvalidArgumentError("The failed flag must be a boolean.")
        # Monotonic: once failed, a build stays failed
        self._state.failed = self._state.failed or failed
        return self

    def is_failed(self) -> bool:
        return self._state.failed

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    def add_locations(self, locations: Union[str, Iterable[str]]) -> "Core":
        self._locations.add_locations(locations)
        return self

    def set_initial_manifest_path(self, path: str) -> "Core":
        if not isinstance(path, str) or not path.strip():
            raise InvalidArgumentError("The initial manifest path must be a non-empty string.")
        self._initial_manifest = path
        return self

    def set_banner_style(self, style: Any) -> "Core":
        self._styles.banner = StyleConfig.from_value(style)
        return self

    def set_failure_style(self, style: Any) -> "Core":
        self._styles.failure = StyleConfig.from_value(style)
        return self

    def set_factory(self, factory: TaskUnitFactory) -> "Core":
        if not isinstance(factory, TaskUnitFactory):
            raise InvalidArgumentError("The factory must be a TaskUnitFactory.")
        self._factory = factory
        return self

    def get_factory(self) -> TaskUnitFactory:
        return self._factory

    # -------------------------------------------------------------------------
    # RUN PROCEDURE
    # -------------------------------------------------------------------------

    def main(self) -> "Core":
        """
        Resolve the requested target and run it, or list targets.

        Resolution and build errors propagate; use run() to have them
        recorded as a failed build.
        """
        self._ensure_open()
        arguments = self.get_arguments()
        argc = len(arguments)
        output = self.get_output()

        output.print_line(f"Hearth: {os.getcwd()} ({self._initial_manifest})", self._styles.banner)

        resolver = (
            Resolver(self._locations)
            .set_directory_separator(self.get_directory_separator())
            .set_output(output)
            .set_initial_manifest_path(self._initial_manifest)
        )

        if argc <= 1:
            logger.debug("No target given; indexing manifest tree.")
            resolver.index()
            return self

        target_path = [s for s in arguments[1].split(TARGET_PATH_SEPARATOR) if s]
        logger.info(f"Resolving target '{arguments[1]}'")
        resolver.lookup(target_path)

        unit = self._factory.create(resolver.get_target_file(), resolver.get_target_class_name())
        logger.info(f"Running {resolver.get_target_class_name()}")
        try:
            unit.main()
        except BuildError:
            raise
        except Exception as e:
            # Anything a unit raises is a build failure, including hearth errors
            raise BuildError(
                f"Target '{resolver.get_target_class_name()}' failed: {type(e).__name__}: {e}"
            ) from e

        output.print_line(SUCCESS_BANNER, self._styles.success)
        return self

    def run(self) -> "Core":
        """Execute main(), recording resolution and build errors as a failed build."""
        try:
            self.main()
        except (ResolutionError, BuildError) as e:
            self.fail_build(e)
        return self

    def fail_build(self, error: BaseException) -> "Core":
        """
        Report a build failure and record it in the build state.

        Args:
            error: The exception that aborted the build.
        """
        self._ensure_open()
        message = str(error) or type(error).__name__
        origin = _origin_of(error)
        logger.error(f"Build failed: {message} ({origin})")

        output = self._state.output
        if output is not None:
            output.print_line(FAILURE_BANNER, self._styles.failure)
            output.print_line(f"{type(error).__name__}: {message}")
            output.print_line(f"  at {origin}")

        self._state.failed = True
        self._state.last_error = message
        return self

    def close(self) -> BuildResult:
        """
        Finish the run and report its outcome.

        Returns:
            BuildResult: exit_code is 1 if any failure was recorded, else 0.
        """
        self._closed = True
        return BuildResult(failed=self._state.failed, error=self._state.last_error)

    def _ensure_open(self) -> None:
        if self._closed:
            raise IllegalStateError("The driver has been closed.")


def _origin_of(error: BaseException) -> str:
    """Return 'file:line' of the innermost frame that raised the error or its cause."""
    while error.__cause__ is not None and error.__cause__.__traceback__ is not None:
        error = error.__cause__
    frames = traceback.extract_tb(error.__traceback__) if error.__traceback__ else []
    if not frames:
        return "<unknown>"
    last = frames[-1]
    return f"{last.filename}:{last.lineno}"
