from __future__ import annotations

"""
Task Unit Factory.

Maps fully-qualified class names to constructors. Constructors registered
explicitly take precedence; any other name is satisfied by loading the
resolved source file as a module and looking the class up inside it.
"""

import importlib.util
import logging
import os
import re
import sys
from types import ModuleType
from typing import Any, Callable, Dict

from hearth.domain.errors import BuildError, InvalidArgumentError, TargetNotFoundError

logger = logging.getLogger(__name__)

Constructor = Callable[[], Any]

# Loaded units live under a private namespace so they never shadow real modules
_MODULE_PREFIX = "hearth_units"


class TaskUnitFactory:
    """Registry-based factory producing task-unit instances."""

    def __init__(self) -> None:
        self._constructors: Dict[str, Constructor] = {}
        self._modules: Dict[str, ModuleType] = {}

    def register(self, class_name: str, constructor: Constructor) -> "TaskUnitFactory":
        """
        Bind a fully-qualified class name to a zero-argument constructor.

        Raises:
            InvalidArgumentError: If the name is not a string or the constructor is not callable.
        """
        if not isinstance(class_name, str) or not class_name:
            raise InvalidArgumentError("A task unit name must be a non-empty string.")
        if not callable(constructor):
            raise InvalidArgumentError(f"Constructor for '{class_name}' is not callable.")
        self._constructors[class_name] = constructor
        return self

    def is_registered(self, class_name: str) -> bool:
        return class_name in self._constructors

    def create(self, file: str, class_name: str) -> Any:
        """
        Instantiate the task unit named class_name.

        Args:
            file: Absolute path to the unit's source, used when no
                constructor is registered for the name.
            class_name: Fully-qualified class name (dotted).

        Returns:
            Any: The task-unit instance, guaranteed to expose a callable main().

        Raises:
            TargetNotFoundError: If the source file or class cannot be found.
            BuildError: If the source fails to import, the constructor fails,
                or the instance has no callable main().
        """
        constructor = self._constructors.get(class_name)
        if constructor is None:
            constructor = self._load_class(file, class_name)

        try:
            unit = constructor()
        except BuildError:
            raise
        except Exception as e:
            raise BuildError(f"Could not instantiate '{class_name}': {e}") from e

        if not callable(getattr(unit, "main", None)):
            raise BuildError(f"Task unit '{class_name}' does not define a callable main().")
        return unit

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _load_class(self, file: str, class_name: str) -> Constructor:
        attr = class_name.rpartition(".")[2]
        module = self._load_module(file, class_name)

        cls = getattr(module, attr, None)
        if cls is None or not callable(cls):
            raise TargetNotFoundError(
                class_name, reason=f"class '{attr}' is not defined in {file}"
            )
        return cls

    def _load_module(self, file: str, class_name: str) -> ModuleType:
        abs_file = os.path.abspath(file)
        if abs_file in self._modules:
            return self._modules[abs_file]

        if not os.path.isfile(abs_file):
            raise TargetNotFoundError(class_name, reason=f"source file {abs_file} does not exist")

        module_name = _module_name_for(class_name, abs_file)
        spec = importlib.util.spec_from_file_location(module_name, abs_file)
        if spec is None or spec.loader is None:
            raise TargetNotFoundError(class_name, reason=f"{abs_file} is not a loadable module")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise BuildError(f"Failed to load task unit source {abs_file}: {e}") from e

        logger.debug(f"Loaded task unit module '{module_name}' from {abs_file}")
        self._modules[abs_file] = module
        return module


def _module_name_for(class_name: str, file: str) -> str:
    """Derive a private module name from the class's dotted prefix or the file stem."""
    package = class_name.rpartition(".")[0]
    if not package:
        package = os.path.splitext(os.path.basename(file))[0]
    safe = re.sub(r"[^0-9A-Za-z_.]", "_", package)
    return f"{_MODULE_PREFIX}.{safe}"
