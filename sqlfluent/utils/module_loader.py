"""Lazy import helpers for optional database drivers."""

import importlib
from importlib.util import find_spec
from typing import Any, Optional

from sqlfluent.exceptions import MissingDependencyError

__all__ = (
    "ensure_driver",
    "import_string",
    "module_installed",
)


def module_installed(module_name: str) -> bool:
    """Report whether a top level module can be imported without importing it."""
    try:
        return find_spec(module_name) is not None
    except (ImportError, ValueError):
        return False


def import_string(dotted_path: str) -> "Any":
    """Dotted Path Import.

    Import a dotted module path and return the attribute/class designated by the
    last name in the path. Raise ImportError if the import failed.

    Args:
        dotted_path: The path of the module to import.

    Raises:
        ImportError: Could not import the module.

    Returns:
        object: The imported object.
    """
    try:
        parts = dotted_path.split(".")
        for i in range(len(parts), 0, -1):
            module_path = ".".join(parts[:i])
            try:
                module = importlib.import_module(module_path)
                break
            except ModuleNotFoundError:
                continue
        else:
            msg = f"{dotted_path} doesn't look like a module path"
            raise ImportError(msg)
        obj = module
        for attr in parts[i:]:
            try:
                obj = getattr(obj, attr)
            except AttributeError as e:
                msg = f"Module '{module.__name__}' has no attribute '{attr}' in '{dotted_path}'"
                raise ImportError(msg) from e
        return obj
    except Exception as e:
        msg = f"Could not import '{dotted_path}': {e}"
        raise ImportError(msg) from e


def ensure_driver(module_name: str, install_package: Optional[str] = None) -> "Any":
    """Import an optional driver module.

    Raises:
        MissingDependencyError: The driver is not installed.

    Returns:
        The imported module.
    """
    if not module_installed(module_name):
        raise MissingDependencyError(module_name, install_package)
    return import_string(module_name)
