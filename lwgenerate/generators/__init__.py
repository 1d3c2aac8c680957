"""
Cloud generators for lwgenerate.

Automatically discovers and imports all generator modules to ensure they
register themselves via the @register_generator decorator.
"""

import importlib
import pkgutil
from pathlib import Path

_FRAMEWORK_MODULES = {"base", "registry"}


def _discover_and_register_generators() -> None:
    """
    Automatically discover and import all generator modules.

    Imports every module in this package except the framework modules.
    This triggers the @register_generator decorator, which registers
    generators in the registry.
    """
    generators_dir = Path(__file__).parent

    for module_info in pkgutil.iter_modules([str(generators_dir)]):
        if module_info.name in _FRAMEWORK_MODULES:
            continue
        importlib.import_module(f"lwgenerate.generators.{module_info.name}")


_discover_and_register_generators()

# Generator classes are accessed via registry, not direct imports
__all__ = []
