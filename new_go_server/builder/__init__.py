"""Post-generation build steps.

Key classes:
    ModuleBootstrapper - runs the module tool inside the generated tree
"""

from .bootstrap import DEFAULT_COMMAND, ModuleBootstrapper

__all__ = [
    "DEFAULT_COMMAND",
    "ModuleBootstrapper",
]
