# docsweep/__init__.py
"""
DocSweep package initializer.
Defines package version and exposes the CLI group as ``main_cli``.
"""
__version__ = "0.1.0"

# ``docsweep.cli`` stays the submodule; the click group is re-exported under another name
from docsweep.cli import cli as main_cli  # noqa: E402

__all__ = ["__version__", "main_cli"]
