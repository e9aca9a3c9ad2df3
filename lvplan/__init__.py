"""LV Distribution Planner package entry.

This lightweight package provides a stable module entrypoint (python -m lvplan)
while keeping the existing top-level packages (core/, domain/, services/, etc.)
intact.
"""

from lvplan.version import __version__  # single source of truth

__all__ = ["__version__"]
