# lead_scout/__init__.py
"""
LeadScout package initializer.
Defines package version and exposes the CLI group.
"""
__version__ = "0.1.0"

from lead_scout.cli import cli  # noqa: E402

__all__ = ["__version__", "cli"]
