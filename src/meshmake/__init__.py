"""Monorepo build orchestrator: fan lifecycle goals out to apps and shared libraries."""

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "cli",
]
