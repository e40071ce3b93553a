"""VERCHECK - Plain-text version manifests and update checks.

This package provides a Python library and CLI for publishing a single-line
version manifest per application and checking a running version against it.
"""

__version__ = "1.0.0"
SCRIPT_NAME = "VERCHECK"
DEFAULT_USER_AGENT = f"vercheck/{__version__}"

__all__ = [
    "__version__",
    "SCRIPT_NAME",
    "DEFAULT_USER_AGENT",
]
