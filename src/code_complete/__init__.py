"""code_complete — design-quality static analysis for Python, built around cohesion."""

__all__ = [
    "__version__",
    "scan_project",
    "scan_source",
    "validate_instance",
]
__version__ = "0.1.0"

# Programmatic entrypoints, see code_complete.api.
from code_complete.api import (  # noqa: E402, F401
    scan_project,
    scan_source,
    validate_instance,
)
