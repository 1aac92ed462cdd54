"""Reports — render a RunResult for terminals, CI artifacts and PR comments."""

from code_complete.reports.exporters import export_result

__all__ = [
    "export_result",
]
