"""
API Routers
===========
Each router handles a specific domain of the API.
"""
from . import health, rules, scan

__all__ = ["health", "rules", "scan"]
