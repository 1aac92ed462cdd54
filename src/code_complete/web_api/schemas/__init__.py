"""
Pydantic Schemas
================
Request and response models for the API.
"""
from .rules import RuleInfo
from .scan import (
    ScanRequest,
    ScanResponse,
    ScanSummary,
    SourceScanRequest,
    SourceScanResponse,
)

__all__ = [
    "RuleInfo",
    "ScanRequest",
    "ScanResponse",
    "ScanSummary",
    "SourceScanRequest",
    "SourceScanResponse",
]
