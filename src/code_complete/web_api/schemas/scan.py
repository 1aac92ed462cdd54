"""
Scan Schemas
============
Request and response models for scan endpoints.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanRequest(BaseModel):
    """Request to scan a local path"""

    repo_path: str = Field(..., description="Local path to the repository")
    project_id: Optional[str] = Field(default=None, description="Project identifier")
    preset: Optional[str] = Field(default=None, description="Rule preset")
    rules: Dict[str, Any] = Field(default_factory=dict, description="Rule overrides")
    ci_mode: bool = Field(default=False, description="Deterministic output")

    class Config:
        json_schema_extra = {
            "example": {
                "repo_path": "/path/to/repo",
                "project_id": "my-project",
                "preset": "strict",
                "rules": {"low-function-cohesion": ["error", {"minSharedVariablePercentage": 40}]},
            }
        }


class ScanSummary(BaseModel):
    """Summary of scan results"""

    files_scanned: int = Field(default=0)
    issues_found: int = Field(default=0)
    worst_severity: Optional[str] = Field(default=None)
    by_rule: Dict[str, int] = Field(default_factory=dict)


class ScanResponse(BaseModel):
    """Response from a scan operation"""

    status: str = Field(..., description="Scan status: complete or failed")
    project_id: Optional[str] = Field(default=None)
    summary: ScanSummary
    result: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class SourceScanRequest(BaseModel):
    """Request to check inline source text"""

    source: str = Field(..., description="Python source text")
    path: str = Field(default="<string>", description="Path reported in findings")
    preset: Optional[str] = Field(default=None, description="Rule preset")
    rules: Dict[str, Any] = Field(default_factory=dict, description="Rule overrides")

    class Config:
        json_schema_extra = {
            "example": {
                "source": "def f(a, b):\n    ...\n",
                "path": "example.py",
                "rules": {"low-function-cohesion": "warn"},
            }
        }


class SourceScanResponse(BaseModel):
    """Findings for one inline source text"""

    path: str
    issues_found: int = Field(default=0)
    findings: List[Dict[str, Any]] = Field(default_factory=list)
