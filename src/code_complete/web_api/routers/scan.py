"""
Scan Router
===========
Endpoints for scanning a local path or an inline source text.

Configuration and syntax errors propagate to the application's exception
handlers, which answer 422.
"""
from pathlib import Path

from fastapi import APIRouter, HTTPException

from code_complete import api as core_api
from code_complete.web_api.config import settings
from code_complete.web_api.schemas.scan import (
    ScanRequest,
    ScanResponse,
    ScanSummary,
    SourceScanRequest,
    SourceScanResponse,
)

router = APIRouter()


@router.post("/", response_model=ScanResponse)
async def run_scan(request: ScanRequest):
    """
    Run a scan on a local directory or file.

    - **repo_path**: Local path to scan (must sit under ``ALLOWED_ROOTS`` when set)
    - **project_id**: Optional project identifier
    - **preset** / **rules**: Rule selection layered over the path's config file
    """
    target = Path(request.repo_path)
    if not target.exists():
        raise HTTPException(status_code=404, detail=f"Path not found: {request.repo_path}")
    if not settings.is_allowed_path(target):
        raise HTTPException(status_code=403, detail=f"Path outside allowed roots: {request.repo_path}")

    _, result = core_api.scan_project(
        root=target,
        project_id=request.project_id or "",
        preset=request.preset,
        rules=request.rules,
        ci_mode=request.ci_mode,
    )

    summary = result["summary"]
    return ScanResponse(
        status="complete",
        project_id=request.project_id,
        summary=ScanSummary(
            files_scanned=summary["files_scanned"],
            issues_found=summary["counts"]["findings_total"],
            worst_severity=summary["worst_severity"],
            by_rule=summary["counts"]["by_rule"],
        ),
        result=result,
    )


@router.post("/source", response_model=SourceScanResponse)
async def scan_source(request: SourceScanRequest):
    """
    Check one inline Python source text against a preset plus overrides.
    """
    if len(request.source.encode("utf-8")) > settings.MAX_SOURCE_BYTES:
        raise HTTPException(status_code=413, detail="Source text too large")

    findings = core_api.scan_source(
        request.source,
        path=request.path,
        preset=request.preset or settings.DEFAULT_PRESET,
        rules=request.rules,
    )
    return SourceScanResponse(
        path=request.path,
        issues_found=len(findings),
        findings=[f.to_dict() for f in findings],
    )
