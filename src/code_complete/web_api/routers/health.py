"""
Health Router
=============
Liveness and readiness probes.
"""
from fastapi import APIRouter

from code_complete import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness: the process is up."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """
    Readiness: the rule registry imports, every preset resolves against it
    and the run-result schema loads.
    """
    from code_complete.contracts.load import load_schema
    from code_complete.core.config import resolve_rules
    from code_complete.core.registry import rule_names
    from code_complete.policy.presets import preset_names

    load_schema("run_result.schema.json")
    presets = preset_names()
    for name in presets:
        resolve_rules(name)
    return {"status": "ready", "rules": len(rule_names()), "presets": presets}
