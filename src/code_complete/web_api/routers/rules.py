"""
Rules Router
============
Read-only view of the rule registry and presets.
"""
from fastapi import APIRouter, HTTPException

from code_complete.core.registry import RULE_CLASSES
from code_complete.policy.presets import PRESETS
from code_complete.rules import RULE_NAMES
from code_complete.web_api.config import settings
from code_complete.web_api.schemas.rules import RuleInfo

router = APIRouter()


@router.get("/", response_model=list[RuleInfo])
async def list_rules(preset: str = settings.DEFAULT_PRESET):
    """
    List every rule with its level in *preset* and its effective options.
    """
    if preset not in PRESETS:
        raise HTTPException(status_code=404, detail=f"Unknown preset: {preset}")
    infos = []
    for name in sorted(RULE_CLASSES):
        cls = RULE_CLASSES[name]
        setting = PRESETS[preset][name]
        infos.append(RuleInfo(
            name=name,
            rule_ids=list(RULE_NAMES[name]),
            level=setting.level,
            description=cls.description,
            options={**cls.default_options(), **setting.options},
        ))
    return infos
