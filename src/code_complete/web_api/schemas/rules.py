"""
Rule Schemas
============
Response model for the rule listing.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class RuleInfo(BaseModel):
    """One rule as seen through a preset"""

    name: str = Field(..., description="Kebab-case rule name")
    rule_ids: List[str] = Field(default_factory=list)
    level: str = Field(..., description="off, warn or error")
    description: str = Field(default="")
    options: Dict[str, Any] = Field(default_factory=dict)
