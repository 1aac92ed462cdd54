"""
API settings.

Every field can be overridden by an environment variable named after it with
the ``CODE_COMPLETE_`` prefix, e.g. ``CODE_COMPLETE_PORT=9000``.  List fields
take comma-separated values.
"""
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List

ENV_PREFIX = "CODE_COMPLETE_"

_TRUTHY = ("true", "1", "yes", "on")


def _coerce(raw: str, field_type: Any) -> Any:
    if field_type is bool:
        return raw.strip().lower() in _TRUTHY
    if field_type is int:
        return int(raw)
    if field_type == List[str]:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


@dataclass
class Settings:
    """API configuration"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Scans
    DEFAULT_PRESET: str = "recommended"
    MAX_SOURCE_BYTES: int = 1_000_000
    # Directories POST /scan/ may read from; empty means unrestricted.
    ALLOWED_ROOTS: List[str] = field(default_factory=list)

    def __post_init__(self):
        for f in fields(self):
            env_value = os.getenv(ENV_PREFIX + f.name)
            if env_value is not None:
                setattr(self, f.name, _coerce(env_value, f.type))

    def is_allowed_path(self, path: Path) -> bool:
        if not self.ALLOWED_ROOTS:
            return True
        resolved = path.resolve()
        for root in self.ALLOWED_ROOTS:
            base = Path(root).resolve()
            if resolved == base or base in resolved.parents:
                return True
        return False


settings = Settings()
