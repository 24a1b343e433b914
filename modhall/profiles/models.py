# modhall/profiles/models.py
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

__all__ = ["Profile", "ProfilesState", "DEFAULT_PROFILE_ID", "DEFAULT_PROFILE_NAME"]

DEFAULT_PROFILE_ID = "default"
DEFAULT_PROFILE_NAME = "Default"



class Profile(BaseModel):
    """A named set of mod ids that should be enabled together."""
    id: str
    name: str
    enabledMods: list[str] = Field(default_factory=list)
    readonly: bool = False

    @field_validator("enabledMods", mode="before")
    @classmethod
    def _dedupeIds(cls, value):
        if not isinstance(value, (list, tuple, set, frozenset)):
            return []
        seen: dict[str, None] = {}
        for item in value:
            if isinstance(item, str):
                seen.setdefault(item, None)
        return list(seen)



class ProfilesState(BaseModel):
    activeProfileId: str | None = None
    profiles: list[Profile] = Field(default_factory=list)
