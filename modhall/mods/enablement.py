# modhall/mods/enablement.py
from __future__ import annotations
from collections.abc import Mapping

__all__ = ["WorldOverrideMap", "resolveEnabled", "worldSignalFor"]

# modId -> explicit Enabled flag from a save world's config.json
WorldOverrideMap = Mapping[str, bool]



def worldSignalFor(modId: str, worldOverrides: WorldOverrideMap | None) -> bool | None:
    if not worldOverrides:
        return None
    value = worldOverrides.get(modId)
    return value if isinstance(value, bool) else None



def resolveEnabled(
    locationSignal: bool | None,
    worldOverrideSignal: bool | None,
    default: bool = False,
) -> bool:
    """
    Merge the two truth sources into one flag, most specific first:

      1) locationSignal       - a mod sitting in the disabled mirror is off, whatever the world says
      2) worldOverrideSignal  - the save world's explicit choice
      3) default              - the game treats "not mentioned" as disabled
    """
    if isinstance(locationSignal, bool):
        return locationSignal
    if isinstance(worldOverrideSignal, bool):
        return worldOverrideSignal
    return default
