import json
import os

import pytest

from modhall.core.errors import PathContainmentError, WorldConfigError
from modhall.mods.types import ModEntry
from modhall.worlds.saves import applyEnabledSetToConfig, readWorldModOverridesFromConfig


def _entry(modId):
    return ModEntry(id=modId, name=modId, format="directory", location="mods", path=f"/m/{modId}", type="pack")


def test_overrides_ignore_non_boolean_values():
    config = {"Mods": {"A": {"Enabled": True}, "B": {"Enabled": "yes"}, "C": 1, "D": {"Enabled": False}}}
    assert readWorldModOverridesFromConfig(config) == {"A": True, "D": False}
    assert readWorldModOverridesFromConfig({"Mods": []}) == {}
    assert readWorldModOverridesFromConfig(None) == {}


def test_apply_enabled_set_keeps_unrelated_fields():
    config = {"Seed": 42, "Mods": {"A": {"Enabled": False, "Options": {"x": 1}}, "Other": {"Enabled": True}}}

    out = applyEnabledSetToConfig(config, {"A"}, [_entry("A"), _entry("B")])

    assert out == {
        "Seed": 42,
        "Mods": {
            "A": {"Enabled": True, "Options": {"x": 1}},
            "B": {"Enabled": False},
            "Other": {"Enabled": True},
        },
    }
    assert config["Mods"]["A"]["Enabled"] is False


@pytest.mark.asyncio
async def test_list_worlds_and_selection(library, install_root, write_world):
    write_world(install_root, "Alpha")
    (install_root / "UserData" / "Saves" / "NoConfig").mkdir()

    state = await library.listWorlds()
    assert [world.id for world in state.worlds] == ["Alpha"]
    assert state.selectedWorldId == "Alpha"

    library.setSelectedWorld("Beta")
    assert (await library.listWorlds()).selectedWorldId == "Beta"


@pytest.mark.asyncio
async def test_set_mod_enabled_writes_one_flag(library, install_root, write_world):
    configPath = write_world(install_root, "w1", {"Mods": {"A": {"Enabled": True, "Keep": 1}}, "Name": "World"})

    await library.setWorldModEnabled("w1", "A", False)
    await library.setWorldModEnabled("w1", "B", True)

    written = json.loads(configPath.read_text(encoding="utf-8"))
    assert written == {"Mods": {"A": {"Enabled": False, "Keep": 1}, "B": {"Enabled": True}}, "Name": "World"}
    assert await library.getWorldConfig("w1") == written


@pytest.mark.asyncio
async def test_set_mod_enabled_without_config(library):
    with pytest.raises(WorldConfigError):
        await library.setWorldModEnabled("missing", "A", True)


@pytest.mark.asyncio
async def test_world_ids_cannot_escape_saves(library):
    with pytest.raises(PathContainmentError):
        await library.getWorldConfig("../..")


@pytest.mark.asyncio
async def test_active_world_is_most_recently_modified(library, install_root, write_world):
    old = write_world(install_root, "old")
    new = write_world(install_root, "new")
    os.utime(old, (1_000_000, 1_000_000))
    os.utime(new, (2_000_000, 2_000_000))

    assert await library.worlds.activeWorldConfigPath(install_root / "UserData") == new


@pytest.mark.asyncio
async def test_unreadable_world_does_not_hide_the_others(library, install_root, write_world, monkeypatch):
    from modhall.worlds import saves

    write_world(install_root, "good")
    write_world(install_root, "broken")
    realMtime = saves._mtime

    def flakyMtime(path):
        if path.name == "broken":
            raise PermissionError(13, "denied")
        return realMtime(path)

    monkeypatch.setattr(saves, "_mtime", flakyMtime)

    state = await library.listWorlds()

    assert [world.id for world in state.worlds] == ["good"]
