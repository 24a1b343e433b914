import asyncio

import pytest

from modhall.mods.discover import InstallLocks, sortEntries
from modhall.mods.types import ModEntry


def _modsRoot(install_root):
    return install_root / "UserData" / "Mods"


@pytest.mark.asyncio
async def test_scan_without_install_returns_nothing(library, tmp_path):
    library.install.setInstallPath(None)
    result = await library.scanMods()
    assert result.installPath is None
    assert result.entries == []


@pytest.mark.asyncio
async def test_scan_reads_every_location(library, install_root, write_mod_folder, write_archive):
    write_mod_folder(_modsRoot(install_root), "FooFolder", {"Name": "Foo", "Group": "com.x"})
    write_archive(_modsRoot(install_root), "Bar.zip", {"Name": "Bar"})
    write_mod_folder(install_root / "UserData" / "Packs", "Textures", {"Name": "Textures"})
    write_archive(install_root / "earlyplugins", "Boot.jar", {"Name": "Boot"}, withClasses=True)

    result = await library.scanMods()

    byId = {entry.id: entry for entry in result.entries}
    assert set(byId) == {"com.x:Foo", "Bar", "Textures", "Boot"}
    assert byId["Textures"].location == "packs"
    assert byId["Boot"].type == "early-plugin"
    assert byId["Bar"].format == "zip"
    assert byId["com.x:Foo"].size and byId["com.x:Foo"].size > 0
    assert [entry.name for entry in result.entries] == ["Bar", "Boot", "Foo", "Textures"]


@pytest.mark.asyncio
async def test_world_config_drives_enabled_flag(library, install_root, write_mod_folder, write_world):
    write_mod_folder(_modsRoot(install_root), "A", {"Name": "A"})
    write_mod_folder(_modsRoot(install_root), "B", {"Name": "B"})
    write_world(install_root, "w1", {"Mods": {"A": {"Enabled": True}, "B": {"Enabled": False}}})

    result = await library.scanMods()

    assert {entry.id: entry.enabled for entry in result.entries} == {"A": True, "B": False}


@pytest.mark.asyncio
async def test_explicit_world_id_is_used(library, install_root, write_mod_folder, write_world):
    write_mod_folder(_modsRoot(install_root), "A", {"Name": "A"})
    write_world(install_root, "older", {"Mods": {"A": {"Enabled": True}}})
    write_world(install_root, "newer", {"Mods": {"A": {"Enabled": False}}})

    result = await library.scanMods(worldId="older")
    assert result.entries[0].enabled is True


@pytest.mark.asyncio
async def test_disabled_mirror_forces_disabled(library, install_root, app_paths, write_mod_folder, write_world):
    write_mod_folder(app_paths.disabledRoot / "mods", "Off", {"Name": "Off"})
    write_world(install_root, "w1", {"Mods": {"Off": {"Enabled": True}}})

    result = await library.scanMods()

    [entry] = result.entries
    assert entry.enabled is False
    assert entry.location == "mods"
    assert entry.path.startswith(str(app_paths.disabledRoot))


@pytest.mark.asyncio
async def test_scan_is_idempotent(library, install_root, write_mod_folder, write_archive, write_world):
    write_mod_folder(_modsRoot(install_root), "A", {"Name": "A", "Dependencies": ["Z"]})
    write_archive(_modsRoot(install_root), "B.jar", {"Name": "B"})
    write_world(install_root, "w1", {"Mods": {"A": {"Enabled": True}}})

    first = await library.scanMods()
    second = await library.scanMods()

    assert first.model_dump() == second.model_dump()
    assert first.validation.hasErrors is True


@pytest.mark.asyncio
async def test_unreadable_manifest_still_yields_entry(library, install_root):
    broken = _modsRoot(install_root) / "Broken"
    broken.mkdir()
    (broken / "manifest.json").write_text("{{{", encoding="utf-8")

    result = await library.scanMods()

    assert [entry.id for entry in result.entries] == ["Broken"]


@pytest.mark.asyncio
async def test_first_scan_seeds_default_profile(library, install_root, write_mod_folder, write_world):
    write_mod_folder(_modsRoot(install_root), "A", {"Name": "A"})
    write_world(install_root, "w1", {"Mods": {"A": {"Enabled": True}}})

    await library.scanMods()

    state = library.getProfiles()
    assert state.activeProfileId == "default"
    assert state.profiles[0].readonly is True
    assert state.profiles[0].enabledMods == ["A"]


@pytest.mark.asyncio
async def test_install_locks_are_per_install(tmp_path):
    locks = InstallLocks()
    assert locks.forInstall(tmp_path / "a") is locks.forInstall(tmp_path / "a")
    assert locks.forInstall(tmp_path / "a") is not locks.forInstall(tmp_path / "b")
    async with locks.forInstall(tmp_path / "a"):
        assert locks.forInstall(tmp_path / "a").locked()
        await asyncio.sleep(0)


def test_sort_is_case_insensitive_then_stable():
    def entry(name, path):
        return ModEntry(id=name, name=name, format="directory", location="mods", path=path, type="pack")

    ordered = sortEntries([entry("beta", "/1"), entry("Alpha", "/2"), entry("alpha", "/3")])
    assert [(e.name, e.path) for e in ordered] == [("Alpha", "/2"), ("alpha", "/3"), ("beta", "/1")]
