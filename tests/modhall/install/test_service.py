import pytest

from modhall.app.state import LibraryState
from modhall.db.settings import SETTINGS_KEYS, MemorySettingsStore
from modhall.install.service import InstallService, locationPath


@pytest.mark.asyncio
async def test_default_path_detected(install_root):
    service = InstallService(LibraryState(MemorySettingsStore()), defaultPath=install_root)

    info = await service.resolveInstallInfo()

    assert info.detectedPath == str(install_root)
    assert info.activePath == str(install_root)
    assert info.modsPath == str(install_root / "UserData" / "Mods")
    assert info.packsPath == str(install_root / "UserData" / "Packs")
    assert info.earlyPluginsPath == str(install_root / "earlyplugins")
    assert info.issues == []


@pytest.mark.asyncio
async def test_override_beats_default_and_persists(tmp_path, install_root):
    store = MemorySettingsStore()
    service = InstallService(LibraryState(store), defaultPath=tmp_path / "absent")

    assert (await service.resolveInstallInfo()).activePath is None

    service.setInstallPath(install_root)

    assert store.get(SETTINGS_KEYS.installPath) == str(install_root)
    reloaded = InstallService(LibraryState(store), defaultPath=tmp_path / "absent")
    assert (await reloaded.resolveInstallInfo()).activePath == str(install_root)


@pytest.mark.asyncio
async def test_missing_override_reports_issues(tmp_path):
    service = InstallService(LibraryState(MemorySettingsStore()), defaultPath=tmp_path / "absent")
    service.setInstallPath(tmp_path / "gone")

    info = await service.resolveInstallInfo()

    assert info.activePath == str(tmp_path / "gone")
    assert info.modsPath is None
    assert "Install path does not exist." in info.issues


@pytest.mark.asyncio
async def test_legacy_install_keeps_packs_in_mods(install_root):
    (install_root / "UserData" / "Packs").rmdir()
    service = InstallService(LibraryState(MemorySettingsStore()), defaultPath=install_root)

    info = await service.resolveInstallInfo()

    assert info.packsPath is None
    assert locationPath(info, "packs") == install_root / "UserData" / "Mods"
    assert locationPath(info, "earlyplugins") == install_root / "earlyplugins"
