import asyncio
import inspect
import json
import sys
import zipfile
from pathlib import Path

import pytest

from modhall.app.library import ModLibraryService
from modhall.app.paths import AppPaths
from modhall.app.settings import loadSettings
from modhall.db.database import Database



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")

    config.addinivalue_line("markers", "asyncio: mark a test to run inside an event loop")



@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function):
    """Runs `@pytest.mark.asyncio` coroutine tests in a fresh event loop."""
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None
    testFunction = pyfuncitem.obj
    if not inspect.iscoroutinefunction(testFunction):
        return None
    argNames = pyfuncitem._fixtureinfo.argnames
    kwargs = {name: pyfuncitem.funcargs[name] for name in argNames}
    asyncio.run(testFunction(**kwargs))
    return True



@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Never read the developer's real ~/.modhall/modhall.json5."""
    monkeypatch.setenv("MODHALL_CONFIG", str(tmp_path / "no-such-settings.json5"))
    loadSettings.cache_clear()
    yield
    loadSettings.cache_clear()



@pytest.fixture()
def install_root(tmp_path) -> Path:
    """
    Fake game install:
      Hytale/UserData/{Mods,Packs,Saves}
      Hytale/earlyplugins
    """
    root = tmp_path / "Hytale"
    for sub in ("UserData/Mods", "UserData/Packs", "UserData/Saves", "earlyplugins"):
        (root / sub).mkdir(parents=True, exist_ok=True)
    return root



@pytest.fixture()
def app_paths(tmp_path) -> AppPaths:
    return AppPaths.fromDir(tmp_path / "appdata")



@pytest.fixture()
def library(tmp_path, install_root, app_paths):
    database = Database.forPath(app_paths.databasePath)
    service = ModLibraryService(
        app_paths,
        database,
        defaultInstallPath=tmp_path / "not-installed",
        maxConcurrentReads=4,
    )
    service.install.setInstallPath(install_root)
    yield service
    service.close()



def _writeManifest(target: Path, manifest: dict | None) -> None:
    if manifest is None:
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(manifest), encoding="utf-8")



@pytest.fixture()
def write_mod_folder():
    def _write(root: Path, folderName: str, manifest: dict | None = None, *, manifestAt: str = "manifest.json") -> Path:
        folder = root / folderName
        folder.mkdir(parents=True, exist_ok=True)
        _writeManifest(folder / manifestAt, manifest)
        (folder / "assets.txt").write_text("payload", encoding="utf-8")
        return folder
    return _write



@pytest.fixture()
def write_archive():
    def _write(
        root: Path,
        fileName: str,
        manifest: dict | None = None,
        *,
        manifestAt: str = "manifest.json",
        withClasses: bool = False,
    ) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        archivePath = root / fileName
        with zipfile.ZipFile(archivePath, "w") as archive:
            if manifest is not None:
                archive.writestr(manifestAt, json.dumps(manifest))
            if withClasses:
                archive.writestr("com/example/Main.class", b"\xca\xfe\xba\xbe")
            archive.writestr("readme.txt", "hello")
        return archivePath
    return _write



@pytest.fixture()
def write_world():
    def _write(installRoot: Path, worldId: str, config: dict | None = None) -> Path:
        worldDir = installRoot / "UserData" / "Saves" / worldId
        worldDir.mkdir(parents=True, exist_ok=True)
        configPath = worldDir / "config.json"
        configPath.write_text(json.dumps(config if config is not None else {}), encoding="utf-8")
        return configPath
    return _write
