from pathlib import Path

from modhall.mods.walk import DirItem, archiveFormat, iterCandidates, listDirectory

LISTING = [
    DirItem("zeta.jar", isDir=False, isFile=True),
    DirItem("Alpha", isDir=True, isFile=False),
    DirItem("beta.ZIP", isDir=False, isFile=True),
    DirItem("notes.txt", isDir=False, isFile=True),
]


def _names(location):
    return [(c.name, c.format) for c in iterCandidates(Path("/root"), location, LISTING)]


def test_mods_root_takes_folders_and_archives():
    assert _names("mods") == [("Alpha", "directory"), ("beta.ZIP", "zip"), ("zeta.jar", "jar")]


def test_packs_root_takes_folders_only():
    assert _names("packs") == [("Alpha", "directory")]


def test_early_plugins_take_jars_only():
    assert _names("earlyplugins") == [("zeta.jar", "jar")]


def test_archive_format():
    assert archiveFormat("a.JAR") == "jar"
    assert archiveFormat("a.zip") == "zip"
    assert archiveFormat("a.rar") is None


def test_list_directory_reads_disk(tmp_path):
    (tmp_path / "Folder").mkdir()
    (tmp_path / "file.zip").write_bytes(b"")
    items = {item.name: item for item in listDirectory(tmp_path)}
    assert items["Folder"].isDir and not items["Folder"].isFile
    assert items["file.zip"].isFile
