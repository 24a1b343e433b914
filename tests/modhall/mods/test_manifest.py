import zipfile

import pytest

from modhall.mods.manifest import readManifest, readManifestFromArchive, readManifestFromFolder


def test_folder_manifest_at_root(tmp_path, write_mod_folder):
    folder = write_mod_folder(tmp_path, "Foo", {"Name": "Foo", "Group": "com.x"})
    assert readManifestFromFolder(folder) == {"Name": "Foo", "Group": "com.x"}


def test_folder_manifest_in_plugin_project_layout(tmp_path, write_mod_folder):
    folder = write_mod_folder(tmp_path, "Plug", {"Name": "Plug"}, manifestAt="src/main/resources/manifest.json")
    assert readManifestFromFolder(folder) == {"Name": "Plug"}


def test_broken_root_manifest_falls_through_to_server_manifest(tmp_path, write_mod_folder):
    folder = write_mod_folder(tmp_path, "Foo", {"Name": "FromServer"}, manifestAt="Server/manifest.json")
    (folder / "manifest.json").write_text("{ not json", encoding="utf-8")
    assert readManifestFromFolder(folder) == {"Name": "FromServer"}


def test_folder_manifest_accepts_json5(tmp_path):
    folder = tmp_path / "Loose"
    folder.mkdir()
    (folder / "manifest.json").write_text('{\n // comment\n Name: "Loose",\n}', encoding="utf-8")
    assert readManifestFromFolder(folder) == {"Name": "Loose"}


def test_folder_without_manifest_is_none(tmp_path, write_mod_folder):
    folder = write_mod_folder(tmp_path, "Bare")
    assert readManifestFromFolder(folder) is None


def test_archive_manifest_and_classes(tmp_path, write_archive):
    archive = write_archive(tmp_path, "plugin.jar", {"Name": "Plug", "Main": "com.example.Main"}, withClasses=True)
    read = readManifestFromArchive(archive)
    assert read.manifest == {"Name": "Plug", "Main": "com.example.Main"}
    assert read.hasClasses is True
    assert read.manifestPath == "manifest.json"


def test_archive_manifest_name_is_case_insensitive(tmp_path, write_archive):
    archive = write_archive(tmp_path, "pack.zip", {"Name": "Pack"}, manifestAt="Server/Manifest.JSON")
    read = readManifestFromArchive(archive)
    assert read.manifest == {"Name": "Pack"}
    assert read.hasClasses is False


def test_archive_without_manifest_still_reports_classes(tmp_path, write_archive):
    read = readManifestFromArchive(write_archive(tmp_path, "raw.jar", None, withClasses=True))
    assert read.manifest is None
    assert read.hasClasses is True


def test_archive_reader_raises_on_garbage(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"definitely not a zip")
    with pytest.raises(zipfile.BadZipFile):
        readManifestFromArchive(bogus)


@pytest.mark.asyncio
async def test_read_manifest_is_soft_for_broken_archives(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"definitely not a zip")
    read = await readManifest(bogus, "zip")
    assert read.manifest is None
    assert read.hasClasses is False
