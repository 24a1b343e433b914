import pytest

from modhall.core.errors import PathContainmentError
from modhall.core.security import ensureSafeChild, ensureWithinRoots, isWithinPath


def test_is_within_path(tmp_path):
    root = tmp_path / "root"
    assert isWithinPath(root, root)
    assert isWithinPath(root / "a" / "b", root)
    assert not isWithinPath(tmp_path / "rootish", root)
    assert not isWithinPath(root / ".." / "other", root)


def test_ensure_within_roots_skips_empty_roots(tmp_path):
    target = tmp_path / "mods" / "A"
    assert ensureWithinRoots(target, [None, "", tmp_path / "mods"]) == target
    with pytest.raises(PathContainmentError):
        ensureWithinRoots(target, [None, tmp_path / "packs"], action="move")


@pytest.mark.parametrize("name", ["", ".", "..", "../x", "a/../../x"])
def test_safe_child_rejects_escapes(tmp_path, name):
    with pytest.raises(PathContainmentError):
        ensureSafeChild(tmp_path, name)


def test_safe_child_accepts_plain_names(tmp_path):
    assert ensureSafeChild(tmp_path, "World 1") == tmp_path / "World 1"
