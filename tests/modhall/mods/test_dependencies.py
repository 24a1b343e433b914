from modhall.mods.dependencies import validateModDependencies
from modhall.mods.types import ModEntry


def _entry(modId, *, enabled=True, deps=(), optional=()):
    return ModEntry(
        id=modId, name=modId, format="directory", location="mods", path=f"/m/{modId}",
        type="pack", enabled=enabled, dependencies=list(deps), optionalDependencies=list(optional),
    )


def test_missing_dependency_is_an_error():
    result = validateModDependencies([_entry("A", deps=["B"])])
    assert result.hasErrors is True
    assert [(i.modId, i.type, i.dependencyId) for i in result.issues] == [("A", "missing_dependency", "B")]


def test_disabled_dependency_is_an_error():
    result = validateModDependencies([_entry("A", deps=["B"]), _entry("B", enabled=False)])
    assert result.hasErrors is True
    assert result.issues[0].type == "disabled_dependency"


def test_optional_missing_is_only_a_warning():
    result = validateModDependencies([_entry("A", optional=["C"])])
    assert result.hasErrors is False
    assert result.hasWarnings is True


def test_disabled_entries_are_not_checked():
    result = validateModDependencies([_entry("A", enabled=False, deps=["Nope"])])
    assert result.issues == []


def test_enabled_copy_wins_for_duplicate_ids():
    result = validateModDependencies([
        _entry("A", deps=["B"]),
        _entry("B", enabled=False),
        _entry("B", enabled=True),
    ])
    assert result.hasErrors is False
