# modhall/mods/dependencies.py
from __future__ import annotations
from collections.abc import Iterable

from modhall.mods.types import DependencyIssue, ModEntry, ModValidationResult

__all__ = ["validateModDependencies"]



def validateModDependencies(entries: Iterable[ModEntry]) -> ModValidationResult:
    """
    Checks every enabled entry's dependencies against the scanned library.
    Disabled entries are skipped: what they need does not matter while they are off.
    """
    entries = list(entries)
    installed: dict[str, ModEntry] = {}
    for entry in entries:
        # Same id in both the enabled root and the disabled mirror: the enabled copy counts
        current = installed.get(entry.id)
        if current is None or (entry.enabled and not current.enabled):
            installed[entry.id] = entry

    issues: list[DependencyIssue] = []
    for entry in entries:
        if not entry.enabled:
            continue

        for depId in entry.dependencies:
            dep = installed.get(depId)
            if dep is None:
                issues.append(DependencyIssue(
                    modId=entry.id,
                    modName=entry.name,
                    type="missing_dependency",
                    dependencyId=depId,
                    message=f'Required dependency "{depId}" is not installed',
                ))
            elif not dep.enabled:
                issues.append(DependencyIssue(
                    modId=entry.id,
                    modName=entry.name,
                    type="disabled_dependency",
                    dependencyId=depId,
                    message=f'Required dependency "{depId}" is disabled',
                ))

        # Informational only
        for depId in entry.optionalDependencies:
            if depId not in installed:
                issues.append(DependencyIssue(
                    modId=entry.id,
                    modName=entry.name,
                    type="optional_missing",
                    dependencyId=depId,
                    message=f'Optional dependency "{depId}" is not installed',
                ))

    return ModValidationResult(
        issues=issues,
        hasErrors=any(issue.type in ("missing_dependency", "disabled_dependency") for issue in issues),
        hasWarnings=any(issue.type == "optional_missing" for issue in issues),
    )
