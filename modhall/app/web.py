# modhall/app/web.py
from __future__ import annotations
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from modhall.app.library import ModLibraryService
from modhall.core.errors import (
    BackupNotFoundError,
    ConflictError,
    InstallPathNotConfiguredError,
    ModHallError,
    ModNotFoundError,
    PathContainmentError,
    ProfileNotFoundError,
    ReadonlyProfileError,
    WorldConfigError,
)
from modhall.profiles.models import Profile

__all__ = ["router", "ERROR_STATUS", "errorStatusFor", "modHallErrorHandler"]

router = APIRouter()

ERROR_STATUS: dict[type[ModHallError], int] = {
    ProfileNotFoundError: 404,
    ModNotFoundError: 404,
    BackupNotFoundError: 404,
    ReadonlyProfileError: 409,
    ConflictError: 409,
    InstallPathNotConfiguredError: 409,
    PathContainmentError: 400,
    WorldConfigError: 422,
}



def errorStatusFor(err: ModHallError) -> int:
    for errType in type(err).__mro__:
        status = ERROR_STATUS.get(errType)
        if status is not None:
            return status
    return 500



async def modHallErrorHandler(request: Request, err: ModHallError) -> JSONResponse:
    return JSONResponse({"error": type(err).__name__, "message": str(err)}, status_code=errorStatusFor(err))



def _library(request: Request) -> ModLibraryService:
    return request.app.state.library



# ----- Request bodies -----

class InstallPathBody(BaseModel):
    path: str | None = None

class AddModsBody(BaseModel):
    sourcePaths: list[str] = Field(default_factory=list)

class DeleteModBody(BaseModel):
    path: str

class CreateProfileBody(BaseModel):
    name: str = ""

class UpdateProfileBody(BaseModel):
    name: str
    enabledMods: list[str] = Field(default_factory=list)

class WorldModBody(BaseModel):
    enabled: bool



# ----- Install -----

@router.get("/api/install")
async def getInstall(request: Request):
    return await _library(request).getInstallInfo()


@router.put("/api/install")
async def putInstall(request: Request, body: InstallPathBody):
    return await _library(request).setInstallPath(body.path)



# ----- Mods -----

@router.get("/api/mods")
async def getMods(request: Request, worldId: str | None = None):
    return await _library(request).scanMods(worldId)


@router.get("/api/mods/manifest")
async def getModManifest(request: Request, path: str):
    return {"manifest": await _library(request).getModManifest(path)}


@router.post("/api/mods/add")
async def postAddMods(request: Request, body: AddModsBody):
    return await _library(request).addMods(body.sourcePaths)


@router.post("/api/mods/delete")
async def postDeleteMod(request: Request, body: DeleteModBody):
    return await _library(request).deleteMod(body.path)



# ----- Profiles -----

@router.get("/api/profiles")
async def getProfiles(request: Request):
    return _library(request).getProfiles()


@router.post("/api/profiles")
async def postProfile(request: Request, body: CreateProfileBody):
    return _library(request).createProfile(body.name)


@router.put("/api/profiles/{profileId}")
async def putProfile(request: Request, profileId: str, body: UpdateProfileBody):
    profile = Profile(id=profileId, name=body.name, enabledMods=body.enabledMods)
    return _library(request).updateProfile(profile)


@router.post("/api/profiles/{profileId}/activate")
async def activateProfile(request: Request, profileId: str):
    return _library(request).setActiveProfile(profileId)


@router.post("/api/profiles/{profileId}/apply")
async def applyProfile(request: Request, profileId: str):
    return await _library(request).applyProfile(profileId)



# ----- Worlds -----

@router.get("/api/worlds")
async def getWorlds(request: Request):
    return await _library(request).listWorlds()


@router.get("/api/worlds/{worldId}/config")
async def getWorldConfig(request: Request, worldId: str):
    config = await _library(request).getWorldConfig(worldId)
    if config is None:
        return JSONResponse({"error": "WorldConfigNotFound", "message": f"No config for world '{worldId}'."}, status_code=404)
    return config


@router.put("/api/worlds/{worldId}/mods/{modId}")
async def putWorldMod(request: Request, worldId: str, modId: str, body: WorldModBody):
    await _library(request).setWorldModEnabled(worldId, modId, body.enabled)
    return {"ok": True}


@router.post("/api/worlds/{worldId}/select")
async def selectWorld(request: Request, worldId: str):
    _library(request).setSelectedWorld(worldId)
    return {"ok": True, "selectedWorldId": worldId}



# ----- Deleted mod backups -----

@router.get("/api/deleted")
async def getDeleted(request: Request):
    return await _library(request).listDeletedMods()


@router.post("/api/deleted/{backupId}/restore")
async def restoreDeleted(request: Request, backupId: str):
    return await _library(request).restoreDeletedMod(backupId)


@router.delete("/api/deleted/{backupId}")
async def deleteBackup(request: Request, backupId: str):
    await _library(request).permanentlyDeleteMod(backupId)
    return {"ok": True}


@router.delete("/api/deleted")
async def clearDeleted(request: Request):
    return {"ok": True, "removed": await _library(request).clearDeletedMods()}



@router.get("/health")
async def health(request: Request):
    return {"ok": True, "db": _library(request).database.healthCheck(), "ts": int(time.time() * 1000)}
