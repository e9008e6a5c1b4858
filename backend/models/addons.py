"""Add-on related models."""

from pydantic import BaseModel, Field


class InstalledAddonsResponse(BaseModel):
    """Installed pack directories per kind."""

    behavior_packs: list[str] = Field(..., description="Installed behavior pack directories")
    resource_packs: list[str] = Field(..., description="Installed resource pack directories")


class ActiveAddon(BaseModel):
    """A world-declared addon that is installed."""

    pack_id: str = Field(..., description="Pack UUID")
    version: list[int] = Field(default_factory=list, description="Declared version")


class ActiveAddonsResponse(BaseModel):
    """Active addons of the configured world."""

    active_behavior_addons: list[ActiveAddon] = Field(..., description="Active behavior packs")
    active_resource_addons: list[ActiveAddon] = Field(..., description="Active resource packs")


class PackResult(BaseModel):
    """Outcome for one pack of an upload."""

    name: str = Field(..., description="Pack file name")
    kind: str = Field(..., description="behavior or resource")
    status: str = Field(..., description="installed or failed")
    uuid: str | None = Field(None, description="Pack UUID, when readable")
    installed_path: str | None = Field(None, description="Installed pack directory")
    archive_path: str | None = Field(None, description="Archived pack file")
    classified_by: str | None = Field(None, description="manifest or path")
    failure: str | None = Field(None, description="Failure category")
    error: str | None = Field(None, description="Failure message")


class UploadResponse(BaseModel):
    """Result of an add-on upload."""

    message: str = Field(..., description="Summary message")
    upload: str = Field(..., description="Uploaded file name")
    total: int = Field(..., description="Packs found in the upload")
    succeeded: int = Field(..., description="Packs archived and installed")
    failed: int = Field(..., description="Packs that failed")
    packs: list[PackResult] = Field(..., description="Per-pack outcomes")
