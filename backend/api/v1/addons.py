"""
Add-on API endpoints.

Provides installed/active addon listings and add-on uploads.
"""

import logging
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.models.addons import ActiveAddonsResponse, InstalledAddonsResponse, UploadResponse
from backend.models.common import ErrorResponse
from backend.rate_limit import limiter
from backend.services.pack_service import get_pack_manager
from packvault.errors import (
    DeclarationNotFoundError,
    DeclarationParseError,
    InvalidArchiveError,
    PackWriteError,
    WorldPropertiesError,
)
from packvault.manager import PackManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["addons"])

_CHUNK_SIZE = 1 << 16


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


class UploadTooLargeError(Exception):
    """Upload exceeded the configured size cap."""


def _spool_upload(upload: UploadFile, destination: Path, max_size: int) -> int:
    """Copy an upload to disk, stopping once it exceeds max_size bytes."""
    written = 0
    with open(destination, "wb") as out:
        while True:
            chunk = upload.file.read(_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_size:
                raise UploadTooLargeError(f"Upload exceeds {max_size} bytes")
            out.write(chunk)
    return written


@router.get("/addons", response_model=InstalledAddonsResponse)
def list_addons(manager: PackManager = Depends(get_pack_manager)):
    """
    List installed behavior and resource pack directories.
    """
    installed = manager.list_installed()
    return InstalledAddonsResponse(
        behavior_packs=installed["behavior"],
        resource_packs=installed["resource"],
    )


@router.get(
    "/addons/active",
    response_model=ActiveAddonsResponse,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def list_active_addons(manager: PackManager = Depends(get_pack_manager)):
    """
    List the configured world's declared addons that are actually installed.

    Returns 404 when a world declaration file is missing.
    """
    try:
        active = manager.list_active()
    except DeclarationNotFoundError as e:
        logger.warning(f"Declaration file missing: {e}")
        return _error(404, "NOT_FOUND", str(e))
    except (FileNotFoundError, WorldPropertiesError) as e:
        logger.error(f"Error determining world folder: {e}")
        return _error(500, "WORLD_UNRESOLVED", "Error determining world folder")
    except DeclarationParseError as e:
        logger.error(f"Error reading active addons: {e}")
        return _error(500, "INVALID_DECLARATION", str(e))

    return ActiveAddonsResponse(
        active_behavior_addons=[a.to_dict() for a in active["behavior"]],
        active_resource_addons=[a.to_dict() for a in active["resource"]],
    )


@router.post(
    "/addons/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.upload_rate_limit)
def upload_addon(
    request: Request,  # noqa: ARG001 - required by slowapi limiter
    file: UploadFile = File(..., description="Add-on archive (.mcaddon, .mcpack or .zip)"),
    manager: PackManager = Depends(get_pack_manager),
):
    """
    Upload an add-on archive.

    Every pack inside is archived and installed; the response reports each
    pack's outcome. The request succeeds once the archive itself could be
    opened, even if individual packs failed.
    """
    upload_name = Path(file.filename or "upload.mcaddon").name

    with tempfile.TemporaryDirectory(prefix="upload-") as tmp_dir:
        upload_path = Path(tmp_dir) / "upload.mcaddon"
        try:
            size = _spool_upload(file, upload_path, settings.max_upload_size)
        except UploadTooLargeError as e:
            logger.warning(f"Rejected upload {upload_name}: {e}")
            return _error(413, "FILE_TOO_LARGE", "File too big")

        logger.info(f"Received upload {upload_name} ({size} bytes)")

        try:
            result = manager.ingest_upload(upload_path, upload_name=upload_name)
        except InvalidArchiveError as e:
            logger.warning(f"Invalid add-on upload {upload_name}: {e}")
            return _error(400, "INVALID_ARCHIVE", "Invalid mcaddon file")
        except PackWriteError as e:
            logger.error(f"Pack archive unavailable: {e}", exc_info=True)
            return _error(500, "ARCHIVE_UNAVAILABLE", "Pack archive is not writable")

    payload = result.to_dict()
    if not result.outcomes:
        message = "No packs found in upload"
    elif result.complete:
        message = "mcaddon processed and installed successfully"
    else:
        message = f"{payload['failed']} of {payload['total']} pack(s) failed to install"
    return UploadResponse(message=message, **payload)


