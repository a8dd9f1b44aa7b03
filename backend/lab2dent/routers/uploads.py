"""Production photo storage and serving (authenticated)."""

from __future__ import annotations

import logging
import mimetypes
import re
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, UploadFile
from fastapi.responses import FileResponse

from ..auth import get_current_user
from ..config import Settings
from ..dependencies import get_app_settings
from ..models import User

router = APIRouter(prefix="/attachments", tags=["attachments"])
logger = logging.getLogger(__name__)

_SAFE_FILENAME_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\.[A-Za-z0-9]{1,16}$"
)
_CHUNK_SIZE = 1024 * 1024  # 1MB
SERVE_PREFIX = "/api/v1/attachments/serve/"


def upload_dir(settings: Settings) -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _sanitize_filename(filename: str, settings: Settings) -> str:
    if not filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    # Reject traversal and path separators regardless of OS.
    if "/" in filename or "\\" in filename or ".." in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    if Path(filename).name != filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    if not _SAFE_FILENAME_RE.match(filename):
        raise HTTPException(status_code=400, detail="Invalid filename")

    ext = filename.rsplit(".", 1)[-1].lower()
    if ext not in settings.allowed_extensions_list:
        raise HTTPException(status_code=400, detail="Invalid filename")

    return filename


def _validate_upload(file: UploadFile, settings: Settings) -> str:
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename is required")

    if "." not in file.filename:
        raise HTTPException(status_code=400, detail="File extension is required")

    ext = file.filename.rsplit(".", 1)[-1].lower()
    if ext not in settings.allowed_extensions_list:
        raise HTTPException(
            status_code=400,
            detail=f"File type not allowed. Allowed: {settings.ALLOWED_EXTENSIONS}",
        )
    return ext


async def _stream_save_upload(*, file: UploadFile, dest_path: Path, max_size: int) -> int:
    """Stream UploadFile to disk with a hard size limit."""
    size = 0
    try:
        with dest_path.open("xb") as out:
            while True:
                chunk = await file.read(_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_size:
                    raise HTTPException(
                        status_code=400,
                        detail=f"File too large. Max size: {max_size} bytes",
                    )
                out.write(chunk)
    except HTTPException:
        dest_path.unlink(missing_ok=True)
        raise
    except FileExistsError:
        raise HTTPException(status_code=409, detail="File collision, try again")
    except OSError:
        dest_path.unlink(missing_ok=True)
        logger.exception("Failed to save upload")
        raise HTTPException(status_code=500, detail="Failed to save file")
    finally:
        await file.close()
    return size


async def save_photo(file: UploadFile, settings: Settings) -> str:
    """Store an uploaded photo under a fresh UUID name and return its serve URL."""
    ext = _validate_upload(file, settings)
    filename = f"{uuid.uuid4()}.{ext}"
    size = await _stream_save_upload(
        file=file,
        dest_path=upload_dir(settings) / filename,
        max_size=settings.MAX_UPLOAD_SIZE,
    )
    logger.info("attachments.saved filename=%s size=%s", filename, size)
    return f"{SERVE_PREFIX}{filename}"


@router.get("/serve/{filename}")
def serve_file(
    filename: str,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
):
    """Serve a stored production photo to any signed-in user."""
    filename = _sanitize_filename(filename, settings)

    file_path = upload_dir(settings) / filename
    if not file_path.exists() or not file_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")

    mime, _ = mimetypes.guess_type(str(file_path))
    return FileResponse(
        path=str(file_path),
        media_type=mime or "application/octet-stream",
        headers={"Cache-Control": "private, max-age=3600, must-revalidate"},
    )
