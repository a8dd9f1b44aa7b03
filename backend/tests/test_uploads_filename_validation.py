from __future__ import annotations

import asyncio
import io

import pytest
from fastapi import HTTPException, UploadFile

from lab2dent.config import Settings
from lab2dent.routers.uploads import SERVE_PREFIX, _sanitize_filename, _validate_upload, save_photo

SETTINGS = Settings()


def test_sanitize_filename_accepts_uuid_filename_with_extension() -> None:
    filename = "35bf5afa-184f-495e-8a0d-7257fe204aa0.png"
    assert _sanitize_filename(filename, SETTINGS) == filename


@pytest.mark.parametrize(
    "filename",
    [
        "../35bf5afa-184f-495e-8a0d-7257fe204aa0.png",
        "nested/35bf5afa-184f-495e-8a0d-7257fe204aa0.png",
        "35bf5afa-184f-495e-8a0d-7257fe204aa0.exe",
        "crown.png",
        "",
    ],
)
def test_sanitize_filename_rejects_unsafe_names(filename: str) -> None:
    with pytest.raises(HTTPException) as exc_info:
        _sanitize_filename(filename, SETTINGS)

    assert exc_info.value.status_code == 400


def test_validate_upload_checks_extension_allow_list() -> None:
    assert _validate_upload(UploadFile(file=io.BytesIO(b""), filename="Crown.JPG"), SETTINGS) == "jpg"

    with pytest.raises(HTTPException, match="File type not allowed"):
        _validate_upload(UploadFile(file=io.BytesIO(b""), filename="notes.pdf"), SETTINGS)

    with pytest.raises(HTTPException, match="File extension is required"):
        _validate_upload(UploadFile(file=io.BytesIO(b""), filename="photo"), SETTINGS)


def test_save_photo_writes_uuid_named_file(tmp_path) -> None:
    settings = Settings(UPLOAD_DIR=str(tmp_path))
    upload = UploadFile(file=io.BytesIO(b"\xff\xd8jpeg-bytes"), filename="stage.jpeg")

    url = asyncio.run(save_photo(upload, settings))

    assert url.startswith(SERVE_PREFIX)
    filename = url[len(SERVE_PREFIX):]
    assert _sanitize_filename(filename, settings) == filename
    assert (tmp_path / filename).read_bytes() == b"\xff\xd8jpeg-bytes"


def test_save_photo_rejects_oversized_file_and_cleans_up(tmp_path) -> None:
    settings = Settings(UPLOAD_DIR=str(tmp_path), MAX_UPLOAD_SIZE=4)
    upload = UploadFile(file=io.BytesIO(b"0123456789"), filename="big.png")

    with pytest.raises(HTTPException, match="File too large"):
        asyncio.run(save_photo(upload, settings))

    assert list(tmp_path.iterdir()) == []
