"""Storage for uploaded images and documents.

Files land in ``config.UPLOAD_DIR`` and are served back under ``/uploads``.
When Cloudinary credentials are configured the file is pushed to Cloudinary
instead and its secure URL is stored on the record.
"""
import logging
import os
import time
import uuid

import cloudinary
import cloudinary.uploader
from fastapi import HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

import config

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"
IMAGE_TYPES = ("image/",)
DOCUMENT_TYPES = ("image/", "application/pdf")


def cloudinary_enabled() -> bool:
    return bool(
        config.CLOUDINARY_CLOUD_NAME and config.CLOUDINARY_API_KEY and config.CLOUDINARY_API_SECRET
    )


def ensure_upload_dir():
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)


def _check_content_type(upload: UploadFile, allowed_types):
    content_type = upload.content_type or ""
    if not any(content_type.startswith(allowed) for allowed in allowed_types):
        if allowed_types == IMAGE_TYPES:
            raise HTTPException(status_code=400, detail="Only image files are allowed")
        raise HTTPException(status_code=400, detail="Only image and PDF files are allowed")


def _unique_name(field_name: str, original_name: str) -> str:
    extension = os.path.splitext(original_name or "")[1].lower()
    suffix = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
    return f"{field_name}-{suffix}{extension}"


async def save_upload(upload: UploadFile, field_name: str, allowed_types=IMAGE_TYPES) -> str:
    """Validate and store ``upload``; returns the path or URL to keep on the record."""
    _check_content_type(upload, allowed_types)
    data = await upload.read()
    if len(data) > config.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=413, detail="File too large")
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if cloudinary_enabled():
        cloudinary.config(
            cloud_name=config.CLOUDINARY_CLOUD_NAME,
            api_key=config.CLOUDINARY_API_KEY,
            api_secret=config.CLOUDINARY_API_SECRET,
        )
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload, data, folder="tabibiq", resource_type="auto"
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed: {str(e)}")
            raise HTTPException(status_code=502, detail="Failed to upload file")
        return result["secure_url"]

    ensure_upload_dir()
    filename = _unique_name(field_name, upload.filename)
    with open(os.path.join(config.UPLOAD_DIR, filename), "wb") as f:
        f.write(data)
    logger.info(f"Stored upload {filename} ({len(data)} bytes)")
    return UPLOAD_URL_PREFIX + filename


def delete_upload(path: str):
    """Remove a locally stored upload; remote URLs are left alone."""
    if not path or not path.startswith(UPLOAD_URL_PREFIX):
        return
    filename = os.path.basename(path)
    try:
        os.remove(os.path.join(config.UPLOAD_DIR, filename))
    except FileNotFoundError:
        logger.warning(f"Upload already missing: {filename}")
    except OSError as e:
        logger.error(f"Failed to remove upload {filename}: {str(e)}")
