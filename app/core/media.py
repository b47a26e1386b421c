# ============================================================================
# FILE: app/core/media.py
# Staging of uploaded files and upload to the remote media store
# ============================================================================
from typing import Dict, Optional
from fastapi import UploadFile
from app.config import settings
import httpx
import logging
import os
import shutil
import uuid

logger = logging.getLogger(__name__)


def discard_staged(*paths: Optional[str]) -> None:
    """Remove staged local files, ignoring ones already gone"""
    for path in paths:
        if not path:
            continue
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove staged file {path}: {e}")


def stage_upload(upload: Optional[UploadFile], directory: str = None) -> Optional[str]:
    """Write an incoming multipart file to local temp storage and return its path"""
    if upload is None or not upload.filename:
        return None

    directory = directory or settings.TEMP_UPLOAD_DIR
    os.makedirs(directory, exist_ok=True)
    _, ext = os.path.splitext(upload.filename)
    path = os.path.join(directory, f"{uuid.uuid4().hex}{ext}")

    with open(path, "wb") as f:
        shutil.copyfileobj(upload.file, f)
    return path


class MediaUploader:
    """
    Uploads staged files to a Cloudinary-style upload endpoint
    The staged local file is always removed afterwards
    """

    def __init__(self, upload_url: str = None, upload_preset: str = None,
                 api_key: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.upload_url = upload_url if upload_url is not None else settings.MEDIA_UPLOAD_URL
        self.upload_preset = upload_preset if upload_preset is not None else settings.MEDIA_UPLOAD_PRESET
        self.api_key = api_key if api_key is not None else settings.MEDIA_UPLOAD_API_KEY
        self.timeout = timeout or settings.MEDIA_UPLOAD_TIMEOUT_SECONDS
        self.transport = transport

    async def upload(self, local_path: Optional[str]) -> Optional[Dict]:
        """
        Upload a staged file

        Args:
            local_path: Path of the staged file

        Returns:
            Dict with at least 'url', or None if the upload failed
        """
        if not local_path:
            return None
        if not self.upload_url:
            logger.error("Media upload URL not configured")
            discard_staged(local_path)
            return None

        data = {}
        if self.upload_preset:
            data["upload_preset"] = self.upload_preset
        if self.api_key:
            data["api_key"] = self.api_key

        try:
            with open(local_path, "rb") as f:
                content = f.read()
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.upload_url,
                    data=data,
                    files={"file": (os.path.basename(local_path), content)},
                )
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.error(f"Media upload failed for {local_path}: {e}")
            return None
        finally:
            discard_staged(local_path)

        url = body.get("secure_url") or body.get("url")
        if not url:
            logger.error(f"Media upload response had no url: {body}")
            return None

        logger.info(f"Media uploaded: {url}")
        return {"url": url, "public_id": body.get("public_id")}


# Create singleton instance
media_uploader = MediaUploader()
