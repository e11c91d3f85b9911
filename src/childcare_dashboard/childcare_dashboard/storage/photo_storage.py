"""Photo uploads for child profiles and messages.

Files land in ``<upload_root>/photos/public/<timestamp-ms>.<ext>`` and are
served from ``<public_base_url>/photos/public/<name>``.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..auth.model import AuthSession
from ..common.datetime_utils import now_local
from ..core.constants import ALLOWED_PHOTO_EXTENSIONS, PHOTOS_FOLDER, PHOTOS_PREFIX
from ..core.exceptions import AuthenticationError, StoreError, ValidationError

logger = logging.getLogger(__name__)


def photo_extension(filename: Optional[str]) -> str:
    name = secure_filename(filename or "")
    if "." not in name:
        raise ValidationError("Photo file name has no extension")
    ext = name.rsplit(".", 1)[1].lower()
    if ext not in ALLOWED_PHOTO_EXTENSIONS:
        allowed = ", ".join(ALLOWED_PHOTO_EXTENSIONS)
        raise ValidationError(f"Photo must be one of: {allowed}")
    return ext


class LocalPhotoStorage:
    def __init__(self, upload_root: str, public_base_url: str = ""):
        self._root = upload_root
        self._base_url = public_base_url.rstrip("/")

    def _verify_image(self, file: FileStorage) -> None:
        try:
            with Image.open(file.stream) as img:
                img.verify()
        except (UnidentifiedImageError, OSError):
            raise ValidationError("Uploaded file is not a valid image")
        finally:
            file.stream.seek(0)

    def upload(self, file: Optional[FileStorage], auth_session: Optional[AuthSession], *, now: Optional[datetime] = None) -> str:
        """Store an uploaded photo and return its public URL."""
        if auth_session is None:
            raise AuthenticationError("An active session is required to upload photos")
        if file is None or not file.filename:
            raise ValidationError("No photo provided")

        ext = photo_extension(file.filename)
        self._verify_image(file)

        stamp = int((now or now_local()).timestamp() * 1000)
        name = f"{stamp}.{ext}"
        relative = f"{PHOTOS_PREFIX}/{PHOTOS_FOLDER}/{name}"
        folder = os.path.join(self._root, PHOTOS_PREFIX, PHOTOS_FOLDER)
        try:
            os.makedirs(folder, exist_ok=True)
            file.save(os.path.join(folder, name))
        except OSError as e:
            logger.error("photo upload failed for %s: %s", relative, e)
            raise StoreError("photos.upload", e) from e

        logger.info("photo uploaded by account=%s: %s", auth_session.account_id, relative)
        return f"{self._base_url}/{relative}"

    def discard(self, url: str) -> None:
        """Remove a photo stored by ``upload`` whose record could not be saved."""
        name = secure_filename(url.rsplit("/", 1)[-1])
        if not name:
            return
        path = os.path.join(self._root, PHOTOS_PREFIX, PHOTOS_FOLDER, name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("could not discard photo %s: %s", name, e)
            return
        logger.info("photo discarded: %s/%s/%s", PHOTOS_PREFIX, PHOTOS_FOLDER, name)
