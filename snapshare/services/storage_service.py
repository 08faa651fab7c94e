# snapshare/services/storage_service.py
import uuid
import logging
from dataclasses import dataclass
from typing import Optional
from flask import Flask
from firebase_admin import storage
from werkzeug.utils import secure_filename

from snapshare.core.exceptions import ObjectStoreError


@dataclass(frozen=True)
class StoredImage:
    url: str
    public_id: str


class StorageService:
    """
    Image storage on a Firebase Storage bucket.

    `upload` returns the public URL together with the blob path (the
    `public_id` saved on users and posts); `delete` takes that path back.
    Both raise ObjectStoreError so callers decide whether a failure is fatal.
    """

    def __init__(self, bucket=None):
        self.bucket = bucket

    def init_app(self, app: Flask):
        """
        Called once from create_app() to bind the bucket when none was injected.

        :param app: Flask application object
        """
        if self.bucket is not None:
            return
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET must be configured in the environment or .env file.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage bucket initialized.")

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService is not initialized. Call init_app first.")
        return self.bucket

    def upload(self, data: bytes, filename: str, content_type: Optional[str], folder: str) -> StoredImage:
        """
        Uploads image bytes under `folder/` with a random name and makes the blob public.

        :param data: raw file content
        :param filename: client-side name, only used for its extension
        :param content_type: MIME type sent by the client (e.g. "image/jpeg")
        :param folder: destination prefix, e.g. "avatars" or "posts/<user_id>"
        """
        bucket = self._require_bucket()
        safe_name = secure_filename(filename or '')
        extension = safe_name.rsplit('.', 1)[-1].lower() if '.' in safe_name else ''
        unique_name = f"{uuid.uuid4()}.{extension}" if extension else str(uuid.uuid4())
        blob_path = f"{folder}/{unique_name}"

        try:
            blob = bucket.blob(blob_path)
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
            logging.info(f"Storage upload complete: {blob_path}")
            return StoredImage(url=blob.public_url, public_id=blob_path)
        except Exception as e:
            logging.error(f"Storage upload failed ({blob_path}): {e}", exc_info=True)
            raise ObjectStoreError("Image upload failed") from e

    def delete(self, public_id: str) -> None:
        """Removes a blob previously returned by `upload`."""
        bucket = self._require_bucket()
        try:
            bucket.blob(public_id).delete()
            logging.info(f"Storage delete complete: {public_id}")
        except Exception as e:
            raise ObjectStoreError(f"Image deletion failed: {public_id}") from e
