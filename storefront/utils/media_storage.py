"""
Product image storage on Cloudflare R2.
Uploads decoded image bytes under a folder tag and deletes them by key.
"""

import logging
import mimetypes
import uuid
from dataclasses import dataclass

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import (
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_PUBLIC_URL,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)


class MediaStorageError(Exception):
    """Raised when the media host rejects an upload or delete"""


@dataclass(frozen=True)
class StoredImage:
    """Remote reference returned by the media host"""

    remote_id: str  # Object key, used for deletion
    url: str  # Public URL

    def as_dict(self) -> dict:
        return {"remote_id": self.remote_id, "url": self.url}


def get_r2_client():
    """Get configured boto3 client for Cloudflare R2"""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
        region_name="auto",
    )


class R2MediaStorage:
    """Media host backed by an R2 bucket with a public domain"""

    def __init__(self, client=None, bucket: str = R2_BUCKET_NAME, public_url: str = R2_PUBLIC_URL):
        self.client = client or get_r2_client()
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")

    def public_url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        return f"https://{self.bucket}.{R2_ACCOUNT_ID}.r2.cloudflarestorage.com/{key}"

    def upload(self, content: bytes, content_type: str, folder: str) -> StoredImage:
        """Store one image and return its key and public URL"""
        ext = (mimetypes.guess_extension(content_type) or ".bin").lstrip(".")
        key = f"{folder}/{uuid.uuid4()}.{ext}"

        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
                CacheControl="public, max-age=31536000",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Upload of {key} failed: {e}")
            raise MediaStorageError(f"Upload failed: {e}") from e

        logger.info(f"✅ Uploaded image {key} ({len(content)} bytes)")
        return StoredImage(remote_id=key, url=self.public_url_for(key))

    def delete(self, remote_id: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=remote_id)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Delete of {remote_id} failed: {e}")
            raise MediaStorageError(f"Delete failed: {e}") from e

        logger.info(f"🗑️ Deleted image {remote_id}")


def get_media_storage() -> R2MediaStorage:
    """Dependency injection for the media host"""
    return R2MediaStorage()
