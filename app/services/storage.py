"""
Object storage for proof-of-display images (S3 or any S3-compatible endpoint).
"""
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import BinaryIO, Optional

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.errors import InternalError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class StoredObject:
    url: str
    key: str


def build_key(prefix: str, filename: Optional[str], content_type: str) -> str:
    ext = ALLOWED_IMAGE_TYPES.get(content_type) or mimetypes.guess_extension(content_type or "") or ""
    stem = (filename or "upload").rsplit(".", 1)[0][:40] or "upload"
    return f"{prefix}/{stem}-{uuid.uuid4().hex}{ext}"


class S3Storage:
    def __init__(self):
        self.client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url or None,
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
            region_name=settings.aws_region,
            config=BotoConfig(signature_version="s3v4"),
        )
        self.bucket_name = settings.s3_bucket_name
        self.public_base = settings.s3_public_base_url.rstrip("/")

    def public_url(self, key: str) -> str:
        if self.public_base:
            return f"{self.public_base}/{key}"
        return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"

    def upload(self, fileobj: BinaryIO, key: str, content_type: str) -> StoredObject:
        try:
            self.client.upload_fileobj(
                fileobj,
                self.bucket_name,
                key,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed for key=%s: %s", key, e)
            raise InternalError(f"Upload failed: {e}")
        logger.info("Uploaded %s to bucket %s", key, self.bucket_name)
        return StoredObject(url=self.public_url(key), key=key)

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.warning("S3 delete failed for key=%s: %s", key, e)


@lru_cache
def get_storage() -> S3Storage:
    return S3Storage()
