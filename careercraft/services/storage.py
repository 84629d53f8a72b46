"""
Resume storage.

Two backends, chosen by settings.storage_backend:
- "s3": any S3-compatible object store (AWS, Cloudflare R2, MinIO) via boto3
- "local": files under settings.local_upload_dir, served by the app at /uploads

Keys look like resumes/<user id>/<random hex><ext>. Failures raise
StorageError; there is no fallback from one backend to the other.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from careercraft.core.config import Settings, get_settings
from careercraft.core.exceptions import StorageError

logger = logging.getLogger(__name__)

PRESIGNED_URL_EXPIRES = 7 * 24 * 3600  # s3v4 maximum


def _get_s3_client(settings: Settings):
    """
    Return a boto3 S3 client. endpoint_url is only passed for non-AWS
    providers (R2, MinIO).
    """
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint or None,
        aws_access_key_id=settings.s3_access_key or None,
        aws_secret_access_key=settings.s3_secret_key or None,
        config=Config(signature_version="s3v4"),
        region_name=settings.s3_region or None,
    )


class ResumeStorage:
    def __init__(self, settings: Optional[Settings] = None, s3_client=None):
        self.settings = settings or get_settings()
        self.backend = self.settings.storage_backend.lower()
        if self.backend == "s3":
            if not self.settings.s3_bucket:
                raise StorageError("S3 storage selected but S3_BUCKET is not configured.")
            self.s3 = s3_client or _get_s3_client(self.settings)
        else:
            self.s3 = None
            self.local_dir = Path(self.settings.local_upload_dir)

    @staticmethod
    def make_key(owner_id: str, filename: str) -> str:
        ext = Path(filename).suffix.lower()
        return f"resumes/{owner_id}/{uuid.uuid4().hex}{ext}"

    def url_for(self, key: str) -> str:
        if self.backend != "s3":
            return f"{self.settings.public_base_url.rstrip('/')}/uploads/{key}"
        if self.settings.s3_public_base_url:
            return f"{self.settings.s3_public_base_url.rstrip('/')}/{key}"
        try:
            return self.s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.settings.s3_bucket, "Key": key},
                ExpiresIn=PRESIGNED_URL_EXPIRES,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Presigned URL generation failed for %s: %r", key, e)
            raise StorageError("Could not generate a link for the uploaded file.")

    def upload(self, owner_id: str, filename: str, content: bytes, content_type: str) -> Tuple[str, str]:
        """Store the file and return (key, public_url)."""
        key = self.make_key(owner_id, filename)

        if self.backend == "s3":
            try:
                self.s3.put_object(
                    Bucket=self.settings.s3_bucket, Key=key, Body=content, ContentType=content_type,
                )
            except (BotoCoreError, ClientError) as e:
                logger.error("S3 upload failed for %s: %r", key, e)
                raise StorageError()
        else:
            path = self.local_dir / key
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(content)
            except OSError as e:
                logger.error("Local upload failed for %s: %r", path, e)
                raise StorageError()

        logger.info("Stored resume %s (%d bytes)", key, len(content))
        return key, self.url_for(key)

    def download(self, key: str) -> bytes:
        if self.backend == "s3":
            try:
                resp = self.s3.get_object(Bucket=self.settings.s3_bucket, Key=key)
                return resp["Body"].read()
            except (BotoCoreError, ClientError) as e:
                logger.error("S3 download failed for %s: %r", key, e)
                raise StorageError("Could not read the stored file.")

        path = self.local_dir / key
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error("Local download failed for %s: %r", path, e)
            raise StorageError("Could not read the stored file.")


_storage: ResumeStorage = None


def get_resume_storage() -> ResumeStorage:
    """Get or create the resume storage (singleton). Also a FastAPI dependency."""
    global _storage
    if _storage is None:
        _storage = ResumeStorage()
    return _storage
