"""
Object storage for uploaded images (S3 compatible, via boto3)
"""
import logging
import mimetypes
import uuid
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from fashion_api.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

# Transformation options understood by the image CDN in front of the bucket
_TRANSFORM_KEYS = {
    "width": "w",
    "height": "h",
    "crop": "fit",
    "quality": "q",
    "fetch_format": "fm",
    "gravity": "crop",
}


class ImageStorage:
    def __init__(self, settings, client=None):
        self.settings = settings
        self._client = client

    @property
    def enabled(self) -> bool:
        return self.settings.USE_OBJECT_STORAGE and (
            self._client is not None or self.settings.storage_configured
        )

    @property
    def client(self):
        """S3 client, created from settings on first use"""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                aws_access_key_id=self.settings.S3_ACCESS_KEY_ID,
                aws_secret_access_key=self.settings.S3_SECRET_ACCESS_KEY,
                region_name=self.settings.S3_REGION,
                endpoint_url=self.settings.S3_ENDPOINT_URL or None,
            )
            logger.info("S3 client initialized successfully")
        return self._client

    def public_url(self, key: str) -> str:
        base = self.settings.STORAGE_PUBLIC_URL
        if base:
            return f"{base.rstrip('/')}/{key}"
        bucket = self.settings.S3_BUCKET_NAME
        return f"https://{bucket}.s3.{self.settings.S3_REGION}.amazonaws.com/{key}"

    def _put(self, key: str, content: bytes, content_type: str, tags: Optional[List[str]]) -> None:
        extra: Dict[str, Any] = {"ContentType": content_type}
        if tags:
            extra["Metadata"] = {"tags": ",".join(tags)}
        self.client.put_object(
            Bucket=self.settings.S3_BUCKET_NAME, Key=key, Body=content, **extra
        )

    async def upload_image(
        self,
        content: bytes,
        content_type: str,
        folder: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Upload an image buffer.

        Returns:
            Dict with 'url', 'public_id', 'uploaded', 'format' and 'bytes'
        Raises:
            ExternalServiceError: if storage is not configured or the upload fails
        """
        if not self.enabled:
            raise ExternalServiceError(
                "Image storage not configured. Set S3_BUCKET_NAME, S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY"
            )

        extension = mimetypes.guess_extension(content_type) or ""
        key = f"{folder or self.settings.STORAGE_FOLDER}/{uuid.uuid4()}{extension}"
        try:
            await run_in_threadpool(self._put, key, content, content_type, tags)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload error: {e}")
            raise ExternalServiceError("Image upload failed", error=str(e))

        url = self.public_url(key)
        logger.info(f"Image uploaded to storage: {url}")
        return {
            "url": url,
            "public_id": key,
            "uploaded": True,
            "format": extension.lstrip(".") or None,
            "bytes": len(content),
        }

    async def download_image(self, public_id: str) -> bytes:
        """Fetch a stored image's bytes.

        Raises:
            ExternalServiceError: if storage is not configured or the download fails
        """
        if not self.enabled:
            raise ExternalServiceError("Image storage not configured")

        def _get() -> bytes:
            obj = self.client.get_object(Bucket=self.settings.S3_BUCKET_NAME, Key=public_id)
            return obj["Body"].read()

        try:
            return await run_in_threadpool(_get)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 download error for {public_id}: {e}")
            raise ExternalServiceError("Image download failed", error=str(e))

    async def delete_image(self, public_id: str) -> bool:
        """Delete an image by key. Failures are logged, not raised."""
        if not self.enabled or not public_id:
            return False
        try:
            await run_in_threadpool(
                self.client.delete_object, Bucket=self.settings.S3_BUCKET_NAME, Key=public_id
            )
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Failed to delete image {public_id} from storage: {e}")
            return False

    def build_url(self, public_id: str, **options) -> str:
        """Build an image URL with on-the-fly transformations.

        Example:
            build_url('items/shoe.jpg', width=300, height=300, crop='fill')
        """
        params = {
            _TRANSFORM_KEYS.get(name, name): value
            for name, value in options.items()
            if value is not None
        }
        url = self.public_url(public_id)
        return f"{url}?{urlencode(params)}" if params else url

    def thumbnail_url(self, public_id: str, size: int = 300) -> str:
        return self.build_url(public_id, width=size, height=size, crop="fill", quality="auto")

    def status(self) -> Dict[str, Any]:
        """Get storage configuration status"""
        return {
            "enabled": self.settings.USE_OBJECT_STORAGE,
            "configured": self.enabled,
            "bucket": self.settings.S3_BUCKET_NAME if self.settings.storage_configured else None,
            "folder": self.settings.STORAGE_FOLDER,
        }
