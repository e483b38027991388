"""
Object Storage Service for the Seva Backend

Service for storing uploaded media (banner and cover images, bhajan audio,
book PDFs) in an S3 compatible bucket and reading it back for streaming.

Features:
- Upload of Django UploadedFile objects into per-entity folders
- Unique object keys with the original extension preserved
- Public URLs for images, presigned URLs for private media
- Byte-range reads for audio and PDF streaming
- Deletion of replaced or removed objects

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import mimetypes
import os
import urllib.parse
import uuid
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from core.exceptions import StorageException, StorageObjectNotFound

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredFile:
    """Represents an object written to the bucket."""

    key: str
    url: str
    size: int
    content_type: str
    name: str


@dataclass
class ObjectRange:
    """A (possibly partial) object body ready to be streamed."""

    body: Iterator[bytes]
    start: int
    end: int
    total_size: int
    content_type: str
    partial: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start + 1


class RangeNotSatisfiable(StorageException):
    """Raised when a Range header points outside the object."""

    default_status_code = 416


def parse_range_header(header: Optional[str], total_size: int) -> Optional[Tuple[int, int]]:
    """
    Parse a single-range ``bytes=`` header into inclusive (start, end).

    Returns None when there is no usable header, in which case the whole
    object is served. Supports open ended ("bytes=500-") and suffix
    ("bytes=-500") ranges; multi-range requests are served whole.
    """
    if not header or not header.startswith("bytes=") or "," in header:
        return None
    start_text, _, end_text = header[len("bytes="):].strip().partition("-")
    try:
        if start_text == "":
            suffix = int(end_text)
            if suffix <= 0 or total_size == 0:
                raise RangeNotSatisfiable("Requested range not satisfiable", details={"total_size": total_size})
            return max(total_size - suffix, 0), total_size - 1
        start = int(start_text)
        end = int(end_text) if end_text else total_size - 1
    except ValueError:
        return None
    if start >= total_size or start > end:
        raise RangeNotSatisfiable("Requested range not satisfiable", details={"total_size": total_size})
    return start, min(end, total_size - 1)


class StorageService:
    """
    Service for S3 compatible object storage operations.

    Manages the connection to the media bucket. Object keys look like
    ``<folder>/<uuid><ext>`` so they never collide and never contain user
    supplied path segments.
    """

    def __init__(self):
        self.bucket = settings.STORAGE_BUCKET_NAME
        self.endpoint_url = settings.STORAGE_ENDPOINT_URL
        self.region = settings.STORAGE_REGION
        self.public_base_url = (settings.STORAGE_PUBLIC_BASE_URL or "").rstrip("/")
        self.client = self._initialize_client()

    def _initialize_client(self):
        """Creates the boto3 S3 client for the configured endpoint."""
        client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
            aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
            config=Config(s3={"addressing_style": "virtual"}),
        )
        logger.info("Object storage client initialised for bucket %s", self.bucket)
        return client

    def _normalize_key(self, key: str) -> str:
        """URL-decodes the key and strips leading slashes and a bucket prefix."""
        if not key:
            return key
        trimmed = urllib.parse.unquote(key).lstrip("/")
        bucket_prefix = f"{self.bucket}/"
        if trimmed.startswith(bucket_prefix):
            trimmed = trimmed[len(bucket_prefix):]
        return trimmed

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{urllib.parse.quote(key)}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{urllib.parse.quote(key)}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{urllib.parse.quote(key)}"

    def upload(self, uploaded_file, folder: str, public: bool = True) -> StoredFile:
        """
        Upload a file into ``folder``.

        Args:
            uploaded_file: Django UploadedFile from request.FILES
            folder: Logical folder, e.g. "banners" or "books/pdf"
            public: Whether the object gets a public-read ACL

        Returns:
            StoredFile describing the new object

        Raises:
            StorageException: If the bucket rejects the upload
        """
        _, ext = os.path.splitext(uploaded_file.name or "")
        key = f"{folder.strip('/')}/{uuid.uuid4().hex}{ext.lower()}"
        content_type = (
            getattr(uploaded_file, "content_type", None)
            or mimetypes.guess_type(uploaded_file.name or "")[0]
            or "application/octet-stream"
        )
        extra_args = {"ContentType": content_type}
        if public:
            extra_args["ACL"] = "public-read"

        try:
            uploaded_file.seek(0)
            self.client.upload_fileobj(
                uploaded_file, self.bucket, key, ExtraArgs=extra_args
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Upload of %s to %s failed: %s", uploaded_file.name, key, e)
            raise StorageException("File upload failed", key=key) from e

        logger.info("Uploaded %s as %s (%s bytes)", uploaded_file.name, key, uploaded_file.size)
        return StoredFile(
            key=key,
            url=self.public_url(key),
            size=uploaded_file.size,
            content_type=content_type,
            name=uploaded_file.name,
        )

    def delete(self, key: Optional[str]) -> None:
        """Delete an object. Missing keys are ignored, failures are logged."""
        if not key:
            return
        key = self._normalize_key(key)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
            logger.info("Deleted object %s", key)
        except (BotoCoreError, ClientError) as e:
            logger.warning("Could not delete object %s: %s", key, e)

    def head(self, key: str) -> dict:
        key = self._normalize_key(key)
        try:
            return self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("404", "NoSuchKey", "NotFound"):
                raise StorageObjectNotFound("File not found", key=key) from e
            raise StorageException("Could not read file metadata", key=key) from e

    def size(self, key: str) -> int:
        return int(self.head(key)["ContentLength"])

    def open_range(self, key: str, range_header: Optional[str] = None) -> ObjectRange:
        """
        Open an object, or the byte range named by an HTTP Range header, for streaming.

        Args:
            key: Object key
            range_header: Raw Range request header ("bytes=0-1023"), or None

        Returns:
            ObjectRange with a chunk iterator over the body

        Raises:
            StorageObjectNotFound: If the key does not exist
            RangeNotSatisfiable: If the range lies outside the object
        """
        key = self._normalize_key(key)
        meta = self.head(key)
        total_size = int(meta["ContentLength"])
        content_type = (
            mimetypes.guess_type(key)[0]
            or meta.get("ContentType")
            or "application/octet-stream"
        )

        params = {"Bucket": self.bucket, "Key": key}
        byte_range = parse_range_header(range_header, total_size)
        if byte_range is None:
            start, end = 0, total_size - 1
        else:
            start, end = byte_range
            params["Range"] = f"bytes={start}-{end}"

        try:
            response = self.client.get_object(**params)
        except (BotoCoreError, ClientError) as e:
            logger.error("Reading %s failed: %s", key, e)
            raise StorageException("Could not read file", key=key) from e

        return ObjectRange(
            body=response["Body"].iter_chunks(CHUNK_SIZE),
            start=start,
            end=end,
            total_size=total_size,
            content_type=content_type,
            partial=byte_range is not None,
        )

    def presigned_url(self, key: str, expires_seconds: int = 3600, filename: Optional[str] = None) -> str:
        """
        Generate a presigned GET URL for a private object.

        Args:
            key: Object key
            expires_seconds: Validity of the URL in seconds
            filename: When given, the URL forces an attachment download with this name
        """
        params = {"Bucket": self.bucket, "Key": self._normalize_key(key)}
        if filename:
            params["ResponseContentDisposition"] = f'attachment; filename="{filename}"'
        return self.client.generate_presigned_url(
            "get_object", Params=params, ExpiresIn=expires_seconds
        )


_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Return the process-wide storage service, created on first use."""
    global _service
    if _service is None:
        _service = StorageService()
    return _service
