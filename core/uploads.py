"""
Upload validation for multipart media fields.

Mirrors the accepted media families of the site: images for banners,
covers and portraits, audio for bhajans and PDF for books.
"""

import os
from typing import Optional

from django.conf import settings
from rest_framework import serializers

IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
AUDIO_EXTENSIONS = {".mp3", ".wav", ".mpeg"}
PDF_EXTENSIONS = {".pdf"}

IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
AUDIO_TYPES = {"audio/mpeg", "audio/mp3", "audio/wav", "audio/x-wav", "audio/wave"}
PDF_TYPES = {"application/pdf"}

_KINDS = {
    "image": (IMAGE_EXTENSIONS, IMAGE_TYPES, "Only image files are allowed (jpeg, jpg, png, gif, webp)"),
    "audio": (AUDIO_EXTENSIONS, AUDIO_TYPES, "Only audio files are allowed (mp3, wav, mpeg)"),
    "pdf": (PDF_EXTENSIONS, PDF_TYPES, "Only PDF files are allowed"),
}


def validate_upload(uploaded_file, kind: str, max_size: Optional[int] = None):
    """
    Validate extension, declared content type and size of an uploaded file.

    Raises:
        serializers.ValidationError: With a message suitable for the client
    """
    extensions, content_types, message = _KINDS[kind]
    _, ext = os.path.splitext(uploaded_file.name or "")
    content_type = (getattr(uploaded_file, "content_type", "") or "").lower()

    if ext.lower() not in extensions or (content_type and content_type not in content_types):
        raise serializers.ValidationError(message)

    limit = max_size or settings.UPLOAD_MAX_SIZE
    if uploaded_file.size > limit:
        raise serializers.ValidationError(
            f"File too large. Maximum size is {limit // (1024 * 1024)} MB"
        )
    return uploaded_file


class MediaFileField(serializers.FileField):
    """FileField that validates the media family and size on input."""

    def __init__(self, kind: str, max_size: Optional[int] = None, **kwargs):
        self.kind = kind
        self.max_size = max_size
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        uploaded_file = super().to_internal_value(data)
        return validate_upload(uploaded_file, self.kind, self.max_size)


def format_file_size(size_in_bytes: int) -> str:
    """Human readable size in megabytes, e.g. ``"2.35 MB"``."""
    return f"{size_in_bytes / (1024 * 1024):.2f} MB"
