"""
Helpers for the API test suites: accounts with a given role, cookie
authentication for the Django test client and an in-memory stand-in for
the object storage service.
"""

import itertools
import os
from typing import Dict, Optional
from unittest import mock

from django.contrib.auth.models import User
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import Role
from backend.custom_auth import ACCESS_COOKIE

from .exceptions import StorageObjectNotFound
from .storage import ObjectRange, StoredFile, parse_range_header

DEFAULT_PASSWORD = "Gau-Seva-2024!"


def create_account(
    email: str,
    role: str = Role.USER,
    name: str = "",
    phone: str = "9876543210",
    password: str = DEFAULT_PASSWORD,
    verified: bool = True,
) -> User:
    user = User.objects.create_user(username=email, email=email, password=password)
    profile = user.profile
    profile.role = role
    profile.name = name or email.split("@")[0]
    profile.phone = phone
    profile.is_verified = verified
    profile.save()
    return user


def authenticate(client, user: User) -> None:
    """Put a fresh access token for ``user`` into the client's cookie jar."""
    client.cookies[ACCESS_COOKIE] = str(AccessToken.for_user(user))


class InMemoryStorage:
    """
    Drop-in replacement for StorageService used with ``mock.patch``.

    Uploaded files are kept in ``objects`` keyed by object key; deleted
    keys are recorded in ``deleted``.
    """

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.deleted = []
        self._counter = itertools.count(1)

    def upload(self, uploaded_file, folder: str, public: bool = True) -> StoredFile:
        _, ext = os.path.splitext(uploaded_file.name or "")
        key = f"{folder.strip('/')}/file{next(self._counter)}{ext.lower()}"
        uploaded_file.seek(0)
        self.objects[key] = uploaded_file.read()
        return StoredFile(
            key=key,
            url=f"https://cdn.example.org/{key}",
            size=uploaded_file.size,
            content_type=getattr(uploaded_file, "content_type", "") or "application/octet-stream",
            name=uploaded_file.name,
        )

    def delete(self, key: Optional[str]) -> None:
        if key:
            self.deleted.append(key)
            self.objects.pop(key, None)

    def size(self, key: str) -> int:
        if key not in self.objects:
            raise StorageObjectNotFound("File not found", key=key)
        return len(self.objects[key])

    def open_range(self, key: str, range_header: Optional[str] = None) -> ObjectRange:
        if key not in self.objects:
            raise StorageObjectNotFound("File not found", key=key)
        body = self.objects[key]
        byte_range = parse_range_header(range_header, len(body))
        start, end = byte_range if byte_range else (0, len(body) - 1)
        content_type = "application/pdf" if key.endswith(".pdf") else "audio/mpeg"
        return ObjectRange(
            body=iter([body[start:end + 1]]),
            start=start,
            end=end,
            total_size=len(body),
            content_type=content_type,
            partial=byte_range is not None,
        )

    def presigned_url(self, key: str, expires_seconds: int = 3600, filename: Optional[str] = None) -> str:
        return f"https://cdn.example.org/{key}?expires={expires_seconds}"


def patch_storage(target: str, storage: Optional[InMemoryStorage] = None):
    """
    Patch ``get_storage_service`` at ``target`` (the module that imported
    it) to return ``storage``.
    """
    return mock.patch(f"{target}.get_storage_service", return_value=storage or InMemoryStorage())


def patch_phonepe(client=None):
    """
    Replace the process-wide PhonePe client with ``client`` (a
    ``mock.Mock`` by default) for every caller of ``get_phonepe_client``.
    """
    return mock.patch("core.phonepe.client._client", client or mock.Mock())
