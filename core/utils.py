"""
Small helpers shared by the content and commerce apps.
"""

import json
import math
from typing import Any, Optional, Tuple

from django.db.models import QuerySet
from django.utils.text import slugify
from rest_framework import serializers
from rest_framework.response import Response


def unique_slug(model: type, text: str, instance_pk: Optional[int] = None, field: str = "slug") -> str:
    """
    Slugify ``text`` and append ``-1``, ``-2``, ... until no other row uses it.

    ``instance_pk`` excludes the row being updated, so re-saving an unchanged
    title keeps its slug.
    """
    base = slugify(text) or model._meta.model_name
    candidate = base
    counter = 0
    queryset = model._default_manager.all()
    if instance_pk is not None:
        queryset = queryset.exclude(pk=instance_pk)
    while queryset.filter(**{field: candidate}).exists():
        counter += 1
        candidate = f"{base}-{counter}"
    return candidate


def parse_positive_int(value: Any, default: int, maximum: Optional[int] = None) -> int:
    """Parse a query parameter as a positive integer, falling back to ``default``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


def paginate(queryset: QuerySet, page: int, limit: int) -> Tuple[QuerySet, int, int]:
    """
    Slice ``queryset`` for a 1-based ``page``.

    Returns:
        (page slice, total row count, total pages)
    """
    total = queryset.count()
    total_pages = math.ceil(total / limit) if total else 0
    offset = (page - 1) * limit
    return queryset[offset:offset + limit], total, total_pages


def parse_json_field(value: Any, field_name: str, default: Any = None) -> Any:
    """
    Accept a JSON value sent either natively (JSON body) or as a string
    (multipart form field).

    Raises:
        serializers.ValidationError: If a string value is not valid JSON
    """
    if value is None or value == "":
        return default
    if isinstance(value, (list, dict)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        raise serializers.ValidationError({field_name: "Invalid JSON"})


def as_bool(value: Any) -> Optional[bool]:
    """Interpret ``"true"``/``"false"`` style request values; None when absent."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")


def missing_fields(data: Any, *names: str) -> list:
    """Names of ``data`` entries that are absent or blank."""
    missing = []
    for name in names:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def error_response(message: str, status_code: int = 400, **extra):
    """Standard ``{"success": false, "message": ...}`` error response."""
    return Response({"success": False, "message": message, **extra}, status=status_code)


def first_error(errors: Any) -> str:
    """First message of a DRF ``serializer.errors`` structure."""
    while isinstance(errors, (dict, list)) and errors:
        errors = next(iter(errors.values())) if isinstance(errors, dict) else errors[0]
    return str(errors) if errors else "Invalid data"
