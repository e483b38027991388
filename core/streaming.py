"""
HTTP helpers for streaming stored media (audio, PDFs) with Range support.
"""

import re
import urllib.parse
from typing import Optional

from django.http import StreamingHttpResponse

from .storage import ObjectRange

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_\-. ]")

NO_CACHE_HEADERS = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def sanitize_filename(raw_name: Optional[str], default: str = "file") -> str:
    """Replace everything but letters, digits, ``_-.`` and spaces with ``_``."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", raw_name or "").strip()
    return cleaned or default


def ranged_response(
    obj: ObjectRange,
    content_type: Optional[str] = None,
    disposition: Optional[str] = None,
    extra_headers: Optional[dict] = None,
) -> StreamingHttpResponse:
    """
    Build a 200 or 206 streaming response for an opened object.

    Args:
        obj: Opened object range from the storage service
        content_type: Overrides the detected content type
        disposition: Value for Content-Disposition, if any
        extra_headers: Additional headers (e.g. NO_CACHE_HEADERS)
    """
    response = StreamingHttpResponse(
        obj.body,
        status=206 if obj.partial else 200,
        content_type=content_type or obj.content_type,
    )
    response["Accept-Ranges"] = "bytes"
    response["Content-Length"] = str(obj.length)
    if obj.partial:
        response["Content-Range"] = f"bytes {obj.start}-{obj.end}/{obj.total_size}"
    if disposition:
        response["Content-Disposition"] = disposition
    for header, value in (extra_headers or {}).items():
        response[header] = value
    return response


def content_disposition(kind: str, filename: str) -> str:
    """``inline``/``attachment`` disposition with an RFC 5987 encoded filename."""
    quoted = urllib.parse.quote(filename)
    return f"{kind}; filename=\"{quoted}\"; filename*=UTF-8''{quoted}"
