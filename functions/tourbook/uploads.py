"""
Validation and naming for media uploaded from the admin tour editor.
"""

from __future__ import annotations

import secrets
import time
from typing import Optional

from tourbook.types import ALLOWED_CONTENT_TYPES, MediaType

FILES_ROUTE = "/files/"


class UploadError(ValueError):
    """Rejected upload; the message is safe to show to the client."""


def validate_upload(media_type: Optional[str], content_type: Optional[str]) -> MediaType:
    try:
        kind = MediaType(media_type)
    except ValueError:
        raise UploadError("Invalid file type") from None
    if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES[kind]:
        raise UploadError(f"Invalid {kind.value} format")
    return kind


def build_storage_path(media_type: MediaType, filename: Optional[str]) -> str:
    ext = "bin"
    if filename and "." in filename:
        candidate = filename.rsplit(".", 1)[1].lower()
        if candidate.isalnum():
            ext = candidate
    stamp = int(time.time() * 1000)
    return f"tours/{media_type.value}s/{stamp}_{secrets.token_hex(6)}.{ext}"


def public_url(path: str, api_prefix: str = "/api") -> str:
    return f"{api_prefix}{FILES_ROUTE}{path}"

