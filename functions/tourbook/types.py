"""
Enumerations shared by the database layer, schemas and routes.
"""

from __future__ import annotations

from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


ALLOWED_CONTENT_TYPES: dict[MediaType, tuple[str, ...]] = {
    MediaType.IMAGE: ("image/jpeg", "image/jpg", "image/png", "image/webp"),
    MediaType.VIDEO: ("video/mp4", "video/webm", "video/mov", "video/avi"),
}

# Row ids are 32-bit INTEGER columns.
MAX_ROW_ID = 2**31 - 1
