"""
Pydantic schemas for the tour booking API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from tourbook.types import MAX_ROW_ID, BookingStatus


class TourPayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    location: str = Field(..., min_length=1, max_length=200)
    duration_days: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    max_guests: int = Field(..., ge=1)
    image_url: Optional[str] = None
    highlights: list[str] = Field(default_factory=list)
    included: list[str] = Field(default_factory=list)
    gallery_images: list[str] = Field(default_factory=list)
    gallery_videos: list[str] = Field(default_factory=list)
    is_featured: bool = False
    is_active: bool = True


class Tour(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    location: str
    duration_days: int
    price: float
    max_guests: int
    image_url: Optional[str] = None
    highlights: list[str]
    included: list[str]
    gallery_images: list[str]
    gallery_videos: list[str]
    is_featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TourListResponse(BaseModel):
    tours: list[Tour]


class TourDetailResponse(BaseModel):
    tour: Tour


class TourCreatedResponse(BaseModel):
    success: Literal[True] = True
    id: int


class BookingRequest(BaseModel):
    tour_id: int = Field(..., ge=1, le=MAX_ROW_ID)
    guest_name: str = Field(..., min_length=1)
    guest_email: EmailStr
    guest_phone: str = Field(..., min_length=1)
    guest_count: int = Field(..., ge=1)
    preferred_date: Optional[str] = None
    message: Optional[str] = None


class BookingCreatedResponse(BaseModel):
    success: Literal[True] = True
    booking_id: int
    whatsapp_url: str
    total_price: float


class Booking(BaseModel):
    id: int
    tour_id: Optional[int] = None
    guest_name: str
    guest_email: str
    guest_phone: str
    guest_count: int
    preferred_date: Optional[str] = None
    message: Optional[str] = None
    status: BookingStatus
    total_price: float
    tour_title: Optional[str] = None
    tour_location: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    bookings: list[Booking]


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AdminProfile(BaseModel):
    username: str
    email: Optional[str] = None


class LoginResponse(BaseModel):
    success: Literal[True] = True
    admin: AdminProfile


class SuccessResponse(BaseModel):
    success: Literal[True] = True


class UploadResponse(BaseModel):
    success: Literal[True] = True
    url: str
    filename: str


class DashboardStats(BaseModel):
    totalTours: int
    activeTours: int
    totalBookings: int
    pendingBookings: int


class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
