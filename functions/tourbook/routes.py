"""
HTTP routes for the tour booking API.

``router`` carries the public catalog, the booking hand-off, file serving and
the admin login/logout pair. ``admin_router`` carries everything behind the
admin session cookie.
"""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Path,
    Request,
    Response,
    UploadFile,
)
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tourbook.auth import (
    authenticate,
    clear_session_cookie,
    require_admin,
    set_session_cookie,
)
from tourbook.config import Settings, get_settings
from tourbook.db import AdminRecord, DbClient
from tourbook.dependencies import get_db_client, get_storage_client
from tourbook.schemas import (
    AdminProfile,
    Booking,
    BookingCreatedResponse,
    BookingListResponse,
    BookingRequest,
    BookingStatusUpdate,
    DashboardStats,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    SuccessResponse,
    Tour,
    TourCreatedResponse,
    TourDetailResponse,
    TourListResponse,
    TourPayload,
    UploadResponse,
)
from tourbook.storage import StorageClient
from tourbook.types import MAX_ROW_ID, BookingStatus
from tourbook.uploads import (
    UploadError,
    build_storage_path,
    public_url,
    validate_upload,
)
from tourbook.whatsapp import build_booking_message, build_whatsapp_url

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])

FILE_CACHE_CONTROL = "public, max-age=31536000"


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()


@router.get("/tours", response_model=TourListResponse)
def list_tours(db: DbClient = Depends(get_db_client)):
    tours = db.list_tours(include_inactive=False)
    return TourListResponse(tours=[Tour(**t.as_dict()) for t in tours])


@router.get("/tours/{tour_id}", response_model=TourDetailResponse)
def get_tour(tour_id: str, db: DbClient = Depends(get_db_client)):
    try:
        parsed_id = int(tour_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid tour ID") from None
    if not 1 <= parsed_id <= MAX_ROW_ID:
        raise HTTPException(status_code=404, detail="Tour not found")
    tour = db.get_tour(parsed_id, active_only=True)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")
    return TourDetailResponse(tour=Tour(**tour.as_dict()))


@router.post("/bookings", response_model=BookingCreatedResponse)
async def create_booking(
    request: Request,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    """
    Record a booking request and hand the guest off to WhatsApp.

    The total is always computed from the tour's current price; any price the
    client sends is ignored.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    try:
        payload = BookingRequest.model_validate(body)
    except ValidationError as exc:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid booking data",
                "details": jsonable_encoder(
                    exc.errors(include_url=False, include_context=False)
                ),
            },
        )

    tour = db.get_tour(payload.tour_id, active_only=True)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")

    total_price = tour.price * payload.guest_count
    data = payload.model_dump()
    booking = db.create_booking(data, total_price)
    logger.info(
        "Booking %s created for tour %s (%d guests)",
        booking.id,
        tour.id,
        payload.guest_count,
    )

    message = build_booking_message(
        tour.title, data, total_price, booking.id, currency=settings.currency
    )
    return BookingCreatedResponse(
        booking_id=booking.id,
        whatsapp_url=build_whatsapp_url(settings.whatsapp_number, message),
        total_price=total_price,
    )


@router.get("/files/{path:path}")
def get_file(path: str, storage: StorageClient = Depends(get_storage_client)):
    try:
        stored = storage.get_object(path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found") from None
    return Response(
        content=stored.body,
        media_type=stored.content_type,
        headers={"etag": stored.etag, "cache-control": FILE_CACHE_CONTROL},
    )


@router.post("/admin/login", response_model=LoginResponse)
def admin_login(
    payload: LoginRequest,
    response: Response,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    if not payload.username or not payload.password:
        raise HTTPException(status_code=400, detail="Username and password required")
    admin = authenticate(db, payload.username, payload.password)
    if admin is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    set_session_cookie(response, admin.username, settings)
    logger.info("Admin %s logged in", admin.username)
    return LoginResponse(
        admin=AdminProfile(username=admin.username, email=admin.email)
    )


@router.post("/admin/logout", response_model=SuccessResponse)
def admin_logout(response: Response, settings: Settings = Depends(get_settings)):
    clear_session_cookie(response, settings)
    return SuccessResponse()


@admin_router.get("/me", response_model=AdminProfile)
def admin_me(admin: AdminRecord = Depends(require_admin)):
    return AdminProfile(username=admin.username, email=admin.email)


@admin_router.get("/tours", response_model=TourListResponse)
def admin_list_tours(db: DbClient = Depends(get_db_client)):
    tours = db.list_tours(include_inactive=True)
    return TourListResponse(tours=[Tour(**t.as_dict()) for t in tours])


@admin_router.post("/tours", response_model=TourCreatedResponse)
def admin_create_tour(payload: TourPayload, db: DbClient = Depends(get_db_client)):
    tour = db.create_tour(payload.model_dump())
    logger.info("Tour %s created", tour.id)
    return TourCreatedResponse(id=tour.id)


@admin_router.put("/tours/{tour_id}", response_model=SuccessResponse)
def admin_update_tour(
    payload: TourPayload,
    tour_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    db: DbClient = Depends(get_db_client),
):
    if db.update_tour(tour_id, payload.model_dump()) is None:
        raise HTTPException(status_code=404, detail="Tour not found")
    return SuccessResponse()


@admin_router.delete("/tours/{tour_id}", response_model=SuccessResponse)
def admin_delete_tour(
    tour_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    db: DbClient = Depends(get_db_client),
):
    if not db.delete_tour(tour_id):
        raise HTTPException(status_code=404, detail="Tour not found")
    logger.info("Tour %s deleted", tour_id)
    return SuccessResponse()


@admin_router.get("/bookings", response_model=BookingListResponse)
def admin_list_bookings(db: DbClient = Depends(get_db_client)):
    bookings = db.list_bookings()
    return BookingListResponse(bookings=[Booking(**b.as_dict()) for b in bookings])


@admin_router.put("/bookings/{booking_id}", response_model=SuccessResponse)
def admin_update_booking(
    payload: BookingStatusUpdate,
    booking_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    db: DbClient = Depends(get_db_client),
):
    if db.update_booking_status(booking_id, payload.status) is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    logger.info("Booking %s marked %s", booking_id, payload.status.value)
    return SuccessResponse()


@admin_router.delete("/bookings/{booking_id}", response_model=SuccessResponse)
def admin_delete_booking(
    booking_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    db: DbClient = Depends(get_db_client),
):
    if not db.delete_booking(booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")
    return SuccessResponse()


@admin_router.get("/stats", response_model=DashboardStats)
def admin_stats(db: DbClient = Depends(get_db_client)):
    tours = db.list_tours(include_inactive=True)
    bookings = db.list_bookings()
    return DashboardStats(
        totalTours=len(tours),
        activeTours=sum(1 for t in tours if t.is_active),
        totalBookings=len(bookings),
        pendingBookings=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
    )


@admin_router.post("/upload", response_model=UploadResponse)
async def admin_upload(
    file: UploadFile | None = File(None),
    media_type: str | None = Form(None, alias="type"),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")
    try:
        kind = validate_upload(media_type, file.content_type)
    except UploadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None

    path = build_storage_path(kind, file.filename)
    data = await file.read()
    storage.put_bytes(path, data, file.content_type)
    logger.info("Uploaded %s (%d bytes)", path, len(data))
    return UploadResponse(url=public_url(path, settings.api_prefix), filename=path)


@admin_router.delete("/files/{path:path}", response_model=SuccessResponse)
def admin_delete_file(path: str, storage: StorageClient = Depends(get_storage_client)):
    storage.delete(path)
    logger.info("Deleted %s", path)
    return SuccessResponse()
