"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    select,
    update,
)
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from tourbook.types import BookingStatus

TOUR_FIELDS = (
    "title",
    "description",
    "location",
    "duration_days",
    "price",
    "max_guests",
    "image_url",
    "highlights",
    "included",
    "gallery_images",
    "gallery_videos",
    "is_featured",
    "is_active",
)

# Stored as JSON arrays; a missing value reads back as an empty list.
TOUR_LIST_FIELDS = ("highlights", "included", "gallery_images", "gallery_videos")


class DbClient(Protocol):
    """Interface for database access."""

    def list_tours(self, include_inactive: bool = False) -> list["TourRecord"]:
        ...

    def get_tour(
        self, tour_id: int, active_only: bool = True
    ) -> Optional["TourRecord"]:
        ...

    def create_tour(self, data: dict) -> "TourRecord":
        ...

    def update_tour(self, tour_id: int, data: dict) -> Optional["TourRecord"]:
        ...

    def delete_tour(self, tour_id: int) -> bool:
        ...

    def create_booking(self, data: dict, total_price: float) -> "BookingRecord":
        ...

    def get_booking(self, booking_id: int) -> Optional["BookingRecord"]:
        ...

    def list_bookings(self) -> list["BookingRecord"]:
        ...

    def update_booking_status(
        self, booking_id: int, status: BookingStatus
    ) -> Optional["BookingRecord"]:
        ...

    def delete_booking(self, booking_id: int) -> bool:
        ...

    def get_admin(self, username: str) -> Optional["AdminRecord"]:
        ...

    def create_admin(
        self, username: str, email: str, password_hash: str
    ) -> "AdminRecord":
        ...


@dataclass
class TourRecord:
    id: int
    title: str
    location: str
    duration_days: int
    price: float
    max_guests: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    highlights: list[str] = field(default_factory=list)
    included: list[str] = field(default_factory=list)
    gallery_images: list[str] = field(default_factory=list)
    gallery_videos: list[str] = field(default_factory=list)
    is_featured: bool = False
    is_active: bool = True
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "duration_days": self.duration_days,
            "price": self.price,
            "max_guests": self.max_guests,
            "image_url": self.image_url,
            "highlights": list(self.highlights),
            "included": list(self.included),
            "gallery_images": list(self.gallery_images),
            "gallery_videos": list(self.gallery_videos),
            "is_featured": self.is_featured,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class BookingRecord:
    id: int
    tour_id: Optional[int]
    guest_name: str
    guest_email: str
    guest_phone: str
    guest_count: int
    total_price: float
    preferred_date: Optional[str] = None
    message: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    tour_title: Optional[str] = None
    tour_location: Optional[str] = None
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "tour_id": self.tour_id,
            "guest_name": self.guest_name,
            "guest_email": self.guest_email,
            "guest_phone": self.guest_phone,
            "guest_count": self.guest_count,
            "preferred_date": self.preferred_date,
            "message": self.message,
            "status": self.status.value,
            "total_price": self.total_price,
            "tour_title": self.tour_title,
            "tour_location": self.tour_location,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class AdminRecord:
    username: str
    email: Optional[str]
    password_hash: str
    is_active: bool = True
    created_at: float = field(default_factory=lambda: time.time())


def _tour_values(data: dict) -> dict:
    """Pick the writable tour columns out of a payload dict."""
    values = {name: data.get(name) for name in TOUR_FIELDS}
    for name in TOUR_LIST_FIELDS:
        values[name] = list(values[name] or [])
    values["is_featured"] = bool(values["is_featured"])
    values["is_active"] = bool(
        True if values["is_active"] is None else values["is_active"]
    )
    return values


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.tours: Dict[int, TourRecord] = {}
        self.bookings: Dict[int, BookingRecord] = {}
        self.admins: Dict[str, AdminRecord] = {}
        self._next_tour_id = 1
        self._next_booking_id = 1

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.tours.clear()
        self.bookings.clear()
        self.admins.clear()
        self._next_tour_id = 1
        self._next_booking_id = 1

    def list_tours(self, include_inactive: bool = False) -> list[TourRecord]:
        if include_inactive:
            return sorted(
                self.tours.values(), key=lambda t: (t.created_at, t.id), reverse=True
            )
        active = [t for t in self.tours.values() if t.is_active]
        return sorted(
            active,
            key=lambda t: (t.is_featured, t.created_at, t.id),
            reverse=True,
        )

    def get_tour(self, tour_id: int, active_only: bool = True) -> Optional[TourRecord]:
        tour = self.tours.get(tour_id)
        if tour is None or (active_only and not tour.is_active):
            return None
        return tour

    def create_tour(self, data: dict) -> TourRecord:
        record = TourRecord(id=self._next_tour_id, **_tour_values(data))
        self.tours[record.id] = record
        self._next_tour_id += 1
        return record

    def update_tour(self, tour_id: int, data: dict) -> Optional[TourRecord]:
        tour = self.tours.get(tour_id)
        if tour is None:
            return None
        for name, value in _tour_values(data).items():
            setattr(tour, name, value)
        tour.updated_at = time.time()
        return tour

    def delete_tour(self, tour_id: int) -> bool:
        if self.tours.pop(tour_id, None) is None:
            return False
        for booking in self.bookings.values():
            if booking.tour_id == tour_id:
                booking.tour_id = None
        return True

    def create_booking(self, data: dict, total_price: float) -> BookingRecord:
        record = BookingRecord(
            id=self._next_booking_id,
            tour_id=data["tour_id"],
            guest_name=data["guest_name"],
            guest_email=data["guest_email"],
            guest_phone=data["guest_phone"],
            guest_count=data["guest_count"],
            preferred_date=data.get("preferred_date"),
            message=data.get("message"),
            total_price=total_price,
        )
        self.bookings[record.id] = record
        self._next_booking_id += 1
        return record

    def _with_tour(self, booking: BookingRecord) -> BookingRecord:
        tour = self.tours.get(booking.tour_id) if booking.tour_id else None
        booking.tour_title = tour.title if tour else None
        booking.tour_location = tour.location if tour else None
        return booking

    def get_booking(self, booking_id: int) -> Optional[BookingRecord]:
        booking = self.bookings.get(booking_id)
        return self._with_tour(booking) if booking else None

    def list_bookings(self) -> list[BookingRecord]:
        ordered = sorted(
            self.bookings.values(), key=lambda b: (b.created_at, b.id), reverse=True
        )
        return [self._with_tour(b) for b in ordered]

    def update_booking_status(
        self, booking_id: int, status: BookingStatus
    ) -> Optional[BookingRecord]:
        booking = self.bookings.get(booking_id)
        if booking is None:
            return None
        booking.status = status
        booking.updated_at = time.time()
        return self._with_tour(booking)

    def delete_booking(self, booking_id: int) -> bool:
        return self.bookings.pop(booking_id, None) is not None

    def get_admin(self, username: str) -> Optional[AdminRecord]:
        admin = self.admins.get(username)
        if admin is None or not admin.is_active:
            return None
        return admin

    def create_admin(
        self, username: str, email: str, password_hash: str
    ) -> AdminRecord:
        record = AdminRecord(
            username=username, email=email, password_hash=password_hash
        )
        self.admins[username] = record
        return record


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        engine_kwargs = {"future": True, "pool_pre_ping": True}
        if database_url.startswith("sqlite"):
            # Sync routes run in a threadpool.
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url:
                # One shared connection so every session sees the same DB.
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_tour_record(self, row: "TourRow") -> TourRecord:
        return TourRecord(
            id=row.id,
            title=row.title,
            description=row.description,
            location=row.location,
            duration_days=row.duration_days,
            price=row.price,
            max_guests=row.max_guests,
            image_url=row.image_url,
            highlights=list(row.highlights or []),
            included=list(row.included or []),
            gallery_images=list(row.gallery_images or []),
            gallery_videos=list(row.gallery_videos or []),
            is_featured=bool(row.is_featured),
            is_active=bool(row.is_active),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_booking_record(
        self, row: "BookingRow", tour: Optional["TourRow"] = None
    ) -> BookingRecord:
        return BookingRecord(
            id=row.id,
            tour_id=row.tour_id,
            guest_name=row.guest_name,
            guest_email=row.guest_email,
            guest_phone=row.guest_phone,
            guest_count=row.guest_count,
            preferred_date=row.preferred_date,
            message=row.message,
            status=BookingStatus(row.status),
            total_price=row.total_price,
            tour_title=tour.title if tour else None,
            tour_location=tour.location if tour else None,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def list_tours(self, include_inactive: bool = False) -> list[TourRecord]:
        with self.Session() as session:
            stmt = select(TourRow)
            if include_inactive:
                stmt = stmt.order_by(TourRow.created_at.desc(), TourRow.id.desc())
            else:
                stmt = stmt.where(TourRow.is_active.is_(True)).order_by(
                    TourRow.is_featured.desc(),
                    TourRow.created_at.desc(),
                    TourRow.id.desc(),
                )
            rows = session.execute(stmt).scalars().all()
            return [self._to_tour_record(row) for row in rows]

    def get_tour(self, tour_id: int, active_only: bool = True) -> Optional[TourRecord]:
        with self.Session() as session:
            row = session.get(TourRow, tour_id)
            if row is None or (active_only and not row.is_active):
                return None
            return self._to_tour_record(row)

    def create_tour(self, data: dict) -> TourRecord:
        now = time.time()
        with self.Session() as session:
            row = TourRow(created_at=now, updated_at=now, **_tour_values(data))
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_tour_record(row)

    def update_tour(self, tour_id: int, data: dict) -> Optional[TourRecord]:
        with self.Session() as session:
            row = session.get(TourRow, tour_id)
            if row is None:
                return None
            for name, value in _tour_values(data).items():
                setattr(row, name, value)
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_tour_record(row)

    def delete_tour(self, tour_id: int) -> bool:
        with self.Session() as session:
            row = session.get(TourRow, tour_id)
            if row is None:
                return False
            session.execute(
                update(BookingRow)
                .where(BookingRow.tour_id == tour_id)
                .values(tour_id=None)
            )
            session.delete(row)
            session.commit()
            return True

    def create_booking(self, data: dict, total_price: float) -> BookingRecord:
        now = time.time()
        with self.Session() as session:
            row = BookingRow(
                tour_id=data["tour_id"],
                guest_name=data["guest_name"],
                guest_email=data["guest_email"],
                guest_phone=data["guest_phone"],
                guest_count=data["guest_count"],
                preferred_date=data.get("preferred_date"),
                message=data.get("message"),
                status=BookingStatus.PENDING.value,
                total_price=total_price,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            tour = session.get(TourRow, row.tour_id) if row.tour_id else None
            return self._to_booking_record(row, tour)

    def get_booking(self, booking_id: int) -> Optional[BookingRecord]:
        with self.Session() as session:
            row = session.get(BookingRow, booking_id)
            if row is None:
                return None
            tour = session.get(TourRow, row.tour_id) if row.tour_id else None
            return self._to_booking_record(row, tour)

    def list_bookings(self) -> list[BookingRecord]:
        with self.Session() as session:
            stmt = (
                select(BookingRow, TourRow)
                .outerjoin(TourRow, BookingRow.tour_id == TourRow.id)
                .order_by(BookingRow.created_at.desc(), BookingRow.id.desc())
            )
            return [
                self._to_booking_record(booking, tour)
                for booking, tour in session.execute(stmt).all()
            ]

    def update_booking_status(
        self, booking_id: int, status: BookingStatus
    ) -> Optional[BookingRecord]:
        with self.Session() as session:
            row = session.get(BookingRow, booking_id)
            if row is None:
                return None
            row.status = status.value
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            tour = session.get(TourRow, row.tour_id) if row.tour_id else None
            return self._to_booking_record(row, tour)

    def delete_booking(self, booking_id: int) -> bool:
        with self.Session() as session:
            row = session.get(BookingRow, booking_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def get_admin(self, username: str) -> Optional[AdminRecord]:
        with self.Session() as session:
            row = session.get(AdminRow, username)
            if row is None or not row.is_active:
                return None
            return AdminRecord(
                username=row.username,
                email=row.email,
                password_hash=row.password_hash,
                is_active=row.is_active,
                created_at=row.created_at,
            )

    def create_admin(
        self, username: str, email: str, password_hash: str
    ) -> AdminRecord:
        now = time.time()
        with self.Session() as session:
            existing = session.get(AdminRow, username)
            if existing:
                existing.email = email
                existing.password_hash = password_hash
                existing.is_active = True
            else:
                session.add(
                    AdminRow(
                        username=username,
                        email=email,
                        password_hash=password_hash,
                        is_active=True,
                        created_at=now,
                    )
                )
            session.commit()
        return AdminRecord(
            username=username, email=email, password_hash=password_hash
        )


Base = declarative_base()


class TourRow(Base):
    __tablename__ = "tours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(200), nullable=False)
    duration_days = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    max_guests = Column(Integer, nullable=False)
    image_url = Column(String, nullable=True)
    highlights = Column(JSON, nullable=True)
    included = Column(JSON, nullable=True)
    gallery_images = Column(JSON, nullable=True)
    gallery_videos = Column(JSON, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tour_id = Column(
        Integer, ForeignKey("tours.id", ondelete="SET NULL"), nullable=True, index=True
    )
    guest_name = Column(String(200), nullable=False)
    guest_email = Column(String(320), nullable=False)
    guest_phone = Column(String(50), nullable=False)
    guest_count = Column(Integer, nullable=False)
    preferred_date = Column(String(50), nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    total_price = Column(Float, nullable=False)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class AdminRow(Base):
    __tablename__ = "admin_users"

    username = Column(String(100), primary_key=True)
    email = Column(String(320), nullable=True)
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Float, nullable=False)
