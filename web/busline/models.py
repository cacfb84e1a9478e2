from sqlalchemy import (
    String, Integer, Numeric, DateTime, Date, ForeignKey,
    func, CheckConstraint, Index
)
from sqlalchemy.orm import mapped_column, DeclarativeBase
import uuid

from .domain import Route, Booking, BookingStatus, Subject, AttendanceRecord, AttendanceStatus


# Document-style identifiers: opaque, generated client side
def _gen_id() -> str:
    """Return a random 32-char hex identifier."""
    return uuid.uuid4().hex


class Base(DeclarativeBase): ...


# ---------- Bus booking ----------
class RouteRow(Base):
    __tablename__ = "routes"
    id              = mapped_column(String(64), primary_key=True, default=_gen_id)
    departure       = mapped_column(String(120), nullable=False)
    destination     = mapped_column(String(120), nullable=False)
    departure_time  = mapped_column(String(32), nullable=False)
    price           = mapped_column(Numeric(10, 2), nullable=False)
    total_seats     = mapped_column(Integer, nullable=False)
    # Only ever written through a conditional UPDATE guarded by its old value
    available_seats = mapped_column(Integer, nullable=False)
    created_at      = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_routes_price_non_negative"),
        CheckConstraint("total_seats > 0", name="ck_routes_total_positive"),
        CheckConstraint("available_seats >= 0", name="ck_routes_available_non_negative"),
        CheckConstraint("available_seats <= total_seats", name="ck_routes_available_lte_total"),
    )

    def to_domain(self) -> Route:
        return Route(
            id=self.id,
            departure=self.departure,
            destination=self.destination,
            departure_time=self.departure_time,
            price=self.price,
            total_seats=self.total_seats,
            available_seats=self.available_seats,
        )


class BookingRow(Base):
    __tablename__ = "bookings"
    # Insertion order; created_at alone ties within one clock tick
    seq            = mapped_column(Integer, primary_key=True, autoincrement=True)
    id             = mapped_column(String(32), nullable=False, unique=True, default=_gen_id)
    owner_id       = mapped_column(String(64), nullable=False)
    route_id       = mapped_column(ForeignKey("routes.id"), nullable=False)
    travel_date    = mapped_column(Date, nullable=False)
    ticket_count   = mapped_column(Integer, nullable=False)
    total_price    = mapped_column(Numeric(10, 2), nullable=False)
    status         = mapped_column(String(16), nullable=False, comment="Booking status: Confirmed, Pending")
    # Route labels copied at booking time
    departure      = mapped_column(String(120), nullable=False, default="")
    destination    = mapped_column(String(120), nullable=False, default="")
    departure_time = mapped_column(String(32), nullable=False, default="")
    created_at     = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("ticket_count > 0", name="ck_bookings_ticket_count_positive"),
        Index("ix_bookings_owner_seq", "owner_id", "seq"),
        Index("ix_bookings_route", "route_id"),
    )

    def to_domain(self) -> Booking:
        return Booking(
            id=self.id,
            seq=self.seq,
            owner_id=self.owner_id,
            route_id=self.route_id,
            travel_date=self.travel_date,
            ticket_count=self.ticket_count,
            total_price=self.total_price,
            status=BookingStatus(self.status),
            departure=self.departure,
            destination=self.destination,
            departure_time=self.departure_time,
            created_at=self.created_at,
        )


# ---------- Attendance ----------
class SubjectRow(Base):
    __tablename__ = "subjects"
    id         = mapped_column(String(32), primary_key=True, default=_gen_id)
    owner_id   = mapped_column(String(64), nullable=False)
    name       = mapped_column(String(120), nullable=False)
    created_at = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("ix_subjects_owner", "owner_id"),
    )

    def to_domain(self) -> Subject:
        return Subject(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            created_at=self.created_at,
        )


class AttendanceRow(Base):
    __tablename__ = "attendance_records"
    seq          = mapped_column(Integer, primary_key=True, autoincrement=True)
    id           = mapped_column(String(32), nullable=False, unique=True, default=_gen_id)
    owner_id     = mapped_column(String(64), nullable=False)
    subject_id   = mapped_column(ForeignKey("subjects.id"), nullable=False)
    subject_name = mapped_column(String(120), nullable=False)
    date         = mapped_column(Date, nullable=False)
    status       = mapped_column(String(16), nullable=False, comment="Attendance status: Present, Absent, Late")
    created_at   = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("ix_attendance_owner_seq", "owner_id", "seq"),
    )

    def to_domain(self) -> AttendanceRecord:
        return AttendanceRecord(
            id=self.id,
            seq=self.seq,
            owner_id=self.owner_id,
            subject_id=self.subject_id,
            subject_name=self.subject_name,
            date=self.date,
            status=AttendanceStatus(self.status),
            created_at=self.created_at,
        )
