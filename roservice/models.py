import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Role(str, enum.Enum):
    USER = "USER"
    TECHNICIAN = "TECHNICIAN"
    ADMIN = "ADMIN"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class ServiceType(str, enum.Enum):
    INSTALLATION = "INSTALLATION"
    REPAIR = "REPAIR"
    MAINTENANCE = "MAINTENANCE"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    location = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    profile_pic = Column(String(500), nullable=True)
    role = Column(Enum(Role, name="role"), default=Role.USER, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="user")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    technician_profile = relationship("Technician", back_populates="user", uselist=False)


class Technician(Base):
    __tablename__ = "technicians"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    # Login account of the technician; a technician may exist before it has one
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), unique=True, nullable=True)
    total_jobs = Column(Integer, default=0, nullable=False)  # lifetime assignment counter
    last_active = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="technician_profile")
    bookings = relationship("Booking", back_populates="technician")
    reports = relationship("Report", back_populates="technician")


class Part(Base):
    __tablename__ = "parts"
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_parts_quantity_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    unit_cost = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    # Quantity at creation; current quantity == initial_quantity + sum(stock_logs.change)
    initial_quantity = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now())

    stock_logs = relationship("StockLog", back_populates="part", order_by="StockLog.id")


class StockLog(Base):
    """Append-only record of one quantity change"""

    __tablename__ = "stock_logs"

    id = Column(Integer, primary_key=True, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)
    change = Column(Integer, nullable=False)
    reason = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    part = relationship("Part", back_populates="stock_logs")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    technician_id = Column(
        Integer, ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True, index=True
    )

    service_type = Column(Enum(ServiceType, name="service_type"), nullable=False)
    # Status workflow: PENDING → IN_PROGRESS → COMPLETED, CANCELED from PENDING or IN_PROGRESS
    status = Column(
        Enum(BookingStatus, name="booking_status"),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    service_date = Column(DateTime, nullable=False, index=True)

    # On-site contact details; remarks is the rendered "Name: .., Phone: .." text
    contact_name = Column(String(255), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    problem = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)

    # Set once the due-service reminder has gone out
    reminder_sent_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    technician = relationship("Technician", back_populates="bookings")
    booking_parts = relationship("BookingPart", back_populates="booking", cascade="all, delete-orphan")
    report = relationship("Report", back_populates="booking", uselist=False)


class BookingPart(Base):
    __tablename__ = "booking_parts"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False)
    quantity = Column(Integer, nullable=False)

    booking = relationship("Booking", back_populates="booking_parts")
    part = relationship("Part")


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    technician_id = Column(Integer, ForeignKey("technicians.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), unique=True, nullable=True)

    # Customer / service details
    customer_name = Column(String(255), nullable=False)
    mobile_number = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)
    service_date_time = Column(DateTime, nullable=False)
    service_type = Column(String(50), nullable=False)
    amount_received = Column(Float, nullable=False, default=0)

    remarks = Column(Text, nullable=True)  # display text, rendered from the fields above
    summary = Column(Text, nullable=False, default="")  # "Filter x2, Membrane x1"
    total_money = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    technician = relationship("Technician", back_populates="reports")
    booking = relationship("Booking", back_populates="report")
    parts = relationship(
        "ReportPart", back_populates="report", cascade="all, delete-orphan", order_by="ReportPart.id"
    )


class ReportPart(Base):
    """Structured parts list of a report, used to reverse its stock effect"""

    __tablename__ = "report_parts"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Float, nullable=False)  # cost at the time of the report

    report = relationship("Report", back_populates="parts")
    part = relationship("Part")


class PurchaseEntry(Base):
    __tablename__ = "purchase_entries"

    id = Column(Integer, primary_key=True, index=True)
    vendor_name = Column(String(255), nullable=False)
    bill_number = Column(String(100), nullable=False)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    cost_per_unit = Column(Float, nullable=False)
    purchase_date = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    part = relationship("Part")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="notifications")
