from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from roservice.database import Database
from roservice.main import create_app
from roservice.models import Booking, BookingStatus, Part, Role, ServiceType, Technician, User
from roservice.security_utils import create_access_token, hash_password


class FakeMailer:
    """Records outgoing mail instead of calling Resend"""

    def __init__(self):
        self.sent = []

    def send(self, to, subject, text):
        if not to:
            return False
        self.sent.append({"to": to, "subject": subject, "text": text})
        return True

    def close(self):
        pass


@pytest.fixture
def database():
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(database, mailer):
    app = create_app(database=database, mailer=mailer)
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}


def make_user(db, email, role=Role.USER, name=None, phone="9876543210", address=None) -> User:
    user = User(
        name=name or email.split("@")[0].title(),
        email=email,
        password_hash=hash_password("secret123"),
        phone=phone,
        address=address,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_technician(db, user=None, name="Ravi", phone="9000000001") -> Technician:
    technician = Technician(name=name, phone=phone, user_id=user.id if user else None, total_jobs=0)
    db.add(technician)
    db.commit()
    db.refresh(technician)
    return technician


def make_part(db, name, quantity, unit_cost) -> Part:
    part = Part(name=name, unit_cost=unit_cost, quantity=quantity, initial_quantity=quantity)
    db.add(part)
    db.commit()
    db.refresh(part)
    return part


def make_booking(db, user, status=BookingStatus.PENDING, technician=None, service_date=None) -> Booking:
    booking = Booking(
        user_id=user.id,
        technician_id=technician.id if technician else None,
        service_type=ServiceType.REPAIR,
        status=status,
        service_date=service_date or datetime(2025, 1, 15, 10, 0),
        contact_name=user.name,
        contact_phone=user.phone,
        remarks=f"Name: {user.name}, Phone: {user.phone}",
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture
def admin(db):
    return make_user(db, "admin@roservices.app", role=Role.ADMIN, name="Admin", phone="9111111111")


@pytest.fixture
def customer(db):
    return make_user(db, "asha@example.com", name="Asha", phone="9876543210", address="12 MG Road")


@pytest.fixture
def tech_user(db):
    return make_user(db, "ravi@roservices.app", role=Role.TECHNICIAN, name="Ravi", phone="9000000001")


@pytest.fixture
def technician(db, tech_user):
    return make_technician(db, tech_user)
