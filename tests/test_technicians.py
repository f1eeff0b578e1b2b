from datetime import datetime

import pytest

from conftest import auth_headers, make_booking, make_user
from roservice.domain.technicians.schemas import TechnicianCreate
from roservice.domain.technicians.service import TechnicianService
from roservice.errors import Conflict, ValidationFailed
from roservice.models import Booking, BookingStatus, Report, Role


def test_admin_creates_and_lists_technicians(client, admin, tech_user):
    headers = auth_headers(admin)
    created = client.post(
        "/api/technicians", json={"name": "Ravi", "phone": "9000000001", "userId": tech_user.id}, headers=headers
    )
    assert created.status_code == 201
    assert created.json()["total_jobs"] == 0
    assert created.json()["user_id"] == tech_user.id

    again = client.post(
        "/api/technicians", json={"name": "Ravi 2", "phone": "9000000009", "userId": tech_user.id}, headers=headers
    )
    assert again.status_code == 409

    updated = client.put(f"/api/technicians/{created.json()['id']}", json={"phone": "9000000003"}, headers=headers)
    assert updated.json()["phone"] == "9000000003"

    assert [t["name"] for t in client.get("/api/technicians", headers=headers).json()] == ["Ravi"]
    me = client.get("/api/technicians/me", headers=auth_headers(tech_user)).json()
    assert me["id"] == created.json()["id"]


def test_only_technician_accounts_can_be_linked(db, customer):
    with pytest.raises(ValidationFailed):
        TechnicianService(db).create_technician(TechnicianCreate(name="Asha", phone="9876543210", userId=customer.id))


def test_delete_unlinks_bookings(db, customer, technician):
    booking = make_booking(db, customer, status=BookingStatus.IN_PROGRESS, technician=technician)

    TechnicianService(db).delete_technician(technician.id)

    db.expire_all()
    assert db.get(Booking, booking.id).technician_id is None


def test_delete_with_reports_is_rejected(db, technician):
    db.add(
        Report(
            technician_id=technician.id,
            customer_name="Asha",
            mobile_number="9876543210",
            address="12 MG Road",
            service_date_time=datetime(2025, 1, 1),
            service_type="Repair",
            summary="",
        )
    )
    db.commit()

    with pytest.raises(Conflict):
        TechnicianService(db).delete_technician(technician.id)


def test_technician_routes_require_technician_role(client, customer):
    assert client.get("/api/technicians/me", headers=auth_headers(customer)).status_code == 403


def test_technician_user_without_profile_gets_404(client, db):
    lone = make_user(db, "lone@roservices.app", role=Role.TECHNICIAN)
    response = client.get("/api/technicians/me/stats", headers=auth_headers(lone))
    assert response.status_code == 404
