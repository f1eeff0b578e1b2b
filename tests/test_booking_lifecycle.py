from datetime import datetime

import pytest

from conftest import FakeMailer, make_booking, make_part, make_technician, make_user
from roservice.domain.bookings.lifecycle import is_terminal, validate_status_transition
from roservice.domain.bookings.schemas import BookingCreate, BookingDetailsUpdate
from roservice.domain.bookings.service import BookingService
from roservice.errors import Conflict, InsufficientStock, InvalidTransition, NotFound, Unauthorized
from roservice.models import BookingStatus, Notification, Role, StockLog, Technician
from roservice.shared.remarks import decode_remarks

PENDING = BookingStatus.PENDING
IN_PROGRESS = BookingStatus.IN_PROGRESS
COMPLETED = BookingStatus.COMPLETED
CANCELED = BookingStatus.CANCELED


@pytest.mark.parametrize(
    "current,new,allowed",
    [
        (PENDING, IN_PROGRESS, True),
        (PENDING, CANCELED, True),
        (PENDING, COMPLETED, False),
        (IN_PROGRESS, COMPLETED, True),
        (IN_PROGRESS, CANCELED, True),
        (IN_PROGRESS, PENDING, False),
        (COMPLETED, PENDING, False),
        (COMPLETED, CANCELED, False),
        (CANCELED, IN_PROGRESS, False),
        (COMPLETED, COMPLETED, True),
    ],
)
def test_transition_table(current, new, allowed):
    assert validate_status_transition(current, new) is allowed


def test_terminal_states():
    assert is_terminal(COMPLETED)
    assert is_terminal(CANCELED)
    assert not is_terminal(PENDING)


def test_create_booking_fills_contact_from_profile(db, customer):
    mailer = FakeMailer()
    booking = BookingService(db, mailer).create_booking(
        customer,
        BookingCreate(serviceType="INSTALLATION", serviceDate=datetime(2025, 3, 1, 9, 30), problem="New unit"),
    )

    assert booking.status == PENDING
    assert booking.technician_id is None
    assert booking.contact_name == "Asha"
    assert booking.address == "12 MG Road"
    assert booking.remarks == "Name: Asha, Phone: 9876543210, Address: 12 MG Road, Problem: New unit"


def test_create_booking_reads_fields_from_free_text_remarks(db, customer):
    booking = BookingService(db).create_booking(
        customer,
        BookingCreate(
            serviceType="REPAIR",
            serviceDate=datetime(2025, 3, 1, 9, 30),
            remarks="Customer: Meera, Mobile: 9123456780, Issue: Leaking tank",
        ),
    )

    assert booking.contact_name == "Meera"
    assert booking.contact_phone == "9123456780"
    assert booking.problem == "Leaking tank"
    assert booking.remarks == "Customer: Meera, Mobile: 9123456780, Issue: Leaking tank, Address: 12 MG Road"


@pytest.mark.parametrize(
    "remarks,expected",
    [
        ("Phone: 1111111111", "Phone: 9999999999, Name: Asha, Address: 12 MG Road"),
        ("Mobile: 1111111111", "Mobile: 1111111111, Name: Asha, Phone: 9999999999, Address: 12 MG Road"),
    ],
)
def test_create_booking_structured_field_overrides_free_text_pair(db, customer, remarks, expected):
    booking = BookingService(db).create_booking(
        customer,
        BookingCreate(
            serviceType="REPAIR",
            serviceDate=datetime(2025, 3, 1, 9, 30),
            phone="9999999999",
            remarks=remarks,
        ),
    )

    assert booking.contact_phone == "9999999999"
    assert decode_remarks(booking.remarks)["phone"] == booking.contact_phone
    assert booking.remarks == expected


def test_assign_moves_to_in_progress_and_counts_every_call(db, customer, technician):
    mailer = FakeMailer()
    booking = make_booking(db, customer)
    service = BookingService(db, mailer)

    booking = service.assign_technician(booking.id, technician.id)
    assert booking.status == IN_PROGRESS
    assert booking.technician_id == technician.id

    service.assign_technician(booking.id, technician.id)
    db.refresh(technician)
    assert technician.total_jobs == 2

    recipients = {n.user_id for n in db.query(Notification).all()}
    assert recipients == {customer.id, technician.user_id}
    assert [m["subject"] for m in mailer.sent] == ["Your service technician has been assigned"] * 2


def test_reassign_counts_for_new_technician_only(db, customer, technician):
    other = make_technician(db, name="Kiran", phone="9000000002")
    booking = make_booking(db, customer)
    service = BookingService(db)

    service.assign_technician(booking.id, technician.id)
    service.assign_technician(booking.id, other.id)

    db.expire_all()
    assert db.get(Technician, technician.id).total_jobs == 1
    assert db.get(Technician, other.id).total_jobs == 1
    assert service.get_booking(booking.id, customer).technician_id == other.id


def test_assign_errors(db, customer, technician):
    service = BookingService(db)
    booking = make_booking(db, customer)

    with pytest.raises(NotFound):
        service.assign_technician(booking.id, 999)
    with pytest.raises(NotFound):
        service.assign_technician(999, technician.id)

    done = make_booking(db, customer, status=COMPLETED)
    with pytest.raises(InvalidTransition):
        service.assign_technician(done.id, technician.id)
    db.refresh(technician)
    assert technician.total_jobs == 0


def test_set_status_rules(db, customer, technician):
    service = BookingService(db)
    booking = make_booking(db, customer)

    with pytest.raises(InvalidTransition):
        service.set_status(booking.id, COMPLETED)
    with pytest.raises(InvalidTransition):
        service.set_status(booking.id, IN_PROGRESS)

    service.assign_technician(booking.id, technician.id)
    assert service.set_status(booking.id, COMPLETED).status == COMPLETED

    with pytest.raises(InvalidTransition):
        service.set_status(booking.id, CANCELED)
    assert service.set_status(booking.id, COMPLETED).status == COMPLETED


def test_cancel_pending_notifies_customer(db, customer):
    booking = make_booking(db, customer)
    BookingService(db).set_status(booking.id, CANCELED)

    notification = db.query(Notification).filter(Notification.user_id == customer.id).one()
    assert "canceled" in notification.message


def test_update_details_merges_into_remarks(db, customer):
    booking = make_booking(db, customer)
    service = BookingService(db)

    updated = service.update_details(booking.id, customer, BookingDetailsUpdate(address="7 Lake Road, Pune"))
    assert updated.address == "7 Lake Road, Pune"
    assert updated.remarks == "Name: Asha, Phone: 9876543210, Address: 7 Lake Road, Pune"

    stranger = make_user(db, "other@example.com")
    with pytest.raises(Unauthorized):
        service.update_details(booking.id, stranger, BookingDetailsUpdate(problem="Noise"))


def test_get_booking_access(db, customer, technician, tech_user):
    booking = make_booking(db, customer, status=IN_PROGRESS, technician=technician)
    service = BookingService(db)
    admin = make_user(db, "boss@roservices.app", role=Role.ADMIN)
    stranger = make_user(db, "other@example.com")

    for viewer in (customer, admin, tech_user):
        assert service.get_booking(booking.id, viewer).id == booking.id
    with pytest.raises(Unauthorized):
        service.get_booking(booking.id, stranger)


def test_add_parts_consumes_stock_all_or_nothing(db, customer, technician, tech_user):
    filter_part = make_part(db, "Sediment Filter", 10, 5.0)
    membrane = make_part(db, "RO Membrane", 1, 40.0)
    booking = make_booking(db, customer, status=IN_PROGRESS, technician=technician)
    service = BookingService(db)

    with pytest.raises(InsufficientStock):
        service.add_parts(booking.id, tech_user, [(filter_part.id, 2), (membrane.id, 5)])
    db.refresh(filter_part)
    assert filter_part.quantity == 10

    updated = service.add_parts(booking.id, tech_user, [(filter_part.id, 2)])
    assert [(bp.part_id, bp.quantity) for bp in updated.booking_parts] == [(filter_part.id, 2)]
    db.refresh(filter_part)
    assert filter_part.quantity == 8
    assert db.query(StockLog).one().reason == "Used in booking"

    with pytest.raises(Unauthorized):
        service.add_parts(booking.id, customer, [(filter_part.id, 1)])


def test_add_parts_to_canceled_booking_is_rejected(db, customer):
    part = make_part(db, "Tap", 5, 2.0)
    booking = make_booking(db, customer, status=CANCELED)
    admin = make_user(db, "boss@roservices.app", role=Role.ADMIN)

    with pytest.raises(Conflict):
        BookingService(db).add_parts(booking.id, admin, [(part.id, 1)])


def test_delete_booking_restores_parts(db, customer, technician):
    part = make_part(db, "Sediment Filter", 10, 5.0)
    booking = make_booking(db, customer, status=IN_PROGRESS, technician=technician)
    admin = make_user(db, "boss@roservices.app", role=Role.ADMIN)
    service = BookingService(db)

    service.add_parts(booking.id, admin, [(part.id, 3)])
    service.delete_booking(booking.id)

    db.refresh(part)
    assert part.quantity == 10
    assert [log.reason for log in db.query(StockLog).order_by(StockLog.id)] == [
        "Used in booking",
        "Booking deleted",
    ]
    with pytest.raises(NotFound):
        service.get_booking(booking.id, admin)
