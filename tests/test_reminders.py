import asyncio
from datetime import datetime

import pytest

from conftest import FakeMailer, make_booking, make_user
from roservice.models import BookingStatus, Notification, Role
from roservice.services.notification_service import NotificationService
from roservice.services.reminder_service import send_due_service_reminders
from roservice.worker import WorkerSettings, due_service_reminder_task

NOW = datetime(2025, 3, 1, 10, 0)


def test_due_booking_notifies_everyone_once(db, customer, technician, tech_user):
    admin = make_user(db, "admin@roservices.app", role=Role.ADMIN, name="Admin")
    booking = make_booking(
        db, customer, status=BookingStatus.COMPLETED, technician=technician, service_date=datetime(2025, 1, 15)
    )
    mailer = FakeMailer()

    summary = send_due_service_reminders(db, NotificationService(db, mailer), now=NOW)

    assert summary == {"due": 1, "reminded": 1, "notifications": 3, "emails_sent": 2}
    recipients = sorted(n.user_id for n in db.query(Notification).all())
    assert recipients == sorted([admin.id, tech_user.id, customer.id])
    assert sorted(m["to"] for m in mailer.sent) == sorted([admin.email, customer.email])
    db.refresh(booking)
    assert booking.reminder_sent_at == NOW

    second = send_due_service_reminders(db, NotificationService(db, mailer), now=NOW)
    assert second["due"] == 0
    assert db.query(Notification).count() == 3


def test_recent_or_open_bookings_are_skipped(db, customer):
    make_booking(db, customer, status=BookingStatus.COMPLETED, service_date=datetime(2025, 2, 20))
    make_booking(db, customer, status=BookingStatus.IN_PROGRESS, service_date=datetime(2024, 12, 1))
    make_booking(db, customer, status=BookingStatus.CANCELED, service_date=datetime(2024, 12, 1))

    summary = send_due_service_reminders(db, NotificationService(db, FakeMailer()), now=NOW)

    assert summary["due"] == 0
    assert db.query(Notification).count() == 0


def test_booking_without_technician_still_reminds_customer(db, customer):
    make_booking(db, customer, status=BookingStatus.COMPLETED, service_date=datetime(2025, 1, 1))

    summary = send_due_service_reminders(db, NotificationService(db), now=NOW)

    assert summary["reminded"] == 1
    assert summary["emails_sent"] == 0
    notification = db.query(Notification).one()
    assert notification.user_id == customer.id
    assert notification.title == "It's Time for Your Next Service"


class CrashingMailer(FakeMailer):
    def send(self, to, subject, text):
        raise RuntimeError("worker killed mid-send")


def test_reminder_marker_is_committed_before_emails(db, customer):
    booking = make_booking(db, customer, status=BookingStatus.COMPLETED, service_date=datetime(2025, 1, 1))

    with pytest.raises(RuntimeError):
        send_due_service_reminders(db, NotificationService(db, CrashingMailer()), now=NOW)
    db.rollback()

    db.refresh(booking)
    assert booking.reminder_sent_at == NOW
    assert db.query(Notification).count() == 1

    mailer = FakeMailer()
    rerun = send_due_service_reminders(db, NotificationService(db, mailer), now=NOW)
    assert rerun["due"] == 0
    assert mailer.sent == []


def test_worker_task_runs_scan(database, db, customer):
    make_booking(db, customer, status=BookingStatus.COMPLETED, service_date=datetime(2020, 1, 1))
    mailer = FakeMailer()

    summary = asyncio.run(due_service_reminder_task({"database": database, "mailer": mailer, "job_id": "t1"}))

    assert summary["reminded"] == 1
    assert [m["to"] for m in mailer.sent] == [customer.email]


def test_worker_schedules_daily_cron():
    assert due_service_reminder_task in WorkerSettings.functions
    assert len(WorkerSettings.cron_jobs) == 1
