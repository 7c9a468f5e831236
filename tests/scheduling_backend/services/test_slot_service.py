from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from scheduling_backend.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from scheduling_backend.models.available_appointment import AvailableAppointment
from scheduling_backend.services import slot_service
from scheduling_backend.services.slot_generator import AvailabilityTemplate

MONDAY_MORNING = datetime(2026, 2, 2, 8, 0)


def monday_template(period: int = 30) -> AvailabilityTemplate:
    return AvailabilityTemplate.from_strings(
        provider_id='provider-1',
        company_id='company-1',
        weekdays=['Monday'],
        shift_start='09:00',
        shift_end='10:00',
        period_minutes=period,
    )


def test_generate_and_store_persists_every_slot_unbooked(db) -> None:
    slots = slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)

    stored = db.query(AvailableAppointment).order_by(AvailableAppointment.start_time).all()
    assert len(slots) == 8
    assert [slot.id for slot in stored] == [slot.id for slot in slots]
    assert all(slot.active is False for slot in stored)
    assert all(slot.created_at is not None for slot in stored)
    assert stored[0].start_time == datetime(2026, 2, 2, 9, 0)


@pytest.mark.parametrize('period', [0, -30])
def test_non_positive_period_inserts_nothing(db, period: int) -> None:
    with pytest.raises(ValidationError):
        slot_service.generate_and_store(db, monday_template(period=period), now=MONDAY_MORNING)

    assert db.query(AvailableAppointment).count() == 0


def test_storage_failure_reports_the_whole_batch(db, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_commit():
        raise OperationalError('INSERT', {}, Exception('timeout'))

    monkeypatch.setattr(db, 'commit', failing_commit)

    with pytest.raises(StorageError):
        slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)


def test_rerunning_generation_duplicates_slots(db) -> None:
    slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)
    slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)

    assert db.query(AvailableAppointment).count() == 16


def test_list_slots_hides_booked_and_past_slots(db) -> None:
    slots = slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)
    slot_service.book_slot(db, slots[1].id, 'user-1', 'user@example.com', now=MONDAY_MORNING)

    open_slots = slot_service.list_slots(db, provider_id='provider-1', since=datetime(2026, 2, 2, 9, 15))

    assert slots[0].id not in {slot.id for slot in open_slots}
    assert slots[1].id not in {slot.id for slot in open_slots}
    assert len(open_slots) == 6


def test_book_slot_marks_active_and_attaches_customer(db) -> None:
    slot = slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)[0]

    booked = slot_service.book_slot(
        db,
        slot.id,
        customer_id='user-1',
        customer_email='user@example.com',
        customer_name='Ada',
        notes='first visit',
        now=MONDAY_MORNING,
    )

    assert booked.active is True
    assert booked.customer_email == 'user@example.com'
    assert booked.customer_name == 'Ada'
    assert booked.notes == 'first visit'
    assert booked.start_time == slot.start_time


def test_booking_an_already_booked_slot_conflicts(db) -> None:
    slot = slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)[0]
    slot_service.book_slot(db, slot.id, 'user-1', 'user@example.com', now=MONDAY_MORNING)

    with pytest.raises(ConflictError):
        slot_service.book_slot(db, slot.id, 'user-2', 'other@example.com', now=MONDAY_MORNING)


def test_booking_unknown_slot_is_not_found(db) -> None:
    with pytest.raises(NotFoundError):
        slot_service.book_slot(db, 'missing', 'user-1', 'user@example.com', now=MONDAY_MORNING)


def test_booking_a_past_slot_is_rejected(db) -> None:
    slot = slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)[0]

    with pytest.raises(ValidationError):
        slot_service.book_slot(db, slot.id, 'user-1', 'user@example.com', now=datetime(2026, 2, 2, 9, 0))


def test_cancel_booking_reopens_slot_for_owner_only(db) -> None:
    slot = slot_service.generate_and_store(db, monday_template(), now=MONDAY_MORNING)[0]
    slot_service.book_slot(db, slot.id, 'user-1', 'user@example.com', now=MONDAY_MORNING)

    with pytest.raises(PermissionDeniedError):
        slot_service.cancel_booking(db, slot.id, 'user-2')

    reopened = slot_service.cancel_booking(db, slot.id, 'user-1')

    assert reopened.active is False
    assert reopened.customer_id is None
    assert slot_service.list_bookings_for_customer(db, 'user-1') == []
