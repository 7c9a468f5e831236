import logging
from datetime import datetime

from sqlalchemy.orm import Session

from scheduling_backend.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from scheduling_backend.database import storage_guard
from scheduling_backend.models.available_appointment import AvailableAppointment
from scheduling_backend.services.slot_generator import AvailabilityTemplate, SlotDraft, generate_slots

logger = logging.getLogger(__name__)


def create_slots(db: Session, drafts: list[SlotDraft]) -> list[AvailableAppointment]:
    """Persist a generated batch; any storage failure fails the whole batch."""
    slots = [
        AvailableAppointment(
            provider_id=draft.provider_id,
            company_id=draft.company_id,
            date=draft.date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            active=draft.active,
        )
        for draft in drafts
    ]
    if not slots:
        return []

    with storage_guard(db, 'insert generated slots'):
        db.add_all(slots)
        db.commit()
        for slot in slots:
            db.refresh(slot)

    return slots


def generate_and_store(db: Session, template: AvailabilityTemplate, now: datetime | None = None) -> list[AvailableAppointment]:
    drafts = generate_slots(template, now or datetime.now())
    slots = create_slots(db, drafts)
    logger.info('Generated %d slots for provider %s', len(slots), template.provider_id)
    return slots


def list_slots(
    db: Session,
    provider_id: str | None = None,
    company_id: str | None = None,
    only_open: bool = True,
    since: datetime | None = None,
) -> list[AvailableAppointment]:
    with storage_guard(db, 'list slots'):
        query = db.query(AvailableAppointment)
        if provider_id:
            query = query.filter(AvailableAppointment.provider_id == provider_id)
        if company_id:
            query = query.filter(AvailableAppointment.company_id == company_id)
        if only_open:
            query = query.filter(AvailableAppointment.active.is_(False))
        if since is not None:
            query = query.filter(AvailableAppointment.start_time >= since)
        return query.order_by(AvailableAppointment.start_time.asc()).all()


def list_bookings_for_customer(db: Session, customer_id: str) -> list[AvailableAppointment]:
    with storage_guard(db, 'list bookings'):
        return db.query(AvailableAppointment).filter(
            AvailableAppointment.customer_id == customer_id,
            AvailableAppointment.active.is_(True),
        ).order_by(AvailableAppointment.start_time.asc()).all()


def book_slot(
    db: Session,
    slot_id: str,
    customer_id: str,
    customer_email: str,
    customer_name: str | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> AvailableAppointment:
    with storage_guard(db, 'book slot'):
        slot = db.query(AvailableAppointment).filter(AvailableAppointment.id == slot_id).first()
        if slot is None:
            raise NotFoundError('Slot not found.')
        if slot.active:
            raise ConflictError('This slot is already booked.')
        if slot.start_time <= (now or datetime.now()):
            raise ValidationError('Only future slots can be booked.')

        slot.active = True
        slot.customer_id = customer_id
        slot.customer_email = customer_email
        slot.customer_name = customer_name
        slot.notes = notes
        db.commit()
        db.refresh(slot)

    return slot


def cancel_booking(db: Session, slot_id: str, customer_id: str) -> AvailableAppointment:
    with storage_guard(db, 'cancel booking'):
        slot = db.query(AvailableAppointment).filter(AvailableAppointment.id == slot_id).first()
        if slot is None or not slot.active:
            raise NotFoundError('Booking not found.')
        if slot.customer_id != customer_id:
            raise PermissionDeniedError('Only the customer who booked this slot can cancel it.')

        slot.active = False
        slot.customer_id = None
        slot.customer_email = None
        slot.customer_name = None
        slot.notes = None
        db.commit()
        db.refresh(slot)

    return slot
