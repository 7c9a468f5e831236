from datetime import date, datetime

from sqlalchemy.orm import Session

from scheduling_backend.core.errors import ValidationError
from scheduling_backend.database import storage_guard
from scheduling_backend.models.appointment import Appointment


def create_appointment(
    db: Session,
    customer_email: str,
    provider_email: str,
    start_time: datetime,
    end_time: datetime,
    customer_name: str | None = None,
    provider_name: str | None = None,
    company_id: str | None = None,
    services: list[str] | None = None,
    notes: str | None = None,
) -> Appointment:
    if end_time <= start_time:
        raise ValidationError('Appointment must end after it starts.')

    appointment = Appointment(
        customer_email=customer_email,
        customer_name=customer_name,
        provider_email=provider_email,
        provider_name=provider_name,
        company_id=company_id,
        services=list(services or []),
        date=start_time.date(),
        start_time=start_time,
        end_time=end_time,
        active=True,
        notes=notes,
    )
    with storage_guard(db, 'create appointment'):
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
    return appointment


def list_appointments(
    db: Session,
    customer_email: str | None = None,
    provider_email: str | None = None,
    company_id: str | None = None,
    on_date: date | None = None,
) -> list[Appointment]:
    with storage_guard(db, 'list appointments'):
        query = db.query(Appointment)
        if customer_email:
            query = query.filter(Appointment.customer_email == customer_email)
        if provider_email:
            query = query.filter(Appointment.provider_email == provider_email)
        if company_id:
            query = query.filter(Appointment.company_id == company_id)
        if on_date:
            query = query.filter(Appointment.date == on_date)
        return query.order_by(Appointment.start_time.asc()).all()
