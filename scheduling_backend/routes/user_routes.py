from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from scheduling_backend.auth.dependencies import Principal, require_user
from scheduling_backend.database import get_db
from scheduling_backend.models.provider import Provider
from scheduling_backend.models.user import User
from scheduling_backend.schemas import AppointmentResponse, SlotResponse, UserResponse, validate_notes
from scheduling_backend.services import accounts, appointments, patches, slot_service

router = APIRouter(tags=['user'], dependencies=[Depends(require_user)])


class BookSlotRequest(BaseModel):
    notes: str | None = None

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return validate_notes(value)


class CreateAppointmentRequest(BaseModel):
    provider_email: str
    start_time: datetime
    end_time: datetime
    services: list[str] = []
    notes: str | None = None

    @field_validator('provider_email')
    @classmethod
    def validate_provider_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return validate_notes(value)


@router.get('/me', response_model=UserResponse)
def get_profile(principal: Principal = Depends(require_user), db: Session = Depends(get_db)):
    return accounts.get_by_id(db, User, principal.subject_id, 'user')


@router.patch('/me', response_model=UserResponse)
def update_profile(
    data: patches.UserPatch,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    user = accounts.get_by_id(db, User, principal.subject_id, 'user')
    return patches.apply_patch(db, user, data, patches.USER_SELF_FIELDS)


@router.get('/slots', response_model=list[SlotResponse])
def list_open_slots(
    provider_id: str | None = Query(default=None),
    company_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return slot_service.list_slots(
        db,
        provider_id=provider_id,
        company_id=company_id,
        only_open=True,
        since=datetime.now(),
    )


@router.post('/slots/{slot_id}/book', response_model=SlotResponse)
def book_slot(
    slot_id: str,
    data: BookSlotRequest,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    user = accounts.get_by_id(db, User, principal.subject_id, 'user')
    return slot_service.book_slot(
        db,
        slot_id,
        customer_id=user.id,
        customer_email=user.email,
        customer_name=user.name,
        notes=data.notes,
    )


@router.delete('/slots/{slot_id}/book', response_model=SlotResponse)
def cancel_booking(slot_id: str, principal: Principal = Depends(require_user), db: Session = Depends(get_db)):
    return slot_service.cancel_booking(db, slot_id, customer_id=principal.subject_id)


@router.get('/bookings', response_model=list[SlotResponse])
def list_bookings(principal: Principal = Depends(require_user), db: Session = Depends(get_db)):
    return slot_service.list_bookings_for_customer(db, principal.subject_id)


@router.post('/appointments', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    user = accounts.get_by_id(db, User, principal.subject_id, 'user')
    provider = accounts.get_by_email(db, Provider, data.provider_email, 'provider')
    return appointments.create_appointment(
        db,
        customer_email=user.email,
        customer_name=user.name,
        provider_email=provider.email,
        provider_name=provider.name,
        company_id=provider.company_id,
        start_time=data.start_time,
        end_time=data.end_time,
        services=data.services,
        notes=data.notes,
    )


@router.get('/appointments', response_model=list[AppointmentResponse])
def list_my_appointments(principal: Principal = Depends(require_user), db: Session = Depends(get_db)):
    user = accounts.get_by_id(db, User, principal.subject_id, 'user')
    return appointments.list_appointments(db, customer_email=user.email)
