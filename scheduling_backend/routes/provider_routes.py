from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from scheduling_backend.auth.dependencies import Principal, require_provider
from scheduling_backend.database import get_db
from scheduling_backend.models.provider import Provider
from scheduling_backend.schemas import (
    AppointmentResponse,
    AvailabilityTemplateRequest,
    PriceResponse,
    ProviderResponse,
    SlotBatchResponse,
    SlotResponse,
)
from scheduling_backend.services import accounts, appointments, catalog, slot_service
from scheduling_backend.services.slot_generator import AvailabilityTemplate

router = APIRouter(tags=['provider'], dependencies=[Depends(require_provider)])


class ServicesRequest(BaseModel):
    services: list[str]


class ServiceEntry(BaseModel):
    index: int
    service: str


class PriceRequest(BaseModel):
    service_name: str
    price: int = Field(ge=0)


def template_for_provider(provider: Provider, data: AvailabilityTemplateRequest) -> AvailabilityTemplate:
    return AvailabilityTemplate.from_strings(
        provider_id=provider.id,
        company_id=provider.company_id,
        weekdays=data.weekdays,
        shift_start=data.shift_start,
        shift_end=data.shift_end,
        period_minutes=data.period,
    )


@router.get('/me', response_model=ProviderResponse)
def get_profile(principal: Principal = Depends(require_provider), db: Session = Depends(get_db)):
    return accounts.get_by_id(db, Provider, principal.subject_id, 'provider')


@router.get('/appointments', response_model=list[AppointmentResponse])
def list_appointments(principal: Principal = Depends(require_provider), db: Session = Depends(get_db)):
    provider = accounts.get_by_id(db, Provider, principal.subject_id, 'provider')
    return appointments.list_appointments(db, provider_email=provider.email)


@router.post('/slots/generate', response_model=SlotBatchResponse, status_code=status.HTTP_201_CREATED)
def generate_slots(
    data: AvailabilityTemplateRequest,
    principal: Principal = Depends(require_provider),
    db: Session = Depends(get_db),
):
    provider = accounts.get_by_id(db, Provider, principal.subject_id, 'provider')
    slots = slot_service.generate_and_store(db, template_for_provider(provider, data))
    return SlotBatchResponse(created=len(slots), slots=[SlotResponse.model_validate(slot) for slot in slots])


@router.get('/slots', response_model=list[SlotResponse])
def list_slots(principal: Principal = Depends(require_provider), db: Session = Depends(get_db)):
    return slot_service.list_slots(db, provider_id=principal.subject_id, only_open=False)


@router.get('/services', response_model=list[ServiceEntry])
def list_services(principal: Principal = Depends(require_provider), db: Session = Depends(get_db)):
    return catalog.list_provider_services(db, principal.subject_id)


@router.post('/services', response_model=list[str])
def add_services(
    data: ServicesRequest,
    principal: Principal = Depends(require_provider),
    db: Session = Depends(get_db),
):
    return catalog.add_provider_services(db, principal.subject_id, data.services)


@router.delete('/services/{index}', response_model=list[str])
def remove_service(index: int, principal: Principal = Depends(require_provider), db: Session = Depends(get_db)):
    return catalog.remove_provider_service(db, principal.subject_id, index)


@router.post('/prices', response_model=PriceResponse)
def set_price(data: PriceRequest, principal: Principal = Depends(require_provider), db: Session = Depends(get_db)):
    return catalog.set_price(db, principal.subject_id, data.service_name, data.price)
