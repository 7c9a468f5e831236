from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from scheduling_backend.auth.dependencies import Principal, require_manager
from scheduling_backend.database import get_db
from scheduling_backend.models.manager import Manager
from scheduling_backend.models.provider import Provider
from scheduling_backend.schemas import AccountCreateRequest, AccountResponse, AppointmentResponse, ProviderResponse
from scheduling_backend.services import accounts, appointments

router = APIRouter(tags=['manager'], dependencies=[Depends(require_manager)])


@router.get('/me', response_model=AccountResponse)
def get_profile(principal: Principal = Depends(require_manager), db: Session = Depends(get_db)):
    return accounts.get_by_id(db, Manager, principal.subject_id, 'manager')


@router.get('/providers', response_model=list[ProviderResponse])
def list_providers(principal: Principal = Depends(require_manager), db: Session = Depends(get_db)):
    company_id = accounts.company_of(db, Manager, principal.subject_id, 'manager')
    return accounts.list_records(db, Provider, company_id=company_id)


@router.post('/providers', response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
def add_provider(
    data: AccountCreateRequest,
    principal: Principal = Depends(require_manager),
    db: Session = Depends(get_db),
):
    company_id = accounts.company_of(db, Manager, principal.subject_id, 'manager')
    return accounts.add_staff(
        db,
        Provider,
        email=data.email,
        password=data.password,
        company_id=company_id,
        name=data.name,
        phone=data.phone,
    )


@router.get('/appointments', response_model=list[AppointmentResponse])
def list_company_appointments(principal: Principal = Depends(require_manager), db: Session = Depends(get_db)):
    company_id = accounts.company_of(db, Manager, principal.subject_id, 'manager')
    return appointments.list_appointments(db, company_id=company_id)
