from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from scheduling_backend.auth.dependencies import Principal, require_admin
from scheduling_backend.core.errors import PermissionDeniedError
from scheduling_backend.database import get_db
from scheduling_backend.models.admin import Admin
from scheduling_backend.models.company import Company
from scheduling_backend.models.manager import Manager
from scheduling_backend.models.provider import Provider
from scheduling_backend.routes.provider_routes import template_for_provider
from scheduling_backend.schemas import (
    AccountCreateRequest,
    AccountResponse,
    AdminResponse,
    AvailabilityTemplateRequest,
    CompanyResponse,
    ProviderResponse,
    SlotBatchResponse,
    SlotResponse,
)
from scheduling_backend.services import accounts, patches, slot_service

router = APIRouter(tags=['admin'], dependencies=[Depends(require_admin)])


def own_company_id(db: Session, principal: Principal) -> str:
    return accounts.company_of(db, Admin, principal.subject_id, 'admin')


def _add_staff(model, data: AccountCreateRequest, principal: Principal, db: Session):
    return accounts.add_staff(
        db,
        model,
        email=data.email,
        password=data.password,
        company_id=own_company_id(db, principal),
        name=data.name,
        phone=data.phone,
    )


@router.get('/me', response_model=AdminResponse)
def get_profile(principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return accounts.get_by_id(db, Admin, principal.subject_id, 'admin')


@router.patch('/me', response_model=AdminResponse)
def update_profile(
    data: patches.AdminPatch,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    admin = accounts.get_by_id(db, Admin, principal.subject_id, 'admin')
    return patches.apply_patch(db, admin, data, patches.ADMIN_SELF_FIELDS)


@router.get('/managers', response_model=list[AccountResponse])
def list_managers(principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return accounts.list_records(db, Manager, company_id=own_company_id(db, principal))


@router.post('/managers', response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def add_manager(data: AccountCreateRequest, principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return _add_staff(Manager, data, principal, db)


@router.get('/providers', response_model=list[ProviderResponse])
def list_providers(principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return accounts.list_records(db, Provider, company_id=own_company_id(db, principal))


@router.post('/providers', response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
def add_provider(data: AccountCreateRequest, principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return _add_staff(Provider, data, principal, db)


@router.get('/company', response_model=CompanyResponse)
def get_company(principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return accounts.get_by_id(db, Company, own_company_id(db, principal), 'company')


@router.patch('/company', response_model=CompanyResponse)
def update_company(
    data: patches.CompanyPatch,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    company = accounts.get_by_id(db, Company, own_company_id(db, principal), 'company')
    return patches.apply_patch(db, company, data, patches.COMPANY_ADMIN_FIELDS)


@router.post(
    '/providers/{provider_id}/slots/generate',
    response_model=SlotBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_provider_slots(
    provider_id: str,
    data: AvailabilityTemplateRequest,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    provider = accounts.get_by_id(db, Provider, provider_id, 'provider')
    if provider.company_id != own_company_id(db, principal):
        raise PermissionDeniedError('Provider belongs to another company.')

    slots = slot_service.generate_and_store(db, template_for_provider(provider, data))
    return SlotBatchResponse(created=len(slots), slots=[SlotResponse.model_validate(slot) for slot in slots])
