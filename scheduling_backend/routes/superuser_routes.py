from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from scheduling_backend.auth.dependencies import require_superuser
from scheduling_backend.database import get_db
from scheduling_backend.models.admin import Admin
from scheduling_backend.models.company import Company
from scheduling_backend.models.user import User
from scheduling_backend.schemas import (
    AccountCreateRequest,
    AdminResponse,
    AppointmentResponse,
    CompanyResponse,
    UserResponse,
)
from scheduling_backend.services import accounts, appointments, patches

router = APIRouter(tags=['superuser'], dependencies=[Depends(require_superuser)])


class CreateAdminRequest(AccountCreateRequest):
    company_id: str | None = None


class CreateCompanyRequest(BaseModel):
    name: str
    address: str | None = None
    phone: str | None = None
    admin_id: str | None = None
    services: list[str] = []


@router.get('/users', response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return accounts.list_records(db, User)


@router.patch('/users/{user_id}', response_model=UserResponse)
def update_user(user_id: str, data: patches.UserPatch, db: Session = Depends(get_db)):
    user = accounts.get_by_id(db, User, user_id, 'user')
    return patches.apply_patch(db, user, data, patches.USER_SUPERUSER_FIELDS)


@router.get('/admins', response_model=list[AdminResponse])
def list_admins(db: Session = Depends(get_db)):
    return accounts.list_records(db, Admin)


@router.post('/admins', response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def add_admin(data: CreateAdminRequest, db: Session = Depends(get_db)):
    return accounts.add_admin(
        db,
        email=data.email,
        password=data.password,
        company_id=data.company_id,
        name=data.name,
        phone=data.phone,
    )


@router.patch('/admins/{admin_id}', response_model=AdminResponse)
def update_admin(admin_id: str, data: patches.AdminPatch, db: Session = Depends(get_db)):
    admin = accounts.get_by_id(db, Admin, admin_id, 'admin')
    return patches.apply_patch(db, admin, data, patches.ADMIN_SUPERUSER_FIELDS)


@router.get('/companies', response_model=list[CompanyResponse])
def list_companies(db: Session = Depends(get_db)):
    return accounts.list_records(db, Company)


@router.post('/companies', response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
def add_company(data: CreateCompanyRequest, db: Session = Depends(get_db)):
    return accounts.add_company(
        db,
        name=data.name,
        address=data.address,
        phone=data.phone,
        admin_id=data.admin_id,
        services=data.services,
    )


@router.get('/companies/{company_id}', response_model=CompanyResponse)
def get_company(company_id: str, db: Session = Depends(get_db)):
    return accounts.get_by_id(db, Company, company_id, 'company')


@router.patch('/companies/{company_id}', response_model=CompanyResponse)
def update_company(company_id: str, data: patches.CompanyPatch, db: Session = Depends(get_db)):
    company = accounts.get_by_id(db, Company, company_id, 'company')
    return patches.apply_patch(db, company, data, patches.COMPANY_SUPERUSER_FIELDS)


@router.get('/appointments', response_model=list[AppointmentResponse])
def list_all_appointments(db: Session = Depends(get_db)):
    return appointments.list_appointments(db)
