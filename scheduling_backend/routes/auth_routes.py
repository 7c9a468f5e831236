from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from scheduling_backend.auth.claims import Role, RoleKeyring
from scheduling_backend.auth.dependencies import get_role_keys
from scheduling_backend.database import get_db
from scheduling_backend.schemas import AccountCreateRequest, CredentialsRequest, TokenResponse, UserResponse
from scheduling_backend.services import accounts

router = APIRouter(tags=['auth'])


def _login(role: Role, data: CredentialsRequest, db: Session, keyring: RoleKeyring) -> TokenResponse:
    token, account = accounts.authenticate(db, role, data.email, data.password, keyring)
    return TokenResponse(token=token, id=account.id)


@router.post('/register', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: AccountCreateRequest, db: Session = Depends(get_db)):
    return accounts.register_user(db, name=data.name, email=data.email, password=data.password, phone=data.phone)


@router.post('/login', response_model=TokenResponse)
def user_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    keyring: RoleKeyring = Depends(get_role_keys),
):
    return _login(Role.USER, data, db, keyring)


@router.post('/provider/login', response_model=TokenResponse)
def provider_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    keyring: RoleKeyring = Depends(get_role_keys),
):
    return _login(Role.PROVIDER, data, db, keyring)


@router.post('/manager/login', response_model=TokenResponse)
def manager_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    keyring: RoleKeyring = Depends(get_role_keys),
):
    return _login(Role.MANAGER, data, db, keyring)


@router.post('/admin/login', response_model=TokenResponse)
def admin_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    keyring: RoleKeyring = Depends(get_role_keys),
):
    return _login(Role.ADMIN, data, db, keyring)


@router.post('/superuser/login', response_model=TokenResponse)
def superuser_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    keyring: RoleKeyring = Depends(get_role_keys),
):
    return _login(Role.SUPERUSER, data, db, keyring)
