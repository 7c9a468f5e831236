"""Accounts for every authority tier, and the per-role login."""

import logging

from sqlalchemy.orm import Session

from scheduling_backend.auth.claims import Role, RoleKeyring, issue_claim
from scheduling_backend.auth.passwords import hash_password, verify_password
from scheduling_backend.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from scheduling_backend.database import storage_guard
from scheduling_backend.models.admin import Admin
from scheduling_backend.models.company import Company
from scheduling_backend.models.manager import Manager
from scheduling_backend.models.provider import Provider
from scheduling_backend.models.user import User

logger = logging.getLogger(__name__)

ACCOUNT_MODELS = {
    Role.USER: User,
    Role.PROVIDER: Provider,
    Role.MANAGER: Manager,
    Role.ADMIN: Admin,
    Role.SUPERUSER: User,
}

COUNTER_COLUMNS = {
    Manager: 'managers_number',
    Provider: 'providers_number',
}


def normalize_email(email: str) -> str:
    normalized = (email or '').strip().lower()
    if not normalized or '@' not in normalized:
        raise ValidationError('A valid email address is required.')
    return normalized


def get_by_id(db: Session, model, record_id: str, label: str):
    with storage_guard(db, f'load {label}'):
        record = db.query(model).filter(model.id == record_id).first()
    if record is None:
        raise NotFoundError(f'{label.capitalize()} not found.')
    return record


def get_by_email(db: Session, model, email: str, label: str):
    normalized = normalize_email(email)
    with storage_guard(db, f'load {label}'):
        record = db.query(model).filter(model.email == normalized).first()
    if record is None:
        raise NotFoundError(f'{label.capitalize()} not found.')
    return record


def list_records(db: Session, model, company_id: str | None = None) -> list:
    with storage_guard(db, f'list {model.__tablename__}'):
        query = db.query(model)
        if company_id is not None:
            query = query.filter(model.company_id == company_id)
        return query.order_by(model.created_at.asc()).all()


def authenticate(
    db: Session,
    role: Role,
    email: str,
    password: str,
    keyring: RoleKeyring,
    now=None,
):
    """Check credentials for ``role`` and return ``(token, account)``."""
    role = Role(role)
    model = ACCOUNT_MODELS[role]
    normalized = (email or '').strip().lower()

    with storage_guard(db, f'{role.value} login'):
        account = db.query(model).filter(model.email == normalized).first()

    if account is None or not verify_password(password, account.password_hash):
        logger.info('Rejected %s login for %s', role.value, normalized)
        raise InvalidCredentialsError('Invalid email or password.')

    if role is Role.SUPERUSER and not account.is_superuser:
        raise PermissionDeniedError('Access denied: user is not a superuser.')

    return issue_claim(account.id, role, keyring, now=now), account


def _create(db: Session, record, label: str):
    counter = COUNTER_COLUMNS.get(type(record))
    company = None
    if counter and record.company_id:
        company = get_by_id(db, Company, record.company_id, 'company')

    with storage_guard(db, f'create {label}'):
        db.add(record)
        if company is not None:
            setattr(company, counter, (getattr(company, counter) or 0) + 1)
        db.commit()
        db.refresh(record)
    logger.info('Created %s %s', label, record.id)
    return record


def _ensure_email_free(db: Session, model, email: str) -> None:
    with storage_guard(db, 'check email'):
        taken = db.query(model.id).filter(model.email == email).first()
    if taken:
        raise ConflictError('An account with this email already exists.')


def register_user(db: Session, name: str, email: str, password: str, phone: str | None = None) -> User:
    email = normalize_email(email)
    _ensure_email_free(db, User, email)
    return _create(
        db,
        User(name=name, email=email, password_hash=hash_password(password), phone=phone),
        'user',
    )


def add_admin(
    db: Session,
    email: str,
    password: str,
    company_id: str | None = None,
    name: str | None = None,
    phone: str | None = None,
) -> Admin:
    """Promote an existing user account to company admin."""
    email = normalize_email(email)
    user = get_by_email(db, User, email, 'user')
    _ensure_email_free(db, Admin, email)
    if company_id is not None:
        get_by_id(db, Company, company_id, 'company')

    return _create(
        db,
        Admin(
            user_id=user.id,
            name=name or user.name,
            email=email,
            password_hash=hash_password(password),
            phone=phone or user.phone,
            company_id=company_id,
        ),
        'admin',
    )


def add_staff(
    db: Session,
    model,
    email: str,
    password: str,
    company_id: str,
    name: str | None = None,
    phone: str | None = None,
):
    """Create a manager or provider attached to ``company_id``."""
    email = normalize_email(email)
    _ensure_email_free(db, model, email)
    return _create(
        db,
        model(
            name=name,
            email=email,
            password_hash=hash_password(password),
            phone=phone,
            company_id=company_id,
        ),
        model.__tablename__[:-1],
    )


def add_company(
    db: Session,
    name: str,
    address: str | None = None,
    phone: str | None = None,
    admin_id: str | None = None,
    services: list[str] | None = None,
) -> Company:
    admin = None
    if admin_id is not None:
        admin = get_by_id(db, Admin, admin_id, 'admin')

    company = _create(
        db,
        Company(
            name=name.strip(),
            address=address,
            phone=phone,
            admin_id=admin_id,
            admin_name=admin.name if admin else None,
            services=list(services or []),
        ),
        'company',
    )

    if admin is not None:
        with storage_guard(db, 'attach admin to company'):
            admin.company_id = company.id
            db.commit()

    return company


def company_of(db: Session, model, subject_id: str, label: str) -> str:
    account = get_by_id(db, model, subject_id, label)
    if not account.company_id:
        raise PermissionDeniedError(f'This {label} is not attached to a company.')
    return account.company_id
