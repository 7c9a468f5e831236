"""Partial updates with an explicit list of mutable fields per entity.

A patch is a pydantic model whose fields are all optional. Only the fields the
caller actually sent are applied, and only if the entity allows them.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.orm import Session

from scheduling_backend.auth.passwords import hash_password
from scheduling_backend.core.errors import ValidationError
from scheduling_backend.database import storage_guard
from scheduling_backend.schemas import MIN_PASSWORD_LENGTH


class Patch(BaseModel):
    model_config = ConfigDict(extra='forbid')

    @field_validator('*', mode='before')
    @classmethod
    def strip_strings(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class UserPatch(Patch):
    name: str | None = None
    phone: str | None = None
    password: str | None = None
    company_id: str | None = None
    is_superuser: bool | None = None


class AdminPatch(Patch):
    name: str | None = None
    phone: str | None = None
    password: str | None = None
    company_id: str | None = None


class CompanyPatch(Patch):
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    admin_id: str | None = None
    admin_name: str | None = None
    services: list[str] | None = None


# who may change what: a user edits their own profile, a superuser edits anyone
USER_SELF_FIELDS = frozenset({'name', 'phone', 'password'})
USER_SUPERUSER_FIELDS = frozenset({'name', 'phone', 'password', 'company_id', 'is_superuser'})
ADMIN_SELF_FIELDS = frozenset({'name', 'phone', 'password'})
ADMIN_SUPERUSER_FIELDS = frozenset({'name', 'phone', 'password', 'company_id'})
COMPANY_ADMIN_FIELDS = frozenset({'address', 'phone', 'services'})
COMPANY_SUPERUSER_FIELDS = frozenset({'name', 'address', 'phone', 'admin_id', 'admin_name', 'services'})


def changed_fields(patch: Patch, mutable_fields: frozenset[str]) -> dict:
    values = patch.model_dump(exclude_unset=True)
    forbidden = sorted(set(values) - mutable_fields)
    if forbidden:
        raise ValidationError(f"Fields cannot be changed: {', '.join(forbidden)}.")

    if 'password' in values:
        password = values.pop('password')
        if password is None or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        values['password_hash'] = hash_password(password)

    for key in ('name', 'email'):
        if key in values and not values[key]:
            raise ValidationError(f'{key} cannot be empty.')

    return values


def apply_patch(db: Session, entity, patch: Patch, mutable_fields: frozenset[str]):
    values = changed_fields(patch, mutable_fields)
    if not values:
        return entity

    columns = entity.__table__.columns
    for key, value in values.items():
        if value is None and not columns[key].nullable:
            raise ValidationError(f'{key} cannot be null.')

    with storage_guard(db, f'update {entity.__tablename__}'):
        for key, value in values.items():
            setattr(entity, key, value)
        entity.updated_at = datetime.now()
        db.commit()
        db.refresh(entity)

    return entity
