import datetime as dt
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_PASSWORD_LENGTH = 8
MAX_NOTES_LENGTH = 600


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized or '@' not in normalized:
        raise ValueError('A valid email address is required.')
    return normalized


class CredentialsRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class AccountCreateRequest(BaseModel):
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str | None = None
    phone: str | None = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('name', 'phone')
    @classmethod
    def strip_optional(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TokenResponse(BaseModel):
    token: str
    id: str
    token_type: str = 'bearer'


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    email: str
    phone: str | None = None
    company_id: str | None = None
    created_at: datetime
    updated_at: datetime


class UserResponse(AccountResponse):
    email_verified: bool
    phone_verified: bool
    is_superuser: bool


class AdminResponse(AccountResponse):
    user_id: str | None = None


class ProviderResponse(AccountResponse):
    services: list[str] = []


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    admin_id: str | None = None
    admin_name: str | None = None
    address: str | None = None
    phone: str | None = None
    services: list[str] = []
    managers_number: int
    providers_number: int
    created_at: datetime
    updated_at: datetime


class AvailabilityTemplateRequest(BaseModel):
    weekdays: list[str]
    shift_start: str
    shift_end: str
    period: int


class SlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    provider_id: str
    company_id: str | None = None
    date: dt.date
    start_time: datetime
    end_time: datetime
    active: bool
    customer_email: str | None = None
    customer_name: str | None = None
    notes: str | None = None
    created_at: datetime


class SlotBatchResponse(BaseModel):
    created: int
    slots: list[SlotResponse]


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_email: str | None = None
    customer_name: str | None = None
    provider_email: str | None = None
    provider_name: str | None = None
    company_id: str | None = None
    services: list[str] = []
    date: dt.date | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    active: bool
    notes: str | None = None
    created_at: datetime


class PriceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    service_name: str
    provider_id: str
    price: int


class MessageResponse(BaseModel):
    message: str


def validate_notes(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_NOTES_LENGTH:
        raise ValueError(f'Notes must be {MAX_NOTES_LENGTH} characters or fewer.')

    return normalized
