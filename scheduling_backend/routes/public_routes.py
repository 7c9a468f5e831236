from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from scheduling_backend.database import get_db
from scheduling_backend.models.provider import Provider
from scheduling_backend.models.verification import Verification
from scheduling_backend.schemas import MessageResponse, PriceResponse, ProviderResponse
from scheduling_backend.services import accounts, catalog, verification_service

router = APIRouter(tags=['public'])


class SendCodeRequest(BaseModel):
    user_id: str
    email: str


class VerifyCodeRequest(BaseModel):
    user_id: str
    code: str

    @field_validator('code')
    @classmethod
    def validate_code(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized.isdigit() or len(normalized) != verification_service.CODE_DIGITS:
            raise ValueError('Verification code must be 6 digits.')
        return normalized


class VerificationResponse(BaseModel):
    user_id: str
    email: str
    email_verified: bool

    @classmethod
    def from_record(cls, record: Verification) -> 'VerificationResponse':
        return cls(user_id=record.user_id, email=record.email, email_verified=record.email_verified)


def get_mailer(request: Request):
    return request.app.state.mailer


@router.get('/prices', response_model=list[PriceResponse])
def list_prices(provider_id: str | None = Query(default=None), db: Session = Depends(get_db)):
    return catalog.list_prices(db, provider_id=provider_id)


@router.get('/companies/{company_id}/providers', response_model=list[ProviderResponse])
def list_company_providers(company_id: str, db: Session = Depends(get_db)):
    return accounts.list_records(db, Provider, company_id=company_id)


@router.post('/verification/send', response_model=MessageResponse)
def send_verification_code(data: SendCodeRequest, db: Session = Depends(get_db), mailer=Depends(get_mailer)):
    verification_service.send_code(db, mailer, data.user_id, data.email)
    return MessageResponse(message='Verification code sent to your email.')


@router.post('/verification/verify', response_model=VerificationResponse)
def verify_code(data: VerifyCodeRequest, db: Session = Depends(get_db)):
    return VerificationResponse.from_record(verification_service.verify_code(db, data.user_id, data.code))


@router.get('/verification/{user_id}', response_model=VerificationResponse)
def get_verification(user_id: str, db: Session = Depends(get_db)):
    return VerificationResponse.from_record(verification_service.latest_verification(db, user_id))
