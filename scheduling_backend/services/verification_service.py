import logging
import secrets
from datetime import datetime

from sqlalchemy.orm import Session

from scheduling_backend.core.errors import NotFoundError, ValidationError
from scheduling_backend.database import storage_guard
from scheduling_backend.models.user import User
from scheduling_backend.models.verification import Verification
from scheduling_backend.services.accounts import get_by_id, normalize_email

logger = logging.getLogger(__name__)

CODE_DIGITS = 6
EMAIL_SUBJECT = 'Email Verification Code'


def generate_code() -> str:
    return f'{secrets.randbelow(10 ** CODE_DIGITS):0{CODE_DIGITS}d}'


def latest_verification(db: Session, user_id: str) -> Verification:
    with storage_guard(db, 'load verification'):
        verification = db.query(Verification).filter(
            Verification.user_id == user_id,
        ).order_by(Verification.created_at.desc()).first()
    if verification is None:
        raise NotFoundError('Verification not found.')
    return verification


def send_code(db: Session, mailer, user_id: str, email: str) -> Verification:
    """Store a fresh code for the user and mail it to ``email``."""
    email = normalize_email(email)
    user = get_by_id(db, User, user_id, 'user')
    if user.email != email:
        raise ValidationError('Email does not belong to this user.')

    verification = Verification(user_id=user_id, email=email, email_code=generate_code())
    with storage_guard(db, 'save verification code'):
        db.add(verification)
        db.commit()
        db.refresh(verification)

    mailer.send(email, EMAIL_SUBJECT, f'Your verification code is: {verification.email_code}')
    return verification


def verify_code(db: Session, user_id: str, code: str) -> Verification:
    verification = latest_verification(db, user_id)
    if not secrets.compare_digest(verification.email_code, (code or '').strip()):
        raise ValidationError('Invalid verification code.')

    user = get_by_id(db, User, user_id, 'user')
    with storage_guard(db, 'update verification status'):
        verification.email_verified = True
        verification.email_verified_at = datetime.now()
        user.email_verified = True
        db.commit()
        db.refresh(verification)

    logger.info('Verified email for user %s', user_id)
    return verification
