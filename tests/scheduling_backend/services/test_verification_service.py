import pytest

from scheduling_backend.core.errors import MailDeliveryError, NotFoundError, ValidationError
from scheduling_backend.models.user import User
from scheduling_backend.models.verification import Verification
from scheduling_backend.services import accounts, verification_service


@pytest.fixture
def user(db) -> User:
    return accounts.register_user(db, name='Ada', email='ada@example.com', password='correct-horse')


def test_generate_code_is_six_digits() -> None:
    for _ in range(20):
        code = verification_service.generate_code()
        assert len(code) == 6
        assert code.isdigit()


def test_send_code_stores_and_mails_code(db, mailer, user) -> None:
    verification = verification_service.send_code(db, mailer, user.id, 'ADA@example.com')

    assert mailer.sent == [
        ('ada@example.com', 'Email Verification Code', f'Your verification code is: {verification.email_code}'),
    ]
    assert verification.email_verified is False


def test_send_code_rejects_foreign_email(db, mailer, user) -> None:
    with pytest.raises(ValidationError):
        verification_service.send_code(db, mailer, user.id, 'someone@example.com')

    assert mailer.sent == []


def test_mail_failure_surfaces_as_single_error(db, failing_mailer, user) -> None:
    with pytest.raises(MailDeliveryError):
        verification_service.send_code(db, failing_mailer, user.id, user.email)


def test_verify_code_marks_user_verified(db, mailer, user) -> None:
    verification = verification_service.send_code(db, mailer, user.id, user.email)

    verified = verification_service.verify_code(db, user.id, verification.email_code)

    db.refresh(user)
    assert verified.email_verified is True
    assert verified.email_verified_at is not None
    assert user.email_verified is True


def test_verify_code_rejects_wrong_code(db, mailer, user) -> None:
    verification = verification_service.send_code(db, mailer, user.id, user.email)
    wrong = '000000' if verification.email_code != '000000' else '111111'

    with pytest.raises(ValidationError):
        verification_service.verify_code(db, user.id, wrong)

    assert db.query(Verification).filter(Verification.email_verified.is_(True)).count() == 0


def test_verify_without_code_is_not_found(db, user) -> None:
    with pytest.raises(NotFoundError):
        verification_service.verify_code(db, user.id, '123456')
