import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

import pytest  # noqa: E402
from passlib.context import CryptContext  # noqa: E402

from scheduling_backend.auth import passwords  # noqa: E402
from scheduling_backend.auth.claims import RoleKeyring  # noqa: E402
from scheduling_backend.core.errors import MailDeliveryError  # noqa: E402
from scheduling_backend.database import Base, Database  # noqa: E402

TEST_ROLE_SECRETS = {
    'user': 'test-user-secret',
    'provider': 'test-provider-secret',
    'manager': 'test-manager-secret',
    'admin': 'test-admin-secret',
    'superuser': 'test-superuser-secret',
}


class FakeMailer:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send(self, to_address: str, subject: str, body: str) -> None:
        if self.fail:
            raise MailDeliveryError('Error sending email.')
        self.sent.append((to_address, subject, body))


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(passwords, 'pwd_context', CryptContext(schemes=['bcrypt'], bcrypt__rounds=4))


@pytest.fixture
def keyring() -> RoleKeyring:
    return RoleKeyring(TEST_ROLE_SECRETS)


@pytest.fixture
def database():
    database = Database('sqlite:///:memory:', timeout_seconds=1)
    database.ensure_schema()
    try:
        yield database
    finally:
        Base.metadata.drop_all(bind=database.engine)
        database.dispose()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def failing_mailer() -> FakeMailer:
    return FakeMailer(fail=True)
