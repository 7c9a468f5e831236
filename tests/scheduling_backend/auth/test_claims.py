from datetime import datetime, timedelta, timezone

import jwt
import pytest

from scheduling_backend.auth.claims import Role, RoleKeyring, issue_claim, verify_claim
from scheduling_backend.core import config
from scheduling_backend.core.errors import (
    AuthError,
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    RoleMismatchError,
)

ISSUED_AT = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def test_issued_claim_carries_subject_role_and_24_hour_expiry(keyring: RoleKeyring) -> None:
    token = issue_claim('user-42', Role.USER, keyring, now=ISSUED_AT)

    payload = jwt.decode(
        token,
        'test-user-secret',
        algorithms=['HS256'],
        options={'verify_exp': False, 'verify_iat': False},
    )

    assert payload['sub'] == 'user-42'
    assert payload['role'] == 'user'
    assert payload['exp'] - payload['iat'] == 24 * 3600


@pytest.mark.parametrize('role', list(Role))
def test_claim_round_trips_for_its_own_role(role: Role, keyring: RoleKeyring) -> None:
    token = issue_claim('subject-1', role, keyring, now=ISSUED_AT)

    assert verify_claim(token, role, keyring, now=ISSUED_AT + timedelta(hours=1)) == 'subject-1'


def test_admin_token_is_rejected_at_superuser_gate(keyring: RoleKeyring) -> None:
    token = issue_claim('admin-1', Role.ADMIN, keyring, now=ISSUED_AT)

    with pytest.raises(InvalidTokenError):
        verify_claim(token, Role.SUPERUSER, keyring, now=ISSUED_AT)


def test_forged_superuser_payload_signed_with_admin_secret_is_rejected(keyring: RoleKeyring) -> None:
    forged = jwt.encode(
        {'sub': 'admin-1', 'role': 'superuser', 'exp': int((ISSUED_AT + timedelta(hours=1)).timestamp())},
        'test-admin-secret',
        algorithm='HS256',
    )

    with pytest.raises(InvalidTokenError):
        verify_claim(forged, Role.SUPERUSER, keyring, now=ISSUED_AT)


def test_token_expires_after_24_hours(keyring: RoleKeyring) -> None:
    token = issue_claim('user-1', Role.USER, keyring, now=ISSUED_AT)

    assert verify_claim(token, Role.USER, keyring, now=ISSUED_AT + timedelta(hours=23)) == 'user-1'
    with pytest.raises(ExpiredTokenError):
        verify_claim(token, Role.USER, keyring, now=ISSUED_AT + timedelta(hours=25))


@pytest.mark.parametrize('token', [None, '', '   '])
def test_missing_token_is_its_own_error(token, keyring: RoleKeyring) -> None:
    with pytest.raises(MissingTokenError):
        verify_claim(token, Role.USER, keyring, now=ISSUED_AT)


@pytest.mark.parametrize('token', ['not-a-jwt', 'a.b.c'])
def test_malformed_token_is_invalid(token: str, keyring: RoleKeyring) -> None:
    with pytest.raises(InvalidTokenError):
        verify_claim(token, Role.USER, keyring, now=ISSUED_AT)


def test_token_without_role_claim_is_invalid(keyring: RoleKeyring) -> None:
    token = jwt.encode(
        {'sub': 'user-1', 'exp': int((ISSUED_AT + timedelta(hours=1)).timestamp())},
        'test-user-secret',
        algorithm='HS256',
    )

    with pytest.raises(InvalidTokenError):
        verify_claim(token, Role.USER, keyring, now=ISSUED_AT)


def test_wrong_role_with_valid_signature_is_a_role_mismatch() -> None:
    # two roles sharing a key is the only way a signature survives a role switch
    shared = RoleKeyring({**config.DEFAULT_ROLE_SECRETS, 'admin': 'shared', 'superuser': 'shared'})
    token = issue_claim('admin-1', Role.ADMIN, shared, now=ISSUED_AT)

    with pytest.raises(RoleMismatchError) as exception_info:
        verify_claim(token, Role.SUPERUSER, shared, now=ISSUED_AT)

    assert exception_info.value.status_code == 403
    assert isinstance(exception_info.value, AuthError)


def test_keyring_requires_a_secret_for_every_role() -> None:
    with pytest.raises(ValueError):
        RoleKeyring({'user': 'only-one'})


def test_runtime_config_rejects_shared_role_secrets() -> None:
    with pytest.raises(RuntimeError):
        config.validate_runtime_config({'user': 'same', 'admin': 'same'})


def test_load_role_keys_reads_each_role_from_environment() -> None:
    keys = config.load_role_keys({'ADMIN_SECRET_KEY': 'from-env'})

    assert keys['admin'] == 'from-env'
    assert keys['user'] == config.DEFAULT_ROLE_SECRETS['user']
