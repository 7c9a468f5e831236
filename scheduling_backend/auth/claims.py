"""Per-role signed bearer tokens.

Every role signs with its own secret, so a token minted for one role cannot
pass another role's gate. Verification fails closed: a token is either valid
for exactly the expected role or rejected.
"""

import enum
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone

import jwt

from scheduling_backend.core import config
from scheduling_backend.core.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    RoleMismatchError,
)

REQUIRED_CLAIMS = ["sub", "role", "exp"]


class Role(str, enum.Enum):
    USER = "user"
    PROVIDER = "provider"
    MANAGER = "manager"
    ADMIN = "admin"
    SUPERUSER = "superuser"


class RoleKeyring:
    """Immutable mapping from role to signing secret, built once at startup."""

    def __init__(self, secrets: Mapping[str, str], algorithm: str = config.JWT_ALGORITHM) -> None:
        missing = [role.value for role in Role if not secrets.get(role.value)]
        if missing:
            raise ValueError(f"Missing signing secret for roles: {', '.join(missing)}")
        self._secrets = {role: secrets[role.value] for role in Role}
        self.algorithm = algorithm

    @classmethod
    def from_config(cls) -> "RoleKeyring":
        return cls(config.load_role_keys())

    def secret_for(self, role: Role) -> str:
        return self._secrets[Role(role)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def issue_claim(
    subject_id: str,
    role: Role,
    keyring: RoleKeyring,
    now: datetime | None = None,
    ttl: timedelta = timedelta(hours=config.CLAIM_TTL_HOURS),
) -> str:
    role = Role(role)
    issued_at = now or _utcnow()
    payload = {
        "sub": subject_id,
        "role": role.value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + ttl).timestamp()),
    }
    return jwt.encode(payload, keyring.secret_for(role), algorithm=keyring.algorithm)


def verify_claim(
    token: str | None,
    expected_role: Role,
    keyring: RoleKeyring,
    now: datetime | None = None,
) -> str:
    """Return the subject id of a token valid for ``expected_role``."""
    if not token or not token.strip():
        raise MissingTokenError("Missing bearer token")

    expected_role = Role(expected_role)
    try:
        # time claims are checked against ``now`` below so callers can pin the clock
        payload = jwt.decode(
            token,
            keyring.secret_for(expected_role),
            algorithms=[keyring.algorithm],
            options={"verify_exp": False, "verify_iat": False, "require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("Invalid token") from exc

    current = now or _utcnow()
    try:
        expires_at = int(payload["exp"])
    except (TypeError, ValueError) as exc:
        raise InvalidTokenError("Invalid token expiry") from exc
    if expires_at <= int(current.timestamp()):
        raise ExpiredTokenError("Token has expired")

    if payload.get("role") != expected_role.value:
        raise RoleMismatchError(f"Token is not valid for the {expected_role.value} role")

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Invalid token subject")
    return subject
