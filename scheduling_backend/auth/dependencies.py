from dataclasses import dataclass
from datetime import datetime, timezone

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from scheduling_backend.auth.claims import Role, RoleKeyring, verify_claim

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    subject_id: str
    role: Role


def get_role_keys(request: Request) -> RoleKeyring:
    return request.app.state.role_keys


def get_clock(request: Request):
    return getattr(request.app.state, "clock", None) or (lambda: datetime.now(timezone.utc))


def require_role(role: Role):
    """Build a dependency that admits only bearer tokens minted for ``role``."""
    role = Role(role)

    def dependency(
        credentials: HTTPAuthorizationCredentials | None = Depends(security),
        keyring: RoleKeyring = Depends(get_role_keys),
        clock=Depends(get_clock),
    ) -> Principal:
        token = credentials.credentials if credentials else None
        subject_id = verify_claim(token, role, keyring, now=clock())
        return Principal(subject_id=subject_id, role=role)

    dependency.__name__ = f"require_{role.value}"
    return dependency


require_user = require_role(Role.USER)
require_provider = require_role(Role.PROVIDER)
require_manager = require_role(Role.MANAGER)
require_admin = require_role(Role.ADMIN)
require_superuser = require_role(Role.SUPERUSER)
