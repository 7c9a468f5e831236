import os
from types import MappingProxyType

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./appointments.db")
DB_TIMEOUT_SECONDS = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))
DB_ECHO = _get_bool(os.getenv("DB_ECHO"), default=False)

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:3000"])

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
CLAIM_TTL_HOURS = int(os.getenv("CLAIM_TTL_HOURS", "24"))

DEFAULT_ROLE_SECRETS = {
    "user": "user_secret_key",
    "provider": "provider_secret_key",
    "manager": "manager_secret_key",
    "admin": "admin_secret_key",
    "superuser": "superuser_secret_key",
}

SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = _get_bool(os.getenv("SMTP_USE_TLS"), default=True)
MAIL_FROM = os.getenv("MAIL_FROM", SMTP_USERNAME)
MAIL_TIMEOUT_SECONDS = int(os.getenv("MAIL_TIMEOUT_SECONDS", "10"))


def load_role_keys(environ=None) -> MappingProxyType:
    """Read one signing secret per role, e.g. ADMIN_SECRET_KEY for "admin"."""
    environ = os.environ if environ is None else environ
    secrets = {
        role: environ.get(f"{role.upper()}_SECRET_KEY", default)
        for role, default in DEFAULT_ROLE_SECRETS.items()
    }
    return MappingProxyType(secrets)


def validate_runtime_config(role_keys=None) -> None:
    role_keys = load_role_keys() if role_keys is None else role_keys

    if len(set(role_keys.values())) != len(role_keys):
        raise RuntimeError("Every role must have its own signing secret.")

    if APP_ENV.lower() != "production":
        return

    for role, secret in role_keys.items():
        if secret == DEFAULT_ROLE_SECRETS.get(role):
            raise RuntimeError(f"{role.upper()}_SECRET_KEY must be set in production.")
