import logging
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from scheduling_backend.core import config
from scheduling_backend.core.errors import ConflictError, StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()

STORAGE_UNAVAILABLE = 'Database unavailable. Verify DATABASE_URL and database credentials.'


def _timeout_connect_args(url: str, timeout_seconds: int) -> dict:
    backend = make_url(url).get_backend_name()
    if backend == 'sqlite':
        return {'timeout': timeout_seconds, 'check_same_thread': False}
    if backend == 'postgresql':
        return {
            'connect_timeout': timeout_seconds,
            'options': f'-c statement_timeout={timeout_seconds * 1000}',
        }
    return {}


class Database:
    """One engine and session factory for the whole process."""

    def __init__(self, url: str, timeout_seconds: int = config.DB_TIMEOUT_SECONDS, echo: bool = False) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds

        engine_options = {
            'connect_args': _timeout_connect_args(url, timeout_seconds),
            'echo': echo,
        }
        if url in {'sqlite://', 'sqlite:///:memory:'}:
            # in-memory SQLite has to share one connection between sessions
            engine_options['poolclass'] = StaticPool
        elif make_url(url).get_backend_name() != 'sqlite':
            engine_options['pool_timeout'] = timeout_seconds
            engine_options['pool_pre_ping'] = True

        self.engine = create_engine(url, **engine_options)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    def ensure_schema(self) -> list[str]:
        """Create missing tables and return the names of the ones created."""
        from scheduling_backend.models import (  # noqa: F401  registers every table on Base
            admin,
            appointment,
            available_appointment,
            company,
            manager,
            provider,
            service,
            user,
            verification,
        )

        try:
            existing = set(inspect(self.engine).get_table_names())
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            logger.exception('Database initialization failed. Check DATABASE_URL and credentials.')
            raise StorageError(STORAGE_UNAVAILABLE) from exc

        created = [name for name in Base.metadata.tables if name not in existing]
        for name in created:
            logger.info('Created table %s', name)
        return created

    @contextmanager
    def session(self):
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request):
    with request.app.state.database.session() as db:
        yield db


@contextmanager
def storage_guard(db: Session, action: str):
    """Roll back and re-raise any database failure as a domain error."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.warning('Constraint violated while trying to %s: %s', action, exc.orig)
        raise ConflictError('A record with the same unique value already exists.') from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Storage failure while trying to %s', action)
        raise StorageError(STORAGE_UNAVAILABLE) from exc
