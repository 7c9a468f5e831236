import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scheduling_backend.auth.claims import RoleKeyring
from scheduling_backend.core import config
from scheduling_backend.core.errors import SchedulingError
from scheduling_backend.database import Database
from scheduling_backend.routes import (
    admin_routes,
    auth_routes,
    manager_routes,
    provider_routes,
    public_routes,
    superuser_routes,
    user_routes,
)
from scheduling_backend.services.mailer import SmtpMailer

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


def create_app(database: Database | None = None, role_keys: RoleKeyring | None = None, mailer=None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_database = getattr(app.state, 'database', None) is None
        if owns_database:
            config.validate_runtime_config()
            app.state.database = Database(config.DATABASE_URL, config.DB_TIMEOUT_SECONDS, echo=config.DB_ECHO)
        if getattr(app.state, 'role_keys', None) is None:
            app.state.role_keys = RoleKeyring.from_config()
        if getattr(app.state, 'mailer', None) is None:
            app.state.mailer = SmtpMailer()

        app.state.database.ensure_schema()
        logger.info('Scheduling API started')
        yield
        if owns_database:
            app.state.database.dispose()

    app = FastAPI(title='Appointment Scheduling API', lifespan=lifespan)
    app.state.database = database
    app.state.role_keys = role_keys
    app.state.mailer = mailer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(request: Request, exc: SchedulingError):
        headers = {'WWW-Authenticate': 'Bearer'} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail}, headers=headers)

    @app.get('/')
    def root():
        return {'status': 'Scheduling API Running'}

    app.include_router(auth_routes.router, prefix='/auth')
    app.include_router(public_routes.router)
    app.include_router(user_routes.router, prefix='/user')
    app.include_router(provider_routes.router, prefix='/provider')
    app.include_router(manager_routes.router, prefix='/manager')
    app.include_router(admin_routes.router, prefix='/admin')
    app.include_router(superuser_routes.router, prefix='/superuser')

    return app


app = create_app()
