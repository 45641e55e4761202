from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foodbook.api import health
from foodbook.api.routes.orders import router as orders_router
from foodbook.config import Settings, settings as default_settings
from foodbook.db.session import Database
from foodbook.errors import OrderError, ValidationError
from foodbook.logging_config import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database(settings.DATABASE_URL, echo=settings.SQL_ECHO)
        if settings.AUTO_CREATE_SCHEMA:
            await db.create_all()
        app.state.database = db
        log.info("Application started")
        yield
        await db.dispose()
        log.info("Application stopped")

    app = FastAPI(title="Foodbook", lifespan=lifespan)

    @app.exception_handler(OrderError)
    async def order_error_handler(request: Request, exc: OrderError):
        log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # некорректные типы в теле или query приводим к тому же формату, что и ValidationError
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        error = ValidationError(f"Ungültige Eingabe: {', '.join(fields)}." if fields else "Ungültige Eingabe.")
        log.warning("%s %s -> %s: %s", request.method, request.url.path, error.code, error.message)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Подключаем роуты
    app.include_router(health.router)
    app.include_router(orders_router)

    return app


setup_logging(default_settings.LOG_LEVEL, default_settings.LOG_FILE)
app = create_app()
