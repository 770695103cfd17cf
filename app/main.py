import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.database import Database
from app.utils.exceptions import AppException
from app.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    integrity_error_handler,
    generic_exception_handler,
)

from app.api.v1 import auth
from app.api.v1 import users
from app.api.v1 import vehicles
from app.api.v1 import fuels

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Vehicle dealership catalog and admin API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    # The app closes the pool on shutdown only when it built the pool itself
    app.state.owns_database = database is None
    app.state.database = database or Database.from_settings(settings)

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api/v1"
    app.include_router(auth.router,     prefix=PREFIX, tags=["Auth"])
    app.include_router(users.router,    prefix=PREFIX, tags=["Users"])
    app.include_router(vehicles.router, prefix=PREFIX, tags=["Vehicles"])
    app.include_router(fuels.router,    prefix=PREFIX, tags=["Fuels"])

    # ─── Uploaded images ──────────────────────────────────────────────────────
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    # ─── Startup / Shutdown ───────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        db = app.state.database
        ok = db.check_connection()
        logger.info("✅ DB connected" if ok else "❌ DB connection FAILED")
        if ok:
            db.init_schema()

    @app.on_event("shutdown")
    def on_shutdown():
        if app.state.owns_database:
            app.state.database.close()
            logger.info("DB pool closed")

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
