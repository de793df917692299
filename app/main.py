from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.classrooms.router import router as classrooms_router
from app.api.v1.conditions.router import router as conditions_router
from app.api.v1.health.router import router as health_router
from app.api.v1.school_settings.router import router as school_settings_router
from app.api.v1.subjects.router import router as subjects_router
from app.api.v1.teachers.router import router as teachers_router
from app.core.config import APP_VERSION, settings
from app.core.errors import register_exception_handlers
from app.core.logging import RequestLoggingMiddleware, configure_logging
from app.core.schemas import ERROR_RESPONSES
from app.db.init_db import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        await init_db()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Timetable Admin Backend", version=APP_VERSION, lifespan=lifespan)

    # CORS: allow the admin front end to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    # Routers
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(subjects_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
    app.include_router(teachers_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
    app.include_router(classrooms_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
    app.include_router(school_settings_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)
    app.include_router(conditions_router, prefix=settings.api_prefix, responses=ERROR_RESPONSES)

    return app


app = create_app()
