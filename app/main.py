"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import engine, Base, SessionLocal
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import AppError, global_exception_handler, validation_exception_handler

# Import all models so SQLAlchemy knows about them
from app.domain.models.role import Role, RoleType
from app.domain.models.user import User
from app.domain.models.area import Area
from app.domain.models.category import Category
from app.domain.models.audit_log import AuditLog
from app.domain.models.refresh_token import RefreshToken

from app.interfaces.deps import build_user_service, get_task_queue

# Import routers
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.users import router as users_router
from app.interfaces.api.roles import router as roles_router
from app.interfaces.api.logs import router as logs_router
from app.interfaces.api.areas import router as areas_router
from app.interfaces.api.categories import router as categories_router
from app.interfaces.api.mobile import router as mobile_router

API_PREFIX = "/api/v1"

settings = get_settings()

# Configure logging immediately
configure_logging(settings)
logger = structlog.get_logger(__name__)


def bootstrap_accounts() -> None:
    """Seed the built-in roles and the root admin account."""
    db = SessionLocal()
    try:
        user_service = build_user_service(db)
        for role in RoleType:
            user_service.resolve_role(role.value)
        user_service.initialize_root_user(
            username=settings.ROOT_USERNAME,
            password=settings.ROOT_PASSWORD,
            email=settings.ROOT_EMAIL,
            fullname=settings.ROOT_FULLNAME,
            phone=settings.ROOT_PHONE,
        )
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting Lapor Warga API...", env=settings.ENVIRONMENT)

    # Create DB tables (use migrations in production)
    if settings.CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    tasks = get_task_queue()
    tasks.start()

    bootstrap_accounts()

    yield

    tasks.stop()
    logger.info("Lapor Warga API stopped")


app = FastAPI(
    title="Lapor Warga API",
    description="Citizen reporting backend — users, roles, areas, categories and audit logs",
    version="2.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Global Exception Handling
app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS is added last so it wraps everything else
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_DOMAIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(roles_router, prefix=API_PREFIX)
app.include_router(logs_router, prefix=API_PREFIX)
app.include_router(areas_router, prefix=API_PREFIX)
app.include_router(categories_router, prefix=API_PREFIX)
app.include_router(mobile_router, prefix=API_PREFIX)


@app.get("/")
def root():
    return {
        "name": "Lapor Warga API",
        "version": "2.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
