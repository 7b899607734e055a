import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    ADMIN_EMAIL,
    ADMIN_FULL_NAME,
    ADMIN_PASSWORD,
    ALLOWED_ORIGINS,
    IS_DEVELOPMENT,
)
from .database import Base, SessionLocal, engine
from .domain.bookings.router import router as bookings_router
from .domain.catalog.router import categories_router, services_router
from .domain.identity.router import router as auth_router
from .domain.identity.service import AuthService
from .errors import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("passlib").setLevel(logging.ERROR)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def seed_admin_account() -> None:
    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set - skipping admin seeding")
        return

    db = SessionLocal()
    try:
        AuthService(db).seed_admin(ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_FULL_NAME)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    seed_admin_account()

    try:
        from .rate_limiter import get_redis_client

        if get_redis_client() is not None:
            logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed - rate limiting will stay in memory: {e}")

    yield
    logger.info("Application shutting down...")


def create_app(is_development: bool = IS_DEVELOPMENT) -> FastAPI:
    app = FastAPI(title="Appointly API", version="1.0.0", lifespan=lifespan)

    register_exception_handlers(app, is_development=is_development)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"{request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response

    logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(categories_router)
    app.include_router(services_router)
    app.include_router(bookings_router)

    @app.get("/")
    def root():
        return {"message": "Appointly API is running"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()
