import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ALLOWED_ORIGINS, DATABASE_URL
from .database import Database
from .domain.bookings.router import router as bookings_router
from .domain.dashboard.router import router as dashboard_router
from .domain.notifications.router import router as notifications_router
from .domain.purchases.router import router as purchases_router
from .domain.reports.router import router as reports_router
from .domain.stock.router import router as stock_router
from .domain.technicians.router import router as technicians_router
from .domain.users.router import router as users_router
from .email_service import Mailer
from .errors import ServiceError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_app(database: Optional[Database] = None, mailer: Optional[Mailer] = None) -> FastAPI:
    """
    Build the API application

    Args:
        database: Database to serve from (default: DATABASE_URL)
        mailer: Mailer for notification emails (default: Resend settings from env)
    """
    database = database or Database(DATABASE_URL)
    mailer = mailer or Mailer()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        try:
            app.state.database.create_all()
            logger.info("Database tables created successfully")
        except Exception as e:
            # Ignore "already exists" errors from race conditions between workers
            error_msg = str(e)
            if "already exists" in error_msg or "duplicate key" in error_msg:
                logger.info("Database tables already exist (created by another worker)")
            else:
                logger.error(f"Failed to create database tables: {e}")
                raise

        yield
        logger.info("Application shutting down...")
        app.state.mailer.close()
        app.state.database.dispose()

    app = FastAPI(title="RO Service API", version="1.0.0", lifespan=lifespan)
    app.state.database = database
    app.state.mailer = mailer

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.kind}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} - {exc.kind}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Convert 422 validation errors from HTTPBearer to 401 authentication errors
        when the issue is with the Authorization header
        """
        for error in exc.errors():
            if error.get("loc") and "authorization" in str(error.get("loc")).lower():
                logger.warning(
                    f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
                )
                return JSONResponse(
                    status_code=401,
                    content={
                        "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                    },
                )

        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "VALIDATION_FAILED",
                "message": "Request validation failed",
                "detail": jsonable_errors(exc),
            },
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
            raise

    logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Routes
    api = APIRouter(prefix="/api")
    api.include_router(users_router)
    api.include_router(stock_router)
    api.include_router(purchases_router)
    api.include_router(bookings_router)
    api.include_router(technicians_router)
    api.include_router(reports_router)
    api.include_router(notifications_router)
    api.include_router(dashboard_router)
    app.include_router(api)

    @app.get("/")
    def root():
        return {"message": "RO Service API is running"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw input and exception context"""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
