"""PageLens API - SEO and GEO page analysis."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from accounts import AccountService
from api.routes import accounts_router, analysis_router, health_router
from api.schemas import ServiceInfoResponse
from config import settings
from db.session import SessionLocal, get_db_session, init_db
from errors import (
    AccessDeniedError,
    CustomerCapReachedError,
    InputError,
    InternalError,
    InvalidCredentialsError,
    PageLensError,
    RegistrationError,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

FEATURES = [
    "SEO Analysis",
    "Broken Link Audit",
    "Keyword Extraction",
    "GEO Analysis",
    "Technical SEO",
    "Simulated SERP Competition",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Code before `yield` runs on startup.
    Code after `yield` runs on shutdown.
    """
    logger.info(f"Starting {settings.app_name}...")
    init_db()
    if settings.seed_demo_customer:
        with SessionLocal.begin() as session:
            AccountService(session).seed_demo_customer()
    yield
    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title="PageLens API",
    description="Heuristic SEO, GEO and technical analysis of a single web page.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error envelopes
# =============================================================================


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": None, "message": message},
    )


@app.exception_handler(PageLensError)
async def pagelens_error_handler(request: Request, exc: PageLensError) -> JSONResponse:
    if isinstance(exc, InputError):
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    if isinstance(exc, InvalidCredentialsError):
        return _error_response(status.HTTP_401_UNAUTHORIZED, str(exc))
    if isinstance(exc, AccessDeniedError):
        return _error_response(status.HTTP_403_FORBIDDEN, str(exc))
    if isinstance(exc, CustomerCapReachedError):
        return _error_response(status.HTTP_409_CONFLICT, str(exc))
    if isinstance(exc, RegistrationError):
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    if not isinstance(exc, InternalError):
        logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Analysis failed due to an internal error",
    )


# Register routers
app.include_router(health_router, prefix="/api/v1")
app.include_router(analysis_router, prefix="/api/v1")
app.include_router(accounts_router, prefix="/api/v1")


@app.get("/", response_model=ServiceInfoResponse, include_in_schema=False)
def root(db: Session = Depends(get_db_session)) -> ServiceInfoResponse:
    """Service info and remaining customer spots."""
    accounts = AccountService(db)
    return ServiceInfoResponse(
        service=settings.app_name,
        customers=accounts.customer_count(),
        max_customers=settings.max_customers,
        spots_left=accounts.spots_left(),
        features=FEATURES,
    )
