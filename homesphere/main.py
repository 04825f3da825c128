from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from homesphere.config import settings
from homesphere.database.connection import close_db, engine
from homesphere.controllers.auth_controller import router as auth_router
from homesphere.controllers.property_controller import router as property_router
from homesphere.controllers.agent_controller import router as agent_router
from homesphere.controllers.review_controller import router as review_router
from homesphere.controllers.favorite_controller import router as favorite_router
from homesphere.controllers.contact_controller import router as contact_router
from homesphere.controllers.admin_controller import router as admin_router
from homesphere.utils.errors import (
    AppError,
    app_error_handler,
    http_exception_handler,
    request_validation_handler,
    sqlalchemy_error_handler,
    unhandled_error_handler,
)
import asyncio
import logging
import time

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration; slow handlers answer 504"""
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_ip}")

        try:
            response = await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            logger.error(f"Timed out: {request.method} {request.url.path} after {settings.REQUEST_TIMEOUT_SECONDS}s")
            return JSONResponse(status_code=504, content={"message": "Request timed out"})

        process_time = time.time() - start_time
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} ({process_time:.3f}s)")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup does not fail on an unreachable database; /health reports it
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except SQLAlchemyError as e:
        logger.warning(f"Database connection failed on startup: {e}")

    yield

    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Real estate marketplace: listings, agents, reviews and inquiries",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(auth_router)
app.include_router(property_router)
app.include_router(agent_router)
app.include_router(review_router)
app.include_router(favorite_router)
app.include_router(contact_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} API", "status": "running"}


@app.get("/health")
async def health_check():
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unreachable"})
    return {"status": "healthy", "database": "connected"}
