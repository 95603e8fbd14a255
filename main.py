import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.errors import FactLensError, LocalRateLimitExceeded
from database import engine, Base
from dependencies import build_services
from routes import contact, fact_check, subscribe, users, verification

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to start without credentials and storage
    settings.validate()
    Base.metadata.create_all(bind=engine)

    async with httpx.AsyncClient() as client:
        app.state.services = build_services(settings, client)
        logger.info("FactLens API ready")
        yield


app = FastAPI(
    title="FactLens API",
    description="Multi-source fact-check aggregation API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(FactLensError)
async def factlens_error_handler(request: Request, exc: FactLensError):
    headers = None
    if isinstance(exc, LocalRateLimitExceeded):
        headers = {"Retry-After": str(exc.retry_after_seconds)}
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        message = "Endpoint not found"
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    content = {"message": "An unexpected error occurred. Please try again later."}
    if settings.DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Include routers
app.include_router(fact_check.router, tags=["fact-check"])
app.include_router(users.router, prefix="/api/auth", tags=["auth"])
app.include_router(verification.router, prefix="/api/verify", tags=["verify"])
app.include_router(subscribe.router, prefix="/api/subscribe", tags=["subscribe"])
app.include_router(contact.router, prefix="/api/contact", tags=["contact"])


@app.get("/")
async def root():
    return {"message": "Welcome to FactLens API"}


@app.get("/health")
async def health():
    return {"status": "OK"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=5000)
