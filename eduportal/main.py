import logging
from typing import Dict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from .config import get_settings
from .dependencies import get_document_store
from .email_routes import router as email_router
from .errors import PortalError
from .logging_config import configure_logging
from .notes_routes import router as notes_router
from .profile_routes import router as profile_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="EduPortal Backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(profile_router)
app.include_router(notes_router)
app.include_router(email_router)

settings_snapshot = get_settings()
logger.info("Backend starting with persistence mode: %s", settings_snapshot.persistence_mode)
logger.info("Email backend: %s", settings_snapshot.email_backend)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "; ".join(problems) or "Invalid request."},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


@app.get("/healthz")
def health() -> Dict[str, str]:
    return {"status": "ok", "persistenceMode": get_settings().persistence_mode}


@app.get("/healthz/store")
def store_health() -> Dict[str, str]:
    try:
        store = get_document_store()
        store.ping()
    except RuntimeError as exc:
        logger.warning("Store health check failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {"status": "ok", "persistenceMode": store.mode}
