# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.auth import router as auth_router
from app.api.community import router as community_router
from app.api.job import router as job_router
from app.api.profile import router as profile_router
from app.api.saved_listings import router as saved_listings_router
from app.core.config import get_settings, validate_settings
from app.core.errors import AppError
from app.db.mongo import init_db, close_db

logger = logging.getLogger(__name__)


app = FastAPI(title="Community & Jobs API")

app.include_router(auth_router, prefix="/api")
app.include_router(community_router, prefix="/api")
app.include_router(job_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(saved_listings_router, prefix="/api")


def _envelope(status_code: int, message: str, error=None, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _envelope(exc.status_code, exc.message, exc.error)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in e.get("loc", ()) if p != "body"), "message": e.get("msg")}
        for e in exc.errors()
    ]
    return _envelope(400, "Validation error", errors)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _envelope(404, "API endpoint not found", path=request.url.path)
    return _envelope(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    settings = get_settings()
    error = str(exc) if settings.APP_ENV == "development" else None
    return _envelope(500, "Server error", error)


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health():
    return {"success": True, "status": "ok"}


@app.on_event("startup")
async def startup_event():
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    validate_settings(settings)
    await init_db()


@app.on_event("shutdown")
async def shutdown_event():
    close_db()
