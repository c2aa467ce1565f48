"""
FastAPI application for the array validation API.

Thin HTTP wrapper around domain_kits.array_validator.

Features enabled:
- Audit logging (request ID, payload hash, latency, status)
- Request redaction (removes PII, secrets) in audit entries
- Uniform ErrorResponse envelope for every error
"""
from fastapi import FastAPI, status, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
import logging
import uuid
import time
from contextvars import ContextVar

from api_validation.public.routes import health, arrays
from api_validation.public.middleware.audit_logging import AuditLoggingMiddleware, RequestIDMiddleware
from api_validation.public.settings import settings

# Context var for trace_id (used in logging)
trace_id_ctx: ContextVar[str] = ContextVar('trace_id', default='-')


# Logging filter to inject trace_id into all log records
class TraceIdFilter(logging.Filter):
    def filter(self, record):
        record.trace_id = trace_id_ctx.get()
        return True


# Configure logging (audit logs to stdout)
root_logger = logging.getLogger()
if not root_logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='[%(trace_id)s] %(levelname)s %(name)s: %(message)s',
    )

# Add trace_id filter to root logger handlers
for handler in logging.root.handlers:
    if not any(isinstance(f, TraceIdFilter) for f in handler.filters):
        handler.addFilter(TraceIdFilter())

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Array Validation API",
    description="Apply declarative attribute rules to array fields (single record or list of records).",
    version=settings.api_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


@app.get("/")
def root():
    return {"name": "Array Validation API", "status": "running"}


# Trace ID middleware (sets request.state.trace_id and adds response headers)
@app.middleware("http")
async def add_trace_id_middleware(request: Request, call_next):
    trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.trace_id = trace_id

    token = trace_id_ctx.set(trace_id)
    try:
        start = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start

        response.headers["X-Request-ID"] = trace_id
        response.headers["X-Process-Time"] = str(process_time)
        return response
    finally:
        trace_id_ctx.reset(token)


if settings.enable_audit_logging:
    app.add_middleware(AuditLoggingMiddleware, enable_redaction=settings.enable_redaction)

app.add_middleware(RequestIDMiddleware)

# CORS is disabled by default (server-to-server API). Enable only if explicitly configured.
if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

# Include routes
app.include_router(health.router)
app.include_router(arrays.router)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or request.headers.get("X-Request-ID") or str(uuid.uuid4())


# HTTPException handler (wraps all HTTPException into ErrorResponse format)
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict):
        err = exc.detail
    else:
        err = {"code": str(exc.detail), "message": str(exc.detail)}

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "trace_id": _trace_id(request),
            "status": "error",
            "error": err,
        },
    )


# RequestValidationError handler (wraps 422 validation errors into ErrorResponse format)
@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "trace_id": _trace_id(request),
            "status": "error",
            "error": {
                "code": "REQUEST_VALIDATION_ERROR",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "trace_id": _trace_id(request),
            "status": "error",
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred."
            }
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api_validation.public.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development"
    )
