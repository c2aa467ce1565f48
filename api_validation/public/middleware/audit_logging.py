"""
Audit logging middleware for FastAPI.

This middleware:
1. Reuses or generates a request ID
2. Hashes the request payload (records submitted for validation are never logged)
3. Logs one structured JSON audit entry per call
4. Applies redaction rules to every string in the entry

Usage:
    app.add_middleware(AuditLoggingMiddleware)
"""

import json
import hashlib
import time
import logging
import re
from uuid import uuid4
from typing import Optional, Dict, Any
from datetime import datetime

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class AuditLogger:
    """Structured audit logger with redaction rules."""

    # Patterns to redact (sensitive data)
    REDACTION_PATTERNS = {
        "email": r"[\w\.-]+@[\w\.-]+\.\w+",
        "credit_card": r"\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}",
        "password": r"(?i)password[:\s=\"]+[^\s,}]+",
        "token": r"(?i)(token|authorization)[:\s=\"]+[^\s,}]+",
    }

    def __init__(self, name: str = "audit", enable_redaction: bool = True):
        self.logger = logging.getLogger(name)
        self.enable_redaction = enable_redaction

    @staticmethod
    def hash_payload(payload: bytes) -> str:
        """Create SHA-256 hash of request payload."""
        if not payload:
            return "sha256:empty"
        return f"sha256:{hashlib.sha256(payload).hexdigest()[:16]}..."

    def redact(self, text: str) -> str:
        """Apply redaction rules to remove sensitive data."""
        if not self.enable_redaction or not isinstance(text, str):
            return text

        result = text
        for pattern_name, pattern in self.REDACTION_PATTERNS.items():
            result = re.sub(pattern, f"[REDACTED_{pattern_name.upper()}]", result, flags=re.IGNORECASE)
        return result

    def create_audit_entry(
        self,
        request_id: str,
        endpoint: str,
        http_method: str,
        http_status: int,
        latency_ms: float,
        payload_hash: str,
        error_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a structured audit log entry."""
        return {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "request_id": request_id,
            "endpoint": endpoint,
            "http_method": http_method,
            "http_status": http_status,
            "latency_ms": round(latency_ms, 3),
            "payload_hash": payload_hash,
            "error_code": error_code,
        }

    def log_entry(self, entry: Dict[str, Any]):
        """Write audit entry to log (JSON format)."""
        redacted_entry = {k: self.redact(v) if isinstance(v, str) else v for k, v in entry.items()}
        self.logger.info(json.dumps(redacted_entry))


def error_code_for_status(status_code: int) -> Optional[str]:
    if status_code < 400:
        return None
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 422:
        return "VALIDATION_ERROR"
    if status_code >= 500:
        return "SERVER_ERROR"
    return "CLIENT_ERROR"


class AuditLoggingMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware to log all API calls with an audit trail.

    Logs contain request_id, endpoint & method, HTTP status & latency,
    payload_hash (not the payload itself) and an error_code when status >= 400.
    """

    def __init__(self, app, enable_redaction: bool = True, enable_logging: bool = True):
        super().__init__(app)
        self.audit_logger = AuditLogger(enable_redaction=enable_redaction)
        self.enable_logging = enable_logging

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request, measure latency, log audit entry."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))

        body = await request.body()
        payload_hash = self.audit_logger.hash_payload(body)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            if self.enable_logging:
                self.audit_logger.log_entry(
                    self.audit_logger.create_audit_entry(
                        request_id=request_id,
                        endpoint=str(request.url.path),
                        http_method=request.method,
                        http_status=500,
                        latency_ms=(time.perf_counter() - start_time) * 1000,
                        payload_hash=payload_hash,
                        error_code="INTERNAL_ERROR",
                    )
                )
            raise

        if self.enable_logging:
            self.audit_logger.log_entry(
                self.audit_logger.create_audit_entry(
                    request_id=request_id,
                    endpoint=str(request.url.path),
                    http_method=request.method,
                    http_status=response.status_code,
                    latency_ms=(time.perf_counter() - start_time) * 1000,
                    payload_hash=payload_hash,
                    error_code=error_code_for_status(response.status_code),
                )
            )

        response.headers["X-Request-ID"] = request_id
        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Simple middleware to ensure every response carries a request ID.
    Falls back to X-Request-ID header if provided.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid4()))

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response
