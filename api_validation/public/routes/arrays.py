"""Array field validation endpoints.

- POST /api/arrays/validate runs the array validator kit against one field of
  a caller-supplied record and echoes the resulting record.
- GET /api/arrays/templates[/{template_id}] exposes static rule-set templates.

Inner attribute errors are collapsed onto the outer field, exactly as the kit
attaches them to the host record. Structural errors map to 400.
"""

from datetime import datetime
import json
import logging
import uuid

from fastapi import APIRouter, HTTPException, Request, status

from api_validation.public.schemas import (
    ArrayValidateRequest,
    ArrayValidateResponse,
    RuleModel,
    TemplateSummary,
)
from api_validation.public.settings import settings

from domain_kits.array_validator import (
    ArrayValidatorError,
    DictRecord,
    FieldConfig,
    FieldProcessor,
)
from domain_kits.array_validator.templates import RULESET_TEMPLATES, get_template, list_templates

router = APIRouter(tags=["arrays"])

# Audit logger (configured in main.py)
audit_logger = logging.getLogger("audit")

processor = FieldProcessor()


def _error(status_code: int, code: str, message: str, field: str = None) -> HTTPException:
    detail = {"code": code, "message": message}
    if field:
        detail["field"] = field
    return HTTPException(status_code=status_code, detail=detail)


def _build_config(req_body: ArrayValidateRequest) -> FieldConfig:
    if req_body.template_id and req_body.rules is not None:
        raise _error(status.HTTP_400_BAD_REQUEST, "AMBIGUOUS_RULES", "Send either rules or template_id, not both")

    if req_body.template_id:
        if req_body.template_id not in RULESET_TEMPLATES:
            raise _error(status.HTTP_404_NOT_FOUND, "TEMPLATE_NOT_FOUND", "Template not found")
        return get_template(req_body.template_id)

    raw_rules = [r.model_dump() if isinstance(r, RuleModel) else r for r in (req_body.rules or [])]
    if len(raw_rules) > settings.max_rules_per_request:
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            "TOO_MANY_RULES",
            f"At most {settings.max_rules_per_request} rules are accepted per request",
        )
    return FieldConfig.build(rules=raw_rules, json=req_body.json_mode, each=req_body.each)


@router.get("/api/arrays/templates")
def list_rule_templates() -> dict:
    if not settings.enable_templates_api:
        raise HTTPException(status_code=404)
    return {"templates": [TemplateSummary(**t) for t in list_templates()]}


@router.get("/api/arrays/templates/{template_id}")
def get_rule_template(template_id: str) -> dict:
    if not settings.enable_templates_api:
        raise HTTPException(status_code=404)
    tmpl = RULESET_TEMPLATES.get(template_id)
    if not tmpl:
        raise _error(status.HTTP_404_NOT_FOUND, "TEMPLATE_NOT_FOUND", "Template not found")

    # Return full template (safe: static, no customer data)
    return {"id": template_id, "template": tmpl}


@router.post("/api/arrays/validate", response_model=ArrayValidateResponse)
def validate_array_field(request: Request, req_body: ArrayValidateRequest) -> ArrayValidateResponse:
    """Validate one array field of the supplied record."""

    trace_id = getattr(request.state, "trace_id", None) or str(uuid.uuid4())
    request_id = request.headers.get("X-Request-ID", trace_id)

    try:
        config = _build_config(req_body)
        host = DictRecord(req_body.record)
        result = processor.process(host, req_body.field, config)
    except ArrayValidatorError as e:
        _log_validation(trace_id=trace_id, field=req_body.field, status_code=400, result="rejected", error_code=e.code)
        raise _error(status.HTTP_400_BAD_REQUEST, e.code, e.message, field=e.field)

    outcome = "ok" if result.ok else "invalid"
    _log_validation(
        trace_id=trace_id,
        field=req_body.field,
        status_code=200,
        result=outcome,
        error_count=len(result.errors),
    )

    return ArrayValidateResponse(
        trace_id=trace_id,
        request_id=request_id,
        status=outcome,
        field=req_body.field,
        value=result.value if result.ok else None,
        errors=result.errors,
        record=host.to_dict(),
    )


def _log_validation(
    trace_id: str,
    field: str,
    status_code: int,
    result: str,
    error_code: str = None,
    error_count: int = 0,
):
    """Log a validation call to the audit trail (no record values are logged)."""
    log_entry = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "trace_id": trace_id,
        "endpoint": "/api/arrays/validate",
        "http_method": "POST",
        "http_status": status_code,
        "field": field,
        "result": result,
        "error_code": error_code,
        "error_count": error_count,
    }
    audit_logger.info(json.dumps(log_entry))
