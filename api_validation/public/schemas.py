"""
Pydantic models for request/response validation.
These define the exact contract between client and API.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Union
from datetime import datetime


class RuleModel(BaseModel):
    """Mapping form of one declarative rule."""
    attributes: Union[str, List[str]] = Field(..., description="Attribute name or list of names")
    validator: str = Field(..., description="Registered validator name, e.g. 'required', 'int', 'trim', 'default'")
    options: Optional[Dict[str, Any]] = Field(None, description="Validator options, e.g. {'value': 'x'} for 'default'")


class ArrayValidateRequest(BaseModel):
    """
    Validate one array field of a record.

    Supports two modes:
    1. Inline rules: `rules` holds positional ([attrs, validator, {options}]) or mapping rules
    2. Template: `template_id` names a stored rule set (its own json/each apply)
    """
    record: Dict[str, Any] = Field(..., description="Host record holding the field")
    field: str = Field(..., min_length=1, description="Name of the array field inside record")
    rules: Optional[List[Union[RuleModel, List[Any]]]] = Field(None, description="Declarative rules (inline mode)")
    template_id: Optional[str] = Field(None, description="Stored rule-set template id (template mode)")
    json_mode: int = Field(0, ge=0, le=3, alias="json", description="0=none, 1=encode, 2=decode, 3=both")
    each: bool = Field(False, description="Validate every item of a list independently")
    api_version: str = Field("1.0", description="API version for forward compatibility")

    model_config = {"populate_by_name": True}


class ArrayValidateResponse(BaseModel):
    """Outcome of one field validation."""
    trace_id: str = Field(..., description="Unique request ID for audit trail")
    request_id: Optional[str] = Field(None, description="Echo of X-Request-ID header for tracing")
    status: str = Field(..., description="'ok' when the field validated, 'invalid' when errors were attached")
    field: str = Field(..., description="Validated field name")
    value: Optional[Any] = Field(None, description="Value written to the field (absent on failure)")
    errors: List[str] = Field(default_factory=list, description="Error messages attached to the field")
    record: Dict[str, Any] = Field(..., description="Host record after processing")


class TemplateSummary(BaseModel):
    id: str
    template_version: str = ""
    description: str = ""
    each: bool = False
    json_mode: int = Field(0, alias="json")
    rules_count: int = 0

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Standard error response."""
    trace_id: str = Field(..., description="Unique request ID")
    status: str = Field(default="error", description="Always 'error'")
    error: Dict[str, Any] = Field(..., description="Error details with 'code', 'message', optional 'field'")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="'ok' if healthy")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
    commit: str = Field(..., description="Git commit hash")
    timestamp: datetime = Field(..., description="Current time (ISO8601)")
