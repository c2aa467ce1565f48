"""
Array Validator - FieldProcessor

Field-level orchestration around RecordValidator:
- read the field from the host record (optionally JSON-decoded)
- classify it as a single record, a list of records ('each'), or invalid
- validate every record and aggregate failures locally
- write back either the rebuilt value (optionally JSON-encoded) or the
  errors, never both

Structural problems raise InvalidInputError / AmbiguousShapeError and leave
the host untouched. Attribute-level failures are attached to the host under
the outer field name; the inner attribute names are dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

from .codec import JsonCodec
from .errors import AmbiguousShapeError, InvalidInputError
from .record_validator import Failure, RecordValidator
from .registry import ValidatorRegistry
from .rules import FieldConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class HostRecord(Protocol):
    """The record/model that owns the array field."""

    def get(self, field: str) -> Any:
        ...

    def set(self, field: str, value: Any) -> None:
        ...

    def add_error(self, field: str, message: str) -> None:
        ...


class DictRecord:
    """In-memory HostRecord: a values dict plus ordered per-field errors."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self.values: Dict[str, Any] = dict(values or {})
        self.errors: Dict[str, List[str]] = {}

    def get(self, field: str) -> Any:
        return self.values.get(field)

    def set(self, field: str, value: Any) -> None:
        self.values[field] = value

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def has_errors(self, field: Optional[str] = None) -> bool:
        if field is None:
            return any(self.errors.values())
        return bool(self.errors.get(field))

    def get_errors(self, field: str) -> List[str]:
        return list(self.errors.get(field, []))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.values)


@dataclass(frozen=True)
class FieldResult:
    field: str
    value: Any = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_list_shaped(value: Any) -> bool:
    # Heuristic kept for compatibility: a mapping whose first key is the
    # integer 0 is treated as a list as well.
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if isinstance(value, Mapping) and value:
        first = next(iter(value))
        return isinstance(first, int) and not isinstance(first, bool) and first == 0
    return False


class FieldProcessor:
    """Validate one array field of a host record against a FieldConfig."""

    def __init__(self, registry: Optional[ValidatorRegistry] = None, codec: Optional[JsonCodec] = None):
        self.validator = RecordValidator(registry)
        self.codec = codec or JsonCodec()

    def process(self, host: HostRecord, field_name: str, config: FieldConfig) -> FieldResult:
        raw = host.get(field_name)

        if config.decodes:
            raw = self.codec.decode(raw)

        items = self._classify(field_name, raw, config)

        # Fresh accumulator for every call.
        outcomes = [self.validator.validate_specs(item, config.rules) for item in items]
        failures = [o for o in outcomes if isinstance(o, Failure)]

        if failures:
            messages: List[str] = []
            for failure in failures:
                for message in failure.errors.values():
                    host.add_error(field_name, message)
                    messages.append(message)
            logger.info(
                "field '%s' failed: items=%d failed_items=%d errors=%d",
                field_name, len(outcomes), len(failures), len(messages),
            )
            return FieldResult(field=field_name, value=None, errors=messages)

        records = [o.record for o in outcomes]
        result: Any = records if config.each else records[0]
        if config.encodes:
            result = self.codec.encode(result)

        host.set(field_name, result)
        logger.info("field '%s' validated: items=%d", field_name, len(records))
        return FieldResult(field=field_name, value=result)

    def process_many(self, host: HostRecord, configs: Mapping[str, FieldConfig]) -> Dict[str, FieldResult]:
        return {name: self.process(host, name, cfg) for name, cfg in configs.items()}

    def _classify(self, field_name: str, raw: Any, config: FieldConfig) -> List[Mapping[str, Any]]:
        if not isinstance(raw, (list, tuple, Mapping)):
            raise InvalidInputError(f"Attribute '{field_name}' must be an array", field=field_name)

        if config.each:
            items = list(raw.values()) if isinstance(raw, Mapping) else list(raw)
            for index, item in enumerate(items):
                if not isinstance(item, Mapping):
                    raise InvalidInputError(
                        f"Attribute '{field_name}' item {index} must be an array",
                        field=field_name,
                    )
            return items

        if _is_list_shaped(raw):
            raise AmbiguousShapeError(
                f"Attribute '{field_name}' seems to contain different objects, use 'each' property",
                field=field_name,
            )
        return [raw if isinstance(raw, Mapping) else {}]
