"""Declarative rule parsing.

Rules are written the compact positional way:

    [["id", "title"], "required"]
    ["id", "int", {"min": 1}]
    ["content", "default", {"value": "empty body example"}]

or, for JSON transport, as mappings:

    {"attributes": ["id", "title"], "validator": "required"}

Both are parsed once into RuleSpec when a FieldConfig is built.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from .errors import RuleConfigError

ValidatorKind = Union[str, Callable[..., Optional[str]]]
WhenPredicate = Callable[[], Any]


class JsonMode(IntFlag):
    """JSON processing mode. Values are bit flags: BOTH == DECODE | ENCODE."""

    NONE = 0
    ENCODE = 1  # encode to JSON after validation
    DECODE = 2  # decode from JSON before validation
    BOTH = 3


@dataclass(frozen=True)
class RuleSpec:
    attributes: Tuple[str, ...]
    validator: ValidatorKind
    options: Optional[Dict[str, Any]] = None

    @property
    def when(self) -> Optional[WhenPredicate]:
        if not self.options:
            return None
        return self.options.get("when")


def _normalize_attributes(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)) or not raw:
        raise RuleConfigError(f"Rule attributes must be a name or a non-empty list of names, got {raw!r}")
    for name in raw:
        if not isinstance(name, str) or not name:
            raise RuleConfigError(f"Rule attribute names must be non-empty strings, got {name!r}")
    return tuple(raw)


def _normalize_options(raw: Any) -> Optional[Dict[str, Any]]:
    # None means "no configuration"; {} is kept as an explicit empty configuration.
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise RuleConfigError(f"Rule options must be a mapping, got {type(raw).__name__}")
    options = dict(raw)
    when = options.get("when")
    if when is not None and not callable(when):
        raise RuleConfigError("Rule option 'when' must be a zero-argument callable")
    return options


def _check_validator(raw: Any) -> ValidatorKind:
    if isinstance(raw, str) and raw:
        return raw
    if callable(raw):
        return raw
    raise RuleConfigError(f"Rule validator must be a name or a callable, got {raw!r}")


def parse_rule(raw: Any) -> RuleSpec:
    """Parse one declarative rule into a RuleSpec."""
    if isinstance(raw, RuleSpec):
        return raw

    if isinstance(raw, Mapping):
        if "attributes" not in raw or "validator" not in raw:
            raise RuleConfigError("Rule mapping requires 'attributes' and 'validator'")
        return RuleSpec(
            attributes=_normalize_attributes(raw["attributes"]),
            validator=_check_validator(raw["validator"]),
            options=_normalize_options(raw.get("options")),
        )

    if isinstance(raw, (list, tuple)):
        if len(raw) < 2:
            raise RuleConfigError(f"Rule must contain attributes and a validator, got {raw!r}")
        if len(raw) > 3:
            raise RuleConfigError(f"Rule takes at most [attributes, validator, options], got {len(raw)} items")
        options = raw[2] if len(raw) == 3 else None
        return RuleSpec(
            attributes=_normalize_attributes(raw[0]),
            validator=_check_validator(raw[1]),
            options=_normalize_options(options),
        )

    raise RuleConfigError(f"Unsupported rule declaration: {raw!r}")


def parse_rules(raw_rules: Optional[Iterable[Any]]) -> Tuple[RuleSpec, ...]:
    if raw_rules is None:
        return ()
    if isinstance(raw_rules, (str, bytes, Mapping)):
        raise RuleConfigError("Rules must be a list of rule declarations")
    return tuple(parse_rule(r) for r in raw_rules)


def coerce_json_mode(value: Any) -> JsonMode:
    if value is None:
        return JsonMode.NONE
    if isinstance(value, JsonMode):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise RuleConfigError(f"JSON mode must be an integer 0-3, got {value!r}")
    if value not in (0, 1, 2, 3):
        raise RuleConfigError(f"JSON mode must be one of 0, 1, 2, 3, got {value!r}")
    return JsonMode(value)


@dataclass(frozen=True)
class FieldConfig:
    """Per-field configuration consumed by FieldProcessor."""

    rules: Tuple[RuleSpec, ...] = ()
    json: JsonMode = JsonMode.NONE
    each: bool = False

    @classmethod
    def build(cls, *, rules: Optional[Iterable[Any]] = None, json: Any = None, each: bool = False) -> "FieldConfig":
        return cls(rules=parse_rules(rules), json=coerce_json_mode(json), each=bool(each))

    @property
    def decodes(self) -> bool:
        return bool(self.json & JsonMode.DECODE)

    @property
    def encodes(self) -> bool:
        return bool(self.json & JsonMode.ENCODE)
