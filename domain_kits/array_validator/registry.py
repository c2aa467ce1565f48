"""Validator registry and the built-in validator set.

A validator is a plain function:

    def validator(record: dict, attribute: str, options: Optional[dict]) -> Optional[str]

It returns an error message (or None on success) and may mutate `record`
(e.g. trim, default). Every built-in accepts a `message` option that replaces
its default message template. Templates use `{attribute}` for the attribute
label plus validator-specific placeholders.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .errors import RuleConfigError, UnknownValidatorError

ValidatorFunc = Callable[[Dict[str, Any], str, Optional[Dict[str, Any]]], Optional[str]]


@dataclass(frozen=True)
class ValidatorSpec:
    name: str
    func: ValidatorFunc
    skip_on_empty: bool = True
    skip_on_error: bool = True

    def __call__(self, record: Dict[str, Any], attribute: str, options: Optional[Dict[str, Any]]) -> Optional[str]:
        return self.func(record, attribute, options)


class ValidatorRegistry:
    """
    Name -> validator lookup.

    Use ValidatorRegistry.default() for a registry pre-loaded with the
    built-ins; it is an independent copy, so registering custom validators
    never changes other registries.
    """

    def __init__(self) -> None:
        self._registry: Dict[str, ValidatorSpec] = {}

    def register(self, name: str, *aliases: str, skip_on_empty: bool = True, skip_on_error: bool = True):
        def decorator(func: ValidatorFunc) -> ValidatorFunc:
            self.add(name, func, *aliases, skip_on_empty=skip_on_empty, skip_on_error=skip_on_error)
            return func

        return decorator

    def add(self, name: str, func: ValidatorFunc, *aliases: str, skip_on_empty: bool = True, skip_on_error: bool = True) -> None:
        if not callable(func):
            raise RuleConfigError(f"Validator '{name}' must be callable")
        spec = ValidatorSpec(name=name, func=func, skip_on_empty=skip_on_empty, skip_on_error=skip_on_error)
        for key in (name,) + aliases:
            self._registry[key] = spec

    def resolve(self, kind: Any) -> ValidatorSpec:
        if isinstance(kind, ValidatorSpec):
            return kind
        if isinstance(kind, str):
            spec = self._registry.get(kind)
            if spec is None:
                raise UnknownValidatorError(f"Unknown validator '{kind}'")
            return spec
        if callable(kind):
            return ValidatorSpec(
                name=getattr(kind, "__name__", "custom"),
                func=kind,
                skip_on_empty=getattr(kind, "skip_on_empty", True),
                skip_on_error=getattr(kind, "skip_on_error", True),
            )
        raise UnknownValidatorError(f"Validator must be a name or a callable, got {kind!r}")

    def names(self) -> List[str]:
        return sorted(self._registry.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._registry

    def copy(self) -> "ValidatorRegistry":
        clone = ValidatorRegistry()
        clone._registry = dict(self._registry)
        return clone

    @classmethod
    def default(cls) -> "ValidatorRegistry":
        return _builtins.copy()


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return True
    return False


def attribute_label(attribute: str) -> str:
    """'user_name' / 'userName' / 'user-name' -> 'User Name'."""
    words = re.sub(r"[-_.]+", " ", attribute)
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", words)
    return " ".join(w[:1].upper() + w[1:] for w in words.split())


def _message(options: Optional[Dict[str, Any]], default: str, attribute: str, **params: Any) -> str:
    template = (options or {}).get("message") or default
    return template.format(attribute=attribute_label(attribute), **params)


def _opt(options: Optional[Dict[str, Any]], key: str, default: Any = None) -> Any:
    if not options:
        return default
    return options.get(key, default)


_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")
_NUMBER_RE = re.compile(r"^\s*[-+]?[0-9]*\.?[0-9]+([eE][-+]?[0-9]+)?\s*$")
_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?\.)+[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?$"
)


def _number_opt(options: Optional[Dict[str, Any]], key: str, attribute: str, validator: str) -> Optional[float]:
    value = _opt(options, key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RuleConfigError(f"'{validator}' validator on '{attribute}' requires a numeric '{key}', got {value!r}")
    return value


def _check_bounds(value: float, attribute: str, options: Optional[Dict[str, Any]], validator: str) -> Optional[str]:
    min_v = _number_opt(options, "min", attribute, validator)
    max_v = _number_opt(options, "max", attribute, validator)
    if min_v is not None and value < min_v:
        return _message({"message": _opt(options, "too_small")}, "{attribute} must be no less than {min}.", attribute, min=min_v)
    if max_v is not None and value > max_v:
        return _message({"message": _opt(options, "too_big")}, "{attribute} must be no greater than {max}.", attribute, max=max_v)
    return None


_builtins = ValidatorRegistry()


@_builtins.register("required", skip_on_empty=False)
def validate_required(record, attribute, options):
    value = record.get(attribute)
    if is_empty(value.strip() if isinstance(value, str) else value):
        return _message(options, "{attribute} cannot be blank.", attribute)
    return None


@_builtins.register("default", skip_on_empty=False)
def apply_default(record, attribute, options):
    if is_empty(record.get(attribute)):
        value = _opt(options, "value")
        record[attribute] = value(record, attribute) if callable(value) else value
    return None


@_builtins.register("trim", skip_on_empty=False)
def apply_trim(record, attribute, options):
    value = record.get(attribute)
    if isinstance(value, str):
        chars = _opt(options, "chars")
        record[attribute] = value.strip(chars) if chars else value.strip()
    return None


@_builtins.register("filter", skip_on_empty=False)
def apply_filter(record, attribute, options):
    func = _opt(options, "filter")
    if not callable(func):
        raise RuleConfigError(f"'filter' validator on '{attribute}' requires a callable 'filter' option")
    value = record.get(attribute)
    if isinstance(value, (list, dict)) and _opt(options, "skip_on_array", False):
        return None
    record[attribute] = func(value)
    return None


@_builtins.register("safe")
def mark_safe(record, attribute, options):
    return None


@_builtins.register("integer", "int")
def validate_integer(record, attribute, options):
    value = record.get(attribute)
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and _INTEGER_RE.match(value):
        number = int(value.strip())
    else:
        number = None

    if number is None:
        return _message(options, "{attribute} must be an integer.", attribute)
    return _check_bounds(number, attribute, options, "integer")


@_builtins.register("number", "double", "float")
def validate_number(record, attribute, options):
    value = record.get(attribute)
    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and _NUMBER_RE.match(value):
        number = float(value.strip())
    else:
        number = None

    if number is None:
        return _message(options, "{attribute} must be a number.", attribute)
    return _check_bounds(number, attribute, options, "number")


@_builtins.register("boolean", "bool")
def validate_boolean(record, attribute, options):
    value = record.get(attribute)
    true_value = _opt(options, "true_value", "1")
    false_value = _opt(options, "false_value", "0")

    if _opt(options, "strict", False):
        ok = any(value == v and type(value) is type(v) for v in (true_value, false_value))
    else:
        loose = int(value) if isinstance(value, bool) else value
        ok = any(loose == v or str(loose) == str(v) for v in (true_value, false_value))

    if not ok:
        return _message(options, '{attribute} must be either "{true}" or "{false}".', attribute, true=true_value, false=false_value)
    return None


@_builtins.register("string")
def validate_string(record, attribute, options):
    value = record.get(attribute)
    if not isinstance(value, str):
        return _message(options, "{attribute} must be a string.", attribute)

    size = len(value)
    bounds = dict(options or {})
    if isinstance(bounds.get("length"), (list, tuple)):
        pair = list(bounds.pop("length")) + [None]
        bounds["min"], bounds["max"] = pair[:2]
    min_v = _number_opt(bounds, "min", attribute, "string")
    max_v = _number_opt(bounds, "max", attribute, "string")
    length = _number_opt(bounds, "length", attribute, "string")

    if min_v is not None and size < min_v:
        return _message({"message": _opt(options, "too_short")}, "{attribute} should contain at least {min} characters.", attribute, min=min_v)
    if max_v is not None and size > max_v:
        return _message({"message": _opt(options, "too_long")}, "{attribute} should contain at most {max} characters.", attribute, max=max_v)
    if length is not None and size != length:
        return _message({"message": _opt(options, "not_equal")}, "{attribute} should contain {length} characters.", attribute, length=length)
    return None


@_builtins.register("in", "range")
def validate_in(record, attribute, options):
    allowed = _opt(options, "range")
    if callable(allowed):
        allowed = allowed(record, attribute)
    if not isinstance(allowed, (list, tuple, set, frozenset)):
        raise RuleConfigError(f"'in' validator on '{attribute}' requires a 'range' list")

    value = record.get(attribute)
    if _opt(options, "strict", False):
        found = any(value == v and type(value) is type(v) for v in allowed)
    else:
        found = value in allowed or str(value) in {str(v) for v in allowed}

    if found == bool(_opt(options, "not", False)):
        return _message(options, "{attribute} is invalid.", attribute)
    return None


@_builtins.register("match")
def validate_match(record, attribute, options):
    pattern = _opt(options, "pattern")
    if not pattern:
        raise RuleConfigError(f"'match' validator on '{attribute}' requires a 'pattern'")
    try:
        regex = re.compile(pattern)
    except (re.error, TypeError) as e:
        raise RuleConfigError(f"'match' validator on '{attribute}' has an invalid pattern: {e}") from e

    value = record.get(attribute)
    matched = isinstance(value, str) and regex.search(value) is not None
    if not isinstance(value, str) or matched == bool(_opt(options, "not", False)):
        return _message(options, "{attribute} is invalid.", attribute)
    return None


@_builtins.register("email")
def validate_email(record, attribute, options):
    value = record.get(attribute)
    if not isinstance(value, str) or len(value) > 320 or not _EMAIL_RE.match(value):
        return _message(options, "{attribute} is not a valid email address.", attribute)
    return None


_COMPARE_MESSAGES = {
    "==": '{attribute} must be equal to "{target}".',
    "!=": '{attribute} must not be equal to "{target}".',
    ">": '{attribute} must be greater than "{target}".',
    ">=": '{attribute} must be greater than or equal to "{target}".',
    "<": '{attribute} must be less than "{target}".',
    "<=": '{attribute} must be less than or equal to "{target}".',
}


@_builtins.register("compare")
def validate_compare(record, attribute, options):
    operator = _opt(options, "operator", "==")
    if operator not in _COMPARE_MESSAGES:
        raise RuleConfigError(f"'compare' validator on '{attribute}' has unknown operator {operator!r}")

    value = record.get(attribute)
    if options and "compare_value" in options:
        other = options["compare_value"]
        target = other
    else:
        other_attr = _opt(options, "compare_attribute") or f"{attribute}_repeat"
        other = record.get(other_attr)
        target = attribute_label(other_attr)

    if _opt(options, "type", "string") == "number":
        try:
            left, right = float(value), float(other)
        except (TypeError, ValueError):
            return _message(options, _COMPARE_MESSAGES[operator], attribute, target=target)
    else:
        left, right = str(value), str(other)

    ok = {
        "==": left == right,
        "!=": left != right,
        ">": left > right,
        ">=": left >= right,
        "<": left < right,
        "<=": left <= right,
    }[operator]
    if not ok:
        return _message(options, _COMPARE_MESSAGES[operator], attribute, target=target)
    return None
