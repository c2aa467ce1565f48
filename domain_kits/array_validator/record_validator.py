"""
Array Validator - RecordValidator

Applies a declarative rule list to one ad-hoc record:
1. Register every (attribute, validator, options) binding in rule order.
   Attributes missing from the record are materialized as None unless a
   `when` predicate says they are not required.
2. Run the bindings in registration order, only after all are registered.
   A binding whose `when` predicate is false at run time is skipped.
3. Return Success(record) or Failure({attribute: message}).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .registry import ValidatorRegistry, ValidatorSpec, is_empty
from .rules import RuleSpec, WhenPredicate, parse_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    record: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class _Binding:
    attribute: str
    validator: ValidatorSpec
    options: Optional[Dict[str, Any]]
    when: Optional[WhenPredicate] = None


class RecordValidator:
    """Validate a single schema-less record against a rule list."""

    def __init__(self, registry: Optional[ValidatorRegistry] = None):
        self.registry = registry or ValidatorRegistry.default()

    def validate(self, record: Mapping[str, Any], rules: Iterable[Any]):
        """
        Validate one record against raw rule declarations.

        Args:
            record: attribute -> value mapping (copied; the input is not mutated)
            rules: rule declarations or RuleSpec instances

        Returns:
            Success with the validated (possibly mutated) record, or Failure
            with an attribute -> message mapping.
        """
        return self.validate_specs(record, parse_rules(rules))

    def validate_specs(self, record: Mapping[str, Any], specs: Tuple[RuleSpec, ...]):
        """Validate one record against rules already parsed (FieldConfig.rules)."""
        context: Dict[str, Any] = dict(record)
        bindings = self._register(context, specs)
        errors = self._run(context, bindings)

        if errors:
            logger.debug("record failed: attributes=%s", list(errors.keys()))
            return Failure(errors=errors)
        return Success(record=context)

    def _register(self, context: Dict[str, Any], specs: Tuple[RuleSpec, ...]) -> List[_Binding]:
        bindings: List[_Binding] = []
        for spec in specs:
            validator = self.registry.resolve(spec.validator)
            when = spec.when
            for attribute in spec.attributes:
                bindings.append(_Binding(attribute=attribute, validator=validator, options=spec.options, when=when))

                if attribute in context:
                    continue
                # Evaluated per missing attribute, at this point of registration.
                required = bool(when()) if when is not None else True
                if required:
                    context[attribute] = None
                else:
                    logger.debug("attribute '%s' not materialized: when() is false", attribute)
        return bindings

    def _run(self, context: Dict[str, Any], bindings: List[_Binding]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for binding in bindings:
            attribute = binding.attribute
            validator = binding.validator
            if attribute not in context:
                continue
            if validator.skip_on_error and attribute in errors:
                continue
            if validator.skip_on_empty and is_empty(context[attribute]):
                continue
            if binding.when is not None and not binding.when():
                continue

            message = validator(context, attribute, binding.options)
            if message is not None:
                errors.setdefault(attribute, message)
        return errors
