# Array Validator Domain Kit
# Apply declarative attribute rules to array fields (one record or a list
# of records), with optional JSON decode/encode around validation

from .errors import (
    ArrayValidatorError,
    InvalidInputError,
    AmbiguousShapeError,
    RuleConfigError,
    UnknownValidatorError,
    ArrayErrorTaxonomy,
)
from .rules import RuleSpec, JsonMode, FieldConfig, parse_rule, parse_rules
from .codec import JsonCodec
from .registry import ValidatorRegistry, ValidatorSpec
from .record_validator import RecordValidator, Success, Failure
from .field_processor import FieldProcessor, FieldResult, HostRecord, DictRecord

__all__ = [
    'ArrayValidatorError', 'InvalidInputError', 'AmbiguousShapeError',
    'RuleConfigError', 'UnknownValidatorError', 'ArrayErrorTaxonomy',
    'RuleSpec', 'JsonMode', 'FieldConfig', 'parse_rule', 'parse_rules',
    'JsonCodec', 'ValidatorRegistry', 'ValidatorSpec',
    'RecordValidator', 'Success', 'Failure',
    'FieldProcessor', 'FieldResult', 'HostRecord', 'DictRecord',
]
__version__ = '1.0.0'
