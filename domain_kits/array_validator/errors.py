"""
Array Validator Error Taxonomy

Two tiers of failure:
- Structural / configuration errors are raised as exceptions (the field
  cannot be processed at all).
- Validation errors are collected per attribute and attached to the host
  record; they are never raised.
"""


class ArrayValidatorError(ValueError):
    """Base class for errors raised by the array validator kit."""

    code = "ARRAY_VALIDATOR_ERROR"

    def __init__(self, message: str, *, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInputError(ArrayValidatorError):
    """Field value is not an array (or an 'each' item is not a record)."""

    code = "INVALID_INPUT"


class AmbiguousShapeError(ArrayValidatorError):
    """Field value is list-shaped but 'each' was not requested."""

    code = "AMBIGUOUS_SHAPE"


class RuleConfigError(ArrayValidatorError):
    """A declarative rule (or field config) could not be parsed."""

    code = "RULE_CONFIG_ERROR"


class UnknownValidatorError(RuleConfigError):
    """A rule names a validator the registry does not know."""

    code = "UNKNOWN_VALIDATOR"


class ArrayErrorTaxonomy:
    """Map error codes to severity and caller-facing guidance."""

    CATEGORIES = {
        'INVALID_INPUT': {
            'severity': 'critical',
            'tier': 'structural',
            'pattern': 'Field value is not an array/object after optional JSON decode',
            'example': 'Field holds the string "abc" or malformed JSON with json=DECODE',
            'remedy': 'Send an object (single record) or a list of objects'
        },
        'AMBIGUOUS_SHAPE': {
            'severity': 'critical',
            'tier': 'structural',
            'pattern': 'List-shaped value validated as a single record',
            'example': '[{"id": 1}, {"id": 2}] with each=false',
            'remedy': "Set 'each' to validate every item independently"
        },
        'RULE_CONFIG_ERROR': {
            'severity': 'high',
            'tier': 'configuration',
            'pattern': 'Rule is missing attributes or validator, or options are not a mapping',
            'example': '["id"] (no validator) or ["id", "int", "min=1"]',
            'remedy': 'Use [attributes, validator, {options}] or the mapping form'
        },
        'UNKNOWN_VALIDATOR': {
            'severity': 'high',
            'tier': 'configuration',
            'pattern': 'Validator name not present in the registry',
            'example': '["id", "integr"]',
            'remedy': 'Use one of the registered validator names or register a custom one'
        },
        'VALIDATION_FAILED': {
            'severity': 'medium',
            'tier': 'validation',
            'pattern': 'One or more attributes failed their validators',
            'example': 'title missing while required',
            'remedy': 'Read the field errors; the field value was left unchanged'
        },
    }

    @classmethod
    def classify(cls, error_code: str) -> dict:
        """
        Retrieve category info for an error code.

        Unknown codes map to a generic 'unknown' category.
        """
        if error_code in cls.CATEGORIES:
            return cls.CATEGORIES[error_code]
        return {
            'severity': 'unknown',
            'tier': 'unknown',
            'pattern': 'Unknown error category',
            'example': '',
            'remedy': 'See logs for details'
        }

    @classmethod
    def all_categories(cls) -> list:
        """Return list of all error category codes."""
        return list(cls.CATEGORIES.keys())

    @classmethod
    def severity_level(cls, error_code: str) -> str:
        """Get severity of an error category."""
        return cls.classify(error_code).get('severity', 'unknown')
