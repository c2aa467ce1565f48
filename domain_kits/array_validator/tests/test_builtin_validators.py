"""Built-in validator behaviour (messages, coercion rules, options)."""

import pytest

from domain_kits.array_validator import RecordValidator, RuleConfigError, ValidatorRegistry
from domain_kits.array_validator.registry import attribute_label, is_empty


def _errors(record, rules):
    outcome = RecordValidator().validate(record, rules)
    return {} if outcome.ok else outcome.errors


def _record(record, rules):
    outcome = RecordValidator().validate(record, rules)
    assert outcome.ok, outcome
    return outcome.record


def test_attribute_label():
    assert attribute_label("title") == "Title"
    assert attribute_label("user_name") == "User Name"
    assert attribute_label("firstName") == "First Name"
    assert attribute_label("zip-code") == "Zip Code"


def test_is_empty():
    assert is_empty(None) and is_empty("") and is_empty([]) and is_empty({})
    assert not is_empty(0) and not is_empty(False) and not is_empty(" ")


def test_required_strips_strings():
    assert _errors({"t": "   "}, [["t", "required"]]) == {"t": "T cannot be blank."}
    assert _errors({"t": 0}, [["t", "required"]]) == {}
    assert _errors({"t": []}, [["t", "required"]]) == {"t": "T cannot be blank."}


def test_custom_message_option():
    rules = [["title", "required", {"message": "Please give {attribute} a value"}]]
    assert _errors({}, rules) == {"title": "Please give Title a value"}


def test_default_literal_and_callable():
    assert _record({}, [["a", "default", {"value": 7}]]) == {"a": 7}
    assert _record({"a": "keep"}, [["a", "default", {"value": 7}]]) == {"a": "keep"}
    computed = _record({"id": 3}, [["slug", "default", {"value": lambda rec, attr: "item-%s" % rec["id"]}]])
    assert computed["slug"] == "item-3"


def test_trim_only_touches_strings():
    assert _record({"a": "  x  ", "b": 5}, [[["a", "b"], "trim"]]) == {"a": "x", "b": 5}
    assert _record({"a": "--x--"}, [["a", "trim", {"chars": "-"}]]) == {"a": "x"}


def test_filter():
    assert _record({"a": "ABC"}, [["a", "filter", {"filter": str.lower}]]) == {"a": "abc"}
    with pytest.raises(RuleConfigError):
        RecordValidator().validate({"a": 1}, [["a", "filter"]])


def test_integer():
    rules = [["n", "int", {"min": 1, "max": 10}]]
    assert _errors({"n": 5}, rules) == {}
    assert _errors({"n": " 7 "}, rules) == {}
    assert _errors({"n": 3.0}, rules) == {}
    assert _errors({"n": True}, rules) == {"n": "N must be an integer."}
    assert _errors({"n": "1.5"}, rules) == {"n": "N must be an integer."}
    assert _errors({"n": 0}, rules) == {"n": "N must be no less than 1."}
    assert _errors({"n": "11"}, rules) == {"n": "N must be no greater than 10."}


def test_type_checks_skip_empty_values():
    assert _errors({"n": None}, [["n", "int"]]) == {}
    assert _errors({}, [["n", "integer"]]) == {}


def test_number():
    assert _errors({"x": "1.5e3"}, [["x", "number"]]) == {}
    assert _errors({"x": 2}, [["x", "double"]]) == {}
    assert _errors({"x": "abc"}, [["x", "float"]]) == {"x": "X must be a number."}
    assert _errors({"x": -1}, [["x", "number", {"min": 0}]]) == {"x": "X must be no less than 0."}


def test_boolean():
    for value in (True, False, 1, 0, "1", "0"):
        assert _errors({"b": value}, [["b", "boolean"]]) == {}
    assert _errors({"b": "yes"}, [["b", "bool"]]) == {"b": 'B must be either "1" or "0".'}
    assert _errors({"b": "1"}, [["b", "boolean", {"strict": True, "true_value": True, "false_value": False}]]) == {
        "b": 'B must be either "True" or "False".'
    }


def test_string():
    assert _errors({"s": 5}, [["s", "string"]]) == {"s": "S must be a string."}
    assert _errors({"s": "ab"}, [["s", "string", {"min": 3}]]) == {"s": "S should contain at least 3 characters."}
    assert _errors({"s": "abcd"}, [["s", "string", {"max": 3}]]) == {"s": "S should contain at most 3 characters."}
    assert _errors({"s": "abcd"}, [["s", "string", {"length": 3}]]) == {"s": "S should contain 3 characters."}
    assert _errors({"s": "abcd"}, [["s", "string", {"length": [2, 4]}]]) == {}


def test_in_and_not_in():
    assert _errors({"r": "admin"}, [["r", "in", {"range": ["admin", "member"]}]]) == {}
    assert _errors({"r": "root"}, [["r", "in", {"range": ["admin", "member"]}]]) == {"r": "R is invalid."}
    assert _errors({"r": "admin"}, [["r", "range", {"range": ["admin"], "not": True}]]) == {"r": "R is invalid."}
    assert _errors({"r": "1"}, [["r", "in", {"range": [1, 2]}]]) == {}
    assert _errors({"r": "1"}, [["r", "in", {"range": [1, 2], "strict": True}]]) == {"r": "R is invalid."}


def test_match():
    assert _errors({"c": "ab12"}, [["c", "match", {"pattern": r"^[a-z]+\d+$"}]]) == {}
    assert _errors({"c": "12"}, [["c", "match", {"pattern": r"^[a-z]+$"}]]) == {"c": "C is invalid."}
    assert _errors({"c": "ab"}, [["c", "match", {"pattern": r"^[a-z]+$", "not": True}]]) == {"c": "C is invalid."}
    with pytest.raises(RuleConfigError):
        RecordValidator().validate({"c": "x"}, [["c", "match"]])


def test_email():
    assert _errors({"e": "ann@example.com"}, [["e", "email"]]) == {}
    assert _errors({"e": "nope"}, [["e", "email"]]) == {"e": "E is not a valid email address."}


def test_compare():
    assert _errors({"password": "x", "password_repeat": "x"}, [["password", "compare"]]) == {}
    assert _errors({"password": "x", "password_repeat": "y"}, [["password", "compare"]]) == {
        "password": 'Password must be equal to "Password Repeat".'
    }
    assert _errors({"age": "20"}, [["age", "compare", {"compare_value": 18, "operator": ">=", "type": "number"}]]) == {}
    assert _errors({"age": 10}, [["age", "compare", {"compare_value": 18, "operator": ">=", "type": "number"}]]) == {
        "age": 'Age must be greater than or equal to "18".'
    }


def test_registry_names_include_aliases():
    names = ValidatorRegistry.default().names()
    for name in ("required", "default", "trim", "int", "integer", "number", "double", "boolean", "bool",
                 "string", "in", "range", "match", "email", "compare", "filter", "safe"):
        assert name in names


def test_invalid_pattern_is_a_rule_config_error():
    with pytest.raises(RuleConfigError):
        RecordValidator().validate({"c": "x"}, [["c", "match", {"pattern": "("}]])


def test_bounds_must_be_numbers():
    for rules in (
        [["n", "int", {"min": "5"}]],
        [["n", "number", {"max": True}]],
        [["s", "string", {"length": "3"}]],
        [["s", "string", {"length": [1, "9"]}]],
    ):
        with pytest.raises(RuleConfigError):
            RecordValidator().validate({"n": 7, "s": "abc"}, rules)
