"""Rule parsing, JSON modes, codec, templates and error taxonomy."""

import pytest

from domain_kits.array_validator import (
    ArrayErrorTaxonomy,
    FieldConfig,
    JsonCodec,
    JsonMode,
    RuleConfigError,
    RuleSpec,
    parse_rule,
    parse_rules,
)
from domain_kits.array_validator.templates import RULESET_TEMPLATES, get_template, list_templates


def test_json_mode_bit_values():
    assert int(JsonMode.NONE) == 0
    assert int(JsonMode.ENCODE) == 1
    assert int(JsonMode.DECODE) == 2
    assert JsonMode.BOTH == JsonMode.DECODE | JsonMode.ENCODE == 3


def test_field_config_flags():
    assert FieldConfig.build(json=3).decodes and FieldConfig.build(json=3).encodes
    assert FieldConfig.build(json=2).decodes and not FieldConfig.build(json=2).encodes
    assert FieldConfig.build(json=1).encodes and not FieldConfig.build(json=1).decodes
    assert not FieldConfig.build().decodes and not FieldConfig.build().encodes


def test_invalid_json_mode_rejected():
    for bad in (4, -1, "2", True, 1.0):
        with pytest.raises(RuleConfigError):
            FieldConfig.build(json=bad)


def test_positional_forms():
    assert parse_rule(["id", "int"]) == RuleSpec(attributes=("id",), validator="int", options=None)
    assert parse_rule((["id", "title"], "required")).attributes == ("id", "title")
    spec = parse_rule(["content", "default", {"value": "x"}])
    assert spec.options == {"value": "x"}
    assert spec.when is None


def test_mapping_form():
    spec = parse_rule({"attributes": "id", "validator": "int", "options": {"min": 1}})
    assert spec == RuleSpec(attributes=("id",), validator="int", options={"min": 1})


def test_when_property():
    pred = lambda: True  # noqa: E731
    assert parse_rule(["a", "required", {"when": pred}]).when is pred


def test_rule_spec_passes_through():
    spec = RuleSpec(attributes=("a",), validator="safe")
    assert parse_rule(spec) is spec


def test_malformed_rules_rejected():
    bad_rules = [
        ["id"],
        ["id", "int", {}, "extra"],
        [[], "required"],
        [["id", 3], "required"],
        ["id", ""],
        ["id", "int", "min=1"],
        ["id", "required", {"when": True}],
        {"attributes": "id"},
        "id",
    ]
    for raw in bad_rules:
        with pytest.raises(RuleConfigError):
            parse_rule(raw)


def test_parse_rules_requires_a_list():
    assert parse_rules(None) == ()
    with pytest.raises(RuleConfigError):
        parse_rules("id")
    with pytest.raises(RuleConfigError):
        parse_rules({"attributes": "id", "validator": "int"})


def test_codec_decode_is_lenient():
    codec = JsonCodec()
    assert codec.decode('{"a": 1}') == {"a": 1}
    assert codec.decode(b"[1, 2]") == [1, 2]
    assert codec.decode("{broken") is None
    assert codec.decode(None) is None
    assert codec.decode(["already", "decoded"]) is None


def test_codec_encode_is_compact_and_unicode():
    assert JsonCodec().encode({"t": "café", "n": [1, 2]}) == '{"t":"café","n":[1,2]}'
    with pytest.raises(TypeError):
        JsonCodec().encode({"s": {1, 2}})


def test_templates_build():
    for template_id in RULESET_TEMPLATES:
        config = get_template(template_id)
        assert config.rules
        assert all(isinstance(r, RuleSpec) for r in config.rules)

    summaries = {t["id"]: t for t in list_templates()}
    assert summaries["user_list_v1"]["each"] is True
    assert summaries["article_body_v1"]["json"] == 3

    with pytest.raises(KeyError):
        get_template("missing_v1")


def test_error_taxonomy():
    for code in ("INVALID_INPUT", "AMBIGUOUS_SHAPE", "RULE_CONFIG_ERROR", "UNKNOWN_VALIDATOR", "VALIDATION_FAILED"):
        info = ArrayErrorTaxonomy.classify(code)
        assert "severity" in info and "remedy" in info
    assert ArrayErrorTaxonomy.severity_level("AMBIGUOUS_SHAPE") == "critical"
    assert ArrayErrorTaxonomy.severity_level("nope") == "unknown"
    assert len(ArrayErrorTaxonomy.all_categories()) == 5
