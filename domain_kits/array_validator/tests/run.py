"""
Array Validator Kit Acceptance Test Runner

Runs the end-to-end scenarios the kit must always satisfy.
This script is the CI gate for kit changes; the full suite runs under pytest.

Usage:
    python -m domain_kits.array_validator.tests.run

    or

    python domain_kits/array_validator/tests/run.py
"""

import sys
from pathlib import Path

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from domain_kits.array_validator import (
    AmbiguousShapeError,
    DictRecord,
    FieldConfig,
    FieldProcessor,
    JsonMode,
)


def test_each_required_scenario():
    """Test 1: missing required attribute in the 2nd item."""
    print("\n[TEST 1] each + required reports one error, field untouched")
    original = [{"id": 1, "title": "A"}, {"id": 2}]
    host = DictRecord({"items": list(original)})
    config = FieldConfig.build(rules=[[["id", "title"], "required"]], each=True)

    result = FieldProcessor().process(host, "items", config)

    assert not result.ok, "Expected a failure"
    assert host.get_errors("items") == ["Title cannot be blank."], f"Unexpected errors: {host.errors}"
    assert host.get("items") == original, "Field must not be rewritten on failure"
    print(f"✅ PASS: errors={host.get_errors('items')}")


def test_default_scenario():
    """Test 2: default value synthesized for a missing attribute."""
    print("\n[TEST 2] default fills a missing attribute")
    host = DictRecord({"body": {"id": 1}})
    config = FieldConfig.build(rules=[["content", "default", {"value": "empty body example"}]])

    FieldProcessor().process(host, "body", config)

    assert host.get("body") == {"id": 1, "content": "empty body example"}, f"Got {host.get('body')}"
    assert not host.has_errors(), "No errors expected"
    print(f"✅ PASS: body={host.get('body')}")


def test_decode_scenario():
    """Test 3: JSON decode without encode writes the structured value."""
    print("\n[TEST 3] json=DECODE keeps the decoded form")
    host = DictRecord({"payload": "[{\"id\":1}]"})
    config = FieldConfig.build(rules=[], json=JsonMode.DECODE, each=True)

    FieldProcessor().process(host, "payload", config)

    assert host.get("payload") == [{"id": 1}], f"Got {host.get('payload')!r}"
    print(f"✅ PASS: payload={host.get('payload')}")


def test_ambiguous_shape():
    """Test 4: list-shaped input without 'each' is rejected."""
    print("\n[TEST 4] list without 'each' raises AmbiguousShapeError")
    host = DictRecord({"items": [{"id": 1}]})
    try:
        FieldProcessor().process(host, "items", FieldConfig.build())
    except AmbiguousShapeError as e:
        print(f"✅ PASS: {e}")
        return
    raise AssertionError("AmbiguousShapeError was not raised")


def main():
    """Run all acceptance tests."""
    print("=" * 70)
    print("ARRAY VALIDATOR KIT ACCEPTANCE TEST RUNNER")
    print("=" * 70)

    try:
        test_each_required_scenario()
        test_default_scenario()
        test_decode_scenario()
        test_ambiguous_shape()

        print("\n" + "=" * 70)
        print("✅ ALL TESTS PASSED")
        print("=" * 70)
        return 0

    except AssertionError as e:
        print("\n" + "=" * 70)
        print("❌ TEST FAILED")
        print("=" * 70)
        print(f"\nError: {e}")
        return 1

    except Exception as e:
        print("\n" + "=" * 70)
        print("❌ UNEXPECTED ERROR")
        print("=" * 70)
        print(f"\nError: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
