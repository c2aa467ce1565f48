"""Client-style smoke test for a deployed array validation API.

- Uses stdlib-only HTTP client in tools/ci/api_http.py
- Exercises: a passing JSON round-trip, a collapsed field error, an ambiguous shape

Env vars:
- ARRAY_API_BASE_URL

Exit codes:
- 0: all checks behaved as expected
- 1: error
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from tools.ci.api_http import post_json


CHECKS = [
    (
        "json_both_ok",
        {
            "record": {"payload": json.dumps({"id": 1, "title": " Smoke "})},
            "field": "payload",
            "json": 3,
            "rules": [[["id", "title"], "required"], ["title", "trim"]],
        },
        200,
        "ok",
    ),
    (
        "each_required_invalid",
        {
            "record": {"users": [{"id": 1, "login": "ann"}, {"id": 2}]},
            "field": "users",
            "each": True,
            "rules": [[["id", "login"], "required"]],
        },
        200,
        "invalid",
    ),
    (
        "ambiguous_shape",
        {"record": {"users": [{"id": 1}]}, "field": "users", "rules": []},
        400,
        "error",
    ),
]


def main() -> int:
    failures = []
    for name, payload, expected_code, expected_status in CHECKS:
        code, body = post_json("/api/arrays/validate", payload)
        status = str(body.get("status") or "")
        print(json.dumps({"check": name, "http": code, "status": status, "trace_id": body.get("trace_id")}))
        if code != expected_code or status != expected_status:
            failures.append(name)

    if failures:
        print(f"ERROR: unexpected results for: {failures}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
