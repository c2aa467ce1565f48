"""Minimal HTTP client helpers for array validation API CI gates.

- Uses stdlib only (urllib) to avoid extra deps in CI.

Environment variables:
- ARRAY_API_BASE_URL (default: http://localhost:8000)
"""

from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from typing import Any


def env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def base_url() -> str:
    if os.getenv("GITHUB_ACTIONS", "").lower() == "true" and not env("ARRAY_API_BASE_URL"):
        raise RuntimeError("ARRAY_API_BASE_URL must be set in GitHub Actions.")
    return (env("ARRAY_API_BASE_URL") or "http://localhost:8000").rstrip("/")


def post_json(path: str, payload: dict[str, Any], *, timeout_s: int = 30) -> tuple[int, dict[str, Any]]:
    """POST a JSON payload; returns (status_code, decoded body) for 2xx and 4xx responses."""
    url = base_url() + path
    req = urllib.request.Request(
        url=url,
        data=json.dumps(payload).encode("utf-8"),
        method="POST",
        headers={"Content-Type": "application/json"},
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            raw = resp.read().decode("utf-8")
            return resp.status, (json.loads(raw) if raw else {})
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8") if getattr(e, "fp", None) else ""
        try:
            detail = json.loads(raw) if raw else {"raw": raw}
        except ValueError:
            detail = {"raw": raw}
        if 400 <= e.code < 500:
            return e.code, detail
        raise RuntimeError(f"HTTP {e.code} calling {url}: {detail}") from e
    except urllib.error.URLError as e:
        raise RuntimeError(f"Network error calling {url}: {e}") from e
