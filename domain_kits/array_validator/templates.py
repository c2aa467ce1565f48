"""Static rule-set templates.

Starting points for common array fields, in the JSON-transportable mapping
form. Templates never hold `when` predicates (not expressible in JSON).
"""
from __future__ import annotations

from typing import Any, Dict, List

from .rules import FieldConfig, JsonMode

RULESET_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "article_body_v1": {
        "template_version": "1.0.0",
        "description": "Single JSON article object: id/title required, title trimmed, content defaulted.",
        "each": False,
        "json": int(JsonMode.BOTH),
        "rules": [
            {"attributes": ["id", "title"], "validator": "required"},
            {"attributes": "id", "validator": "int", "options": {"min": 1}},
            {"attributes": "title", "validator": "trim"},
            {"attributes": "title", "validator": "string", "options": {"max": 255}},
            {"attributes": "content", "validator": "default", "options": {"value": "empty body example"}},
        ],
    },
    "user_list_v1": {
        "template_version": "1.0.0",
        "description": "List of users: id/login/active required, login format, active flag boolean.",
        "each": True,
        "json": int(JsonMode.NONE),
        "rules": [
            {"attributes": ["id", "login", "active"], "validator": "required"},
            {"attributes": "id", "validator": "integer"},
            {"attributes": "login", "validator": "trim"},
            {"attributes": "login", "validator": "match", "options": {"pattern": "^[a-z0-9_\\-]{3,32}$"}},
            {"attributes": "active", "validator": "boolean"},
        ],
    },
    "contact_list_v1": {
        "template_version": "1.0.0",
        "description": "JSON-encoded list of contacts: name required, email format, optional role from a fixed set.",
        "each": True,
        "json": int(JsonMode.BOTH),
        "rules": [
            {"attributes": ["name", "email"], "validator": "required"},
            {"attributes": "name", "validator": "trim"},
            {"attributes": "email", "validator": "email"},
            {"attributes": "role", "validator": "default", "options": {"value": "member"}},
            {"attributes": "role", "validator": "in", "options": {"range": ["owner", "admin", "member"]}},
        ],
    },
}


def get_template(template_id: str) -> FieldConfig:
    """Build the FieldConfig for a template id (KeyError if unknown)."""
    tmpl = RULESET_TEMPLATES[template_id]
    return FieldConfig.build(rules=tmpl["rules"], json=tmpl.get("json"), each=tmpl.get("each", False))


def list_templates() -> List[Dict[str, Any]]:
    summaries = []
    for template_id, tmpl in RULESET_TEMPLATES.items():
        rules = tmpl.get("rules") or []
        summaries.append(
            {
                "id": template_id,
                "template_version": tmpl.get("template_version", ""),
                "description": tmpl.get("description", ""),
                "each": bool(tmpl.get("each", False)),
                "json": int(tmpl.get("json") or 0),
                "rules_count": len(rules),
            }
        )
    return summaries
