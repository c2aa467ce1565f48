"""
Application settings for the array validation service.
Externalizes config for portability across hosted/on-prem deployments.
"""
import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class AppSettings:
    """Application settings with environment variable support."""

    def __init__(self):
        self.api_version: str = os.getenv("API_VERSION", "1.0.0")
        self.build_commit: str = os.getenv("BUILD_COMMIT", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "development")
        self.port: int = int(os.getenv("PORT", "8000"))

        self.enable_audit_logging: bool = _env_flag("ENABLE_AUDIT_LOGGING", "true")
        self.enable_redaction: bool = _env_flag("ENABLE_REDACTION", "true")
        self.enable_templates_api: bool = _env_flag("ENABLE_TEMPLATES_API", "true")

        # Upper bound on declarative rules accepted per request
        self.max_rules_per_request: int = int(os.getenv("MAX_RULES_PER_REQUEST", "200"))

        self.cors_allow_origins: list = [
            o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "").split(",") if o.strip()
        ]


settings = AppSettings()
