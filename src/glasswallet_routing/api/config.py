"""Environment-based configuration for the API service."""

import os
from pathlib import Path


class Settings:
    """API configuration loaded from environment variables."""

    def __init__(self):
        self.host = os.getenv("GW_API_HOST", "0.0.0.0")
        self.port = int(os.getenv("GW_API_PORT", "8000"))
        self.routing_config_path = os.getenv(
            "GW_ROUTING_CONFIG",
            str(Path.home() / ".glasswallet" / "routing_config.json"),
        )

        # CORS
        origins = os.getenv("GW_ALLOWED_ORIGINS", "")
        self.allowed_origins = [o.strip() for o in origins.split(",") if o.strip()] or [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]


_settings = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class _SettingsProxy:
    """Lazy proxy so settings aren't loaded until first access."""

    def __getattr__(self, name):
        return getattr(_get_settings(), name)


settings = _SettingsProxy()
