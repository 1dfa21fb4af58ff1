import os

_SETTINGS_BY_ENV = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module(env: str = None) -> str:
    """Dotted path of the settings module for ``env`` (default: ``APP_ENV``)."""
    env = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")
