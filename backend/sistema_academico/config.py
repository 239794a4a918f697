"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class Settings:
    ENV: str
    DATABASE_URL: str
    BASE_PATH: str
    SEED_DATA: bool
    SQL_ECHO: bool
    ALLOW_DEV_CORS: bool
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}")
        self.BASE_PATH = os.getenv("BASE_PATH", "")
        self.SEED_DATA = _flag("SEED_DATA", "true")
        self.SQL_ECHO = _flag("SQL_ECHO", "false")
        self.ALLOW_DEV_CORS = _flag("ALLOW_DEV_CORS", "true")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    def _validate(self):
        if self.BASE_PATH and (not self.BASE_PATH.startswith("/") or self.BASE_PATH.endswith("/")):
            raise RuntimeError("BASE_PATH must start with '/' and must not end with '/'")
        if self.ENV != "dev" and self.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            raise RuntimeError("an in-memory DATABASE_URL is only allowed in the dev environment")


settings = Settings()
