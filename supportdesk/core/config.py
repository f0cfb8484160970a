# supportdesk/core/config.py
"""
Application settings, read from the environment (and `.env` when present).
"""

import os
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "data")
DEFAULT_DATABASE_FILE = os.path.join(DATA_DIR, "db", "supportdesk.sqlite")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "development"
    database_url: str = f"sqlite+aiosqlite:///{DEFAULT_DATABASE_FILE}"
    api_prefix: str = ""
    allowed_origins: str = "http://localhost:5173"
    seed_data: bool = True
    log_level: str = "INFO"
    uvicorn_host: str = "0.0.0.0"
    uvicorn_port: int = 5182

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
