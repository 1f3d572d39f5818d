import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

# .env and the dev database live in the directory the service is started from
load_dotenv(find_dotenv(usecwd=True))

VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    environment: str
    database_url: str
    host: str
    port: int
    public_base_url: str
    preview_timeout: float
    code_attempts: int
    seed_links: bool
    log_level: str


def _flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    environment = os.getenv("ENVIRONMENT", "dev")

    # Dev: SQLite (zero config), Prod: whatever DATABASE_URL points at
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        if environment == "prod":
            raise RuntimeError("DATABASE_URL must be set in production")
        database_url = "sqlite:///./shortlinks_dev.db"

    return Settings(
        environment=environment,
        database_url=database_url,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 3000)),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:3000"),
        preview_timeout=float(os.getenv("PREVIEW_TIMEOUT", 4.0)),
        code_attempts=max(1, int(os.getenv("CODE_ATTEMPTS", 3))),
        seed_links=_flag(os.getenv("SEED_LINKS", "1" if environment == "dev" else "0")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
