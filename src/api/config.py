"""Process configuration from environment variables (.env is loaded by api.main)."""

import os
from dataclasses import dataclass

STORE_MEMORY = "memory"
STORE_NEO4J = "neo4j"


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, "true" if default else "false").lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in _env(name, default).split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    person_store: str = STORE_MEMORY
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    neo4j_database: str | None = None
    cache_enabled: bool = True
    cache_ttl_seconds: float = 300
    cache_max_entries: int = 1024
    max_page_size: int = 100
    protected_email: str = "admin@system.com"
    disallowed_email_domains: tuple[str, ...] = ("temp.com",)
    cors_allowed_origins: tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"

    def __post_init__(self):
        if self.person_store not in (STORE_MEMORY, STORE_NEO4J):
            raise ValueError(f"PERSON_STORE must be '{STORE_MEMORY}' or '{STORE_NEO4J}', got {self.person_store!r}")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=_env("ENVIRONMENT", "development").lower(),
            person_store=_env("PERSON_STORE", STORE_MEMORY).lower(),
            neo4j_uri=_env("NEO4J_URI", "bolt://localhost:7687"),
            neo4j_user=_env("NEO4J_USER", "neo4j"),
            neo4j_password=_env("NEO4J_PASSWORD", "password"),
            neo4j_database=_env("NEO4J_DATABASE", "") or None,
            cache_enabled=_env_bool("CACHE_ENABLED", True),
            cache_ttl_seconds=float(_env("CACHE_TTL_SECONDS", "300")),
            cache_max_entries=int(_env("CACHE_MAX_ENTRIES", "1024")),
            max_page_size=int(_env("MAX_PAGE_SIZE", "100")),
            protected_email=_env("PROTECTED_EMAIL", "admin@system.com"),
            disallowed_email_domains=_env_list("DISALLOWED_EMAIL_DOMAINS", "temp.com"),
            cors_allowed_origins=_env_list("CORS_ALLOWED_ORIGINS", "http://localhost:3000"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
        )
