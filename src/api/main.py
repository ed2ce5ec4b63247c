"""
FastAPI backend: person REST API.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from neo4j import GraphDatabase

from api.config import STORE_NEO4J, Settings
from api.errors import install_exception_handlers
from api.persons import router as persons_router
from roster.application import PersonService
from roster.infrastructure import (
    PERSON,
    CacheService,
    Repository,
    UnitOfWork,
    in_memory_person_store,
    neo4j_person_store,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

API_NAME = "Roster Person API"
API_VERSION = "1.0.0"


def _get_driver(settings: Settings):
    return GraphDatabase.driver(settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password))


def build_person_service(store, settings: Settings, cache: CacheService | None = None) -> PersonService:
    """Wire repository, unit-of-work factory and service over one store."""
    cache = cache or CacheService(settings.cache_ttl_seconds, settings.cache_max_entries)
    repository = Repository(store, PERSON, cache, cache_enabled=settings.cache_enabled)
    return PersonService(
        repository,
        lambda: UnitOfWork(store, repository),
        protected_email=settings.protected_email,
        disallowed_email_domains=settings.disallowed_email_domains,
        max_page_size=settings.max_page_size,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.driver = None
        try:
            if settings.person_store == STORE_NEO4J:
                app.state.driver = _get_driver(settings)
                store = neo4j_person_store(app.state.driver, database=settings.neo4j_database)
            else:
                store = in_memory_person_store()
            app.state.person_service = build_person_service(store, settings)
            logger.info(
                "Person API ready (store=%s, environment=%s, cache=%s)",
                settings.person_store,
                settings.environment,
                "on" if settings.cache_enabled else "off",
            )
            yield
        finally:
            if getattr(app.state, "driver", None) is not None:
                app.state.driver.close()

    app = FastAPI(title=API_NAME, version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    install_exception_handlers(app)
    app.include_router(persons_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/")
    def info():
        return {
            "message": API_NAME,
            "version": API_VERSION,
            "environment": settings.environment,
            "endpoints": {
                "list": "GET /api/persons",
                "search": "GET /api/persons/search",
                "incomplete": "GET /api/persons/incomplete",
                "statistics": "GET /api/persons/statistics",
                "get": "GET /api/persons/:id",
                "create": "POST /api/persons",
                "update": "PUT /api/persons/:id",
                "delete": "DELETE /api/persons/:id",
                "health": "GET /health",
            },
        }

    return app


app = create_app()
