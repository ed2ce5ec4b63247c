"""Infrastructure layer: concrete implementations of application ports."""

from roster.infrastructure.cache import CacheService
from roster.infrastructure.memory_store import InMemoryStore
from roster.infrastructure.person_entity import (
    PERSON,
    in_memory_person_store,
    neo4j_person_store,
)
from roster.infrastructure.persistence.neo4j_store import Neo4jStore, ensure_constraints
from roster.infrastructure.repository import EntitySpec, Repository
from roster.infrastructure.unit_of_work import UnitOfWork

__all__ = [
    "PERSON",
    "CacheService",
    "EntitySpec",
    "InMemoryStore",
    "Neo4jStore",
    "Repository",
    "UnitOfWork",
    "ensure_constraints",
    "in_memory_person_store",
    "neo4j_person_store",
]
