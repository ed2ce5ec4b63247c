#!/usr/bin/env python3
"""Seed the Neo4j person store with sample people.

Creates constraints if missing, then adds each sample person through
PersonService so the usual rules and normalization apply. People whose email
already exists are skipped, so the script is idempotent. Run from repo root
with .env (NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD, optional NEO4J_DATABASE).
"""
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402
from neo4j import GraphDatabase  # noqa: E402

load_dotenv(REPO_ROOT / ".env")

from api.config import Settings  # noqa: E402
from api.main import build_person_service  # noqa: E402
from roster.application import ConflictError, PersonInput  # noqa: E402
from roster.infrastructure import neo4j_person_store  # noqa: E402

SAMPLE_PERSONS = [
    PersonInput("John", "Doe", "john.doe@email.com", "555-0101", "123 Main Street, Springfield"),
    PersonInput("Jane", "Smith", "jane.smith@email.com", "555-0102", "456 Oak Avenue, Riverside"),
    PersonInput("Bob", "Johnson", "bob.johnson@email.com", "555-0103", "789 Pine Road, Lakeside"),
    PersonInput("Alice", "Williams", "alice.williams@email.com", "555-0104", "321 Elm Street, Hilltown"),
    PersonInput("Charlie", "Brown", "charlie.brown@email.com", "555-0105", "654 Maple Drive, Meadowview"),
]


def main() -> int:
    settings = Settings.from_env()
    driver = GraphDatabase.driver(settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password))
    try:
        store = neo4j_person_store(driver, database=settings.neo4j_database)
        service = build_person_service(store, settings)
        created = 0
        for data in SAMPLE_PERSONS:
            try:
                person = service.create_person(data)
            except ConflictError:
                print(f"Skipped {data.email} (already exists).")
                continue
            created += 1
            print(f"Created {person.display_name} (id {person.id}).")
        print(f"Done. {created} person(s) created.")
        return 0
    finally:
        driver.close()


if __name__ == "__main__":
    sys.exit(main())
