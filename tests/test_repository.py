"""Unit tests for the cached Repository over InMemoryStore."""

import pytest

from roster.application.criteria import icontains, where
from roster.application.errors import DuplicateEntryError
from roster.infrastructure import PERSON, CacheService, InMemoryStore, Repository


class CountingStore(InMemoryStore):
    """InMemoryStore that counts store reads."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = 0

    def get(self, row_id):
        self.reads += 1
        return super().get(row_id)

    def select(self, *args, **kwargs):
        self.reads += 1
        return super().select(*args, **kwargs)

    def count(self, *args, **kwargs):
        self.reads += 1
        return super().count(*args, **kwargs)


def _row(name, surname, email, phone="5550101", address="1 Main St"):
    return {"name": name, "surname": surname, "email": email, "phone": phone, "address": address}


@pytest.fixture
def store():
    return CountingStore(PERSON.unique_fields)


@pytest.fixture
def repo(store):
    return Repository(store, PERSON, CacheService())


def test_create_then_find_by_id_returns_same_record(repo):
    created = repo.create(_row("John", "Doe", "john@x.com"))
    found = repo.find_by_id(created.id)
    assert found == created
    assert found.display_name == "JOHN DOE"


def test_reads_are_cached(repo, store):
    created = repo.create(_row("John", "Doe", "john@x.com"))
    repo.find_by_id(created.id)
    repo.find_by_id(created.id)
    repo.find_all()
    repo.find_all()
    assert store.reads == 2


def test_absent_result_is_cached(repo, store):
    assert repo.find_by_id(999) is None
    assert repo.find_by_id(999) is None
    assert store.reads == 1


def test_write_invalidates_cached_reads(repo):
    created = repo.create(_row("John", "Doe", "john@x.com"))
    assert repo.find_by_id(created.id).name == "John"
    assert repo.count() == 1

    repo.update(created.id, {"name": "Johnny"})
    assert repo.find_by_id(created.id).name == "Johnny"

    repo.delete(created.id)
    assert repo.find_by_id(created.id) is None
    assert repo.count() == 0


def test_cache_disabled_always_reads_store(store):
    repo = Repository(store, PERSON, CacheService(), cache_enabled=False)
    repo.find_all()
    repo.find_all()
    assert store.reads == 2


def test_update_ignores_unknown_fields_and_keeps_created_at(repo):
    created = repo.create(_row("John", "Doe", "john@x.com"))
    updated = repo.update(created.id, {"surname": "Smith", "id": 42, "bogus": 1})
    assert updated.id == created.id
    assert updated.surname == "Smith"
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at


def test_update_and_delete_missing_row(repo):
    assert repo.update(404, {"name": "X"}) is None
    assert repo.delete(404) is False


def test_unique_violation_is_mapped_to_duplicate_entry(repo):
    repo.create(_row("John", "Doe", "john@x.com"))
    with pytest.raises(DuplicateEntryError) as exc_info:
        repo.create(_row("Jane", "Doe", "john@x.com"))
    assert exc_info.value.code == "DUPLICATE_EMAIL"
    assert exc_info.value.field == "email"
    assert repo.count() == 1


def test_find_by_and_exists(repo):
    repo.create(_row("John", "Doe", "john@x.com"))
    repo.create(_row("Jane", "Smith", "jane@x.com"))
    found = repo.find_by(where(icontains("surname", "smi")))
    assert [p.name for p in found] == ["Jane"]
    assert repo.exists(where(icontains("email", "JOHN")))
    assert not repo.exists(where(icontains("email", "bob")))


def test_default_order_is_name_then_surname(repo):
    repo.create(_row("Zoe", "Adams", "zoe@x.com"))
    repo.create(_row("Anna", "Young", "anna.y@x.com"))
    repo.create(_row("Anna", "Baker", "anna.b@x.com"))
    assert [(p.name, p.surname) for p in repo.find_all()] == [
        ("Anna", "Baker"),
        ("Anna", "Young"),
        ("Zoe", "Adams"),
    ]


def test_paginate_math(repo):
    for i in range(25):
        repo.create(_row(f"Name{i:02d}", "Doe", f"p{i}@x.com"))

    first = repo.paginate(1, 10)
    assert len(first.items) == 10
    assert first.total == 25
    assert first.total_pages == 3
    assert first.has_next is True
    assert first.has_prev is False

    last = repo.paginate(3, 10)
    assert [p.name for p in last.items] == [f"Name{i:02d}" for i in range(20, 25)]
    assert last.has_next is False
    assert last.has_prev is True
    assert last.pagination() == {
        "page": 3,
        "limit": 10,
        "total": 25,
        "totalPages": 3,
        "hasNext": False,
        "hasPrev": True,
    }

    beyond = repo.paginate(4, 10)
    assert beyond.items == []
    assert beyond.has_next is False


def test_paginate_rejects_non_positive_arguments(repo):
    with pytest.raises(ValueError):
        repo.paginate(0, 10)
    with pytest.raises(ValueError):
        repo.paginate(1, 0)


def test_ids_are_never_reused(repo):
    first = repo.create(_row("John", "Doe", "john@x.com"))
    repo.delete(first.id)
    second = repo.create(_row("John", "Doe", "john@x.com"))
    assert second.id > first.id
