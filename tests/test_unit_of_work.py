"""Unit tests for UnitOfWork over InMemoryStore."""

import pytest

from roster.application.criteria import where
from roster.application.errors import TransactionError
from roster.infrastructure import PERSON, CacheService, InMemoryStore, Repository, UnitOfWork
from roster.infrastructure.cache import make_key


def _row(name, email):
    return {"name": name, "surname": "Doe", "email": email, "phone": "5550101", "address": "1 Main St"}


@pytest.fixture
def store():
    return InMemoryStore(PERSON.unique_fields)


@pytest.fixture
def cache():
    return CacheService()


@pytest.fixture
def repo(store, cache):
    return Repository(store, PERSON, cache)


def test_run_commits_on_success(store, repo):
    uow = UnitOfWork(store, repo)
    created = uow.run(lambda r: r.create(_row("John", "john@x.com")))
    assert not uow.active
    assert repo.find_by_id(created.id) == created


def test_run_rolls_back_and_reraises(store, repo):
    existing = repo.create(_row("Jane", "jane@x.com"))

    def work(r):
        r.create(_row("John", "john@x.com"))
        r.update(existing.id, {"name": "Janet"})
        r.delete(existing.id)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        UnitOfWork(store, repo).run(work)

    assert repo.count() == 1
    restored = repo.find_by_id(existing.id)
    assert restored.name == "Jane"
    assert repo.find_by(where()) == [restored]


def test_rollback_drops_reads_cached_inside_transaction(store, repo):
    uow = UnitOfWork(store, repo)
    uow.begin()
    created = uow.repository.create(_row("John", "john@x.com"))
    assert uow.repository.find_by_id(created.id) is not None
    uow.rollback()
    assert repo.find_by_id(created.id) is None


def test_nested_begin_is_an_error(store, repo):
    uow = UnitOfWork(store, repo)
    uow.begin()
    with pytest.raises(TransactionError):
        uow.begin()
    uow.rollback()


def test_commit_or_rollback_without_begin_is_an_error(store, repo):
    uow = UnitOfWork(store, repo)
    with pytest.raises(TransactionError):
        uow.commit()
    with pytest.raises(TransactionError):
        uow.rollback()
    with pytest.raises(TransactionError):
        uow.repository


def test_instance_is_reusable_after_commit(store, repo):
    uow = UnitOfWork(store, repo)
    uow.run(lambda r: r.create(_row("John", "john@x.com")))
    uow.run(lambda r: r.create(_row("Jane", "jane@x.com")))
    assert repo.count() == 2


def test_rollback_leaves_other_transactions_alone(store, repo):
    first = UnitOfWork(store, repo)
    second = UnitOfWork(store, repo)
    first.begin()
    second.begin()
    first.repository.create(_row("John", "john@x.com"))
    second.repository.create(_row("Jane", "jane@x.com"))
    second.rollback()
    first.commit()
    assert [p.name for p in repo.find_all()] == ["John"]


def test_commit_drops_rows_cached_by_other_readers_before_commit(store, repo, cache):
    person = repo.create(_row("John", "john@x.com"))
    stale = repo.find_by_id(person.id)

    uow = UnitOfWork(store, repo)
    uow.begin()
    uow.repository.update(person.id, {"name": "Johnny"})
    # A reader on another session still sees the committed row and caches it.
    cache.set(PERSON.name, make_key("findById", {"id": person.id}), stale)
    uow.commit()

    assert repo.find_by_id(person.id).name == "Johnny"
