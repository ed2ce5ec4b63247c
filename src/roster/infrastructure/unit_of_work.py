"""Unit of work: one store transaction around a sequence of repository calls."""

import logging
from collections.abc import Callable
from typing import TypeVar

from roster.application.errors import TransactionError
from roster.application.ports import EntityStore, StoreTransaction
from roster.infrastructure.repository import Repository

logger = logging.getLogger(__name__)

R = TypeVar("R")


class UnitOfWork:
    """Begin / commit / rollback over one EntityStore.

    At most one transaction is active per instance; nesting is a programming
    error. Use a fresh instance per workflow.
    """

    def __init__(self, store: EntityStore, repository: Repository) -> None:
        self._store = store
        self._repository = repository
        self._transaction: StoreTransaction | None = None
        self._bound: Repository | None = None

    @property
    def active(self) -> bool:
        return self._transaction is not None

    @property
    def repository(self) -> Repository:
        """Repository bound to the active transaction."""
        if self._bound is None:
            raise TransactionError("No active transaction")
        return self._bound

    def begin(self) -> None:
        if self._transaction is not None:
            raise TransactionError("A transaction is already active; nesting is not supported")
        self._transaction = self._store.begin()
        self._bound = self._repository.bind(self._transaction.store)

    def commit(self) -> None:
        if self._transaction is None:
            raise TransactionError("No active transaction to commit")
        transaction = self._transaction
        self._transaction = None
        self._bound = None
        try:
            transaction.commit()
        finally:
            # Other sessions may have cached pre-commit rows while the writes were invisible to them.
            self._repository.invalidate_cache()

    def rollback(self) -> None:
        if self._transaction is None:
            raise TransactionError("No active transaction to roll back")
        transaction = self._transaction
        self._transaction = None
        self._bound = None
        try:
            transaction.rollback()
        finally:
            # Reads inside the transaction may have cached rows that no longer exist.
            self._repository.invalidate_cache()

    def run(self, work: Callable[[Repository], R]) -> R:
        """Run `work` in a transaction: commit on return, roll back and re-raise on error."""
        self.begin()
        try:
            result = work(self.repository)
        except BaseException:
            logger.debug("Rolling back %s transaction", self._repository.entity.name)
            self.rollback()
            raise
        self.commit()
        return result
