"""
Repository Factory for creating backend-specific repositories.
"""
from dataclasses import dataclass
from typing import Callable, Dict

from ..config import Settings
from ..domain.notice_repository import FileAttachmentRepository, NoticeRepository, TransactionManager
from .memory_notice_repository import InMemoryFileAttachmentRepository, InMemoryNoticeRepository, InMemoryStore
from .sqlalchemy_notice_repository import (
    SqlAlchemyDatabase,
    SqlAlchemyFileAttachmentRepository,
    SqlAlchemyNoticeRepository,
)


@dataclass(frozen=True)
class RepositoryBundle:
    """Repositories sharing one transaction boundary."""
    notices: NoticeRepository
    attachments: FileAttachmentRepository
    transactions: TransactionManager


def _create_memory_repositories(settings: Settings) -> RepositoryBundle:
    store = InMemoryStore()
    return RepositoryBundle(
        notices=InMemoryNoticeRepository(store),
        attachments=InMemoryFileAttachmentRepository(store),
        transactions=store
    )


def _create_sqlalchemy_repositories(settings: Settings) -> RepositoryBundle:
    database = SqlAlchemyDatabase(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    database.create_tables()
    return RepositoryBundle(
        notices=SqlAlchemyNoticeRepository(database),
        attachments=SqlAlchemyFileAttachmentRepository(database),
        transactions=database
    )


class RepositoryFactory:
    """Factory for creating repositories of the configured backend."""

    _backends: Dict[str, Callable[[Settings], RepositoryBundle]] = {
        'memory': _create_memory_repositories,
        'sqlalchemy': _create_sqlalchemy_repositories
    }

    @classmethod
    def create_repositories(cls, settings: Settings) -> RepositoryBundle:
        """Create repositories for settings.REPOSITORY_BACKEND.

        Args:
            settings: Application settings

        Returns:
            RepositoryBundle for the backend

        Raises:
            ValueError: If the backend is not supported
        """
        backend = settings.REPOSITORY_BACKEND
        if backend not in cls._backends:
            raise ValueError(f"Repository backend {backend} is not supported")
        return cls._backends[backend](settings)

    @classmethod
    def get_supported_backends(cls) -> list[str]:
        return list(cls._backends.keys())

    @classmethod
    def register_backend(cls, name: str, builder: Callable[[Settings], RepositoryBundle]) -> None:
        """Register a new repository backend.

        Args:
            name: Backend name used in REPOSITORY_BACKEND
            builder: Callable building the repositories from settings
        """
        cls._backends[name] = builder
