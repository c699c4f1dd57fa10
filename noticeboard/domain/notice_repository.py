"""
Notice repository interfaces following Repository pattern.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional

from .notice import FileAttachment, Notice, Page, SearchType


class NoticeRepository(ABC):
    """Notice repository interface."""

    @abstractmethod
    def find_by_id(self, notice_id: int) -> Optional[Notice]:
        """Get notice by ID.

        Args:
            notice_id: Notice ID

        Returns:
            Notice with its attachments or None if not found
        """
        pass

    @abstractmethod
    def save(self, notice: Notice) -> Notice:
        """Insert or update a notice.

        Attachments without an ID are persisted along with the notice.

        Args:
            notice: Notice to persist

        Returns:
            The persisted notice with its ID assigned
        """
        pass

    @abstractmethod
    def delete(self, notice: Notice) -> None:
        """Delete a notice row and any attachment rows still linked to it."""
        pass

    @abstractmethod
    def update_notice(self, notice: Notice) -> None:
        """Update title, content, counters and attachments of an existing notice."""
        pass

    @abstractmethod
    def get_notice_search(
        self,
        search_type: SearchType,
        keyword: Optional[str],
        page: int = 1,
        per_page: int = 10
    ) -> Page[Notice]:
        """Search notices by keyword with pagination.

        Args:
            search_type: Field(s) the keyword is matched against
            keyword: Substring to match; empty or None matches everything
            page: Page number (1-based)
            per_page: Number of notices per page

        Returns:
            Page of notices, newest first
        """
        pass


class FileAttachmentRepository(ABC):
    """File metadata repository interface."""

    @abstractmethod
    def delete_all(self, attachments: List[FileAttachment]) -> None:
        """Delete the given attachment rows."""
        pass


class TransactionManager(ABC):
    """Scoped transaction boundary shared by the repositories."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Open a transaction.

        Commits when the block exits normally, rolls back and re-raises
        when it exits with an exception.
        """
        pass
