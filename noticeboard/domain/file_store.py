"""
File store interface for attachment blobs.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from .notice import StoredFile


class FileStore(ABC):
    """Durable storage for uploaded files."""

    @abstractmethod
    def save_files(self, files: Sequence[Any]) -> List[StoredFile]:
        """Persist uploaded files.

        Args:
            files: Uploaded files (werkzeug FileStorage or compatible objects)

        Returns:
            Stored name and directory for each saved file, in upload order
        """
        pass

    @abstractmethod
    def delete_files(self, paths: List[str]) -> None:
        """Delete stored files by full path."""
        pass
