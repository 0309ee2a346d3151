from abc import ABC, abstractmethod
from typing import BinaryIO


class StorageService(ABC):
    """Abstract base class for storage services."""

    @abstractmethod
    async def save_file(self, file: BinaryIO, path: str, content_type: str = None) -> str:
        """
        Save a file to the storage.

        Args:
            file: The file-like object to save. Must support ``await file.read()``.
            path: The destination path/key in the storage (relative to root).
            content_type: The MIME type of the file.

        Returns:
            The path/key where the file was saved.
        """
        pass

    @abstractmethod
    async def delete_file(self, path: str) -> bool:
        """
        Delete a file from the storage.

        Args:
            path: The path/key of the file to delete.

        Returns:
            True if deletion was successful, False if the file did not exist.
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """
        Check whether a file exists in the storage.

        Args:
            path: The path/key of the file.
        """
        pass

    @abstractmethod
    def get_url(self, path: str) -> str:
        """
        Get the URL path the file is served from.

        Args:
            path: The storage path/key.

        Returns:
            A URL path relative to the site root (e.g. ``/uploads/a.jpg``).
        """
        pass
