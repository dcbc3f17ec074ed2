"""
Repository Interface Definitions

Defines the abstract interfaces for the documents table, the profiles table
and storage buckets. Routes depend on these interfaces so tests can swap in
mocks without touching Supabase.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class DocumentRepositoryInterface(ABC):
    """
    Abstract interface for the `documents` table.

    All methods are fail-fast: SDK errors propagate to the caller.
    """

    @abstractmethod
    def list_for_user(
        self,
        user_id: str,
        visibility: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List a user's documents, newest first.

        Args:
            user_id: Owner id
            visibility: Optional filter ("public" or "private")

        Returns:
            List of document rows
        """
        pass

    @abstractmethod
    def get(self, doc_id: int) -> Optional[Dict[str, Any]]:
        """
        Fetch a document row by id.

        Returns:
            The row if found, None otherwise
        """
        pass

    @abstractmethod
    def get_owned(self, doc_id: int, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a document row only if it belongs to user_id.

        Returns:
            The row if found and owned, None otherwise
        """
        pass

    @abstractmethod
    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a document row.

        Returns:
            The inserted row as stored (with id and created_at)
        """
        pass

    @abstractmethod
    def update(self, doc_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Patch a document row.

        Returns:
            The updated row, None if nothing matched
        """
        pass

    @abstractmethod
    def delete(self, doc_id: int) -> None:
        """Delete a document row."""
        pass


class ProfileRepositoryInterface(ABC):
    """Abstract interface for the `profiles` table."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a profile row by user id.

        Returns:
            The row if found, None otherwise
        """
        pass

    @abstractmethod
    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Patch a profile row.

        Returns:
            The updated row, None if nothing matched
        """
        pass


class StorageBucketInterface(ABC):
    """Abstract interface for one object storage bucket."""

    @abstractmethod
    def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        """
        Upload bytes under a storage key.

        Raises:
            Exception: If the storage API rejects the upload
        """
        pass

    @abstractmethod
    def remove(self, paths: List[str]) -> None:
        """Remove objects by key."""
        pass

    @abstractmethod
    def create_signed_url(self, path: str, expires_in: int) -> Optional[str]:
        """
        Mint a time-limited URL for a private object.

        Returns:
            The signed URL, None if the API returned none
        """
        pass

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        """Return the public URL for an object (no request is made)."""
        pass
