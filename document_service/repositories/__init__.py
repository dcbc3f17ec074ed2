"""
Repository layer over Supabase Postgres and Storage.

Public API:
- DocumentRepositoryInterface / SupabaseDocumentRepository: `documents` table
- ProfileRepositoryInterface / SupabaseProfileRepository: `profiles` table
- StorageBucketInterface / SupabaseStorageBucket: one storage bucket

Usage:
    from document_service.repositories import SupabaseDocumentRepository

    repo = SupabaseDocumentRepository(client)
    rows = repo.list_for_user(user_id)
"""

from .base import (
    DocumentRepositoryInterface,
    ProfileRepositoryInterface,
    StorageBucketInterface,
)
from .documents import SupabaseDocumentRepository
from .profiles import SupabaseProfileRepository
from .storage import SupabaseStorageBucket

__all__ = [
    "DocumentRepositoryInterface",
    "ProfileRepositoryInterface",
    "StorageBucketInterface",
    "SupabaseDocumentRepository",
    "SupabaseProfileRepository",
    "SupabaseStorageBucket",
]
