"""
FastAPI dependency providers for repositories and storage buckets.

Tests replace these through `app.dependency_overrides`.
"""

from fastapi import Depends
from supabase import Client

from .auth import require_admin_client
from .config import ServiceSettings, get_settings
from .repositories import (
    DocumentRepositoryInterface,
    ProfileRepositoryInterface,
    StorageBucketInterface,
    SupabaseDocumentRepository,
    SupabaseProfileRepository,
    SupabaseStorageBucket,
)


def get_document_repository(
    client: Client = Depends(require_admin_client),
) -> DocumentRepositoryInterface:
    return SupabaseDocumentRepository(client)


def get_profile_repository(
    client: Client = Depends(require_admin_client),
) -> ProfileRepositoryInterface:
    return SupabaseProfileRepository(client)


def get_documents_bucket(
    client: Client = Depends(require_admin_client),
    settings: ServiceSettings = Depends(get_settings),
) -> StorageBucketInterface:
    return SupabaseStorageBucket(client, settings.documents_bucket)


def get_avatars_bucket(
    client: Client = Depends(require_admin_client),
    settings: ServiceSettings = Depends(get_settings),
) -> StorageBucketInterface:
    return SupabaseStorageBucket(client, settings.avatars_bucket)
