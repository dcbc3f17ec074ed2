"""
Supabase-backed profiles repository.
"""

from typing import Any, Dict, Optional

from supabase import Client

from .base import ProfileRepositoryInterface

PROFILES_TABLE = "profiles"


class SupabaseProfileRepository(ProfileRepositoryInterface):
    """Wrapper around the PostgREST `profiles` table."""

    def __init__(self, client: Client, table: str = PROFILES_TABLE):
        self._client = client
        self._table = table

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self._client.table(self._table)
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = (
            self._client.table(self._table)
            .update(fields)
            .eq("id", user_id)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None
