"""
Supabase-backed documents repository.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from .base import DocumentRepositoryInterface

logger = logging.getLogger(__name__)

DOCUMENTS_TABLE = "documents"


class SupabaseDocumentRepository(DocumentRepositoryInterface):
    """
    Wrapper around the PostgREST `documents` table.

    Error Handling:
    - Fail-fast: postgrest APIError propagates to the caller
    - Lookups use limit(1) so a missing row is None rather than an error
    """

    def __init__(self, client: Client, table: str = DOCUMENTS_TABLE):
        self._client = client
        self._table = table

    def _query(self):
        return self._client.table(self._table)

    def list_for_user(
        self,
        user_id: str,
        visibility: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        query = self._query().select("*").eq("user_id", user_id)
        if visibility:
            query = query.eq("visibility", visibility)
        response = query.order("created_at", desc=True).execute()
        return list(response.data or [])

    def get(self, doc_id: int) -> Optional[Dict[str, Any]]:
        response = (
            self._query()
            .select("id, user_id, file_path, visibility")
            .eq("id", doc_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    def get_owned(self, doc_id: int, user_id: str) -> Optional[Dict[str, Any]]:
        response = (
            self._query()
            .select("id")
            .eq("id", doc_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        response = self._query().insert(row).execute()
        rows = response.data or []
        if not rows:
            raise RuntimeError("Insert returned no row")
        return rows[0]

    def update(self, doc_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = self._query().update(fields).eq("id", doc_id).execute()
        rows = response.data or []
        return rows[0] if rows else None

    def delete(self, doc_id: int) -> None:
        self._query().delete().eq("id", doc_id).execute()
        logger.debug(f"Deleted document row {doc_id}")
