"""
Client for the document service with a direct Supabase fallback.

Usage:
    from document_client import DocumentClient

    client = DocumentClient(base_url, access_token=token, user_id=user_id, supabase=sb)
    docs = client.list_documents()
"""

from .client import DocumentClient
from .timeouts import ClientTimeouts, DocumentClientError, DocumentTimeoutError

__all__ = [
    "DocumentClient",
    "ClientTimeouts",
    "DocumentClientError",
    "DocumentTimeoutError",
]
