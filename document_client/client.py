"""
Document client with endpoint-first, direct-Supabase fallback.

Mirrors how the SPA talks to the document service: every operation first
calls the service endpoint (which works on networks where the browser
cannot reach Supabase directly) and falls back to a direct Supabase call
when the endpoint is not deployed (404) or answers something unusable.
The client keeps the last known document list in `documents`.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from document_service.errors import describe_exception
from document_service.models import DOCUMENT_UPDATABLE_FIELDS
from document_service.repositories import SupabaseDocumentRepository, SupabaseStorageBucket
from document_service.utils.files import build_document_path, format_size_label
from document_service.utils.urls import with_public_url

from .timeouts import ClientTimeouts, DocumentClientError, DocumentTimeoutError, run_with_timeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_UPLOAD_BYTES = 15 * 1024 * 1024
SIGNED_URL_TTL_SECONDS = 600
NOT_CONNECTED_MESSAGE = "Application is not connected to a backend service."


class DocumentClient:
    """
    Client for one signed-in user's documents.

    Args:
        base_url: Origin serving the /api endpoints ("" for same origin)
        access_token: Supabase access token of the session
        user_id: Profile id whose documents are managed
        supabase: Optional Supabase client for the direct fallback path
        session_user_id: User id of the session (defaults to user_id when a token is set)
        documents_bucket: Storage bucket name
        timeouts: Per-operation timeout budgets
    """

    def __init__(
        self,
        base_url: str = "",
        access_token: Optional[str] = None,
        user_id: Optional[str] = None,
        supabase: Any = None,
        session_user_id: Optional[str] = None,
        documents_bucket: str = "documents",
        timeouts: Optional[ClientTimeouts] = None,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.user_id = user_id
        if session_user_id is None and access_token:
            session_user_id = user_id
        self.session_user_id = session_user_id
        self.documents_bucket = documents_bucket
        self.timeouts = timeouts or ClientTimeouts()
        self.max_upload_bytes = max_upload_bytes
        self._supabase = supabase
        self.documents: List[Dict[str, Any]] = []

    # =========================================================================
    # Plumbing
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    @staticmethod
    def _content_type(response: requests.Response) -> str:
        return response.headers.get("content-type", "") or ""

    def _json_payload(self, response: requests.Response) -> Optional[Dict[str, Any]]:
        """JSON object of a 2xx JSON response, None for anything else."""
        if not 200 <= response.status_code < 300:
            return None
        if "application/json" not in self._content_type(response):
            return None
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def _repository(self) -> SupabaseDocumentRepository:
        if self._supabase is None:
            raise DocumentClientError(NOT_CONNECTED_MESSAGE)
        return SupabaseDocumentRepository(self._supabase)

    def _bucket(self) -> SupabaseStorageBucket:
        if self._supabase is None:
            raise DocumentClientError(NOT_CONNECTED_MESSAGE)
        return SupabaseStorageBucket(self._supabase, self.documents_bucket)

    @staticmethod
    def _direct(fn: Callable[[], T], timeout: float, timeout_message: str) -> T:
        """Run a direct Supabase call under a timeout, normalizing errors."""
        try:
            return run_with_timeout(fn, timeout, timeout_message)
        except DocumentClientError:
            raise
        except Exception as e:
            raise DocumentClientError(describe_exception(e)) from e

    def _replace_cached(self, doc_id: int, fields: Dict[str, Any]) -> None:
        self.documents = [
            {**doc, **fields} if doc.get("id") == doc_id else doc
            for doc in self.documents
        ]

    def _drop_cached(self, doc_id: int) -> None:
        self.documents = [doc for doc in self.documents if doc.get("id") != doc_id]

    # =========================================================================
    # Operations
    # =========================================================================

    def list_documents(self) -> List[Dict[str, Any]]:
        """
        Fetch the user's documents and refresh the cache.

        Returns:
            Document rows, newest first
        """
        if not self.user_id:
            self.documents = []
            return self.documents

        if self.access_token:
            try:
                response = requests.get(
                    self._url("/api/list-documents"),
                    headers=self._headers(),
                    timeout=self.timeouts.list_endpoint,
                )
            except requests.exceptions.Timeout:
                raise DocumentClientError("Fetching documents timed out. Please check your connection.")
            except requests.exceptions.RequestException as e:
                logger.error(f"Server fetch error: {e}")
                raise DocumentClientError(str(e) or "Failed to fetch documents.") from e

            if response.status_code != 404:
                payload = self._json_payload(response)
                if payload is not None and isinstance(payload.get("documents"), list):
                    self.documents = payload["documents"]
                    return self.documents
                logger.warning(
                    f"API responded with {response.status_code} ({self._content_type(response)}), "
                    "but no documents found. Falling back to Supabase."
                )

        repo = self._repository()
        bucket = self._bucket()
        rows = self._direct(
            lambda: repo.list_for_user(self.user_id),
            self.timeouts.list_direct,
            "Fetching documents timed out. Please check your connection and try again.",
        )
        self.documents = [with_public_url(row, bucket) for row in rows]
        return self.documents

    def add_document(
        self,
        filename: str,
        content: Optional[bytes],
        name: str,
        visibility: str = "private",
        content_type: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Upload a document, then refresh the cached list.

        Returns:
            The new document row when the service or Supabase returned it
        """
        if content is None:
            raise DocumentClientError("Pick a file to upload.")
        if not name or not name.strip():
            raise DocumentClientError("Enter a document name.")
        if len(content) > self.max_upload_bytes:
            max_mb = self.max_upload_bytes // (1024 * 1024)
            raise DocumentClientError(f"File too large. Max {max_mb}MB.")

        # Fail fast when the stored session is gone or belongs to someone else
        if not self.access_token or not self.session_user_id:
            raise DocumentClientError("Session expired. Please sign in again and retry.")
        if self.session_user_id != self.user_id:
            raise DocumentClientError("Session mismatch. Please sign out and sign in again.")

        visibility = visibility or "private"
        mime_type = content_type or "application/octet-stream"

        try:
            response = requests.post(
                self._url("/api/upload-document"),
                headers=self._headers(),
                files={"file": (filename, content, mime_type)},
                data={"name": name, "visibility": visibility},
                timeout=self.timeouts.upload_endpoint,
            )
        except requests.exceptions.Timeout:
            raise DocumentClientError("Upload timed out. Please retry.")
        except requests.exceptions.ConnectionError as e:
            # Nothing reached the service, so the direct upload cannot duplicate it
            logger.warning(f"Upload endpoint unreachable ({e}). Falling back to direct upload.")
            response = None
        except requests.exceptions.RequestException as e:
            raise DocumentClientError(str(e) or "Upload failed.") from e

        if response is not None and response.status_code != 404:
            payload = self._json_payload(response)
            if payload is not None:
                self.list_documents()
                return payload.get("document")
            logger.warning(
                f"Upload API responded with {response.status_code} "
                f"({self._content_type(response)}). Falling back to direct upload."
            )

        repo = self._repository()
        bucket = self._bucket()
        file_path = build_document_path(self.user_id, filename)

        self._direct(
            lambda: bucket.upload(file_path, content, content_type=mime_type, upsert=False),
            self.timeouts.upload_direct,
            "Upload timed out. Mobile networks can be slow, please retry on a stronger connection.",
        )
        row = self._direct(
            lambda: repo.insert({
                "user_id": self.user_id,
                "name": name.strip(),
                "size": format_size_label(len(content)),
                "visibility": visibility,
                "file_path": file_path,
            }),
            self.timeouts.insert_direct,
            "Saving document record timed out. Please retry.",
        )

        self.list_documents()
        return row

    def update_document(self, doc_id: int, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Rename a document or change its visibility.

        Returns:
            The updated row
        """
        if self.access_token:
            try:
                response = requests.post(
                    self._url("/api/update-document"),
                    headers={**self._headers(), "Content-Type": "application/json"},
                    json={"docId": doc_id, "updates": updates},
                    timeout=self.timeouts.update_endpoint,
                )
            except requests.exceptions.Timeout:
                raise DocumentClientError("Update timed out. Please retry.")
            except requests.exceptions.RequestException as e:
                raise DocumentClientError(str(e) or "Update failed.") from e

            if response.status_code != 404:
                payload = self._json_payload(response)
                if payload and payload.get("document"):
                    self._replace_cached(doc_id, payload["document"])
                    return payload["document"]
                logger.warning(
                    f"Update API responded with {response.status_code} "
                    f"({self._content_type(response)}). Falling back to direct update."
                )

        fields = {key: updates[key] for key in DOCUMENT_UPDATABLE_FIELDS if key in updates}
        if not fields:
            raise DocumentClientError("No valid fields to update")

        repo = self._repository()
        updated = self._direct(
            lambda: repo.update(doc_id, fields),
            self.timeouts.update_direct,
            "Updating document timed out. Please retry.",
        )
        self._replace_cached(doc_id, updated or fields)
        return updated

    def delete_document(self, doc_id: int) -> None:
        """Delete a document and drop it from the cache."""
        if self.access_token:
            try:
                response = requests.post(
                    self._url("/api/delete-document"),
                    headers={**self._headers(), "Content-Type": "application/json"},
                    json={"docId": doc_id},
                    timeout=self.timeouts.delete_endpoint,
                )
            except requests.exceptions.Timeout:
                raise DocumentClientError("Delete timed out. Please retry.")
            except requests.exceptions.RequestException as e:
                raise DocumentClientError(str(e) or "Delete failed.") from e

            if response.status_code != 404:
                if self._json_payload(response) is not None:
                    self._drop_cached(doc_id)
                    return
                logger.warning(
                    f"Delete API responded with {response.status_code} "
                    f"({self._content_type(response)}). Falling back to direct delete."
                )

        doc = next((d for d in self.documents if d.get("id") == doc_id), None)
        if doc is None:
            return

        repo = self._repository()
        bucket = self._bucket()

        if doc.get("file_path"):
            try:
                self._direct(
                    lambda: bucket.remove([doc["file_path"]]),
                    self.timeouts.remove_direct,
                    "Deleting file timed out. Please retry.",
                )
            except DocumentTimeoutError:
                raise
            except DocumentClientError as e:
                # The file might already be gone; the row is removed regardless
                logger.error(f"Error deleting from storage: {e}")

        self._direct(
            lambda: repo.delete(doc_id),
            self.timeouts.delete_direct,
            "Deleting document record timed out. Please retry.",
        )
        self._drop_cached(doc_id)

    def resolve_document_url(self, doc: Dict[str, Any]) -> Optional[str]:
        """
        URL to view or download a document, None when none can be produced.
        """
        if doc.get("visibility") == "public" and doc.get("public_url"):
            return doc["public_url"]

        if self.access_token:
            try:
                response = requests.post(
                    self._url("/api/get-document-url"),
                    headers={**self._headers(), "Content-Type": "application/json"},
                    json={"docId": doc.get("id")},
                    timeout=self.timeouts.url_endpoint,
                )
            except requests.exceptions.Timeout:
                logger.warning("Document URL request timed out, trying Supabase directly")
            except requests.exceptions.RequestException as e:
                logger.error(f"Failed to get document URL via API: {e}")
            else:
                if response.status_code != 404:
                    payload = self._json_payload(response)
                    if payload and payload.get("url"):
                        return payload["url"]

        if self._supabase is None or not doc.get("file_path"):
            return doc.get("public_url") or None

        try:
            return self._bucket().create_signed_url(doc["file_path"], SIGNED_URL_TTL_SECONDS)
        except Exception as e:
            logger.error(f"Failed to create signed URL: {e}")
            return None
