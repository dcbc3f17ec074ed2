"""
Document API Routes.

Privileged document operations that the browser cannot perform reliably on
its own (mobile networks, private buckets):
- List: the caller's documents with public URLs for public rows
- Upload: multipart upload to storage, then a database row
- Update: rename or toggle visibility (allow-listed fields only)
- Delete: storage object (best effort), then the row
- Signed URL: time-limited link for the owner or for public documents

Every endpoint requires `Authorization: Bearer <supabase access token>`.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..auth import verify_token
from ..config import ServiceSettings, get_settings
from ..dependencies import get_document_repository, get_documents_bucket
from ..errors import describe_exception
from ..models import (
    DOCUMENT_UPDATABLE_FIELDS,
    VISIBILITY_VALUES,
    AuthenticatedUser,
    DocumentIdRequest,
    DocumentListResponse,
    DocumentResponse,
    DocumentUrlResponse,
    SuccessResponse,
    UpdateDocumentRequest,
)
from ..repositories import DocumentRepositoryInterface, StorageBucketInterface
from ..utils.files import build_document_path, format_size_label
from ..utils.urls import with_public_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


# =============================================================================
# Helper Functions
# =============================================================================


def sanitize_document_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keep only the fields a caller may change on a document.

    Raises:
        HTTPException: 400 if nothing is left or a value is invalid
    """
    sanitized = {key: updates[key] for key in DOCUMENT_UPDATABLE_FIELDS if key in updates}

    if not sanitized:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    if "visibility" in sanitized and sanitized["visibility"] not in VISIBILITY_VALUES:
        raise HTTPException(status_code=400, detail="Invalid visibility value")

    if "name" in sanitized:
        name = sanitized["name"]
        if not isinstance(name, str) or not name.strip():
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        sanitized["name"] = name.strip()

    return sanitized


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/list-documents",
    response_model=DocumentListResponse,
    summary="List the caller's documents",
)
def list_documents(
    user: AuthenticatedUser = Depends(verify_token),
    repo: DocumentRepositoryInterface = Depends(get_document_repository),
    bucket: StorageBucketInterface = Depends(get_documents_bucket),
):
    """
    List documents owned by the caller, newest first.

    Public documents carry their storage public URL; private ones carry
    `public_url: null` and must be opened through a signed URL.
    """
    logger.info(f"[{user.id[:8]}] Listing documents")

    try:
        rows = repo.list_for_user(user.id)
    except Exception as e:
        logger.exception(f"Error fetching documents: {e}")
        raise HTTPException(status_code=500, detail=describe_exception(e))

    return {"documents": [with_public_url(row, bucket) for row in rows]}


@router.post(
    "/upload-document",
    response_model=DocumentResponse,
    summary="Upload a document",
)
def upload_document(
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    visibility: Optional[str] = Form(None),
    user: AuthenticatedUser = Depends(verify_token),
    repo: DocumentRepositoryInterface = Depends(get_document_repository),
    bucket: StorageBucketInterface = Depends(get_documents_bucket),
    settings: ServiceSettings = Depends(get_settings),
):
    """
    Store an uploaded file and record it in the documents table.

    The object is written under `{userId}/{epoch_ms}_{filename}`. Storage and
    database are not transactional: if the insert fails the uploaded object
    is removed best-effort.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="Missing file")

    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File exceeds the {settings.max_upload_megabytes} MB upload limit",
        )

    display_name = (name or file.filename or "").strip()
    if not display_name:
        raise HTTPException(status_code=400, detail="Missing name")

    resolved_visibility = "public" if (visibility or "private") == "public" else "private"
    file_path = build_document_path(user.id, file.filename)
    content_type = file.content_type or "application/octet-stream"

    logger.info(f"[{user.id[:8]}] Uploading {len(content)} bytes to {file_path}")

    try:
        bucket.upload(file_path, content, content_type=content_type, upsert=False)
    except Exception as e:
        logger.error(f"Storage upload failed for {file_path}: {e}")
        raise HTTPException(status_code=400, detail=describe_exception(e))

    try:
        row = repo.insert({
            "user_id": user.id,
            "name": display_name,
            "size": format_size_label(len(content)),
            "visibility": resolved_visibility,
            "file_path": file_path,
        })
    except Exception as e:
        logger.error(f"Document insert failed for {file_path}: {e}")
        try:
            bucket.remove([file_path])
        except Exception as cleanup_error:
            logger.error(f"Orphaned storage object {file_path}: {cleanup_error}")
        raise HTTPException(status_code=400, detail=describe_exception(e))

    return {"document": row}


@router.post(
    "/update-document",
    response_model=DocumentResponse,
    summary="Rename a document or change its visibility",
)
def update_document(
    body: Optional[UpdateDocumentRequest] = None,
    user: AuthenticatedUser = Depends(verify_token),
    repo: DocumentRepositoryInterface = Depends(get_document_repository),
):
    """Patch `name` and/or `visibility` on a document the caller owns."""
    body = body or UpdateDocumentRequest()

    if not body.doc_id:
        raise HTTPException(status_code=400, detail="Missing docId in request body")

    if not isinstance(body.updates, dict):
        raise HTTPException(status_code=400, detail="Missing updates in request body")

    sanitized = sanitize_document_updates(body.updates)

    logger.info(f"[{user.id[:8]}] Updating document {body.doc_id}: {sorted(sanitized)}")

    try:
        existing = repo.get_owned(body.doc_id, user.id)
    except Exception as e:
        logger.warning(f"Ownership lookup failed for document {body.doc_id}: {e}")
        existing = None

    if not existing:
        raise HTTPException(status_code=404, detail="Document not found or access denied")

    try:
        updated = repo.update(body.doc_id, sanitized)
    except Exception as e:
        logger.exception(f"update-document error: {e}")
        raise HTTPException(status_code=500, detail=describe_exception(e))

    if updated is None:
        # Row vanished between the ownership check and the patch
        raise HTTPException(status_code=404, detail="Document not found or access denied")

    return {"document": updated}


@router.post(
    "/delete-document",
    response_model=SuccessResponse,
    summary="Delete a document",
)
def delete_document(
    body: Optional[DocumentIdRequest] = None,
    user: AuthenticatedUser = Depends(verify_token),
    repo: DocumentRepositoryInterface = Depends(get_document_repository),
    bucket: StorageBucketInterface = Depends(get_documents_bucket),
):
    """
    Delete a document the caller owns.

    Storage removal errors are logged and ignored so that the database row
    is still removed when the object is already gone.
    """
    body = body or DocumentIdRequest()
    if not body.doc_id:
        raise HTTPException(status_code=400, detail="Missing docId")

    try:
        doc = repo.get(body.doc_id)
    except Exception as e:
        logger.warning(f"Lookup failed for document {body.doc_id}: {e}")
        doc = None

    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")

    if doc.get("user_id") != user.id:
        raise HTTPException(status_code=403, detail="You do not own this document")

    logger.info(f"[{user.id[:8]}] Deleting document {body.doc_id}")

    file_path = doc.get("file_path")
    if file_path:
        try:
            bucket.remove([file_path])
        except Exception as e:
            logger.error(f"Storage delete error (continuing): {describe_exception(e)}")

    try:
        repo.delete(body.doc_id)
    except Exception as e:
        logger.exception(f"delete-document error: {e}")
        raise HTTPException(status_code=500, detail=describe_exception(e))

    return {"success": True}


@router.post(
    "/get-document-url",
    response_model=DocumentUrlResponse,
    summary="Get a viewing URL for a document",
)
def get_document_url(
    body: Optional[DocumentIdRequest] = None,
    user: AuthenticatedUser = Depends(verify_token),
    repo: DocumentRepositoryInterface = Depends(get_document_repository),
    bucket: StorageBucketInterface = Depends(get_documents_bucket),
    settings: ServiceSettings = Depends(get_settings),
):
    """
    Mint a signed URL for a document the caller owns or that is public.

    Falls back to the public URL for public documents when signing fails.
    """
    body = body or DocumentIdRequest()
    if not body.doc_id:
        raise HTTPException(status_code=400, detail="Missing docId")

    try:
        doc = repo.get(body.doc_id)
    except Exception as e:
        logger.warning(f"Lookup failed for document {body.doc_id}: {e}")
        doc = None

    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")

    is_public = doc.get("visibility") == "public"
    if doc.get("user_id") != user.id and not is_public:
        raise HTTPException(status_code=403, detail="Access denied")

    file_path = doc.get("file_path")
    if not file_path:
        logger.error(f"Document {body.doc_id} has no storage path")
        raise HTTPException(status_code=500, detail="Failed to create signed URL")

    sign_error: Optional[str] = None
    url: Optional[str] = None
    try:
        url = bucket.create_signed_url(file_path, settings.signed_url_ttl_seconds)
    except Exception as e:
        sign_error = describe_exception(e)
        logger.warning(f"Signing failed for document {body.doc_id}: {sign_error}")

    if url:
        return {"url": url}

    if is_public:
        return {"url": bucket.get_public_url(file_path)}

    raise HTTPException(status_code=500, detail=sign_error or "Failed to create signed URL")
