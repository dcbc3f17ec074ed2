"""
Profile API Routes.

- GET  /api/profile: the caller's own profile
- POST /api/update-profile: patch allow-listed profile fields
- POST /api/upload-avatar: store a profile photo and point photo_url at it
- GET  /api/public-profile/{user_id}: anyone's profile plus public documents
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..auth import verify_token
from ..config import ServiceSettings, get_settings
from ..dependencies import (
    get_avatars_bucket,
    get_document_repository,
    get_documents_bucket,
    get_profile_repository,
)
from ..errors import describe_exception
from ..models import (
    PROFILE_LIST_FIELDS,
    PROFILE_UPDATABLE_FIELDS,
    AuthenticatedUser,
    ProfileResponse,
    PublicProfileResponse,
    UpdateProfileRequest,
)
from ..repositories import (
    DocumentRepositoryInterface,
    ProfileRepositoryInterface,
    StorageBucketInterface,
)
from ..utils.files import build_avatar_path, cache_busted_url, clean_user_id
from ..utils.urls import public_documents_with_urls

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["profiles"])

PROFILE_NOT_FOUND = "Profile not found."


def sanitize_profile_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keep only profile fields the owner may edit.

    Raises:
        HTTPException: 400 if nothing is left or a list field is malformed
    """
    sanitized = {key: updates[key] for key in PROFILE_UPDATABLE_FIELDS if key in updates}

    if not sanitized:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    for key in PROFILE_LIST_FIELDS:
        if key not in sanitized:
            continue
        value = sanitized[key]
        if value is None:
            sanitized[key] = []
        elif not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise HTTPException(status_code=400, detail=f"{key} must be a list of strings")

    return sanitized


def _load_profile(repo: ProfileRepositoryInterface, user_id: str) -> Dict[str, Any]:
    try:
        profile = repo.get(user_id)
    except Exception as e:
        logger.exception(f"Error fetching profile {user_id}: {e}")
        raise HTTPException(status_code=500, detail=describe_exception(e))

    if not profile:
        raise HTTPException(status_code=404, detail=PROFILE_NOT_FOUND)
    return profile


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get the caller's profile",
)
def get_own_profile(
    user: AuthenticatedUser = Depends(verify_token),
    repo: ProfileRepositoryInterface = Depends(get_profile_repository),
):
    return {"profile": _load_profile(repo, user.id)}


@router.post(
    "/update-profile",
    response_model=ProfileResponse,
    summary="Update the caller's profile",
)
def update_profile(
    body: Optional[UpdateProfileRequest] = None,
    user: AuthenticatedUser = Depends(verify_token),
    repo: ProfileRepositoryInterface = Depends(get_profile_repository),
):
    """
    Patch the caller's profile.

    `id` and `role` are never writable; list fields must hold strings.
    """
    body = body or UpdateProfileRequest()
    if not isinstance(body.updates, dict):
        raise HTTPException(status_code=400, detail="Missing updates in request body")

    sanitized = sanitize_profile_updates(body.updates)
    logger.info(f"[{user.id[:8]}] Updating profile fields {sorted(sanitized)}")

    try:
        updated = repo.update(user.id, sanitized)
    except Exception as e:
        logger.exception(f"update-profile error: {e}")
        raise HTTPException(status_code=500, detail=describe_exception(e))

    if updated is None:
        raise HTTPException(status_code=404, detail=PROFILE_NOT_FOUND)

    return {"profile": updated}


@router.post(
    "/upload-avatar",
    response_model=ProfileResponse,
    summary="Upload a profile photo",
)
def upload_avatar(
    file: Optional[UploadFile] = File(None),
    user: AuthenticatedUser = Depends(verify_token),
    repo: ProfileRepositoryInterface = Depends(get_profile_repository),
    bucket: StorageBucketInterface = Depends(get_avatars_bucket),
    settings: ServiceSettings = Depends(get_settings),
):
    """
    Overwrite `{userId}/profile.{ext}` in the avatars bucket.

    The stored photo_url carries a `?t=` suffix so browsers drop the cached
    previous photo.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="Missing file")

    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File exceeds the {settings.max_upload_megabytes} MB upload limit",
        )

    file_path = build_avatar_path(user.id, file.filename)
    logger.info(f"[{user.id[:8]}] Uploading avatar to {file_path}")

    try:
        bucket.upload(
            file_path,
            content,
            content_type=file.content_type or "application/octet-stream",
            upsert=True,
        )
    except Exception as e:
        logger.error(f"Avatar upload failed for {file_path}: {e}")
        raise HTTPException(status_code=400, detail=describe_exception(e))

    photo_url = cache_busted_url(bucket.get_public_url(file_path))

    try:
        updated = repo.update(user.id, {"photo_url": photo_url})
    except Exception as e:
        logger.exception(f"upload-avatar error: {e}")
        raise HTTPException(status_code=500, detail=describe_exception(e))

    if updated is None:
        raise HTTPException(status_code=404, detail=PROFILE_NOT_FOUND)

    return {"profile": updated}


@router.get(
    "/public-profile/{user_id}",
    response_model=PublicProfileResponse,
    summary="Get a public profile with its public documents",
)
def get_public_profile(
    user_id: str,
    profiles: ProfileRepositoryInterface = Depends(get_profile_repository),
    documents: DocumentRepositoryInterface = Depends(get_document_repository),
    bucket: StorageBucketInterface = Depends(get_documents_bucket),
    settings: ServiceSettings = Depends(get_settings),
):
    """
    Profile viewer payload; no authentication required.

    Document listing failures are logged and yield an empty list so the
    profile still renders.
    """
    profile_id = clean_user_id(user_id)
    if not profile_id:
        raise HTTPException(status_code=404, detail=PROFILE_NOT_FOUND)

    profile = _load_profile(profiles, profile_id)

    try:
        rows = documents.list_for_user(profile_id, visibility="public")
        public_docs = public_documents_with_urls(rows, bucket, settings.signed_url_ttl_seconds)
    except Exception as e:
        logger.error(f"Error fetching public documents for {profile_id}: {e}")
        public_docs = []

    return {"profile": profile, "documents": public_docs}
