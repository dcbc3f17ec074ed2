"""
Shared Pydantic models for the document service.

These models define the structure for API requests, responses, and the
persisted rows they carry.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["candidate", "recruiter"]

VISIBILITY_VALUES = ("public", "private")

# Fields a caller may patch on a document row
DOCUMENT_UPDATABLE_FIELDS = ("name", "visibility")

# Fields a caller may patch on their own profile row (never id or role)
PROFILE_UPDATABLE_FIELDS = (
    "name",
    "title",
    "industry",
    "experience",
    "location",
    "bio",
    "skills",
    "certifications",
    "roles",
    "photo_url",
    "portfolio_url",
)
PROFILE_LIST_FIELDS = ("skills", "certifications", "roles")


class AuthenticatedUser(BaseModel):
    """User resolved from a bearer token."""

    id: str
    email: Optional[str] = None


# === Persisted rows ===

class DocumentFile(BaseModel):
    """
    A row of the documents table plus its derived public URL.

    Stored values pass through as-is: legacy rows may carry null paths or
    visibility, and timestamps keep PostgREST's formatting.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    user_id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[str] = Field(None, description="Human readable size, e.g. '248.0 KB'")
    created_at: Optional[str] = None
    visibility: Optional[str] = None
    file_path: Optional[str] = Field(None, description="Storage key inside the documents bucket")
    public_url: Optional[str] = Field(
        None, description="Derived per response for public documents, never persisted"
    )


class UserProfile(BaseModel):
    """A row of the profiles table."""

    model_config = ConfigDict(extra="allow")

    id: str
    role: Optional[Role] = None
    name: Optional[str] = None
    title: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[Union[str, int]] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = Field(default_factory=list)
    certifications: Optional[List[str]] = Field(default_factory=list)
    roles: Optional[List[str]] = Field(default_factory=list)
    photo_url: Optional[str] = None
    portfolio_url: Optional[str] = None


# === Requests ===
# Fields are optional so that missing values answer 400 with the
# endpoint's own message instead of a generic validation error.
# docId is untyped: any falsy value counts as missing.

class DocumentIdRequest(BaseModel):
    """Request body carrying only a document id."""

    model_config = ConfigDict(populate_by_name=True)

    doc_id: Optional[Any] = Field(None, alias="docId")


class UpdateDocumentRequest(BaseModel):
    """Request body for renaming a document or toggling its visibility."""

    model_config = ConfigDict(populate_by_name=True)

    doc_id: Optional[Any] = Field(None, alias="docId")
    updates: Optional[Any] = Field(None, description="Partial document fields")


class UpdateProfileRequest(BaseModel):
    """Request body for patching the caller's profile."""

    updates: Optional[Any] = Field(None, description="Partial profile fields")


# === Responses ===

class DocumentListResponse(BaseModel):
    documents: List[DocumentFile]


class DocumentResponse(BaseModel):
    document: DocumentFile


class DocumentUrlResponse(BaseModel):
    url: str


class SuccessResponse(BaseModel):
    success: bool


class ProfileResponse(BaseModel):
    profile: UserProfile


class PublicProfileResponse(BaseModel):
    """A profile together with its public documents."""

    profile: UserProfile
    documents: List[DocumentFile] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    supabase_configured: bool
    version: str
