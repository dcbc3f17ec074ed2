"""
Helpers for storage keys and human readable file sizes.
"""

import posixpath
import time
from typing import Optional

DEFAULT_UPLOAD_NAME = "upload"


def now_ms() -> int:
    """Current wall clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def format_size_label(num_bytes: int) -> str:
    """
    Format a byte count the way the documents table stores it.

    Example:
        >>> format_size_label(253952)
        '248.0 KB'
        >>> format_size_label(6081740)
        '5.8 MB'
    """
    size_kb = num_bytes / 1024
    if size_kb > 1024:
        return f"{size_kb / 1024:.1f} MB"
    return f"{size_kb:.1f} KB"


def safe_filename(filename: Optional[str]) -> str:
    """
    Reduce a client supplied filename to its last path component.

    Keeps uploads inside the caller's own `{userId}/` prefix.
    """
    if not filename:
        return DEFAULT_UPLOAD_NAME
    name = posixpath.basename(filename.replace("\\", "/")).strip()
    if name in ("", ".", ".."):
        return DEFAULT_UPLOAD_NAME
    return name


def build_document_path(user_id: str, filename: Optional[str], timestamp_ms: Optional[int] = None) -> str:
    """Storage key for a document: `{userId}/{epoch_ms}_{filename}`."""
    ts = timestamp_ms if timestamp_ms is not None else now_ms()
    return f"{user_id}/{ts}_{safe_filename(filename)}"


def build_avatar_path(user_id: str, filename: Optional[str]) -> str:
    """Storage key for a profile photo: `{userId}/profile.{ext}`."""
    name = safe_filename(filename)
    ext = name.rsplit(".", 1)[-1] if "." in name else "png"
    return f"{user_id}/profile.{ext.lower()}"


def cache_busted_url(url: str, timestamp_ms: Optional[int] = None) -> str:
    """Append `?t=<epoch_ms>` so browsers refetch an overwritten object."""
    ts = timestamp_ms if timestamp_ms is not None else now_ms()
    base = url.rstrip("?")
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}t={ts}"


def clean_user_id(raw: str) -> str:
    """Strip trailing backslashes and surrounding whitespace from a path id."""
    return raw.rstrip("\\").strip()
