"""
Document service route modules.

Each module handles a specific area of functionality.
"""

from .documents import router as documents_router
from .profiles import router as profiles_router

__all__ = [
    "documents_router",
    "profiles_router",
]
