"""
Vercel serverless function entry point for the document service.

This file exposes the FastAPI app as a Vercel Python function.
Vercel detects the ASGI interface on the module-level `app`.
"""

import sys
from pathlib import Path

# Add repository root to path so the package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from document_service.app import app  # noqa: E402,F401
