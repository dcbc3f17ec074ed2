"""Package marker for the document service.

Proxies privileged Supabase storage/database operations for the SPA.
"""

__version__ = "1.0.0"
