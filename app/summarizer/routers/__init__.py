"""
Routers package for FastAPI endpoints.

Organized by domain:
- documents: Upload, analysis and retrieval endpoints
"""

from . import documents

__all__ = ["documents"]
