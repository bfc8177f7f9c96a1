"""
Routes module - contains all API route handlers
"""

from .scriptwriting import router as scriptwriting_router

__all__ = [
    "scriptwriting_router",
]
