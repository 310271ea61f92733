"""
Module api - Exposition HTTP du service RAG (FastAPI).
"""

from .app import create_app, run

__all__ = ["create_app", "run"]
