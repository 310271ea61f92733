"""
Module services - Logique métier de l'application.

Contient les services qui orchestrent les opérations composées :
- Ingestion de la documentation dans la base vectorielle
"""

from .ingestion import IngestionResult, IngestionService, build_document

__all__ = ["IngestionResult", "IngestionService", "build_document"]
