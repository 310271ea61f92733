"""
Module core - Composants fondamentaux du système RAG.

Ce module contient les briques de base de l'assistant :
- Gestionnaire d'embeddings
- Interface avec la base vectorielle
- Registre des fournisseurs LLM
- Service RAG complet
"""

from .embeddings import EmbeddingsManager
from .vectorstore import VectorStoreManager
from .providers import ProviderName, ProviderRegistry, ProviderTestResult
from .rag import ChatResponse, RAGService

__all__ = [
    "EmbeddingsManager",
    "VectorStoreManager",
    "ProviderName",
    "ProviderRegistry",
    "ProviderTestResult",
    "ChatResponse",
    "RAGService",
]
