"""
Exceptions métier de l'assistant.

Chaque étape du pipeline RAG lève un type dédié afin que la couche HTTP
et l'interface puissent distinguer les cas d'échec sans analyser les messages.
"""

from typing import Optional, Sequence


class AssistantError(RuntimeError):
    """Erreur de base de l'application."""


class ConfigurationError(AssistantError):
    """Configuration inutilisable au démarrage (aucun fournisseur LLM)."""


class StoreError(AssistantError):
    """La base vectorielle est indisponible pour une écriture ou une suppression."""


class RetrievalError(AssistantError):
    """Échec de la recherche de similarité."""


class ProviderNotAvailableError(AssistantError):
    """Le fournisseur demandé n'est pas enregistré."""

    def __init__(self, provider: str, available: Sequence[str]):
        self.provider = provider
        self.available = list(available)
        super().__init__(
            f"LLM provider '{provider}' not available. "
            f"Available providers: {', '.join(self.available)}"
        )


class GenerationError(AssistantError):
    """L'appel au modèle de langage a échoué."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)
