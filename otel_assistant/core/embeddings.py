"""
Gestionnaire d'embeddings pour la vectorisation de la documentation.

Les embeddings sont toujours calculés par OpenAI, quel que soit
le fournisseur utilisé pour la génération.
"""

from typing import Optional
from langchain_openai import OpenAIEmbeddings

from otel_assistant.config import Settings, get_settings
from otel_assistant.utils.logger import get_logger


logger = get_logger("embeddings")


class EmbeddingsManager:
    """
    Gestionnaire pour la création d'embeddings via OpenAI.

    Fournit l'objet LangChain attendu par la base vectorielle.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialise le gestionnaire d'embeddings.

        Args:
            model: Nom du modèle d'embeddings (défaut: config)
            settings: Configuration à utiliser (défaut: config globale)
        """
        self.settings = settings or get_settings()
        self.model = model or self.settings.embedding_model
        self._embeddings: Optional[OpenAIEmbeddings] = None

        logger.info(f"Gestionnaire d'embeddings initialisé avec {self.model}")

    @property
    def embeddings(self) -> OpenAIEmbeddings:
        """
        Retourne l'instance OpenAIEmbeddings (lazy loading).

        L'instance est créée à la première utilisation pour
        permettre une configuration différée de la clé API.
        """
        if self._embeddings is None:
            if not self.settings.openai_api_key:
                raise ValueError(
                    "La clé API OpenAI n'est pas configurée. "
                    "Elle est requise pour les embeddings (OPENAI_API_KEY)."
                )

            self._embeddings = OpenAIEmbeddings(
                model=self.model,
                api_key=self.settings.openai_api_key,
            )

        return self._embeddings

    def get_langchain_embeddings(self) -> OpenAIEmbeddings:
        """
        Retourne l'objet embeddings LangChain pour intégration directe.

        Utilisé par VectorStoreManager pour ouvrir la collection Chroma.

        Returns:
            OpenAIEmbeddings: Instance LangChain
        """
        return self.embeddings
