"""
Racine de composition de l'application.

Construit une fois par processus les services partagés et les relie
entre eux ; l'API, l'interface Streamlit et la CLI reçoivent ce conteneur
au lieu d'instancier leurs propres dépendances.
"""

from typing import Optional
from dataclasses import dataclass

from otel_assistant.config import Settings, get_settings
from otel_assistant.core.providers import ProviderRegistry
from otel_assistant.core.rag import RAGService
from otel_assistant.core.vectorstore import VectorStoreManager
from otel_assistant.services.ingestion import IngestionService
from otel_assistant.utils.logger import get_logger


logger = get_logger("container")


@dataclass(frozen=True)
class Services:
    """Services partagés, en lecture seule après le démarrage."""
    settings: Settings
    vectorstore: VectorStoreManager
    providers: ProviderRegistry
    rag: RAGService
    ingestion: IngestionService


def build_services(
    settings: Optional[Settings] = None,
    initialize_store: bool = True,
) -> Services:
    """
    Construit et initialise les services de l'application.

    Args:
        settings: Configuration à utiliser (défaut: config globale)
        initialize_store: Ouvre la collection immédiatement

    Returns:
        Services: Conteneur des services

    Raises:
        ConfigurationError: Si aucun fournisseur LLM n'est configuré
        StoreError: Si la base vectorielle est injoignable
    """
    settings = settings or get_settings()

    providers = ProviderRegistry(settings=settings)
    vectorstore = VectorStoreManager(settings=settings)

    if initialize_store:
        vectorstore.initialize()

    logger.info("Services initialisés")

    return Services(
        settings=settings,
        vectorstore=vectorstore,
        providers=providers,
        rag=RAGService(vectorstore, providers, settings=settings),
        ingestion=IngestionService(vectorstore),
    )
