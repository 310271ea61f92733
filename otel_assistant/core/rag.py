"""
Service RAG (Retrieval-Augmented Generation).

Orchestre la recherche de contexte dans la documentation OpenTelemetry
et la génération de la réponse par le fournisseur LLM choisi.
"""

from typing import Optional, Union
from datetime import datetime, timezone
from dataclasses import dataclass, field

from langchain_core.documents import Document
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate

from otel_assistant.config import Settings, get_settings, SYSTEM_PROMPT, NO_CONTEXT_MESSAGE
from otel_assistant.core.providers import ProviderName, ProviderRegistry
from otel_assistant.core.vectorstore import VectorStoreManager
from otel_assistant.exceptions import GenerationError
from otel_assistant.utils.logger import get_logger


logger = get_logger("rag")

UNKNOWN_SOURCE = "unknown"
CONTEXT_SEPARATOR = "\n\n---\n\n"


@dataclass
class ChatResponse:
    """
    Réponse structurée du service RAG.

    Attributes:
        response: Texte généré par le LLM
        sources: Sources distinctes, dans l'ordre de première apparition
        provider: Fournisseur effectivement utilisé
        question: Question posée
        context: Contexte formaté envoyé au modèle
        relevance_scores: Source et score de chaque chunk, dans l'ordre de recherche
        timestamp: Date de génération (ISO-8601, UTC)
    """
    response: str
    sources: list[str]
    provider: str
    question: str
    context: str
    relevance_scores: list[dict] = field(default_factory=list)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def documents_used(self) -> int:
        return len(self.relevance_scores)

    def to_dict(self, include_context: bool = False) -> dict:
        """
        Sérialise la réponse pour la couche HTTP.

        Sans include_context, seuls la réponse, les sources et les
        métadonnées minimales sont renvoyés.
        """
        if not include_context:
            return {
                "response": self.response,
                "sources": self.sources,
                "metadata": {
                    "provider": self.provider,
                    "timestamp": self.timestamp,
                },
            }

        return {
            "response": self.response,
            "sources": self.sources,
            "context": self.context,
            "relevanceScores": self.relevance_scores,
            "documentsUsed": self.documents_used,
            "metadata": {
                "question": self.question,
                "provider": self.provider,
                "timestamp": self.timestamp,
            },
        }


def get_source(doc: Document) -> str:
    """Retourne le libellé de source d'un chunk."""
    return doc.metadata.get("source") or UNKNOWN_SOURCE


class RAGService:
    """
    Pipeline RAG : recherche, formatage du contexte, génération.

    Aucun re-classement ni seuil n'est appliqué : l'ordre et les scores
    sont ceux renvoyés par la base vectorielle.
    """

    def __init__(
        self,
        vectorstore_manager: VectorStoreManager,
        provider_registry: ProviderRegistry,
        settings: Optional[Settings] = None,
    ):
        """
        Initialise le service RAG.

        Args:
            vectorstore_manager: Gestionnaire de base vectorielle
            provider_registry: Registre des fournisseurs LLM
            settings: Configuration à utiliser (défaut: config globale)
        """
        self.settings = settings or get_settings()
        self.vectorstore = vectorstore_manager
        self.providers = provider_registry
        self.prompt_template = PromptTemplate.from_template(SYSTEM_PROMPT)

        logger.info("Service RAG initialisé")

    def ask_question(
        self,
        question: str,
        provider: Union[ProviderName, str, None] = None,
        max_context_docs: Optional[int] = None,
        include_context: bool = False,
    ) -> dict:
        """
        Répond à une question à partir de la documentation indexée.

        Args:
            question: Question de l'utilisateur
            provider: Fournisseur LLM (défaut: fournisseur par défaut)
            max_context_docs: Nombre de chunks à utiliser (défaut: config)
            include_context: Ajoute le contexte et les scores au résultat

        Returns:
            dict: Réponse simplifiée ou complète (voir ChatResponse.to_dict)

        Raises:
            RetrievalError: Si la recherche vectorielle échoue
            ProviderNotAvailableError: Si le fournisseur n'est pas configuré
            GenerationError: Si l'appel au LLM échoue
        """
        result = self.generate_response(question, provider, max_context_docs)
        return result.to_dict(include_context=include_context)

    def generate_response(
        self,
        question: str,
        provider: Union[ProviderName, str, None] = None,
        max_context_docs: Optional[int] = None,
    ) -> ChatResponse:
        """Exécute le pipeline complet et retourne la réponse structurée."""
        k = max_context_docs or self.settings.max_context_docs
        logger.info(f"Génération d'une réponse pour: '{question[:80]}'")

        try:
            results = self.vectorstore.similarity_search_with_score(question, k=k)
            context = self.format_context(results)

            provider_name = self.providers.resolve_name(provider)
            llm = self.providers.get_provider(provider_name)

        except Exception as e:
            logger.error(f"Erreur lors de la préparation de la réponse: {str(e)}")
            raise

        chain = self.prompt_template | llm | StrOutputParser()

        try:
            logger.debug(
                f"Appel de {provider_name.value} avec {len(results)} chunks de contexte"
            )
            answer = chain.invoke({"context": context, "question": question})

        except Exception as e:
            logger.error(f"Erreur lors de l'appel à {provider_name.value}: {str(e)}")
            raise GenerationError(
                f"Failed to generate response with '{provider_name.value}': {str(e)}",
                provider=provider_name.value,
            ) from e

        logger.info("Réponse générée avec succès")

        return ChatResponse(
            response=answer,
            sources=self.extract_sources(results),
            provider=provider_name.value,
            question=question,
            context=context,
            relevance_scores=[
                {"source": get_source(doc), "score": score}
                for doc, score in results
            ],
        )

    def get_context_for_question(
        self,
        question: str,
        max_docs: Optional[int] = None
    ) -> dict:
        """
        Retourne le contexte qui serait envoyé au LLM, sans générer de réponse.

        Args:
            question: Question de l'utilisateur
            max_docs: Nombre de chunks à récupérer (défaut: config)

        Returns:
            dict: context, sources et documentCount

        Raises:
            RetrievalError: Si la recherche vectorielle échoue
        """
        k = max_docs or self.settings.max_context_docs

        try:
            results = self.vectorstore.similarity_search_with_score(question, k=k)
        except Exception as e:
            logger.error(f"Erreur lors de la récupération du contexte: {str(e)}")
            raise

        return {
            "context": self.format_context(results),
            "sources": self.extract_sources(results),
            "documentCount": len(results),
        }

    def format_context(self, results: list[tuple[Document, float]]) -> str:
        """
        Construit le contexte textuel à partir des chunks trouvés.

        Args:
            results: Chunks et scores, dans l'ordre de la recherche

        Returns:
            str: Contexte formaté, ou NO_CONTEXT_MESSAGE si la liste est vide
        """
        if not results:
            return NO_CONTEXT_MESSAGE

        return CONTEXT_SEPARATOR.join(
            f"Source: {get_source(doc)} (Relevance: {score:.3f})\n{doc.page_content}"
            for doc, score in results
        )

    def extract_sources(self, results: list[tuple[Document, float]]) -> list[str]:
        """Sources distinctes, dans l'ordre de première apparition."""
        sources = []
        seen = set()

        for doc, _ in results:
            source = get_source(doc)
            if source not in seen:
                seen.add(source)
                sources.append(source)

        return sources
