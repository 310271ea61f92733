"""
Registre des fournisseurs LLM.

Construit une seule fois au démarrage les clients de chat LangChain
dont les identifiants sont configurés (OpenAI, Anthropic, AWS Bedrock),
puis les expose en lecture seule au pipeline RAG.
"""

from enum import Enum
from typing import Callable, Optional, Union
from dataclasses import dataclass

from langchain_anthropic import ChatAnthropic
from langchain_aws import ChatBedrockConverse
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from otel_assistant.config import Settings, get_settings, TEST_PROVIDER_MESSAGE
from otel_assistant.exceptions import ConfigurationError, ProviderNotAvailableError
from otel_assistant.utils.logger import get_logger


logger = get_logger("providers")


class ProviderName(str, Enum):
    """Fournisseurs LLM supportés, dans l'ordre d'enregistrement."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"


@dataclass
class ProviderTestResult:
    """
    Résultat d'un test de fournisseur.

    Attributes:
        success: Indique si le fournisseur a répondu
        response: Texte renvoyé par le modèle en cas de succès
        error: Description de l'erreur en cas d'échec
    """
    success: bool
    response: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "response": self.response}
        return {"success": False, "error": self.error}


def _build_openai(settings: Settings) -> Optional[BaseChatModel]:
    if not settings.openai_api_key:
        return None
    return ChatOpenAI(
        model=settings.openai_model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        api_key=settings.openai_api_key,
    )


def _build_anthropic(settings: Settings) -> Optional[BaseChatModel]:
    if not settings.anthropic_api_key:
        return None
    return ChatAnthropic(
        model=settings.anthropic_model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        api_key=settings.anthropic_api_key,
    )


def _build_bedrock(settings: Settings) -> Optional[BaseChatModel]:
    if not (settings.aws_access_key_id and settings.aws_secret_access_key):
        return None
    return ChatBedrockConverse(
        model=settings.bedrock_model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )


# Un constructeur par membre de ProviderName ; None si les identifiants manquent
PROVIDER_BUILDERS: dict[ProviderName, Callable[[Settings], Optional[BaseChatModel]]] = {
    ProviderName.OPENAI: _build_openai,
    ProviderName.ANTHROPIC: _build_anthropic,
    ProviderName.BEDROCK: _build_bedrock,
}


class ProviderRegistry:
    """
    Registre des clients de chat configurés.

    Le registre est immuable après sa construction et peut être partagé
    entre toutes les requêtes.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Construit les fournisseurs dont les identifiants sont présents.

        Args:
            settings: Configuration à utiliser (défaut: config globale)

        Raises:
            ConfigurationError: Si aucun fournisseur n'a pu être initialisé
        """
        self.settings = settings or get_settings()
        self._providers: dict[ProviderName, BaseChatModel] = {}

        for name in ProviderName:
            client = PROVIDER_BUILDERS[name](self.settings)
            if client is not None:
                self._providers[name] = client
                logger.info(f"Fournisseur {name.value} initialisé")

        if not self._providers:
            logger.error("Aucun fournisseur LLM n'a pu être initialisé")
            raise ConfigurationError(
                "No LLM providers could be initialized. Check your configuration."
            )

        self.default_provider = self._resolve_default()
        logger.info(
            f"Fournisseurs disponibles: {', '.join(self.get_available_providers())} "
            f"(défaut: {self.default_provider.value})"
        )

    def _resolve_default(self) -> ProviderName:
        configured = self.settings.default_provider
        for name in self._providers:
            if name.value == configured:
                return name

        fallback = next(iter(self._providers))
        logger.warning(
            f"Fournisseur par défaut '{configured}' indisponible, "
            f"utilisation de '{fallback.value}'"
        )
        return fallback

    def resolve_name(
        self,
        name: Union[ProviderName, str, None] = None
    ) -> ProviderName:
        """
        Convertit un nom de fournisseur en membre enregistré.

        Args:
            name: Nom demandé (défaut: fournisseur par défaut)

        Returns:
            ProviderName: Fournisseur enregistré correspondant

        Raises:
            ProviderNotAvailableError: Si le nom est inconnu ou non configuré
        """
        if name is None:
            return self.default_provider

        try:
            provider = ProviderName(name)
        except ValueError:
            raise ProviderNotAvailableError(
                str(name), self.get_available_providers()
            ) from None

        if provider not in self._providers:
            raise ProviderNotAvailableError(
                provider.value, self.get_available_providers()
            )
        return provider

    def get_provider(
        self,
        name: Union[ProviderName, str, None] = None
    ) -> BaseChatModel:
        """
        Retourne le client de chat demandé.

        Raises:
            ProviderNotAvailableError: Si le nom est inconnu ou non configuré
        """
        return self._providers[self.resolve_name(name)]

    def get_available_providers(self) -> list[str]:
        """Noms des fournisseurs enregistrés, dans l'ordre d'enregistrement."""
        return [name.value for name in self._providers]

    def test_provider(self, name: Union[ProviderName, str, None]) -> ProviderTestResult:
        """
        Envoie un message de test au fournisseur.

        Ne lève jamais d'exception : l'échec est renvoyé dans le résultat.

        Args:
            name: Fournisseur à tester

        Returns:
            ProviderTestResult: Réponse brute ou description de l'erreur
        """
        try:
            provider = self.get_provider(name)
            chain = provider | StrOutputParser()
            response = chain.invoke([HumanMessage(content=TEST_PROVIDER_MESSAGE)])

            logger.info(f"Test du fournisseur {name} réussi")
            return ProviderTestResult(success=True, response=response)

        except Exception as e:
            logger.error(f"Test du fournisseur {name} échoué: {str(e)}")
            return ProviderTestResult(success=False, error=str(e))
