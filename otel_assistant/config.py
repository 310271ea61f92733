"""
Configuration centralisée de l'application.

Ce module gère toutes les variables de configuration via Pydantic Settings,
permettant une validation automatique et un chargement sécurisé depuis
les variables d'environnement.
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Configuration principale de l'application.

    Les valeurs sont chargées depuis les variables d'environnement
    ou le fichier .env à la racine du projet.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(
        default="",
        description="Clé API OpenAI (fournisseur LLM et embeddings)"
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Modèle OpenAI utilisé pour la génération"
    )
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Modèle d'embeddings pour la vectorisation"
    )

    # Anthropic Configuration
    anthropic_api_key: str = Field(
        default="",
        description="Clé API Anthropic"
    )
    anthropic_model: str = Field(
        default="claude-3-5-sonnet-latest",
        description="Modèle Anthropic utilisé pour la génération"
    )

    # AWS Bedrock Configuration
    aws_access_key_id: str = Field(default="", description="Identifiant de clé AWS")
    aws_secret_access_key: str = Field(default="", description="Clé secrète AWS")
    aws_region: str = Field(default="us-east-1", description="Région AWS Bedrock")
    bedrock_model: str = Field(
        default="anthropic.claude-3-5-sonnet-20240620-v1:0",
        description="Modèle Bedrock utilisé pour la génération"
    )

    # LLM Parameters (communs à tous les fournisseurs)
    default_provider: str = Field(
        default="openai",
        description="Fournisseur utilisé quand la requête n'en précise aucun"
    )
    temperature: float = Field(
        default=0.7,
        description="Température du modèle (créativité)"
    )
    max_tokens: int = Field(
        default=1000,
        description="Nombre maximum de tokens en sortie"
    )

    # Vector store Configuration
    chroma_host: str = Field(
        default="",
        description="Hôte du serveur Chroma (vide: persistance locale)"
    )
    chroma_port: int = Field(default=8000, description="Port du serveur Chroma")
    collection_name: str = Field(
        default="otel_docs",
        description="Nom de la collection de la base vectorielle"
    )

    # RAG Configuration
    chunk_size: int = Field(
        default=1000,
        description="Taille des chunks pour le découpage des documents"
    )
    chunk_overlap: int = Field(
        default=200,
        description="Chevauchement entre les chunks"
    )
    max_context_docs: int = Field(
        default=5,
        description="Nombre de chunks récupérés pour le contexte"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environnement d'exécution")
    debug: bool = Field(
        default=False,
        description="Mode debug"
    )
    log_level: str = Field(
        default="INFO",
        description="Niveau de logging"
    )

    # API Settings
    host: str = Field(default="0.0.0.0", description="Adresse d'écoute de l'API")
    port: int = Field(default=3001, description="Port d'écoute de l'API")
    api_key: str = Field(
        default="",
        description="Clé attendue dans l'en-tête X-API-Key (vide: pas de contrôle)"
    )
    rate_limit_window_seconds: int = Field(
        default=900,
        description="Fenêtre du limiteur de requêtes en secondes"
    )
    rate_limit_max_requests: int = Field(
        default=100,
        description="Nombre de requêtes autorisées par fenêtre et par IP"
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8501"],
        description="Origines autorisées pour CORS"
    )


class Paths:
    """
    Gestionnaire des chemins de l'application.

    Centralise tous les chemins utilisés pour garantir
    la cohérence et faciliter les modifications.
    """

    def __init__(self):
        self.root = Path(__file__).parent.parent
        self.package = self.root / "otel_assistant"
        self.data = self.root / "data"
        self.vectorstore = self.data / "vectorstore"
        self.sample_documents = self.data / "sample_otel_docs.json"

        # Création automatique des dossiers nécessaires
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Crée les dossiers s'ils n'existent pas."""
        for path in [self.data, self.vectorstore]:
            path.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """
    Récupère l'instance de configuration (singleton).

    Utilise le cache LRU pour éviter de recharger
    la configuration à chaque appel.

    Returns:
        Settings: Instance de configuration
    """
    return Settings()


@lru_cache
def get_paths() -> Paths:
    """
    Récupère l'instance des chemins (singleton).

    Returns:
        Paths: Instance du gestionnaire de chemins
    """
    return Paths()


# Constantes de l'interface
APP_TITLE = "OpenTelemetry Assistant"
PAGE_CHAT = "Chat"
PAGE_ADMIN = "Administration"

# Messages système
SYSTEM_PROMPT = """You are an expert assistant specializing in OpenTelemetry (OTel) integration and implementation.
Your role is to help developers understand and implement OpenTelemetry instrumentation in their applications.

Context: You have access to comprehensive documentation about OpenTelemetry, including:
- Installation and setup guides
- Instrumentation examples for various frameworks and libraries
- Best practices and configuration options
- Troubleshooting guides
- Code snippets and examples

Instructions:
1. Provide accurate, practical, and actionable advice based on the provided context
2. Include relevant code examples when appropriate
3. Explain concepts clearly and concisely
4. If the context doesn't contain enough information, acknowledge this and provide general guidance
5. Focus on helping users implement OTel successfully in their specific use case
6. Always prioritize official OpenTelemetry documentation and best practices

Context information:
{context}

User question: {question}

Provide a helpful, accurate response based on the context above:"""

NO_CONTEXT_MESSAGE = "No relevant context found in the knowledge base."

TEST_PROVIDER_MESSAGE = "Hello, this is a test message."
