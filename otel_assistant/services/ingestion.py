"""
Pipeline d'ingestion de la documentation.

Transforme des documents bruts (titre, contenu, source, métadonnées)
en Documents LangChain identifiés puis les indexe dans la base vectorielle.
"""

import json
import time
from typing import Optional
from pathlib import Path
from datetime import datetime, timezone
from dataclasses import dataclass
from uuid import uuid4

from langchain_core.documents import Document

from otel_assistant.config import get_paths
from otel_assistant.core.vectorstore import VectorStoreManager
from otel_assistant.utils.logger import get_logger


logger = get_logger("ingestion")


@dataclass
class IngestionResult:
    """
    Résultat d'une ingestion.

    Attributes:
        documents_ingested: Nombre de documents traités
        chunks_created: Nombre de chunks indexés
    """
    documents_ingested: int
    chunks_created: int


def build_document(
    content: str,
    title: str,
    source: str,
    document_id: Optional[str] = None,
    url: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Document:
    """
    Construit un Document prêt à être indexé.

    Les métadonnées libres sont fusionnées après les champs standards,
    sans pouvoir écraser l'identifiant du document.
    """
    document_id = document_id or f"doc-{uuid4().hex}"

    return Document(
        page_content=content,
        metadata={
            "title": title,
            "source": source,
            "url": url,
            "ingestedAt": datetime.now(timezone.utc).isoformat(),
            **(metadata or {}),
            "document_id": document_id,
        },
    )


class IngestionService:
    """
    Service d'ingestion des documents dans la base vectorielle.

    Utilisé par la commande `otel-assistant-ingest` pour charger le jeu
    de documentation de référence, et par l'API d'administration pour
    ajouter un document unitaire.
    """

    def __init__(self, vectorstore: VectorStoreManager):
        """
        Initialise le service d'ingestion.

        Args:
            vectorstore: Gestionnaire de base vectorielle
        """
        self.vectorstore = vectorstore

    def load_documents(self, path: Optional[Path] = None) -> list[dict]:
        """
        Charge des documents bruts depuis un fichier JSON.

        Args:
            path: Fichier à lire (défaut: data/sample_otel_docs.json)

        Returns:
            list[dict]: Documents {title, content, source, metadata}

        Raises:
            ValueError: Si le fichier ne contient pas une liste
        """
        path = Path(path) if path else get_paths().sample_documents

        logger.info(f"Lecture des documents depuis {path}")
        raw_documents = json.loads(path.read_text(encoding="utf-8"))

        if not isinstance(raw_documents, list):
            raise ValueError(f"Le fichier {path} doit contenir une liste de documents")

        return raw_documents

    def process_document(self, raw: dict, index: int) -> Document:
        """Convertit un document brut en Document identifié."""
        return build_document(
            content=raw["content"],
            title=raw["title"],
            source=raw["source"],
            document_id=f"doc-{int(time.time() * 1000)}-{index}",
            url=raw.get("url"),
            metadata=raw.get("metadata"),
        )

    def ingest_documents(self, raw_documents: list[dict]) -> IngestionResult:
        """
        Indexe une liste de documents bruts.

        Args:
            raw_documents: Documents {title, content, source, metadata}

        Returns:
            IngestionResult: Nombre de documents et de chunks indexés
        """
        try:
            documents = [
                self.process_document(raw, index)
                for index, raw in enumerate(raw_documents)
            ]
            chunks = self.vectorstore.add_documents(documents)

        except Exception as e:
            logger.error(f"Erreur lors de l'ingestion des documents: {str(e)}")
            raise

        logger.info(
            f"{len(documents)} documents ingérés ({chunks} chunks) "
            f"dans la base vectorielle"
        )
        return IngestionResult(documents_ingested=len(documents), chunks_created=chunks)

    def ingest_text(
        self,
        content: str,
        title: str,
        source: str,
        url: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> int:
        """
        Indexe un document saisi directement.

        Returns:
            int: Nombre de chunks ajoutés
        """
        document = build_document(
            content=content,
            title=title,
            source=source,
            url=url,
            metadata=metadata,
        )
        chunks = self.vectorstore.add_documents([document])

        logger.info(f"Document ingéré: {title} ({chunks} chunks)")
        return chunks

    def run(self, path: Optional[Path] = None, reset: bool = True) -> IngestionResult:
        """
        Recharge la base vectorielle à partir d'un fichier de documents.

        Args:
            path: Fichier JSON à ingérer (défaut: jeu de référence)
            reset: Supprime la collection existante avant l'ingestion

        Returns:
            IngestionResult: Bilan de l'ingestion
        """
        logger.info("Démarrage de l'ingestion de la documentation OpenTelemetry")

        raw_documents = self.load_documents(path)

        self.vectorstore.initialize()

        if reset:
            self.vectorstore.delete_collection()
            self.vectorstore.initialize()

        result = self.ingest_documents(raw_documents)

        logger.info(
            f"Ingestion terminée: {result.documents_ingested} documents, "
            f"{result.chunks_created} chunks"
        )
        return result
