"""
Gestionnaire de la base vectorielle ChromaDB.

Encapsule toutes les opérations sur la collection de documentation :
connexion, découpage et ajout de documents, recherche et suppression.
"""

from typing import Optional

import chromadb
from chromadb.api import ClientAPI
from langchain_chroma import Chroma
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from otel_assistant.config import Settings, get_paths, get_settings
from otel_assistant.core.embeddings import EmbeddingsManager
from otel_assistant.exceptions import RetrievalError, StoreError
from otel_assistant.utils.logger import get_logger


logger = get_logger("vectorstore")


class VectorStoreManager:
    """
    Gestionnaire de la base vectorielle ChromaDB.

    La collection est créée en espace cosinus et interrogée avec les scores
    de pertinence LangChain : un score proche de 1 indique une forte
    similarité, et les résultats sont renvoyés du plus au moins pertinent.
    """

    # Séparateurs pour le découpage du texte (Markdown en priorité)
    SEPARATORS = ["\n\n", "\n", ". ", " ", ""]

    COLLECTION_METADATA = {"hnsw:space": "cosine"}

    def __init__(
        self,
        embeddings_manager: Optional[EmbeddingsManager] = None,
        settings: Optional[Settings] = None,
        client: Optional[ClientAPI] = None,
    ):
        """
        Initialise le gestionnaire de la base vectorielle.

        Args:
            embeddings_manager: Gestionnaire d'embeddings à utiliser
            settings: Configuration à utiliser (défaut: config globale)
            client: Client Chroma déjà construit (défaut: selon la config)
        """
        self.settings = settings or get_settings()
        self.collection_name = self.settings.collection_name
        self.embeddings_manager = embeddings_manager or EmbeddingsManager(
            settings=self.settings
        )
        self._client = client
        self._vectorstore: Optional[Chroma] = None

        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
            separators=self.SEPARATORS,
            length_function=len,
        )

        logger.info(
            f"VectorStoreManager configuré "
            f"(collection: {self.collection_name}, emplacement: {self.location})"
        )

    @property
    def location(self) -> str:
        """Emplacement de la base : hôte distant ou dossier local."""
        if self.settings.chroma_host:
            return f"{self.settings.chroma_host}:{self.settings.chroma_port}"
        return str(get_paths().vectorstore)

    @property
    def client(self) -> ClientAPI:
        """
        Retourne le client Chroma (lazy loading).

        Un serveur distant est utilisé si CHROMA_HOST est défini,
        sinon la base est persistée dans le dossier data/vectorstore.
        """
        if self._client is None:
            if self.settings.chroma_host:
                self._client = chromadb.HttpClient(
                    host=self.settings.chroma_host,
                    port=self.settings.chroma_port,
                )
            else:
                self._client = chromadb.PersistentClient(
                    path=str(get_paths().vectorstore)
                )
        return self._client

    @property
    def is_initialized(self) -> bool:
        """Indique si la collection est ouverte."""
        return self._vectorstore is not None

    @property
    def vectorstore(self) -> Chroma:
        """Retourne la collection ouverte, en l'initialisant si nécessaire."""
        if self._vectorstore is None:
            self.initialize()
        return self._vectorstore

    def initialize(self) -> None:
        """
        Ouvre (ou rouvre) la collection configurée.

        Peut être appelée plusieurs fois : la collection est créée
        si elle n'existe pas, réutilisée sinon.

        Raises:
            StoreError: Si la base vectorielle est injoignable
        """
        try:
            self._vectorstore = Chroma(
                client=self.client,
                collection_name=self.collection_name,
                embedding_function=self.embeddings_manager.get_langchain_embeddings(),
                collection_metadata=self.COLLECTION_METADATA,
            )
            logger.info(f"Collection '{self.collection_name}' initialisée")

        except Exception as e:
            logger.error(f"Erreur lors de l'initialisation de la base: {str(e)}")
            raise StoreError(
                f"Vector store unavailable ({self.location}): {str(e)}"
            ) from e

    def split_documents(self, documents: list[Document]) -> list[Document]:
        """
        Découpe les documents en chunks qui se chevauchent.

        Chaque chunk hérite des métadonnées de son document et reçoit
        un identifiant unique `<document_id>-chunk-<n>`.

        Args:
            documents: Documents complets à découper

        Returns:
            list[Document]: Chunks prêts à être indexés

        Raises:
            ValueError: Si un document n'a pas de document_id
        """
        chunks = []

        for doc in documents:
            document_id = doc.metadata.get("document_id")
            if not document_id:
                raise ValueError(
                    f"Document sans document_id: '{doc.metadata.get('title', '?')}'"
                )

            # Chroma n'accepte que des métadonnées scalaires non nulles
            metadata = {
                key: value for key, value in doc.metadata.items()
                if value is not None
            }

            for index, text in enumerate(self.text_splitter.split_text(doc.page_content)):
                chunks.append(Document(
                    page_content=text,
                    metadata={
                        **metadata,
                        "chunk_id": f"{document_id}-chunk-{index}",
                        "chunk_index": index,
                    },
                ))

        return chunks

    def add_documents(self, documents: list[Document]) -> int:
        """
        Découpe, vectorise et indexe des documents.

        Args:
            documents: Documents LangChain à indexer

        Returns:
            int: Nombre total de chunks stockés

        Raises:
            ValueError: Si un document n'a pas de document_id
            StoreError: Si la base vectorielle est indisponible
        """
        chunks = self.split_documents(documents)

        if not chunks:
            logger.warning("Aucun chunk à indexer")
            return 0

        vectorstore = self.vectorstore

        try:
            logger.info(
                f"Ajout de {len(documents)} documents ({len(chunks)} chunks) à la base"
            )
            vectorstore.add_documents(
                chunks,
                ids=[chunk.metadata["chunk_id"] for chunk in chunks],
            )

        except Exception as e:
            logger.error(f"Erreur lors de l'ajout des documents: {str(e)}")
            raise StoreError(f"Failed to add documents: {str(e)}") from e

        logger.info(f"{len(chunks)} chunks ajoutés avec succès")
        return len(chunks)

    def similarity_search_with_score(
        self,
        query: str,
        k: Optional[int] = None
    ) -> list[tuple[Document, float]]:
        """
        Recherche les chunks les plus proches d'une requête.

        Args:
            query: Requête en langage naturel
            k: Nombre maximum de résultats (défaut: config)

        Returns:
            list[tuple[Document, float]]: Chunks et scores, du plus pertinent
            au moins pertinent. Liste vide si la collection est vide.

        Raises:
            RetrievalError: Si la recherche échoue
        """
        k = k or self.settings.max_context_docs

        try:
            vectorstore = self.vectorstore

            if vectorstore._collection.count() == 0:
                logger.debug("Collection vide, aucune recherche effectuée")
                return []

            logger.debug(f"Recherche: '{query[:50]}...' (k={k})")
            results = vectorstore.similarity_search_with_relevance_scores(
                query=query,
                k=k,
            )

        except Exception as e:
            logger.error(f"Erreur lors de la recherche: {str(e)}")
            raise RetrievalError(f"Vector search failed: {str(e)}") from e

        logger.debug(f"{len(results)} chunks trouvés")
        return results

    def get_collection_info(self) -> dict:
        """
        Décrit la collection courante.

        Returns:
            dict: name, initialized, count (None si inconnu) et location
        """
        count = None

        if self.is_initialized:
            try:
                count = self._vectorstore._collection.count()
            except Exception as e:
                logger.error(f"Erreur lors du comptage: {str(e)}")

        return {
            "name": self.collection_name,
            "initialized": self.is_initialized,
            "count": count,
            "location": self.location,
        }

    def delete_collection(self) -> None:
        """
        Supprime définitivement la collection et tous ses chunks.

        Une collection absente est considérée comme déjà supprimée.

        Raises:
            StoreError: Si la base vectorielle est indisponible
        """
        try:
            existing = [
                getattr(collection, "name", collection)
                for collection in self.client.list_collections()
            ]

            if self.collection_name in existing:
                logger.warning(f"Suppression de la collection '{self.collection_name}'")
                self.client.delete_collection(self.collection_name)
            else:
                logger.info(f"Collection '{self.collection_name}' absente, rien à supprimer")

        except Exception as e:
            logger.error(f"Erreur lors de la suppression de la collection: {str(e)}")
            raise StoreError(f"Failed to delete collection: {str(e)}") from e

        self._vectorstore = None
