"""
Tests unitaires pour la construction des services.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import Mock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from otel_assistant.container import build_services
from otel_assistant.core.rag import RAGService
from otel_assistant.exceptions import ConfigurationError
from otel_assistant.services.ingestion import IngestionService


@patch('otel_assistant.container.VectorStoreManager')
@patch('otel_assistant.container.ProviderRegistry')
class TestBuildServices:
    """Tests pour la racine de composition."""

    def test_services_are_wired(self, mock_registry, mock_vectorstore):
        """Vérifie le partage des dépendances entre services."""
        settings = Mock()

        services = build_services(settings)

        assert services.settings is settings
        assert services.providers is mock_registry.return_value
        assert services.vectorstore is mock_vectorstore.return_value
        assert isinstance(services.rag, RAGService)
        assert services.rag.vectorstore is services.vectorstore
        assert services.rag.providers is services.providers
        assert isinstance(services.ingestion, IngestionService)
        assert services.ingestion.vectorstore is services.vectorstore
        mock_registry.assert_called_once_with(settings=settings)

    def test_store_initialized_by_default(self, mock_registry, mock_vectorstore):
        """Vérifie l'ouverture de la collection au démarrage."""
        build_services(Mock())

        mock_vectorstore.return_value.initialize.assert_called_once()

    def test_store_initialization_skipped(self, mock_registry, mock_vectorstore):
        """Vérifie l'option d'ouverture différée."""
        build_services(Mock(), initialize_store=False)

        mock_vectorstore.return_value.initialize.assert_not_called()

    def test_configuration_error_propagates(self, mock_registry, mock_vectorstore):
        """Vérifie l'échec au démarrage sans fournisseur."""
        mock_registry.side_effect = ConfigurationError("No LLM providers could be initialized.")

        with pytest.raises(ConfigurationError):
            build_services(Mock())

        mock_vectorstore.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
