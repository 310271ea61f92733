"""
Tests de l'API HTTP (FastAPI TestClient).
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient
from langchain_core.documents import Document

from otel_assistant.api.app import create_app
from otel_assistant.config import Settings
from otel_assistant.container import Services
from otel_assistant.core.providers import ProviderName, ProviderTestResult
from otel_assistant.exceptions import (
    GenerationError,
    ProviderNotAvailableError,
    RetrievalError,
    StoreError,
)


def make_settings(**overrides) -> Settings:
    values = {
        "_env_file": None,
        "api_key": "",
        "rate_limit_max_requests": 100,
        "rate_limit_window_seconds": 900,
        "debug": False,
    }
    values.update(overrides)
    return Settings(**values)


def make_services(settings: Settings) -> Services:
    providers = Mock()
    providers.default_provider = ProviderName.OPENAI
    providers.get_available_providers.return_value = ["openai", "anthropic"]

    return Services(
        settings=settings,
        vectorstore=Mock(),
        providers=providers,
        rag=Mock(),
        ingestion=Mock(),
    )


class APITestCase:
    """Base commune : application construite sur des services factices."""

    settings_overrides = {}

    def setup_method(self):
        self.settings = make_settings(**self.settings_overrides)
        self.services = make_services(self.settings)
        self.client = TestClient(create_app(self.settings, self.services))


class TestChatEndpoint(APITestCase):
    """Tests pour POST /api/chat."""

    def test_chat_success(self):
        """Vérifie l'enveloppe de succès."""
        answer = {"response": "Use the NodeSDK.", "sources": ["otel-docs"], "metadata": {}}
        self.services.rag.ask_question.return_value = answer

        response = self.client.post("/api/chat", json={"message": "How do I trace a Node app?"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": answer}
        self.services.rag.ask_question.assert_called_once_with(
            "How do I trace a Node app?",
            provider=None,
            max_context_docs=5,
            include_context=False,
        )

    def test_chat_options(self):
        """Vérifie la transmission des options de la requête."""
        self.services.rag.ask_question.return_value = {}

        self.client.post("/api/chat", json={
            "message": "  trim me  ",
            "provider": "anthropic",
            "maxContextDocs": 3,
            "includeContext": True,
        })

        args, kwargs = self.services.rag.ask_question.call_args
        assert args == ("trim me",)
        assert kwargs["provider"] == ProviderName.ANTHROPIC
        assert kwargs["max_context_docs"] == 3
        assert kwargs["include_context"] is True

    @pytest.mark.parametrize("payload,field", [
        ({"message": ""}, "message"),
        ({"message": "   "}, "message"),
        ({"message": "x" * 2001}, "message"),
        ({"message": "ok", "provider": "mistral"}, "provider"),
        ({"message": "ok", "maxContextDocs": 11}, "maxContextDocs"),
        ({"message": "ok", "maxContextDocs": 0}, "maxContextDocs"),
        ({}, "message"),
    ])
    def test_chat_validation(self, payload, field):
        """Vérifie le rejet des requêtes invalides."""
        response = self.client.post("/api/chat", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert field in [detail["field"] for detail in body["details"]]
        self.services.rag.ask_question.assert_not_called()

    def test_chat_provider_not_available(self):
        """Vérifie la réponse pour un fournisseur non configuré."""
        self.services.rag.ask_question.side_effect = ProviderNotAvailableError(
            "bedrock", ["openai"]
        )

        response = self.client.post("/api/chat", json={"message": "hi", "provider": "bedrock"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Provider not available"
        assert "Available providers: openai" in body["message"]

    @pytest.mark.parametrize("error", [
        RetrievalError("Vector search failed: timeout"),
        GenerationError("Failed to generate response with 'openai': quota", provider="openai"),
    ])
    def test_chat_pipeline_failure(self, error):
        """Vérifie la réponse en cas d'échec du pipeline."""
        self.services.rag.ask_question.side_effect = error

        response = self.client.post("/api/chat", json={"message": "hi"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to generate response"
        assert body["message"] == str(error)


class TestChatContextEndpoint(APITestCase):
    """Tests pour GET /api/chat/context."""

    def test_context_success(self):
        context = {"context": "c", "sources": ["otel-docs"], "documentCount": 1}
        self.services.rag.get_context_for_question.return_value = context

        response = self.client.get("/api/chat/context", params={"question": "q", "maxDocs": 3})

        assert response.status_code == 200
        assert response.json()["data"] == context
        self.services.rag.get_context_for_question.assert_called_once_with("q", 3)

    def test_context_requires_question(self):
        response = self.client.get("/api/chat/context")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Question parameter is required"}

    def test_context_retrieval_failure(self):
        self.services.rag.get_context_for_question.side_effect = RetrievalError("down")

        response = self.client.get("/api/chat/context", params={"question": "q"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to retrieve context"


class TestProviderEndpoints(APITestCase):
    """Tests pour les routes des fournisseurs."""

    def test_list_providers(self):
        response = self.client.get("/api/chat/providers")

        assert response.json()["data"] == {
            "providers": ["openai", "anthropic"],
            "default": "openai",
        }

    def test_test_provider_failure_is_reported(self):
        """Vérifie qu'un échec de fournisseur reste une réponse 200."""
        self.services.providers.test_provider.return_value = ProviderTestResult(
            success=False, error="invalid api key"
        )

        response = self.client.post("/api/chat/test-provider", json={"provider": "openai"})

        assert response.status_code == 200
        assert response.json()["data"] == {"success": False, "error": "invalid api key"}
        self.services.providers.test_provider.assert_called_once_with("openai")

    def test_test_provider_requires_name(self):
        response = self.client.post("/api/chat/test-provider", json={})

        assert response.status_code == 400


class TestAdminEndpoints(APITestCase):
    """Tests pour les routes d'administration."""

    def test_ingest_content(self):
        """Vérifie l'ingestion d'un document saisi."""
        self.services.ingestion.ingest_text.return_value = 3

        response = self.client.post("/api/admin/ingest", json={
            "content": "OpenTelemetry collector configuration guide",
            "title": "Collector",
            "source": "otel-docs",
            "metadata": {"type": "collector"},
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["chunksAdded"] == 3
        assert data["title"] == "Collector"
        self.services.ingestion.ingest_text.assert_called_once_with(
            content="OpenTelemetry collector configuration guide",
            title="Collector",
            source="otel-docs",
            url=None,
            metadata={"type": "collector"},
        )

    def test_ingest_requires_content_or_url(self):
        response = self.client.post("/api/admin/ingest", json={"title": "T", "source": "s"})

        assert response.status_code == 400
        assert response.json()["error"] == "Either content or url must be provided"

    def test_ingest_url_not_implemented(self):
        response = self.client.post("/api/admin/ingest", json={
            "url": "https://opentelemetry.io/docs/",
            "title": "T",
            "source": "s",
        })

        assert response.status_code == 400
        assert "URL ingestion not implemented" in response.json()["error"]
        self.services.ingestion.ingest_text.assert_not_called()

    @pytest.mark.parametrize("payload", [
        {"content": "too short", "title": "T", "source": "s"},
        {"content": "long enough content", "title": "", "source": "s"},
        {"content": "long enough content", "title": "T", "source": "x" * 101},
        {"url": "not a url", "title": "T", "source": "s"},
    ])
    def test_ingest_validation(self, payload):
        response = self.client.post("/api/admin/ingest", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_ingest_store_failure(self):
        self.services.ingestion.ingest_text.side_effect = StoreError("Failed to add documents: x")

        response = self.client.post("/api/admin/ingest", json={
            "content": "long enough content", "title": "T", "source": "s",
        })

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to ingest document"

    def test_vector_store_info(self):
        info = {"name": "otel_docs", "initialized": True, "count": 12, "location": "x"}
        self.services.vectorstore.get_collection_info.return_value = info

        response = self.client.get("/api/admin/vector-store/info")

        assert response.json() == {"success": True, "data": info}

    def test_delete_vector_store(self):
        response = self.client.delete("/api/admin/vector-store")

        assert response.status_code == 200
        self.services.vectorstore.delete_collection.assert_called_once()

    def test_delete_vector_store_failure(self):
        self.services.vectorstore.delete_collection.side_effect = StoreError("down")

        response = self.client.delete("/api/admin/vector-store")

        assert response.status_code == 500

    def test_search(self):
        doc = Document(page_content="Use NodeSDK", metadata={"source": "otel-docs"})
        self.services.vectorstore.similarity_search_with_score.return_value = [(doc, 0.87)]

        response = self.client.post("/api/admin/search", json={"query": "trace", "maxResults": 2})

        assert response.json()["data"] == {
            "query": "trace",
            "results": [
                {"content": "Use NodeSDK", "metadata": {"source": "otel-docs"}, "score": 0.87}
            ],
        }
        self.services.vectorstore.similarity_search_with_score.assert_called_once_with("trace", k=2)


class TestMiscEndpoints(APITestCase):
    """Tests pour la santé et les routes inconnues."""

    def test_health(self):
        body = self.client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["availableProviders"] == ["openai", "anthropic"]

    def test_unknown_endpoint(self):
        response = self.client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "API endpoint not found"}


class TestAPIKey(APITestCase):
    """Tests pour le contrôle de la clé d'API."""

    settings_overrides = {"api_key": "secret"}

    def test_missing_key(self):
        response = self.client.get("/api/chat/providers")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid or missing API key"}

    def test_wrong_key(self):
        response = self.client.get("/api/chat/providers", headers={"X-API-Key": "nope"})

        assert response.status_code == 401

    def test_valid_key(self):
        response = self.client.get("/api/chat/providers", headers={"X-API-Key": "secret"})

        assert response.status_code == 200


class TestRateLimit(APITestCase):
    """Tests pour la limitation de débit."""

    settings_overrides = {"rate_limit_max_requests": 2}

    def test_quota_exceeded(self):
        assert self.client.get("/api/chat/providers").status_code == 200
        assert self.client.get("/api/chat/providers").status_code == 200

        response = self.client.get("/api/chat/providers")

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["retryAfter"] > 0
        assert "Retry-After" in response.headers


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
