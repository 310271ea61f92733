"""Modèles Pydantic des requêtes de l'API."""

from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, StringConstraints

from otel_assistant.core.providers import ProviderName


MetadataValue = Union[str, int, float, bool]


class ChatRequest(BaseModel):
    """Question envoyée par le client de chat."""

    model_config = ConfigDict(populate_by_name=True)

    message: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)
    ]
    provider: Optional[ProviderName] = None
    max_context_docs: int = Field(default=5, ge=1, le=10, alias="maxContextDocs")
    include_context: bool = Field(default=False, alias="includeContext")


class ProviderTestRequest(BaseModel):
    provider: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class IngestRequest(BaseModel):
    """Document à ajouter à la base vectorielle."""

    url: Optional[HttpUrl] = None
    content: Optional[
        Annotated[str, StringConstraints(strip_whitespace=True, min_length=10)]
    ] = None
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    source: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    max_results: int = Field(default=5, ge=1, le=50, alias="maxResults")
