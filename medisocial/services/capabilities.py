"""Interfaces of the external collaborators the studio is built against."""
from typing import Protocol

from medisocial.models.schemas import (
    ArticleRequest,
    ConversionRequest,
    ConversionResult,
    GeneratedArticle,
    InfographicData,
    InfographicRequest,
    PostContent,
    PostFormat,
    PostRequest,
    PubMedArticle,
)


class GenerativeCapability(Protocol):
    """Generative-content service. Every method raises GenerationFailure on error."""

    async def generate_text(self, request: PostRequest) -> PostContent: ...

    async def generate_image(self, prompt: str, format: PostFormat) -> str: ...

    async def generate_article(self, request: ArticleRequest) -> GeneratedArticle: ...

    async def generate_infographic(self, request: InfographicRequest) -> InfographicData: ...

    async def generate_conversion(self, request: ConversionRequest) -> ConversionResult: ...

    async def refine_text(self, text: str, instruction: str) -> str: ...


class EvidenceSearch(Protocol):
    """Bibliographic search. Never raises; failures return an empty list."""

    async def search(self, query: str) -> list[PubMedArticle]: ...


class KeyValueMedium(Protocol):
    """String-keyed durable storage of serialized blobs."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...
