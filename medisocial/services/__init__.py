"""External collaborators and infrastructure services."""
from medisocial.services.gemini_service import GeminiService
from medisocial.services.persistence import InMemoryMedium, PersistenceStore, SqlKeyValueMedium
from medisocial.services.pubmed_service import PubMedService

__all__ = ["GeminiService", "InMemoryMedium", "PersistenceStore", "PubMedService", "SqlKeyValueMedium"]
