"""SQLAlchemy and Pydantic models."""
from medisocial.models.db_models import KeyValueEntry, create_tables, init_db
from medisocial.models.schemas import (
    ArticleRequest,
    ConversionRequest,
    ConversionResult,
    GeneratedArticle,
    InfographicData,
    InfographicRequest,
    InfographicResult,
    PostCategory,
    PostContent,
    PostFormat,
    PostRequest,
    PostResult,
    PubMedArticle,
    RequestOrigin,
    RTSHistoryEntry,
    RTSMetrics,
    Tone,
    ToolScope,
    ToolStatus,
    TrendSuggestion,
)

__all__ = [
    "KeyValueEntry",
    "create_tables",
    "init_db",
    "ArticleRequest",
    "ConversionRequest",
    "ConversionResult",
    "GeneratedArticle",
    "InfographicData",
    "InfographicRequest",
    "InfographicResult",
    "PostCategory",
    "PostContent",
    "PostFormat",
    "PostRequest",
    "PostResult",
    "PubMedArticle",
    "RequestOrigin",
    "RTSHistoryEntry",
    "RTSMetrics",
    "Tone",
    "ToolScope",
    "ToolStatus",
    "TrendSuggestion",
]
