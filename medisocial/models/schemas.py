"""Pydantic schemas for requests, results and API payloads."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ----- Enumerations -----
class PostCategory(str, Enum):
    PATHOLOGY = "pathology"
    SURGERY = "surgery"
    SPORTS = "sports"
    REHAB = "rehab"
    LIFESTYLE = "lifestyle"
    MYTHS = "myths"


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    EDUCATIONAL = "educational"
    EMPATHETIC = "empathetic"
    MOTIVATIONAL = "motivational"


class PostFormat(str, Enum):
    FEED = "feed"  # 1:1
    STORY = "story"  # 9:16

    @property
    def aspect_ratio(self) -> str:
        return "9:16" if self is PostFormat.STORY else "1:1"


class RequestOrigin(str, Enum):
    """Where a post request came from; drives the wizard start step."""

    MANUAL = "manual"
    TREND_SUGGESTED = "trend_suggested"
    ARTICLE_DERIVED = "article_derived"


class ToolScope(str, Enum):
    POST = "post"
    ARTICLE = "article"
    INFOGRAPHIC = "infographic"
    CONVERSION = "conversion"


class ToolStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# ----- Requests -----
class PostRequest(BaseModel):
    """Input of the post tool (Instagram feed/story)."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(default="", description="Subject of the post; required before submit")
    category: PostCategory = PostCategory.PATHOLOGY
    tone: Tone = Tone.PROFESSIONAL
    format: PostFormat = PostFormat.FEED
    custom_instructions: str = ""
    uploaded_image: str | None = Field(default=None, description="User image as a data URL")
    origin: RequestOrigin = RequestOrigin.MANUAL


class ArticleRequest(BaseModel):
    """Input of the SEO blog article tool."""

    model_config = ConfigDict(frozen=True)

    topic: str
    keywords: list[str] = Field(default_factory=list)
    target_audience: str = "pacientes"
    custom_instructions: str = ""


class InfographicRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str
    category: PostCategory = PostCategory.PATHOLOGY
    custom_instructions: str = ""


class ConversionRequest(BaseModel):
    """Input of the objection-handling (conversion) tool."""

    model_config = ConfigDict(frozen=True)

    procedure: str
    objection: str = ""
    tone: Tone = Tone.EMPATHETIC
    custom_instructions: str = ""


class TrendSuggestion(BaseModel):
    """Partial post request produced by the trend source."""

    topic: str | None = None
    category: PostCategory | None = None
    tone: Tone | None = None
    format: PostFormat | None = None
    custom_instructions: str | None = None


# ----- Generated content -----
class PostContent(BaseModel):
    """Textual part of a post result."""

    headline: str = ""
    caption: str = ""
    hashtags: list[str] = Field(default_factory=list)
    image_prompt_description: str = ""


class PostResult(BaseModel):
    """A settled post generation; the unit stored in history and the draft slot."""

    id: str
    date: str
    content: PostContent
    image_url: str | None = None
    is_custom_image: bool = False


class ArticleSection(BaseModel):
    heading: str
    body: str


class GeneratedArticle(BaseModel):
    title: str
    meta_description: str = ""
    slug: str = ""
    keywords: list[str] = Field(default_factory=list)
    sections: list[ArticleSection] = Field(default_factory=list)
    conclusion: str = ""
    references: list[str] = Field(default_factory=list)


class AnatomyPanel(BaseModel):
    title: str = ""
    description: str = ""
    image_prompt: str = ""


class InfographicData(BaseModel):
    """Structured payload of the infographic tool; carries its own image prompts."""

    title: str
    subtitle: str = ""
    key_points: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    hero_image_prompt: str = ""
    anatomy: AnatomyPanel | None = None


class InfographicResult(BaseModel):
    data: InfographicData
    hero_image_url: str | None = None
    anatomy_image_url: str | None = None


class ObjectionAnswer(BaseModel):
    objection: str
    answer: str


class ConversionResult(BaseModel):
    headline: str = ""
    objections: list[ObjectionAnswer] = Field(default_factory=list)
    caption: str = ""
    call_to_action: str = ""
    hashtags: list[str] = Field(default_factory=list)


# ----- Evidence finder -----
class PubMedArticle(BaseModel):
    uid: str
    title: str
    source: str = Field(default="", description="Journal name")
    pubdate: str = ""
    authors: list[str] = Field(default_factory=list)
    volume: str = ""
    url: str


# ----- Return-to-sport calculator -----
class RTSMetrics(BaseModel):
    patient_name: str = ""
    limb_symmetry: float = Field(default=85, ge=0, le=100)
    hop_test: float = Field(default=80, ge=0, le=100)
    psychological_readiness: float = Field(default=70, ge=0, le=100)
    pain_score: float = Field(default=2, ge=0, le=10)
    rom_flexion: float = Field(default=135, ge=0, le=160)
    rom_extension: float = Field(default=0, ge=0, le=20)


class RTSHistoryEntry(BaseModel):
    id: str
    date: str
    patient_name: str
    score: int
    metrics: RTSMetrics


class RTSScoreOut(BaseModel):
    score: int
    label: str = Field(description="Apto | Treino | Inapto")
    pain_factor: float
    rom_factor: float


# ----- API request/response -----
class UpdateDraftRequest(BaseModel):
    """Body for PATCH /post/draft (in-place edit of the current post)."""

    headline: str | None = None
    caption: str | None = None
    hashtags: list[str] | None = None


class RefineRequest(BaseModel):
    instruction: str = Field(description="e.g. 'mais curto', 'mais empático'")


class NavigateRequest(BaseModel):
    mode: str


class TabRequest(BaseModel):
    tab: str


class ToolStateOut(BaseModel):
    """Tool status as exposed to the front end."""

    tool: ToolScope
    status: ToolStatus
    error: str | None = None
    result: dict[str, Any] | None = None
    regenerating_text: bool = False
    regenerating_image: bool = False
    refining: bool = False


class PostPrefillOut(BaseModel):
    request: PostRequest
    start_step: int


class SessionOut(BaseModel):
    view_mode: str
    tab: str
    visible_panel: str
    notification: str | None = None
    any_in_flight: bool
    tools: list[ToolStateOut]
