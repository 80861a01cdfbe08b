from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models import AiProvider, CampaignStatus, ContentType, ReviewState, VersionType


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CampaignCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    target_languages: list[str] | None = None
    target_markets: list[str] | None = None


class CampaignUpdate(ApiModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    status: CampaignStatus | None = None
    target_languages: list[str] | None = None
    target_markets: list[str] | None = None


class ContentPieceCreate(ApiModel):
    campaign_id: str
    title: str = Field(..., min_length=1, max_length=200)
    type: ContentType
    briefing: str | None = None
    target_audience: str | None = None
    tone: str | None = None
    keywords: list[str] | None = None
    source_language: str | None = None


class ContentPieceUpdate(ApiModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    briefing: str | None = None
    target_audience: str | None = None
    tone: str | None = None
    keywords: list[str] | None = None
    review_state: ReviewState | None = None


class GenerateAiContentInput(ApiModel):
    provider: AiProvider | None = None


class TranslateContentInput(ApiModel):
    target_language: str = Field(..., min_length=2, max_length=16)
    provider: AiProvider | None = None


class ManualVersionCreate(ApiModel):
    content: str = Field(..., min_length=1)
    language: str | None = None


class VersionUpdate(ApiModel):
    content: str = Field(..., min_length=1)
    review_notes: str | None = None


class ContentVersionOut(ApiModel):
    id: str
    content_piece_id: str
    content: str
    language: str
    type: VersionType
    ai_provider: AiProvider | None = None
    ai_model: str | None = None
    ai_metadata: dict[str, Any] | None = None
    sentiment_analysis: dict[str, Any] | None = None
    version: int
    is_active: bool
    review_notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ContentPieceOut(ApiModel):
    id: str
    campaign_id: str
    title: str
    type: ContentType
    review_state: ReviewState
    source_language: str
    briefing: str | None = None
    target_audience: str | None = None
    tone: str | None = None
    keywords: list[str] = []
    versions: list[ContentVersionOut] = []
    created_at: datetime
    updated_at: datetime


class CampaignOut(ApiModel):
    id: str
    name: str
    description: str | None = None
    status: CampaignStatus
    target_languages: list[str] = []
    target_markets: list[str] = []
    content_pieces: list[ContentPieceOut] = []
    created_at: datetime
    updated_at: datetime


class CampaignStatsOut(ApiModel):
    total_content_pieces: int
    draft_count: int
    ai_suggested_count: int
    under_review_count: int
    approved_count: int
    rejected_count: int
