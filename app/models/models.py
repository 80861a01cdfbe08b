import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db import Base


class CampaignStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class ContentType(str, enum.Enum):
    HEADLINE = "HEADLINE"
    DESCRIPTION = "DESCRIPTION"
    AD_COPY = "AD_COPY"
    PRODUCT_DESCRIPTION = "PRODUCT_DESCRIPTION"
    SOCIAL_POST = "SOCIAL_POST"
    EMAIL_SUBJECT = "EMAIL_SUBJECT"
    BLOG_TITLE = "BLOG_TITLE"


class ReviewState(str, enum.Enum):
    DRAFT = "DRAFT"
    AI_SUGGESTED = "AI_SUGGESTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    NEEDS_REVISION = "NEEDS_REVISION"


class VersionType(str, enum.Enum):
    ORIGINAL = "ORIGINAL"
    AI_GENERATED = "AI_GENERATED"
    AI_TRANSLATED = "AI_TRANSLATED"
    HUMAN_EDITED = "HUMAN_EDITED"


class AiProvider(str, enum.Enum):
    OPENAI = "OPENAI"
    ANTHROPIC = "ANTHROPIC"
    LANGCHAIN = "LANGCHAIN"


def _uuid() -> str:
    return str(uuid.uuid4())


def _label(enum_cls: type[enum.Enum]) -> Enum:
    return Enum(enum_cls, native_enum=False, length=32, validate_strings=True)


class Campaign(Base):
    __tablename__ = "campaigns"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[CampaignStatus] = mapped_column(_label(CampaignStatus), default=CampaignStatus.DRAFT, index=True)
    target_languages: Mapped[list[str]] = mapped_column(JSON, default=list)
    target_markets: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    content_pieces = relationship(
        "ContentPiece",
        back_populates="campaign",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ContentPiece.created_at",
    )


class ContentPiece(Base):
    __tablename__ = "content_pieces"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    campaign_id: Mapped[str] = mapped_column(ForeignKey("campaigns.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200), index=True)
    type: Mapped[ContentType] = mapped_column(_label(ContentType))
    review_state: Mapped[ReviewState] = mapped_column(_label(ReviewState), default=ReviewState.DRAFT, index=True)
    source_language: Mapped[str] = mapped_column(String(16), default="en")
    briefing: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_audience: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tone: Mapped[str | None] = mapped_column(String(120), nullable=True)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    campaign = relationship("Campaign", back_populates="content_pieces")
    versions = relationship(
        "ContentVersion",
        back_populates="content_piece",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ContentVersion.version",
    )


class ContentVersion(Base):
    __tablename__ = "content_versions"
    __table_args__ = (UniqueConstraint("content_piece_id", "version", name="uq_content_piece_version"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    content_piece_id: Mapped[str] = mapped_column(ForeignKey("content_pieces.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(16), default="en")
    type: Mapped[VersionType] = mapped_column(_label(VersionType), default=VersionType.ORIGINAL)
    ai_provider: Mapped[AiProvider | None] = mapped_column(_label(AiProvider), nullable=True)
    ai_model: Mapped[str | None] = mapped_column(String(120), nullable=True)
    ai_metadata: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    sentiment_analysis: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    content_piece = relationship("ContentPiece", back_populates="versions")
