from app.models.models import (
    AiProvider,
    Campaign,
    CampaignStatus,
    ContentPiece,
    ContentType,
    ContentVersion,
    ReviewState,
    VersionType,
)

__all__ = [
    "AiProvider",
    "Campaign",
    "CampaignStatus",
    "ContentPiece",
    "ContentType",
    "ContentVersion",
    "ReviewState",
    "VersionType",
]
