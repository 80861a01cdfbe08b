from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFoundError
from app.models import Campaign, CampaignStatus, ContentPiece, ReviewState

CAMPAIGN_FIELDS = ("name", "description", "status", "target_languages", "target_markets")
REQUIRED_CAMPAIGN_FIELDS = frozenset({"name", "status", "target_languages", "target_markets"})


@dataclass
class CampaignStats:
    total_content_pieces: int = 0
    draft_count: int = 0
    ai_suggested_count: int = 0
    under_review_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0


# NEEDS_REVISION has no counter of its own; those pieces only count toward the total.
STATE_COUNTERS = {
    ReviewState.DRAFT: "draft_count",
    ReviewState.AI_SUGGESTED: "ai_suggested_count",
    ReviewState.UNDER_REVIEW: "under_review_count",
    ReviewState.APPROVED: "approved_count",
    ReviewState.REJECTED: "rejected_count",
}


def _with_children():
    return selectinload(Campaign.content_pieces).selectinload(ContentPiece.versions)


def list_campaigns(db: Session) -> list[Campaign]:
    stmt = select(Campaign).options(_with_children()).order_by(Campaign.updated_at.desc())
    return list(db.scalars(stmt).all())


def get_campaign(db: Session, campaign_id: str) -> Campaign:
    campaign = db.scalars(select(Campaign).options(_with_children()).where(Campaign.id == campaign_id)).first()
    if not campaign:
        raise NotFoundError("Campaign", campaign_id)
    return campaign


def create_campaign(
    db: Session,
    *,
    name: str,
    description: str | None = None,
    target_languages: list[str] | None = None,
    target_markets: list[str] | None = None,
) -> Campaign:
    campaign = Campaign(
        name=name.strip(),
        description=description,
        status=CampaignStatus.DRAFT,
        target_languages=["en"] if target_languages is None else list(target_languages),
        target_markets=[] if target_markets is None else list(target_markets),
    )
    db.add(campaign)
    db.commit()
    return get_campaign(db, campaign.id)


def update_campaign(db: Session, campaign_id: str, changes: dict) -> Campaign:
    campaign = get_campaign(db, campaign_id)
    for key in CAMPAIGN_FIELDS:
        if key not in changes:
            continue
        if changes[key] is not None or key not in REQUIRED_CAMPAIGN_FIELDS:
            setattr(campaign, key, changes[key])
    db.commit()
    db.refresh(campaign)
    return campaign


def delete_campaign(db: Session, campaign_id: str) -> bool:
    campaign = db.get(Campaign, campaign_id)
    if not campaign:
        return False
    db.delete(campaign)
    db.commit()
    return True


def get_campaign_stats(db: Session, campaign_id: str) -> CampaignStats:
    campaign = get_campaign(db, campaign_id)
    stats = CampaignStats(total_content_pieces=len(campaign.content_pieces))
    for piece in campaign.content_pieces:
        counter = STATE_COUNTERS.get(piece.review_state)
        if counter:
            setattr(stats, counter, getattr(stats, counter) + 1)
    return stats
