from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas import CampaignCreate, CampaignOut, CampaignStatsOut, CampaignUpdate
from app.services import campaigns as campaign_service
from app.services.notifier import Notifier, get_notifier, publish_safely

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.get("", response_model=list[CampaignOut])
def list_campaigns(db: Session = Depends(get_db)):
    return [CampaignOut.model_validate(c) for c in campaign_service.list_campaigns(db)]


@router.get("/{campaign_id}", response_model=CampaignOut)
def get_campaign(campaign_id: str, db: Session = Depends(get_db)):
    return CampaignOut.model_validate(campaign_service.get_campaign(db, campaign_id))


@router.get("/{campaign_id}/stats", response_model=CampaignStatsOut)
def get_campaign_stats(campaign_id: str, db: Session = Depends(get_db)):
    return CampaignStatsOut.model_validate(campaign_service.get_campaign_stats(db, campaign_id))


@router.post("", response_model=CampaignOut, status_code=201)
def create_campaign(
    body: CampaignCreate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    campaign = campaign_service.create_campaign(
        db,
        name=body.name,
        description=body.description,
        target_languages=body.target_languages,
        target_markets=body.target_markets,
    )
    out = CampaignOut.model_validate(campaign)
    publish_safely(notifier, "campaignCreated", out.payload())
    return out


@router.patch("/{campaign_id}", response_model=CampaignOut)
def update_campaign(
    campaign_id: str,
    body: CampaignUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    campaign = campaign_service.update_campaign(db, campaign_id, body.model_dump(exclude_unset=True))
    out = CampaignOut.model_validate(campaign)
    publish_safely(notifier, "campaignUpdated", out.payload())
    return out


@router.delete("/{campaign_id}")
def delete_campaign(
    campaign_id: str,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    deleted = campaign_service.delete_campaign(db, campaign_id)
    if deleted:
        publish_safely(notifier, "campaignDeleted", {"id": campaign_id})
    return {"deleted": deleted}
