from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas import (
    ContentPieceCreate,
    ContentPieceOut,
    ContentPieceUpdate,
    ContentVersionOut,
    GenerateAiContentInput,
    ManualVersionCreate,
    TranslateContentInput,
    VersionUpdate,
)
from app.services import content as content_service
from app.services.ai_gateway import AiGateway, get_ai_gateway
from app.services.notifier import Notifier, get_notifier, publish_safely

router = APIRouter(tags=["content"])


def _published(notifier: Notifier, topic: str, version) -> ContentVersionOut:
    out = ContentVersionOut.model_validate(version)
    publish_safely(notifier, topic, out.payload())
    return out


@router.get("/content-pieces", response_model=list[ContentPieceOut])
def list_content_pieces(campaign_id: str | None = None, db: Session = Depends(get_db)):
    if campaign_id:
        pieces = content_service.list_content_pieces_by_campaign(db, campaign_id)
    else:
        pieces = content_service.list_content_pieces(db)
    return [ContentPieceOut.model_validate(p) for p in pieces]


@router.get("/content-pieces/{piece_id}", response_model=ContentPieceOut)
def get_content_piece(piece_id: str, db: Session = Depends(get_db)):
    return ContentPieceOut.model_validate(content_service.get_content_piece(db, piece_id))


@router.post("/content-pieces", response_model=ContentPieceOut, status_code=201)
def create_content_piece(
    body: ContentPieceCreate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    piece = content_service.create_content_piece(db, **body.model_dump())
    out = ContentPieceOut.model_validate(piece)
    publish_safely(notifier, "contentPieceCreated", out.payload())
    return out


@router.patch("/content-pieces/{piece_id}", response_model=ContentPieceOut)
def update_content_piece(
    piece_id: str,
    body: ContentPieceUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    piece = content_service.update_content_piece(db, piece_id, body.model_dump(exclude_unset=True))
    out = ContentPieceOut.model_validate(piece)
    publish_safely(notifier, "contentPieceUpdated", out.payload())
    return out


@router.delete("/content-pieces/{piece_id}")
def delete_content_piece(
    piece_id: str,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    deleted = content_service.delete_content_piece(db, piece_id)
    if deleted:
        publish_safely(notifier, "contentPieceDeleted", {"id": piece_id})
    return {"deleted": deleted}


@router.post("/content-pieces/{piece_id}/generate", response_model=ContentVersionOut, status_code=201)
def generate_ai_content(
    piece_id: str,
    body: GenerateAiContentInput | None = None,
    db: Session = Depends(get_db),
    gateway: AiGateway = Depends(get_ai_gateway),
    notifier: Notifier = Depends(get_notifier),
):
    provider = body.provider if body else None
    version = content_service.generate_ai_content(db, gateway, piece_id, provider)
    return _published(notifier, "aiContentGenerated", version)


@router.get("/content-pieces/{piece_id}/versions", response_model=list[ContentVersionOut])
def list_versions(piece_id: str, db: Session = Depends(get_db)):
    return [ContentVersionOut.model_validate(v) for v in content_service.list_versions(db, piece_id)]


@router.post("/content-pieces/{piece_id}/versions", response_model=ContentVersionOut, status_code=201)
def create_manual_version(
    piece_id: str,
    body: ManualVersionCreate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    version = content_service.create_manual_version(db, piece_id, body.content, body.language)
    return _published(notifier, "manualVersionCreated", version)


@router.get("/versions/{version_id}", response_model=ContentVersionOut)
def get_version(version_id: str, db: Session = Depends(get_db)):
    return ContentVersionOut.model_validate(content_service.get_content_version(db, version_id))


@router.patch("/versions/{version_id}", response_model=ContentVersionOut)
def update_version(
    version_id: str,
    body: VersionUpdate,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    version = content_service.update_version_content(db, version_id, body.content, body.review_notes)
    return _published(notifier, "versionUpdated", version)


@router.post("/versions/{version_id}/activate", response_model=ContentVersionOut)
def set_active_version(
    version_id: str,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    version = content_service.set_active_version(db, version_id)
    return _published(notifier, "activeVersionChanged", version)


@router.post("/versions/{version_id}/translate", response_model=ContentVersionOut, status_code=201)
def translate_content(
    version_id: str,
    body: TranslateContentInput,
    db: Session = Depends(get_db),
    gateway: AiGateway = Depends(get_ai_gateway),
    notifier: Notifier = Depends(get_notifier),
):
    version = content_service.translate_content(db, gateway, version_id, body.target_language, body.provider)
    return _published(notifier, "contentTranslated", version)
