import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import BadRequestError, NotFoundError
from app.models import AiProvider, Campaign, ContentPiece, ContentType, ContentVersion, ReviewState, VersionType
from app.services.ai_gateway import AiGateway, GenerateContentRequest, TranslateContentRequest

logger = logging.getLogger(__name__)

PIECE_FIELDS = ("title", "briefing", "target_audience", "tone", "keywords", "review_state")
REQUIRED_PIECE_FIELDS = frozenset({"title", "keywords", "review_state"})
VERSION_INSERT_ATTEMPTS = 3


def list_content_pieces(db: Session) -> list[ContentPiece]:
    stmt = select(ContentPiece).options(selectinload(ContentPiece.versions)).order_by(ContentPiece.updated_at.desc())
    return list(db.scalars(stmt).all())


def list_content_pieces_by_campaign(db: Session, campaign_id: str) -> list[ContentPiece]:
    stmt = (
        select(ContentPiece)
        .options(selectinload(ContentPiece.versions))
        .where(ContentPiece.campaign_id == campaign_id)
        .order_by(ContentPiece.updated_at.desc())
    )
    return list(db.scalars(stmt).all())


def get_content_piece(db: Session, piece_id: str) -> ContentPiece:
    piece = db.scalars(
        select(ContentPiece).options(selectinload(ContentPiece.versions)).where(ContentPiece.id == piece_id)
    ).first()
    if not piece:
        raise NotFoundError("Content piece", piece_id)
    return piece


def create_content_piece(
    db: Session,
    *,
    campaign_id: str,
    title: str,
    type: ContentType,
    briefing: str | None = None,
    target_audience: str | None = None,
    tone: str | None = None,
    keywords: list[str] | None = None,
    source_language: str | None = None,
) -> ContentPiece:
    if db.get(Campaign, campaign_id) is None:
        raise BadRequestError(f"Campaign with ID {campaign_id} not found")

    piece = ContentPiece(
        campaign_id=campaign_id,
        title=title.strip(),
        type=ContentType(type),
        briefing=briefing,
        target_audience=target_audience,
        tone=tone,
        keywords=list(keywords or []),
        source_language=source_language or "en",
    )
    db.add(piece)
    db.commit()
    return get_content_piece(db, piece.id)


def update_content_piece(db: Session, piece_id: str, changes: dict) -> ContentPiece:
    """Merge the supplied fields into the piece.

    Review states are plain labels: any state may be set from any other.
    An explicit None clears an optional field and is ignored for required ones.
    """
    piece = get_content_piece(db, piece_id)
    for key in PIECE_FIELDS:
        if key not in changes:
            continue
        if changes[key] is not None or key not in REQUIRED_PIECE_FIELDS:
            setattr(piece, key, changes[key])
    db.commit()
    db.refresh(piece)
    return piece


def delete_content_piece(db: Session, piece_id: str) -> bool:
    piece = db.get(ContentPiece, piece_id)
    if not piece:
        return False
    db.delete(piece)
    db.commit()
    return True


def get_content_version(db: Session, version_id: str) -> ContentVersion:
    version = db.get(ContentVersion, version_id)
    if not version:
        raise NotFoundError("Content version", version_id)
    return version


def list_versions(db: Session, piece_id: str) -> list[ContentVersion]:
    get_content_piece(db, piece_id)
    stmt = select(ContentVersion).where(ContentVersion.content_piece_id == piece_id).order_by(ContentVersion.version.asc())
    return list(db.scalars(stmt).all())


def next_version_number(db: Session, piece_id: str) -> int:
    current = db.scalar(select(func.max(ContentVersion.version)).where(ContentVersion.content_piece_id == piece_id))
    return (current or 0) + 1


def _lock_piece(db: Session, piece_id: str) -> None:
    # Row lock on databases that support it; SQLite serializes writers anyway.
    found = db.scalar(select(ContentPiece.id).where(ContentPiece.id == piece_id).with_for_update())
    if not found:
        raise NotFoundError("Content piece", piece_id)


def _deactivate_versions(db: Session, piece_id: str, keep_id: str | None = None) -> None:
    stmt = update(ContentVersion).where(ContentVersion.content_piece_id == piece_id, ContentVersion.is_active.is_(True))
    if keep_id:
        stmt = stmt.where(ContentVersion.id != keep_id)
    db.execute(stmt.values(is_active=False), execution_options={"synchronize_session": "fetch"})


def _insert_version(db: Session, piece_id: str, *, activate: bool = False, **fields) -> ContentVersion:
    """Flush a new version row numbered after the piece's latest version.

    A concurrent writer can take the same number first; the unique
    (content_piece_id, version) constraint rejects the loser, which recomputes
    and retries.
    """
    for attempt in range(1, VERSION_INSERT_ATTEMPTS + 1):
        _lock_piece(db, piece_id)
        if activate:
            _deactivate_versions(db, piece_id)
        number = next_version_number(db, piece_id)
        version = ContentVersion(content_piece_id=piece_id, version=number, is_active=activate, **fields)
        db.add(version)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            if attempt == VERSION_INSERT_ATTEMPTS:
                raise
            logger.warning("Version %s of piece %s already taken, retrying", number, piece_id)
            continue
        return version


def create_manual_version(db: Session, piece_id: str, content: str, language: str | None = None) -> ContentVersion:
    get_content_piece(db, piece_id)
    version = _insert_version(
        db,
        piece_id,
        activate=True,
        content=content,
        language=language or "en",
        type=VersionType.ORIGINAL,
    )
    db.commit()
    db.refresh(version)
    logger.info("Manual version %s created for piece %s", version.version, piece_id)
    return version


def update_version_content(db: Session, version_id: str, content: str, review_notes: str | None = None) -> ContentVersion:
    version = get_content_version(db, version_id)
    version.content = content
    version.type = VersionType.HUMAN_EDITED
    if review_notes:
        version.review_notes = review_notes
    db.commit()
    db.refresh(version)
    return version


def set_active_version(db: Session, version_id: str) -> ContentVersion:
    version = get_content_version(db, version_id)
    _lock_piece(db, version.content_piece_id)
    _deactivate_versions(db, version.content_piece_id, keep_id=version.id)
    version.is_active = True
    db.commit()
    db.refresh(version)
    logger.info("Version %s is now active for piece %s", version.id, version.content_piece_id)
    return version


def generate_ai_content(
    db: Session,
    gateway: AiGateway,
    piece_id: str,
    provider: AiProvider | None = None,
) -> ContentVersion:
    piece = get_content_piece(db, piece_id)
    provider = AiProvider(provider or AiProvider.OPENAI)
    request = GenerateContentRequest(
        type=piece.type,
        briefing=piece.briefing or "",
        target_audience=piece.target_audience,
        tone=piece.tone,
        keywords=list(piece.keywords or []),
        language=piece.source_language,
        provider=provider,
    )
    result = gateway.generate(request)
    analysis = gateway.analyze(result.content)

    version = _insert_version(
        db,
        piece_id,
        content=result.content,
        language=piece.source_language,
        type=VersionType.AI_GENERATED,
        ai_provider=provider,
        ai_model=result.metadata.get("model"),
        ai_metadata=result.metadata,
        sentiment_analysis=analysis.to_dict(),
    )
    piece.review_state = ReviewState.AI_SUGGESTED
    db.commit()
    db.refresh(version)
    logger.info("AI version %s generated for piece %s via %s", version.version, piece_id, provider.value)
    return version


def translate_content(
    db: Session,
    gateway: AiGateway,
    version_id: str,
    target_language: str,
    provider: AiProvider | None = None,
) -> ContentVersion:
    source = get_content_version(db, version_id)
    piece = source.content_piece
    provider = AiProvider(provider or AiProvider.OPENAI)
    request = TranslateContentRequest(
        content=source.content,
        source_language=source.language,
        target_language=target_language,
        context=piece.briefing,
        provider=provider,
    )
    result = gateway.translate(request)
    analysis = gateway.analyze(result.content)

    piece_id = source.content_piece_id
    version = _insert_version(
        db,
        piece_id,
        content=result.content,
        language=target_language,
        type=VersionType.AI_TRANSLATED,
        ai_provider=provider,
        ai_model=result.metadata.get("model"),
        ai_metadata=result.metadata,
        sentiment_analysis=analysis.to_dict(),
    )
    db.commit()
    db.refresh(version)
    logger.info("Version %s translated to %s as version %s", version_id, target_language, version.version)
    return version
