import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import select

from app.core.db import Base, SessionLocal, engine
from app.models import Campaign, ContentType
from app.services.campaigns import create_campaign
from app.services.content import create_content_piece, create_manual_version


def run() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.scalars(select(Campaign)).first():
            print("Seed already applied")
            return

        campaign = create_campaign(
            db,
            name="Acme Launch",
            description="Spring launch of the Acme smart kettle",
            target_languages=["en", "es", "de"],
            target_markets=["US", "ES", "DE"],
        )
        headline = create_content_piece(
            db,
            campaign_id=campaign.id,
            title="Launch headline",
            type=ContentType.HEADLINE,
            briefing="Announce the Acme smart kettle: boils in 90 seconds, app controlled.",
            target_audience="Busy professionals",
            tone="Energetic",
            keywords=["smart kettle", "fast", "app"],
        )
        create_content_piece(
            db,
            campaign_id=campaign.id,
            title="Launch email subject",
            type=ContentType.EMAIL_SUBJECT,
            briefing="Invite newsletter subscribers to pre-order.",
            tone="Friendly",
        )
        create_manual_version(db, headline.id, "Tea in 90 seconds. Meet the Acme smart kettle.")
        print(f"Seeded campaign {campaign.id}")
    finally:
        db.close()


if __name__ == "__main__":
    run()
