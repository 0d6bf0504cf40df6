"""Periodic maintenance jobs run by the scheduler."""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from gymbuddy.errors import Unavailable
from gymbuddy.extensions import db
from gymbuddy.models import Match

logger = logging.getLogger(__name__)


def expire_stale_matches(now=None):
    """Mark pending match requests past their expiry as expired.

    Returns the number of matches updated.
    """
    now = now or datetime.utcnow()
    try:
        stale = Match.query.filter(
            Match.status == "pending",
            Match.expires_at.isnot(None),
            Match.expires_at <= now,
        ).all()
        for match in stale:
            match.status = "expired"
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error expiring stale matches: {e}")
        raise Unavailable("Could not expire stale matches") from e

    if stale:
        logger.info("Expired %d stale match requests", len(stale))
    return len(stale)


def register_jobs(app, scheduler):
    interval = app.config.get("MATCH_EXPIRY_INTERVAL_MINUTES", 30)

    @scheduler.task("interval", id="expire_stale_matches", minutes=interval, replace_existing=True)
    def expire_stale_matches_job():
        with app.app_context():
            try:
                expire_stale_matches()
            except Unavailable:
                # already logged; the next run retries
                pass
