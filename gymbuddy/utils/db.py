import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gymbuddy.errors import Conflict, Unavailable
from gymbuddy.extensions import db

logger = logging.getLogger(__name__)


def commit(action, conflict=None):
    """Commit the session, rolling back and raising Unavailable on failure.

    When `conflict` is given, a constraint violation is reported as a Conflict
    with that message instead.
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if conflict is None:
            logger.error(f"Error while trying to {action}: {e}")
            raise Unavailable(f"Could not {action}") from e
        raise Conflict(conflict) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error while trying to {action}: {e}")
        raise Unavailable(f"Could not {action}") from e
