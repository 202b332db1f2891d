"""Activity log writer.

Entries are written after the action they describe has been committed. A
failure to write one is logged and rolled back; it never turns a completed
action into a failed request.
"""

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from helpdesk.audit.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def record(
        self, kind: str, subject_id: str, author_id: uuid.UUID | None = None
    ) -> ActivityLog | None:
        entry = ActivityLog(type=kind, to=subject_id, author_id=author_id)
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to record %s activity for %s", kind, subject_id)
            self.db.rollback()
            return None
        return entry
