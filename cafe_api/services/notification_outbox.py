"""Deferred, best-effort notification fan-out.

Services enqueue notifications while handling the primary action. The router
schedules :meth:`NotificationOutbox.flush` as a background task so delivery
happens after the primary transaction has committed and the response is sent,
on its own session. A failed notification is logged and dropped; it never
affects the action that produced it.
"""
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from cafe_api.database import get_session_local
from cafe_api.crud.notification import notify
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)


class NotificationOutbox:

    def __init__(self):
        self._pending: List[Tuple[int, str]] = []

    def enqueue(self, user_id: int, message: str) -> None:
        self._pending.append((user_id, message))

    @property
    def pending(self) -> List[Tuple[int, str]]:
        return list(self._pending)

    def flush(self, session_factory: Optional[Callable[[], Session]] = None) -> int:
        """Deliver queued notifications; returns how many were stored."""
        if not self._pending:
            return 0

        pending, self._pending = self._pending, []
        SessionLocal = session_factory or get_session_local()
        db = SessionLocal()
        delivered = 0
        try:
            for user_id, message in pending:
                try:
                    notify(db, user_id, message)
                    delivered += 1
                except Exception:
                    logger.exception(f"Failed to create notification for user {user_id}")
        finally:
            db.close()

        if delivered:
            logger.info(f"Delivered {delivered}/{len(pending)} notifications")
        return delivered
