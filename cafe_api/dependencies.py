from fastapi import BackgroundTasks, Request

from cafe_api.security import Authenticator
from cafe_api.services.blob_store import LocalBlobStore
from cafe_api.services.notification_outbox import NotificationOutbox


def get_authenticator(request: Request) -> Authenticator:
    """The Authenticator constructed at startup (see ``main``)."""
    return request.app.state.authenticator


def get_blob_store(request: Request) -> LocalBlobStore:
    return request.app.state.blob_store


def get_notification_outbox(background_tasks: BackgroundTasks) -> NotificationOutbox:
    """
    Per-request outbox for side-effect notifications.

    The flush is scheduled as a background task, so it runs after the route
    has returned (and its writes have committed) and uses its own session.
    """
    outbox = NotificationOutbox()
    background_tasks.add_task(outbox.flush)
    return outbox
