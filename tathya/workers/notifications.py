"""Celery tasks for push notifications."""
from tathya.core.celery_app import celery_app


@celery_app.task
def send_push_notification(recipient_id: str, title: str, body: str) -> None:
    # Delivery provider is external; the task records the dispatch.
    print(f"[Push] to={recipient_id} title={title!r} body={body!r}")
