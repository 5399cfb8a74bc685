"""
Domain events emitted after a write commits, and the worker that turns them
into notifications.

Services take an ``emit`` callable. The API layer passes one that schedules
``dispatch`` as a FastAPI background task, so notification work runs after
the response and in its own session: a slow fan-out or a failed notification
write never touches the publish/review/send transaction.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from app.errors import DependencyError
from app.models.application import Application
from app.models.job import Job
from app.models.message import Message
from app.services import fanout_service, notification_service

logger = logging.getLogger("app.events")


@dataclass(frozen=True)
class JobPublished:
    job_id: str


@dataclass(frozen=True)
class ApplicationStatusChanged:
    application_id: str
    old_status: str
    new_status: str


@dataclass(frozen=True)
class MessageSent:
    message_id: str


@dataclass(frozen=True)
class InterviewScheduled:
    message_id: str


DomainEvent = JobPublished | ApplicationStatusChanged | MessageSent | InterviewScheduled
Emit = Callable[[DomainEvent], None]


def discard(event: DomainEvent):
    """Emit target for callers that do not want notifications."""


def _on_job_published(db: Session, event: JobPublished):
    job = db.query(Job).filter(Job.id == event.job_id).first()
    if not job or not job.is_published:
        logger.info("Job %s no longer published, skipping match notifications", event.job_id)
        return
    fanout_service.fan_out_job_match(db, job)


def _on_application_status_changed(db: Session, event: ApplicationStatusChanged):
    application = db.query(Application).filter(Application.id == event.application_id).first()
    if not application:
        return
    notification_service.notify_application_status(db, application, event.old_status, event.new_status)


def _on_message_sent(db: Session, event: MessageSent):
    message = db.query(Message).filter(Message.id == event.message_id).first()
    if message:
        notification_service.notify_new_message(db, message)


def _on_interview_scheduled(db: Session, event: InterviewScheduled):
    message = db.query(Message).filter(Message.id == event.message_id).first()
    if message:
        notification_service.notify_interview(db, message)


HANDLERS: dict[type, Callable[[Session, DomainEvent], None]] = {
    JobPublished: _on_job_published,
    ApplicationStatusChanged: _on_application_status_changed,
    MessageSent: _on_message_sent,
    InterviewScheduled: _on_interview_scheduled,
}


def handle(db: Session, event: DomainEvent):
    """Run the handler for ``event`` on ``db``. Notification failures are logged, never raised."""
    handler = HANDLERS[type(event)]
    try:
        handler(db, event)
    except DependencyError as exc:
        logger.error("Notification for %s failed: %s", event, exc.__cause__ or exc)


def dispatch(event: DomainEvent, session_factory: sessionmaker):
    db = session_factory()
    try:
        handle(db, event)
    except Exception:
        logger.exception("Unhandled error while processing %s", event)
    finally:
        db.close()
