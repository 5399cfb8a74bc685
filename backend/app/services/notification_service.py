"""
Per-user notification log.

Creation goes through ``create_notification``, which applies the dedup policy
for the notification type:

* ``job_match``: skipped when the user already got one for the same job
  inside ``settings.job_match_dedup_hours``.
* ``new_message``: an unread notification from the same sender created
  inside ``settings.message_notification_merge_minutes`` is refreshed in place.
* anything else is always inserted.

Windows are checked with a plain query at write time, so two concurrent
writers can both insert.
"""
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import DependencyError, NotFoundError, ValidationError
from app.models.application import Application
from app.models.job import Job
from app.models.message import Message
from app.models.notification import (
    APPLICATION_UPDATE,
    INTERVIEW,
    JOB_MATCH,
    NEW_MESSAGE,
    NOTIFICATION_TYPES,
    SYSTEM,
    ApplicationRef,
    JobRef,
    MessageRef,
    Notification,
    RelatedRef,
)
from app.models.user import User
from app.services.match_service import job_match_message
from app.utils.timestamps import cutoff_timestamp, now_timestamp

logger = logging.getLogger("app.notifications")

STATUS_MESSAGES = {
    "shortlisted": "Your application has been shortlisted!",
    "accepted": "Congratulations! Your application has been accepted!",
    "rejected": "Your application status has been updated.",
}


def _find_recent_job_match(db: Session, user_id: str, related: RelatedRef | None) -> Notification | None:
    if related is None:
        return None
    cutoff = cutoff_timestamp(hours=settings.job_match_dedup_hours)
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .filter(Notification.type == JOB_MATCH)
        .filter(Notification.related_model == related.model)
        .filter(Notification.related_id == related.id)
        .filter(Notification.created_at >= cutoff)
        .first()
    )


def _find_mergeable_message(db: Session, user_id: str, actor_id: str | None) -> Notification | None:
    if actor_id is None:
        return None
    cutoff = cutoff_timestamp(minutes=settings.message_notification_merge_minutes)
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .filter(Notification.type == NEW_MESSAGE)
        .filter(Notification.actor_id == actor_id)
        .filter(Notification.is_read.is_(False))
        .filter(Notification.is_archived.is_(False))
        .filter(Notification.created_at >= cutoff)
        .order_by(Notification.created_at.desc())
        .first()
    )


def create_notification(
    db: Session,
    *,
    user_id: str,
    type: str,
    title: str,
    message: str,
    related: RelatedRef | None = None,
    actor_id: str | None = None,
    link: str | None = None,
    metadata: dict | None = None,
) -> Notification | None:
    """Write a notification under the dedup policy for its type.

    Returns the created or refreshed row, or None when suppressed.
    Raises DependencyError when the write fails.
    """
    if type not in NOTIFICATION_TYPES:
        raise ValidationError(f"Invalid notification type: {type}")

    now = now_timestamp()
    try:
        if type == JOB_MATCH and _find_recent_job_match(db, user_id, related):
            logger.debug("Duplicate job_match suppressed for user %s, %s %s", user_id, related.model, related.id)
            return None

        if type == NEW_MESSAGE:
            existing = _find_mergeable_message(db, user_id, actor_id)
            if existing:
                existing.message = message
                existing.related = related
                existing.metadata_ = {**(existing.metadata_ or {}), **(metadata or {})}
                existing.updated_at = now
                db.commit()
                db.refresh(existing)
                return existing

        notification = Notification(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            actor_id=actor_id,
            link=link,
            is_read=False,
            is_archived=False,
            metadata_=metadata or {},
            created_at=now,
            updated_at=now,
        )
        notification.related = related
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification
    except SQLAlchemyError as exc:
        db.rollback()
        raise DependencyError(f"Could not write {type} notification for user {user_id}") from exc


# ---------------------------------------------------------------------------
# Producers
# ---------------------------------------------------------------------------

def notify_job_match(db: Session, jobseeker_id: str, job: Job, matched: list[str]) -> Notification | None:
    return create_notification(
        db,
        user_id=jobseeker_id,
        type=JOB_MATCH,
        title="New Job Match!",
        message=job_match_message(job.title, job.company_name, matched),
        related=JobRef(job.id),
        link=f"/jobseeker/job-details/{job.id}",
        metadata={
            "job_id": job.id,
            "company_name": job.company_name,
            "job_title": job.title,
            "matching_skills": matched,
            "match_count": len(matched),
        },
    )


def notify_application_status(db: Session, application: Application, old_status: str, new_status: str) -> Notification | None:
    job = application.job
    text = STATUS_MESSAGES.get(new_status, f"Your application status changed to {new_status}")
    job_title = job.title if job and job.title else "the job"
    company = job.company_name if job else "the company"
    return create_notification(
        db,
        user_id=application.jobseeker_id,
        type=APPLICATION_UPDATE,
        title="Application Update",
        message=f'{text} for "{job_title}" at {company}.',
        related=ApplicationRef(application.id),
        actor_id=application.employer_id,
        link="/jobseeker/my-applications",
        metadata={
            "application_id": application.id,
            "job_id": application.job_id,
            "old_status": old_status,
            "new_status": new_status,
        },
    )


def notify_new_message(db: Session, message: Message) -> Notification | None:
    sender = db.query(User).filter(User.id == message.sender_id).first()
    sender_name = sender.display_name if sender else "User"
    preview = message.content[: settings.message_preview_chars]
    return create_notification(
        db,
        user_id=message.receiver_id,
        type=NEW_MESSAGE,
        title="New Message",
        message=f"New message from {sender_name}: {preview}...",
        related=MessageRef(message.id),
        actor_id=message.sender_id,
        link=f"/messages?conversation={message.conversation_id}",
        metadata={
            "sender_id": message.sender_id,
            "sender_name": sender_name,
            "conversation_id": message.conversation_id,
            "last_message": message.content,
        },
    )


def notify_interview(db: Session, message: Message) -> Notification | None:
    return create_notification(
        db,
        user_id=message.receiver_id,
        type=INTERVIEW,
        title="Interview Scheduled!",
        message=(
            f"An interview has been scheduled for {message.interview_date} at {message.interview_time}. "
            f"Location: {message.interview_location or 'Online'}"
        ),
        related=MessageRef(message.id),
        actor_id=message.sender_id,
        link="/messages",
        metadata={
            "interview_date": message.interview_date,
            "interview_time": message.interview_time,
            "location": message.interview_location,
            "meeting_link": message.meeting_link,
        },
    )


def notify_system(db: Session, user_id: str, title: str, message: str, link: str | None = None) -> Notification | None:
    return create_notification(db, user_id=user_id, type=SYSTEM, title=title, message=message, link=link)


# ---------------------------------------------------------------------------
# Reads and user actions
# ---------------------------------------------------------------------------

def list_for_user(db: Session, user_id: str, limit: int | None = None) -> list[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_archived.is_(False))
        .order_by(Notification.created_at.desc(), Notification.updated_at.desc())
        .limit(limit or settings.notification_page_size)
        .all()
    )


def unread_count(db: Session, user_id: str) -> int:
    return (
        db.query(Notification)
        .filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
            Notification.is_archived.is_(False),
        )
        .count()
    )


def _get_owned(db: Session, user_id: str, notification_id: str) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, user_id: str, notification_id: str) -> Notification:
    notification = _get_owned(db, user_id, notification_id)
    if not notification.is_read:
        notification.is_read = True
        notification.updated_at = now_timestamp()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: str) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True, Notification.updated_at: now_timestamp()}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete(db: Session, user_id: str, notification_id: str):
    notification = _get_owned(db, user_id, notification_id)
    db.delete(notification)
    db.commit()


def clear_all(db: Session, user_id: str) -> int:
    """Archive every notification of the user. Rows are kept."""
    archived = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_archived.is_(False))
        .update({Notification.is_archived: True, Notification.updated_at: now_timestamp()}, synchronize_session=False)
    )
    db.commit()
    return archived
