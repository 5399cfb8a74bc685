"""
Messaging between a jobseeker and an employer.

Two users may exchange messages (or schedule an interview) only while an
application links them with status shortlisted or accepted. The check runs on
every send; nothing about it is cached.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import AuthorizationError, MessagingNotAllowedError, NotFoundError, ValidationError
from app.models.application import Application
from app.models.message import Message
from app.models.user import User
from app.services.events import Emit, InterviewScheduled, MessageSent, discard
from app.utils.timestamps import now_timestamp, utcnow

logger = logging.getLogger("app.messaging")

ELIGIBLE_STATUSES = ("shortlisted", "accepted")
NO_APPLICATION_REASON = "no application between these users"

MESSAGE_TYPES = {"text", "interview", "followup", "instruction", "notification", "file"}
# Types that never produce a new_message notification.
SILENT_TYPES = {"interview", "notification"}


@dataclass
class Eligibility:
    eligible: bool
    reason: str | None = None
    application: Application | None = None


def conversation_id(a: str, b: str, separator: str | None = None) -> str:
    sep = settings.conversation_separator if separator is None else separator
    return sep.join(sorted([str(a), str(b)]))


def find_application_between(db: Session, a: str, b: str, job_id: str | None = None) -> Application | None:
    """Application linking ``a`` and ``b`` in either role.

    With several applications (different jobs), one that allows messaging wins,
    otherwise the most recent one is returned.
    """
    query = db.query(Application).filter(
        or_(
            (Application.jobseeker_id == a) & (Application.employer_id == b),
            (Application.jobseeker_id == b) & (Application.employer_id == a),
        )
    )
    if job_id:
        query = query.filter(Application.job_id == job_id)
    applications = query.order_by(Application.applied_at.desc()).all()
    for application in applications:
        if application.status in ELIGIBLE_STATUSES:
            return application
    return applications[0] if applications else None


def check_eligibility(db: Session, actor_id: str, counterpart_id: str, job_id: str | None = None) -> Eligibility:
    application = find_application_between(db, actor_id, counterpart_id, job_id)
    if application is None:
        return Eligibility(False, NO_APPLICATION_REASON)
    if application.status in ELIGIBLE_STATUSES:
        return Eligibility(True, application=application)
    return Eligibility(
        False,
        f"messaging available only after shortlist or acceptance; current status: {application.status}",
        application,
    )


def _require_eligible(
    db: Session, actor: User, receiver_id: str, job_id: str | None, application_id: str | None = None
) -> Application:
    """Application the message is linked to, once the pair passes the gate."""
    if not db.query(User.id).filter(User.id == receiver_id).first():
        raise NotFoundError("Receiver not found")
    eligibility = check_eligibility(db, actor.id, receiver_id, job_id)
    if not eligibility.eligible:
        logger.info("Message from %s to %s blocked: %s", actor.id, receiver_id, eligibility.reason)
        raise MessagingNotAllowedError(eligibility.reason)
    if not application_id:
        return eligibility.application

    application = db.query(Application).filter(Application.id == application_id).first()
    if not application or {application.jobseeker_id, application.employer_id} != {actor.id, receiver_id}:
        raise ValidationError("Application does not link the sender and the receiver")
    return application


def send_message(
    db: Session,
    actor: User,
    receiver_id: str,
    content: str | None = None,
    message_type: str = "text",
    job_id: str | None = None,
    application_id: str | None = None,
    file_url: str | None = None,
    file_name: str | None = None,
    emit: Emit = discard,
) -> Message:
    if not receiver_id:
        raise ValidationError("Receiver ID is required")
    if receiver_id == actor.id:
        raise ValidationError("Cannot send a message to yourself")
    message_type = message_type or "text"
    if message_type not in MESSAGE_TYPES:
        raise ValidationError(f"Invalid message type. Must be one of: {', '.join(sorted(MESSAGE_TYPES))}")
    if message_type == "interview":
        raise ValidationError("Interviews are scheduled through the interview endpoint")

    application = _require_eligible(db, actor, receiver_id, job_id, application_id)

    content = (content or "").strip()
    if file_url:
        message_type = "file"
        content = content or f"Sent a file: {file_name or file_url.rsplit('/', 1)[-1]}"
    if not content:
        raise ValidationError("Message content is required")

    message = Message(
        id=str(uuid.uuid4()),
        conversation_id=conversation_id(actor.id, receiver_id),
        sender_id=actor.id,
        receiver_id=receiver_id,
        content=content,
        message_type=message_type,
        file_url=file_url,
        file_name=file_name,
        job_id=job_id or application.job_id,
        application_id=application.id,
        is_read=False,
        created_at=now_timestamp(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)

    if message.message_type not in SILENT_TYPES:
        emit(MessageSent(message.id))
    return message


def schedule_interview(
    db: Session,
    actor: User,
    receiver_id: str,
    details: dict,
    job_id: str | None = None,
    application_id: str | None = None,
    emit: Emit = discard,
) -> Message:
    if not receiver_id or not details:
        raise ValidationError("Receiver ID and interview details are required")
    if not details.get("date") or not details.get("time"):
        raise ValidationError("Interview date and time are required")
    try:
        date.fromisoformat(details["date"])
    except ValueError as exc:
        raise ValidationError(f"Invalid interview date: {details['date']}") from exc

    application = _require_eligible(db, actor, receiver_id, job_id, application_id)

    message = Message(
        id=str(uuid.uuid4()),
        conversation_id=conversation_id(actor.id, receiver_id),
        sender_id=actor.id,
        receiver_id=receiver_id,
        content=f"Interview Scheduled: {details['date']} at {details['time']}",
        message_type="interview",
        interview_date=details["date"],
        interview_time=details["time"],
        interview_location=details.get("location"),
        meeting_link=details.get("meeting_link"),
        interview_notes=details.get("notes"),
        job_id=job_id or application.job_id,
        application_id=application.id,
        is_read=False,
        created_at=now_timestamp(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Interview %s scheduled by %s with %s", message.id, actor.id, receiver_id)

    emit(InterviewScheduled(message.id))
    return message


def get_message(db: Session, actor: User, message_id: str) -> Message:
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message:
        raise NotFoundError("Message not found")
    if actor.id not in (message.sender_id, message.receiver_id):
        raise AuthorizationError("Not authorized to view this message")
    return message


def list_conversations(db: Session, actor: User) -> list[dict]:
    messages = (
        db.query(Message)
        .filter(or_(Message.sender_id == actor.id, Message.receiver_id == actor.id))
        .order_by(Message.created_at.desc())
        .all()
    )
    conversations: dict[str, dict] = {}
    for message in messages:
        conv = conversations.get(message.conversation_id)
        if conv is None:
            other = message.receiver_id if message.sender_id == actor.id else message.sender_id
            conv = conversations[message.conversation_id] = {
                "conversation_id": message.conversation_id,
                "other_user_id": other,
                "last_message": message,
                "unread_count": 0,
            }
        if message.receiver_id == actor.id and not message.is_read:
            conv["unread_count"] += 1
    return list(conversations.values())


def _mark_read(db: Session, actor: User, conv_id: str) -> int:
    updated = (
        db.query(Message)
        .filter(
            Message.conversation_id == conv_id,
            Message.receiver_id == actor.id,
            Message.is_read.is_(False),
        )
        .update({Message.is_read: True, Message.read_at: now_timestamp()}, synchronize_session=False)
    )
    db.commit()
    return updated


def _require_participant(db: Session, actor: User, conv_id: str):
    # Ids may contain the separator, so membership comes from stored rows.
    member = (
        db.query(Message.id)
        .filter(Message.conversation_id == conv_id)
        .filter(or_(Message.sender_id == actor.id, Message.receiver_id == actor.id))
        .first()
    )
    if not member:
        raise AuthorizationError("Not authorized to view this conversation")


def get_conversation(db: Session, actor: User, conv_id: str) -> list[Message]:
    _require_participant(db, actor, conv_id)
    messages = (
        db.query(Message)
        .filter(Message.conversation_id == conv_id)
        .order_by(Message.created_at.asc())
        .all()
    )
    _mark_read(db, actor, conv_id)
    return messages


def mark_conversation_read(db: Session, actor: User, conv_id: str) -> int:
    _require_participant(db, actor, conv_id)
    return _mark_read(db, actor, conv_id)


def unread_count(db: Session, actor: User) -> int:
    return (
        db.query(Message)
        .filter(Message.receiver_id == actor.id, Message.is_read.is_(False))
        .count()
    )


def upcoming_interview_count(db: Session, actor: User, days: int | None = None) -> int:
    days = days if days and days > 0 else settings.upcoming_interview_days
    today = utcnow().date()
    end = today + timedelta(days=days)
    return (
        db.query(Message)
        .filter(Message.message_type == "interview")
        .filter(or_(Message.sender_id == actor.id, Message.receiver_id == actor.id))
        .filter(Message.interview_date >= today.isoformat())
        .filter(Message.interview_date <= end.isoformat())
        .count()
    )
