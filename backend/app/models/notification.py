from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Text
from app.database import Base

JOB_MATCH = "job_match"
APPLICATION_UPDATE = "application_update"
NEW_MESSAGE = "new_message"
INTERVIEW = "interview"
SYSTEM = "system"

NOTIFICATION_TYPES = {JOB_MATCH, APPLICATION_UPDATE, NEW_MESSAGE, INTERVIEW, SYSTEM}


@dataclass(frozen=True)
class JobRef:
    id: str
    model: ClassVar[str] = "Job"


@dataclass(frozen=True)
class ApplicationRef:
    id: str
    model: ClassVar[str] = "Application"


@dataclass(frozen=True)
class MessageRef:
    id: str
    model: ClassVar[str] = "Message"


@dataclass(frozen=True)
class UserRef:
    id: str
    model: ClassVar[str] = "User"


RelatedRef = JobRef | ApplicationRef | MessageRef | UserRef

_REF_TYPES = {ref.model: ref for ref in (JobRef, ApplicationRef, MessageRef, UserRef)}


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    related_model = Column(Text)
    related_id = Column(Text)
    # User whose action produced the notification (message sender, reviewer).
    actor_id = Column(Text)
    link = Column(Text)
    is_read = Column(Boolean, nullable=False, default=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    @property
    def related(self) -> RelatedRef | None:
        if not self.related_model or not self.related_id:
            return None
        return _REF_TYPES[self.related_model](self.related_id)

    @related.setter
    def related(self, ref: RelatedRef | None):
        self.related_model = ref.model if ref else None
        self.related_id = ref.id if ref else None
