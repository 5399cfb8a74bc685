from sqlalchemy import Boolean, Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.database import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Text, primary_key=True)
    conversation_id = Column(Text, nullable=False)
    sender_id = Column(Text, ForeignKey("users.id"), nullable=False)
    receiver_id = Column(Text, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    message_type = Column(Text, nullable=False, default="text")
    interview_date = Column(Text)
    interview_time = Column(Text)
    interview_location = Column(Text)
    meeting_link = Column(Text)
    interview_notes = Column(Text)
    file_url = Column(Text)
    file_name = Column(Text)
    job_id = Column(Text, ForeignKey("jobs.id", ondelete="SET NULL"))
    application_id = Column(Text, ForeignKey("applications.id"))
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(Text)
    created_at = Column(Text, nullable=False)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
    job = relationship("Job")
