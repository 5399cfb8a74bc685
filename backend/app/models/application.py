from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.database import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(Text, primary_key=True)
    job_id = Column(Text, ForeignKey("jobs.id", ondelete="SET NULL"))
    jobseeker_id = Column(Text, ForeignKey("users.id"), nullable=False)
    employer_id = Column(Text, ForeignKey("users.id"), nullable=False)
    status = Column(Text, nullable=False, default="pending")
    cover_letter = Column(Text, nullable=False, default="")
    notes = Column(Text)
    applied_at = Column(Text, nullable=False)
    reviewed_at = Column(Text)

    job = relationship("Job", back_populates="applications")
