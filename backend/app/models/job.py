from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Text, primary_key=True)
    employer_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text)
    description = Column(Text)
    requirements = Column(Text)
    job_type = Column(Text)
    category = Column(Text)
    location = Column(Text)
    work_mode = Column(Text)
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    salary_type = Column(Text, nullable=False, default="Monthly")
    application_deadline = Column(Text)
    vacancies = Column(Integer)
    skills_required = Column(JSON, nullable=False, default=list)
    experience_level = Column(Text, nullable=False, default="Entry Level")
    company_name = Column(Text, nullable=False)
    company_logo = Column(Text, nullable=False, default="")
    status = Column(Text, nullable=False, default="draft")
    is_published = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=False)
    application_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    # Applications outlive their job: the FK is ON DELETE SET NULL.
    applications = relationship("Application", back_populates="job", passive_deletes=True)
