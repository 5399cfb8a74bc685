from sqlalchemy import JSON, Boolean, Column, Text
from sqlalchemy.orm import relationship
from app.database import Base

JOBSEEKER = "jobseeker"
EMPLOYER = "employer"
ADMIN = "admin"


class User(Base):
    """Profile record owned by the profile service; the core only reads it,
    except for ``verification_status`` which it recomputes."""

    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    full_name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Jobseeker profile
    skills = Column(JSON, nullable=False, default=list)
    resume_url = Column(Text)

    # Employer profile
    company_name = Column(Text)
    company_logo = Column(Text)
    company_address = Column(Text)
    industry = Column(Text)
    verification_status = Column(Text, nullable=False, default="unverified")

    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    verification_documents = relationship(
        "VerificationDocument", back_populates="employer", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        return self.full_name or self.company_name or "User"
