from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.database import Base


class VerificationDocument(Base):
    __tablename__ = "verification_documents"

    employer_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    doc_type = Column(Text, primary_key=True)
    url = Column(Text, nullable=False, default="")
    status = Column(Text, nullable=False, default="not_submitted")
    uploaded_at = Column(Text)
    reviewed_at = Column(Text)
    remarks = Column(Text)

    employer = relationship("User", back_populates="verification_documents")
