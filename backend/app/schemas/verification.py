from pydantic import BaseModel


class DocumentSubmit(BaseModel):
    url: str


class DocumentReview(BaseModel):
    status: str  # approved, rejected or pending
    remarks: str | None = None


class DocumentResponse(BaseModel):
    doc_type: str
    url: str
    status: str
    uploaded_at: str | None
    reviewed_at: str | None
    remarks: str | None


class VerificationResponse(BaseModel):
    employer_id: str
    company_name: str | None
    verification_status: str
    documents: list[DocumentResponse]
