from pydantic import BaseModel


class ApplicationCreate(BaseModel):
    cover_letter: str | None = None


class ApplicationStatusUpdate(BaseModel):
    status: str
    notes: str | None = None


class ApplicationResponse(BaseModel):
    id: str
    job_id: str | None
    jobseeker_id: str
    employer_id: str
    status: str
    cover_letter: str
    notes: str | None
    applied_at: str
    reviewed_at: str | None
    job_title: str | None = None
    company_name: str | None = None


class ApplicationCheckResponse(BaseModel):
    has_applied: bool
    application: ApplicationResponse | None = None
