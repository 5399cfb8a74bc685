from pydantic import BaseModel


class MessageCreate(BaseModel):
    receiver_id: str
    content: str | None = None
    message_type: str = "text"
    job_id: str | None = None
    application_id: str | None = None
    file_url: str | None = None
    file_name: str | None = None


class InterviewDetails(BaseModel):
    date: str  # YYYY-MM-DD
    time: str
    location: str | None = None
    meeting_link: str | None = None
    notes: str | None = None


class InterviewCreate(BaseModel):
    receiver_id: str
    interview_details: InterviewDetails
    job_id: str | None = None
    application_id: str | None = None


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    message_type: str
    interview_date: str | None
    interview_time: str | None
    interview_location: str | None
    meeting_link: str | None
    interview_notes: str | None
    file_url: str | None
    file_name: str | None
    job_id: str | None
    application_id: str | None
    is_read: bool
    read_at: str | None
    created_at: str


class ConversationResponse(BaseModel):
    conversation_id: str
    other_user_id: str
    other_user_name: str | None
    last_message: MessageResponse
    unread_count: int


class EligibilityResponse(BaseModel):
    eligible: bool
    reason: str | None
    application_id: str | None
    application_status: str | None
