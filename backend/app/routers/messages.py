from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, get_emitter
from app.errors import ValidationError
from app.models.message import Message
from app.models.user import User
from app.schemas.message import (
    ConversationResponse,
    EligibilityResponse,
    InterviewCreate,
    MessageCreate,
    MessageResponse,
)
from app.services import messaging_service
from app.services.calendar_service import generate_interview_ics
from app.services.events import Emit

router = APIRouter(prefix="/messages", tags=["messages"])


def _message_to_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        receiver_id=message.receiver_id,
        content=message.content,
        message_type=message.message_type,
        interview_date=message.interview_date,
        interview_time=message.interview_time,
        interview_location=message.interview_location,
        meeting_link=message.meeting_link,
        interview_notes=message.interview_notes,
        file_url=message.file_url,
        file_name=message.file_name,
        job_id=message.job_id,
        application_id=message.application_id,
        is_read=bool(message.is_read),
        read_at=message.read_at,
        created_at=message.created_at,
    )


@router.get("/eligibility/{counterpart_id}", response_model=EligibilityResponse)
async def check_eligibility(
    counterpart_id: str,
    job_id: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = messaging_service.check_eligibility(db, user.id, counterpart_id, job_id)
    return EligibilityResponse(
        eligible=result.eligible,
        reason=result.reason,
        application_id=result.application.id if result.application else None,
        application_status=result.application.status if result.application else None,
    )


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    req: MessageCreate,
    user: User = Depends(get_current_user),
    emit: Emit = Depends(get_emitter),
    db: Session = Depends(get_db),
):
    message = messaging_service.send_message(
        db, user, req.receiver_id,
        content=req.content,
        message_type=req.message_type,
        job_id=req.job_id,
        application_id=req.application_id,
        file_url=req.file_url,
        file_name=req.file_name,
        emit=emit,
    )
    return _message_to_response(message)


@router.post("/interviews", response_model=MessageResponse, status_code=201)
async def schedule_interview(
    req: InterviewCreate,
    user: User = Depends(get_current_user),
    emit: Emit = Depends(get_emitter),
    db: Session = Depends(get_db),
):
    message = messaging_service.schedule_interview(
        db, user, req.receiver_id, req.interview_details.model_dump(),
        job_id=req.job_id,
        application_id=req.application_id,
        emit=emit,
    )
    return _message_to_response(message)


@router.get("/conversations", response_model=list[ConversationResponse])
async def list_conversations(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    conversations = messaging_service.list_conversations(db, user)
    names = {
        u.id: u.display_name
        for u in db.query(User).filter(User.id.in_([c["other_user_id"] for c in conversations])).all()
    }
    return [
        ConversationResponse(
            conversation_id=c["conversation_id"],
            other_user_id=c["other_user_id"],
            other_user_name=names.get(c["other_user_id"]),
            last_message=_message_to_response(c["last_message"]),
            unread_count=c["unread_count"],
        )
        for c in conversations
    ]


@router.get("/conversations/{conversation_id}", response_model=list[MessageResponse])
async def get_conversation(conversation_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [_message_to_response(m) for m in messaging_service.get_conversation(db, user, conversation_id)]


@router.put("/conversations/{conversation_id}/read")
async def mark_conversation_read(
    conversation_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = messaging_service.mark_conversation_read(db, user, conversation_id)
    return {"updated": updated}


@router.get("/unread-count")
async def unread_count(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"count": messaging_service.unread_count(db, user)}


@router.get("/interviews/upcoming-count")
async def upcoming_interview_count(
    days: int | None = Query(None, ge=1, le=365),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"count": messaging_service.upcoming_interview_count(db, user, days)}


@router.get("/{message_id}/calendar")
async def interview_calendar(message_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    message = messaging_service.get_message(db, user, message_id)
    if message.message_type != "interview":
        raise ValidationError("Message is not an interview invitation")

    ics_data = generate_interview_ics(
        message_id=message.id,
        interview_date=message.interview_date,
        interview_time=message.interview_time,
        location=message.interview_location,
        meeting_link=message.meeting_link,
        notes=message.interview_notes,
        company_name=message.job.company_name if message.job else None,
    )
    return Response(
        content=ics_data,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="interview_{message.id[:8]}.ics"'},
    )
