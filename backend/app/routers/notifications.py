from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.notification import Notification
from app.models.user import User
from app.schemas.notification import NotificationListResponse, NotificationResponse
from app.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        related_model=notification.related_model,
        related_id=notification.related_id,
        actor_id=notification.actor_id,
        link=notification.link,
        is_read=bool(notification.is_read),
        metadata=notification.metadata_ or {},
        created_at=notification.created_at,
        updated_at=notification.updated_at,
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int | None = Query(None, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notifications = notification_service.list_for_user(db, user.id, limit)
    return NotificationListResponse(
        notifications=[_notification_to_response(n) for n in notifications],
        unread_count=notification_service.unread_count(db, user.id),
    )


@router.get("/unread-count")
async def unread_count(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"count": notification_service.unread_count(db, user.id)}


@router.put("/read-all")
async def mark_all_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"updated": notification_service.mark_all_read(db, user.id)}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _notification_to_response(notification_service.mark_read(db, user.id, notification_id))


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification_service.delete(db, user.id, notification_id)
    return {"message": "Notification deleted"}


@router.post("/clear")
async def clear_notifications(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"archived": notification_service.clear_all(db, user.id)}
