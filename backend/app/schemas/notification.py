from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    related_model: str | None
    related_id: str | None
    actor_id: str | None
    link: str | None
    is_read: bool
    metadata: dict
    created_at: str
    updated_at: str


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
