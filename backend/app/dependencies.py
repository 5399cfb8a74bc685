from fastapi import BackgroundTasks, Depends, Header, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from app.database import get_db, get_session_factory
from app.errors import AuthorizationError
from app.models.user import User
from app.services import events
from app.services.events import DomainEvent, Emit


async def get_current_user(x_user_id: str = Header(...), db: Session = Depends(get_db)) -> User:
    # Identity is established upstream; the gateway forwards the user id.
    user = db.query(User).filter(User.id == x_user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Unknown or inactive user")
    return user


def require_role(*roles: str):
    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise AuthorizationError(f"This action requires role: {', '.join(roles)}")
        return user
    return dependency


async def get_emitter(
    background_tasks: BackgroundTasks,
    session_factory: sessionmaker = Depends(get_session_factory),
) -> Emit:
    """Emit callable that runs the event's notification work after the response is sent."""
    def emit(event: DomainEvent):
        background_tasks.add_task(events.dispatch, event, session_factory)
    return emit
