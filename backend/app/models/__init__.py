from app.models.user import User
from app.models.verification import VerificationDocument
from app.models.job import Job
from app.models.application import Application
from app.models.message import Message
from app.models.notification import Notification

__all__ = ["User", "VerificationDocument", "Job", "Application", "Message", "Notification"]
