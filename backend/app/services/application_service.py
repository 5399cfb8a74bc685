"""
Application lifecycle.

    pending -> shortlisted -> accepted | rejected
    pending -> accepted | rejected

accepted and rejected are terminal. One application per (job, jobseeker) is
enforced by the unique index on the applications table; a violation on insert
is reported as ConflictError.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import AuthorizationError, ConflictError, NotFoundError, StateError, ValidationError
from app.models.application import Application
from app.models.job import Job
from app.models.user import EMPLOYER, JOBSEEKER, User
from app.services.events import ApplicationStatusChanged, Emit, discard
from app.utils.timestamps import now_timestamp, parse_deadline, utcnow

logger = logging.getLogger("app.applications")

PENDING = "pending"
SHORTLISTED = "shortlisted"
ACCEPTED = "accepted"
REJECTED = "rejected"

APPLICATION_STATUSES = {PENDING, SHORTLISTED, ACCEPTED, REJECTED}
TERMINAL_STATUSES = {ACCEPTED, REJECTED}
TRANSITIONS = {
    PENDING: {SHORTLISTED, ACCEPTED, REJECTED},
    SHORTLISTED: {ACCEPTED, REJECTED},
    ACCEPTED: set(),
    REJECTED: set(),
}


def can_transition(old_status: str, new_status: str) -> bool:
    """Whether a review may move an application from ``old_status`` to ``new_status``.

    Re-stating the current status is allowed while the application is open.
    """
    if old_status in TERMINAL_STATUSES:
        return False
    return new_status == old_status or new_status in TRANSITIONS[old_status]


def apply_for_job(db: Session, actor: User, job_id: str, cover_letter: str | None = None) -> Application:
    if actor.role != JOBSEEKER:
        raise AuthorizationError("Only jobseekers can apply for jobs")

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    if not (job.is_active and job.is_published):
        raise StateError("This job is no longer accepting applications")
    if job.application_deadline and utcnow() > parse_deadline(job.application_deadline):
        raise StateError("Application deadline has passed")
    if not (actor.resume_url or "").strip():
        raise ValidationError("Please upload your resume before applying")

    application = Application(
        id=str(uuid.uuid4()),
        job_id=job.id,
        jobseeker_id=actor.id,
        employer_id=job.employer_id,
        status=PENDING,
        cover_letter=cover_letter or "",
        applied_at=now_timestamp(),
    )
    db.add(application)
    try:
        db.flush()
        db.query(Job).filter(Job.id == job.id).update(
            {Job.application_count: Job.application_count + 1}, synchronize_session=False
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Duplicate application by %s for job %s rejected", actor.id, job_id)
        raise ConflictError("You have already applied for this job") from exc

    db.refresh(application)
    logger.info("Jobseeker %s applied for job %s", actor.id, job_id)
    return application


def get_application(db: Session, actor: User, application_id: str) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")
    if actor.id not in (application.jobseeker_id, application.employer_id):
        raise AuthorizationError("Not authorized to view this application")
    return application


def update_status(
    db: Session,
    actor: User,
    application_id: str,
    new_status: str,
    notes: str | None = None,
    emit: Emit = discard,
) -> Application:
    if actor.role != EMPLOYER:
        raise AuthorizationError("Only employers can update application status")
    if new_status not in APPLICATION_STATUSES:
        raise ValidationError(
            f"Invalid application status. Must be one of: {', '.join(sorted(APPLICATION_STATUSES))}"
        )

    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")
    if application.employer_id != actor.id:
        raise AuthorizationError("Not authorized to update this application")

    old_status = application.status
    if old_status in TERMINAL_STATUSES:
        raise StateError(f"Application is already {old_status} and can no longer be reviewed")
    if not can_transition(old_status, new_status):
        raise StateError(f"Cannot move application from {old_status} to {new_status}")

    application.status = new_status
    application.reviewed_at = now_timestamp()
    if notes:
        application.notes = notes
    db.commit()
    db.refresh(application)

    if new_status != old_status:
        logger.info("Application %s moved %s -> %s by %s", application.id, old_status, new_status, actor.id)
        emit(ApplicationStatusChanged(application.id, old_status, new_status))
    return application


def list_for_jobseeker(db: Session, actor: User) -> list[Application]:
    if actor.role != JOBSEEKER:
        raise AuthorizationError("Only jobseekers can view their applications")
    return (
        db.query(Application)
        .filter(Application.jobseeker_id == actor.id)
        .order_by(Application.applied_at.desc())
        .all()
    )


def list_for_employer(db: Session, actor: User, status: str | None = None) -> list[Application]:
    if actor.role != EMPLOYER:
        raise AuthorizationError("Only employers can view received applications")
    query = db.query(Application).filter(Application.employer_id == actor.id)
    if status:
        if status not in APPLICATION_STATUSES:
            raise ValidationError(f"Invalid status filter: {status}")
        query = query.filter(Application.status == status)
    return query.order_by(Application.applied_at.desc()).all()


def list_for_job(db: Session, actor: User, job_id: str) -> list[Application]:
    if actor.role != EMPLOYER:
        raise AuthorizationError("Only employers can view job applications")
    job = db.query(Job).filter(Job.id == job_id, Job.employer_id == actor.id).first()
    if not job:
        raise NotFoundError("Job not found or unauthorized")
    return (
        db.query(Application)
        .filter(Application.job_id == job_id)
        .order_by(Application.applied_at.desc())
        .all()
    )


def find_own_application(db: Session, actor: User, job_id: str) -> Application | None:
    if actor.role != JOBSEEKER:
        raise AuthorizationError("Only jobseekers can check application status")
    return (
        db.query(Application)
        .filter(Application.job_id == job_id, Application.jobseeker_id == actor.id)
        .first()
    )
