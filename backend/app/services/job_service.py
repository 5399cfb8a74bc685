"""
Job postings and the draft -> published gate.

Drafts can always be saved. Publishing, at creation or through an edit,
requires the employer's derived verification status to be ``verified``.
``JobPublished`` is emitted only on the edge from unpublished to published,
never on a save of an already published job.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from app.errors import (
    AuthorizationError,
    EmployerNotVerifiedError,
    NotFoundError,
    StateError,
    ValidationError,
)
from app.models.job import Job
from app.models.user import EMPLOYER, User
from app.services import verification_service
from app.services.events import Emit, JobPublished, discard
from app.services.match_service import normalize_skills
from app.utils.timestamps import now_timestamp, parse_deadline

logger = logging.getLogger("app.jobs")

DRAFT = "draft"
PUBLISHED = "published"
JOB_STATUSES = {DRAFT, PUBLISHED}

EXPERIENCE_LEVELS = ("Internship", "Entry Level", "Junior")
_LEGACY_EXPERIENCE_LEVELS = {"Mid Level", "Senior Level", "Executive"}

REQUIRED_FOR_PUBLISH = (
    "title", "description", "requirements", "job_type",
    "location", "work_mode", "application_deadline", "vacancies",
)

EDITABLE_FIELDS = {
    "title", "description", "requirements", "job_type", "category", "location",
    "work_mode", "salary_min", "salary_max", "salary_type", "application_deadline",
    "vacancies", "skills_required", "experience_level",
}


def normalize_experience_level(level) -> str:
    value = str(level or "").strip()
    if value in EXPERIENCE_LEVELS:
        return value
    if value in _LEGACY_EXPERIENCE_LEVELS:
        return "Junior"
    return "Entry Level"


def normalize_category(category) -> str | None:
    value = str(category or "").strip()
    if not value:
        return None
    if value in ("Other", "Others"):
        return "Others"
    return value


def _require_employer(actor: User):
    if actor.role != EMPLOYER:
        raise AuthorizationError("Only employers can manage jobs")


def _gate(actor: User):
    status = verification_service.current_status(actor)
    if status != "verified":
        logger.warning("Publish blocked for employer %s: verification status %s", actor.id, status)
        raise EmployerNotVerifiedError(
            "You can save jobs as draft, but you cannot publish until your company is verified by admin.",
            verification_status=status,
        )


def _check_publishable(job: Job):
    missing = [f for f in REQUIRED_FOR_PUBLISH if getattr(job, f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields for publishing: {', '.join(missing)}", fields=missing)
    if job.vacancies < 1:
        raise ValidationError("Vacancies must be at least 1", fields=["vacancies"])


def _apply_fields(job: Job, data: dict):
    for key, value in data.items():
        if key not in EDITABLE_FIELDS:
            continue
        if key == "skills_required":
            value = normalize_skills(value)
        elif key == "experience_level":
            value = normalize_experience_level(value)
        elif key == "category":
            value = normalize_category(value) or "Others"
        elif key == "salary_type":
            value = value or "Monthly"
        elif key == "application_deadline" and value:
            try:
                parse_deadline(value)
            except ValueError as exc:
                raise ValidationError(f"Invalid application deadline: {value}", fields=["application_deadline"]) from exc
        setattr(job, key, value)


def _sync_company(job: Job, employer: User):
    job.company_name = employer.company_name or employer.full_name
    if employer.company_logo:
        job.company_logo = employer.company_logo


def create_job(db: Session, actor: User, data: dict, emit: Emit = discard) -> Job:
    _require_employer(actor)
    status = data.get("status") or PUBLISHED
    if status not in JOB_STATUSES:
        raise ValidationError(f"Invalid job status. Must be one of: {', '.join(sorted(JOB_STATUSES))}")
    publishing = status == PUBLISHED
    if publishing:
        _gate(actor)

    now = now_timestamp()
    job = Job(
        id=str(uuid.uuid4()),
        employer_id=actor.id,
        company_logo=actor.company_logo or "",
        category=normalize_category(actor.industry) or normalize_category(data.get("category")) or "Others",
        location=(actor.company_address or "").strip() or "Not specified",
        salary_type="Monthly",
        skills_required=[],
        experience_level="Entry Level",
        status=status,
        is_published=publishing,
        is_active=publishing,
        application_count=0,
        created_at=now,
        updated_at=now,
    )
    _sync_company(job, actor)
    _apply_fields(job, {k: v for k, v in data.items() if k not in ("category", "location")})
    if publishing:
        _check_publishable(job)

    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("Employer %s created job %s as %s", actor.id, job.id, job.status)

    if publishing:
        emit(JobPublished(job.id))
    return job


def get_job(db: Session, job_id: str) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def _get_owned(db: Session, actor: User, job_id: str) -> Job:
    _require_employer(actor)
    job = get_job(db, job_id)
    if job.employer_id != actor.id:
        raise AuthorizationError("Not authorized to modify this job")
    return job


def update_job(db: Session, actor: User, job_id: str, data: dict, emit: Emit = discard) -> Job:
    job = _get_owned(db, actor, job_id)
    was_published = bool(job.is_published)

    status = data.get("status")
    if status is not None and status not in JOB_STATUSES:
        raise ValidationError(f"Invalid job status. Must be one of: {', '.join(sorted(JOB_STATUSES))}")
    if status == PUBLISHED:
        _gate(actor)

    try:
        _apply_fields(job, data)

        if status == DRAFT:
            job.status = DRAFT
            job.is_published = False
            job.is_active = False
        elif status == PUBLISHED:
            job.status = PUBLISHED
            job.is_published = True
            job.is_active = data["is_active"] if data.get("is_active") is not None else True
        elif data.get("is_active") is not None and job.is_published:
            job.is_active = data["is_active"]

        _sync_company(job, actor)
        if job.is_published:
            _check_publishable(job)
    except ValidationError:
        db.rollback()
        raise
    job.updated_at = now_timestamp()

    db.commit()
    db.refresh(job)

    if not was_published and job.is_published:
        logger.info("Job %s published by employer %s", job.id, actor.id)
        emit(JobPublished(job.id))
    return job


def set_job_active(db: Session, actor: User, job_id: str, is_active: bool) -> Job:
    job = _get_owned(db, actor, job_id)
    if is_active and not job.is_published:
        raise StateError("Draft jobs cannot be opened; publish the job first")
    job.is_active = is_active
    job.updated_at = now_timestamp()
    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, actor: User, job_id: str):
    job = _get_owned(db, actor, job_id)
    db.delete(job)
    db.commit()
    logger.info("Employer %s deleted job %s", actor.id, job_id)


def list_published(db: Session) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.is_published.is_(True), Job.is_active.is_(True))
        .order_by(Job.created_at.desc())
        .all()
    )


def list_for_employer(db: Session, actor: User) -> list[Job]:
    _require_employer(actor)
    return db.query(Job).filter(Job.employer_id == actor.id).order_by(Job.created_at.desc()).all()
