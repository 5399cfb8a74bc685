"""
Skill-match fan-out: evaluate every active jobseeker with skills against a
newly published job and notify the ones whose skills overlap.
"""
import logging

from sqlalchemy.orm import Session

from app.errors import DependencyError
from app.models.job import Job
from app.models.user import JOBSEEKER, User
from app.services import notification_service
from app.services.match_service import compute_skill_match

logger = logging.getLogger("app.fanout")


def iter_candidates(db: Session):
    """Active jobseekers that list at least one skill.

    Skills live in a JSON column, so this is a scan over the active jobseekers,
    not a lookup keyed by skill.
    """
    rows = (
        db.query(User.id, User.skills)
        .filter(User.role == JOBSEEKER, User.is_active.is_(True))
        .order_by(User.id)
        .all()
    )
    for user_id, skills in rows:
        if skills:
            yield user_id, skills


def fan_out_job_match(db: Session, job: Job) -> dict:
    """Create job_match notifications for ``job``.

    A failed write for one candidate is logged and the scan moves on.
    Returns counters for logging and tests.
    """
    stats = {"candidates": 0, "matched": 0, "notified": 0, "suppressed": 0, "failed": 0}
    if not job.skills_required:
        logger.info("Job %s has no required skills, skipping match notifications", job.id)
        return stats

    logger.info("Starting job match notifications for job %s (%s)", job.id, job.title)
    for user_id, skills in iter_candidates(db):
        stats["candidates"] += 1
        result = compute_skill_match(job.skills_required, skills)
        if not result["matched"]:
            continue
        stats["matched"] += 1
        try:
            created = notification_service.notify_job_match(db, user_id, job, result["matched"])
        except DependencyError as exc:
            stats["failed"] += 1
            logger.error("Job match notification for jobseeker %s failed: %s", user_id, exc.__cause__ or exc)
            continue
        if created is None:
            stats["suppressed"] += 1
        else:
            stats["notified"] += 1

    logger.info(
        "Job match notifications for job %s done: %d candidates, %d notified, %d suppressed, %d failed",
        job.id, stats["candidates"], stats["notified"], stats["suppressed"], stats["failed"],
    )
    return stats
