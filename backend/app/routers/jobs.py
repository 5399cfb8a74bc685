from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, get_emitter
from app.models.job import Job
from app.models.user import User
from app.schemas.job import JobActiveUpdate, JobCreate, JobListResponse, JobResponse, JobUpdate
from app.services import job_service
from app.services.events import Emit

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        id=job.id,
        employer_id=job.employer_id,
        title=job.title,
        description=job.description,
        requirements=job.requirements,
        job_type=job.job_type,
        category=job.category,
        location=job.location,
        work_mode=job.work_mode,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        salary_type=job.salary_type,
        application_deadline=job.application_deadline,
        vacancies=job.vacancies,
        skills_required=job.skills_required or [],
        experience_level=job.experience_level,
        company_name=job.company_name,
        company_logo=job.company_logo or "",
        status=job.status,
        is_published=bool(job.is_published),
        is_active=bool(job.is_active),
        application_count=job.application_count,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def _job_list(jobs: list[Job]) -> JobListResponse:
    return JobListResponse(jobs=[_job_to_response(j) for j in jobs], total=len(jobs))


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    req: JobCreate,
    user: User = Depends(get_current_user),
    emit: Emit = Depends(get_emitter),
    db: Session = Depends(get_db),
):
    job = job_service.create_job(db, user, req.model_dump(exclude_unset=True), emit=emit)
    return _job_to_response(job)


@router.get("", response_model=JobListResponse)
async def list_jobs(db: Session = Depends(get_db)):
    return _job_list(job_service.list_published(db))


@router.get("/mine", response_model=JobListResponse)
async def list_my_jobs(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _job_list(job_service.list_for_employer(db, user))


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, db: Session = Depends(get_db)):
    return _job_to_response(job_service.get_job(db, job_id))


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    req: JobUpdate,
    user: User = Depends(get_current_user),
    emit: Emit = Depends(get_emitter),
    db: Session = Depends(get_db),
):
    job = job_service.update_job(db, user, job_id, req.model_dump(exclude_unset=True), emit=emit)
    return _job_to_response(job)


@router.patch("/{job_id}/active", response_model=JobResponse)
async def set_job_active(
    job_id: str,
    req: JobActiveUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _job_to_response(job_service.set_job_active(db, user, job_id, req.is_active))


@router.delete("/{job_id}")
async def delete_job(job_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    job_service.delete_job(db, user, job_id)
    return {"message": "Job deleted"}
