from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, get_emitter
from app.models.application import Application
from app.models.user import User
from app.schemas.application import (
    ApplicationCheckResponse,
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
)
from app.services import application_service
from app.services.events import Emit

router = APIRouter(tags=["applications"])


def _application_to_response(application: Application) -> ApplicationResponse:
    job = application.job
    return ApplicationResponse(
        id=application.id,
        job_id=application.job_id,
        jobseeker_id=application.jobseeker_id,
        employer_id=application.employer_id,
        status=application.status,
        cover_letter=application.cover_letter or "",
        notes=application.notes,
        applied_at=application.applied_at,
        reviewed_at=application.reviewed_at,
        job_title=job.title if job else None,
        company_name=job.company_name if job else None,
    )


@router.post("/jobs/{job_id}/applications", response_model=ApplicationResponse, status_code=201)
async def apply_for_job(
    job_id: str,
    req: ApplicationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = application_service.apply_for_job(db, user, job_id, req.cover_letter)
    return _application_to_response(application)


@router.get("/jobs/{job_id}/applications", response_model=list[ApplicationResponse])
async def list_job_applications(job_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [_application_to_response(a) for a in application_service.list_for_job(db, user, job_id)]


@router.get("/jobs/{job_id}/applications/check", response_model=ApplicationCheckResponse)
async def check_application(job_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    application = application_service.find_own_application(db, user, job_id)
    if application is None:
        return ApplicationCheckResponse(has_applied=False)
    return ApplicationCheckResponse(has_applied=True, application=_application_to_response(application))


@router.get("/applications/mine", response_model=list[ApplicationResponse])
async def my_applications(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [_application_to_response(a) for a in application_service.list_for_jobseeker(db, user)]


@router.get("/applications/received", response_model=list[ApplicationResponse])
async def received_applications(
    status: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_application_to_response(a) for a in application_service.list_for_employer(db, user, status)]


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _application_to_response(application_service.get_application(db, user, application_id))


@router.put("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    req: ApplicationStatusUpdate,
    user: User = Depends(get_current_user),
    emit: Emit = Depends(get_emitter),
    db: Session = Depends(get_db),
):
    application = application_service.update_status(db, user, application_id, req.status, req.notes, emit=emit)
    return _application_to_response(application)
