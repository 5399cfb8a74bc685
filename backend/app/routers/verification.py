from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_role
from app.models.user import ADMIN, EMPLOYER, User
from app.schemas.verification import DocumentResponse, DocumentReview, DocumentSubmit, VerificationResponse
from app.services import verification_service
from app.services.verification_service import DOC_TYPES

router = APIRouter(tags=["verification"])


def _verification_to_response(employer: User) -> VerificationResponse:
    docs = {doc.doc_type: doc for doc in employer.verification_documents}
    documents = []
    for doc_type in DOC_TYPES:
        doc = docs.get(doc_type)
        documents.append(DocumentResponse(
            doc_type=doc_type,
            url=doc.url if doc else "",
            status=doc.status if doc else "not_submitted",
            uploaded_at=doc.uploaded_at if doc else None,
            reviewed_at=doc.reviewed_at if doc else None,
            remarks=doc.remarks if doc else None,
        ))
    return VerificationResponse(
        employer_id=employer.id,
        company_name=employer.company_name,
        verification_status=verification_service.current_status(employer),
        documents=documents,
    )


@router.get("/employers/me/verification", response_model=VerificationResponse)
async def my_verification(user: User = Depends(require_role(EMPLOYER))):
    return _verification_to_response(user)


@router.put("/employers/me/verification/{doc_type}", response_model=VerificationResponse)
async def submit_document(
    doc_type: str,
    req: DocumentSubmit,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _verification_to_response(verification_service.submit_document(db, user, doc_type, req.url))


@router.get("/admin/employers", response_model=list[VerificationResponse])
async def list_employers(
    status: str | None = None,
    admin: User = Depends(require_role(ADMIN)),
    db: Session = Depends(get_db),
):
    return [_verification_to_response(e) for e in verification_service.list_employers(db, admin, status)]


@router.put("/admin/employers/{employer_id}/verification/{doc_type}", response_model=VerificationResponse)
async def review_document(
    employer_id: str,
    doc_type: str,
    req: DocumentReview,
    admin: User = Depends(require_role(ADMIN)),
    db: Session = Depends(get_db),
):
    employer = verification_service.review_document(db, admin, employer_id, doc_type, req.status, req.remarks)
    return _verification_to_response(employer)
