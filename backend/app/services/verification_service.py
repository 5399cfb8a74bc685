"""
Employer verification: three independently reviewed documents rolled up into
one employer-wide status. ``derive_overall_status`` is the only place that
rollup is computed.
"""
import logging
from collections.abc import Mapping

from sqlalchemy.orm import Session

from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.models.user import ADMIN, EMPLOYER, User
from app.models.verification import VerificationDocument
from app.utils.timestamps import now_timestamp

logger = logging.getLogger("app.verification")

DOC_TYPES = ("registration", "government_id", "address_proof")
DOC_STATUSES = {"not_submitted", "submitted", "pending", "approved", "rejected"}
REVIEW_STATUSES = {"approved", "rejected", "pending"}
OVERALL_STATUSES = {"unverified", "pending", "verified", "rejected"}


def derive_overall_status(docs: Mapping[str, str]) -> str:
    """Roll the three document outcomes up into one status.

    ``docs`` maps doc type to outcome; a missing slot counts as not_submitted.
    """
    statuses = [docs.get(doc_type) or "not_submitted" for doc_type in DOC_TYPES]
    if all(s == "approved" for s in statuses):
        return "verified"
    if any(s == "rejected" for s in statuses):
        return "rejected"
    if any(s in ("pending", "submitted") for s in statuses):
        return "pending"
    return "unverified"


def document_statuses(employer: User) -> dict[str, str]:
    return {doc.doc_type: doc.status for doc in employer.verification_documents}


def current_status(employer: User) -> str:
    return derive_overall_status(document_statuses(employer))


def can_publish(employer: User) -> bool:
    return current_status(employer) == "verified"


def _get_slot(employer: User, doc_type: str) -> VerificationDocument:
    for doc in employer.verification_documents:
        if doc.doc_type == doc_type:
            return doc
    doc = VerificationDocument(employer_id=employer.id, doc_type=doc_type, url="", status="not_submitted")
    employer.verification_documents.append(doc)
    return doc


def _recompute(employer: User):
    employer.verification_status = current_status(employer)
    employer.updated_at = now_timestamp()


def submit_document(db: Session, actor: User, doc_type: str, url: str) -> User:
    if actor.role != EMPLOYER:
        raise AuthorizationError("Only employers can upload verification documents")
    if doc_type not in DOC_TYPES:
        raise ValidationError(f"Invalid document type. Must be one of: {', '.join(DOC_TYPES)}")
    if not url or not url.strip():
        raise ValidationError("Document URL is required")

    doc = _get_slot(actor, doc_type)
    doc.url = url.strip()
    doc.status = "pending"
    doc.uploaded_at = now_timestamp()
    doc.reviewed_at = None
    doc.remarks = None
    _recompute(actor)
    db.commit()
    db.refresh(actor)
    logger.info("Employer %s submitted %s; overall status %s", actor.id, doc_type, actor.verification_status)
    return actor


def review_document(
    db: Session,
    actor: User,
    employer_id: str,
    doc_type: str,
    status: str,
    remarks: str | None = None,
) -> User:
    if actor.role != ADMIN:
        raise AuthorizationError("Only admins can review verification documents")
    if doc_type not in DOC_TYPES:
        raise ValidationError(f"Invalid document type. Must be one of: {', '.join(DOC_TYPES)}")
    if status not in REVIEW_STATUSES:
        raise ValidationError(f"Invalid review status. Must be one of: {', '.join(sorted(REVIEW_STATUSES))}")

    employer = db.query(User).filter(User.id == employer_id).first()
    if not employer or employer.role != EMPLOYER:
        raise NotFoundError("Employer not found")

    doc = _get_slot(employer, doc_type)
    doc.status = status
    doc.reviewed_at = now_timestamp()
    doc.remarks = remarks
    _recompute(employer)
    db.commit()
    db.refresh(employer)
    logger.info(
        "Admin %s marked %s of employer %s as %s; overall status %s",
        actor.id, doc_type, employer.id, status, employer.verification_status,
    )
    return employer


def list_employers(db: Session, actor: User, status: str | None = None) -> list[User]:
    if actor.role != ADMIN:
        raise AuthorizationError("Only admins can list employers for verification")
    query = db.query(User).filter(User.role == EMPLOYER)
    if status:
        if status not in OVERALL_STATUSES:
            raise ValidationError(f"Invalid status filter. Must be one of: {', '.join(sorted(OVERALL_STATUSES))}")
        query = query.filter(User.verification_status == status)
    return query.order_by(User.created_at.desc()).all()
