from itertools import product

import pytest
from hypothesis import given, strategies as st

from app.models.user import ADMIN, EMPLOYER
from app.services.verification_service import DOC_TYPES, derive_overall_status

DOC_OUTCOMES = ["not_submitted", "submitted", "pending", "approved", "rejected"]


def _expected(statuses):
    if all(s == "approved" for s in statuses):
        return "verified"
    if "rejected" in statuses:
        return "rejected"
    if "pending" in statuses or "submitted" in statuses:
        return "pending"
    return "unverified"


class TestDeriveOverallStatus:
    @pytest.mark.parametrize("statuses", list(product(DOC_OUTCOMES, repeat=3)))
    def test_every_combination(self, statuses):
        docs = dict(zip(DOC_TYPES, statuses))
        assert derive_overall_status(docs) == _expected(statuses)

    def test_examples(self):
        assert derive_overall_status({
            "registration": "approved", "government_id": "approved", "address_proof": "approved",
        }) == "verified"
        assert derive_overall_status({
            "registration": "approved", "government_id": "rejected", "address_proof": "pending",
        }) == "rejected"
        assert derive_overall_status({
            "registration": "approved", "government_id": "pending", "address_proof": "not_submitted",
        }) == "pending"
        assert derive_overall_status({}) == "unverified"

    @given(st.dictionaries(st.sampled_from(DOC_TYPES), st.sampled_from(DOC_OUTCOMES)))
    def test_missing_slot_counts_as_not_submitted(self, docs):
        filled = {doc_type: docs.get(doc_type, "not_submitted") for doc_type in DOC_TYPES}
        assert derive_overall_status(docs) == derive_overall_status(filled)

    @given(st.dictionaries(st.sampled_from(DOC_TYPES), st.sampled_from(DOC_OUTCOMES)))
    def test_verified_only_when_all_three_approved(self, docs):
        all_approved = all(docs.get(d) == "approved" for d in DOC_TYPES)
        assert (derive_overall_status(docs) == "verified") == all_approved


class TestVerificationWorkflow:
    def _auth(self, user_id):
        return {"X-User-Id": user_id}

    def test_new_employer_is_unverified(self, client, make_employer):
        employer_id = make_employer(verified=False)
        r = client.get("/api/v1/employers/me/verification", headers=self._auth(employer_id))
        assert r.status_code == 200
        data = r.json()
        assert data["verification_status"] == "unverified"
        assert [d["status"] for d in data["documents"]] == ["not_submitted"] * 3

    def test_submit_then_review_all(self, client, make_employer, make_user):
        employer_id = make_employer(verified=False)
        admin_id = make_user(ADMIN)

        for doc_type in DOC_TYPES:
            r = client.put(
                f"/api/v1/employers/me/verification/{doc_type}",
                json={"url": f"https://files.example.com/{doc_type}.pdf"},
                headers=self._auth(employer_id),
            )
            assert r.status_code == 200
        assert r.json()["verification_status"] == "pending"

        r = client.get("/api/v1/admin/employers?status=pending", headers=self._auth(admin_id))
        assert [e["employer_id"] for e in r.json()] == [employer_id]

        for doc_type in DOC_TYPES:
            r = client.put(
                f"/api/v1/admin/employers/{employer_id}/verification/{doc_type}",
                json={"status": "approved"},
                headers=self._auth(admin_id),
            )
            assert r.status_code == 200
        assert r.json()["verification_status"] == "verified"

    def test_single_rejection_rejects_employer(self, client, make_employer, make_user):
        employer_id = make_employer()
        admin_id = make_user(ADMIN)
        r = client.put(
            f"/api/v1/admin/employers/{employer_id}/verification/government_id",
            json={"status": "rejected", "remarks": "Document expired"},
            headers=self._auth(admin_id),
        )
        assert r.status_code == 200
        data = r.json()
        assert data["verification_status"] == "rejected"
        gov = next(d for d in data["documents"] if d["doc_type"] == "government_id")
        assert gov["remarks"] == "Document expired"

    def test_resubmission_returns_to_pending(self, client, make_employer):
        employer_id = make_employer()
        r = client.put(
            "/api/v1/employers/me/verification/address_proof",
            json={"url": "https://files.example.com/new-proof.pdf"},
            headers=self._auth(employer_id),
        )
        assert r.json()["verification_status"] == "pending"

    def test_only_admin_reviews(self, client, make_employer):
        employer_id = make_employer(verified=False)
        r = client.put(
            f"/api/v1/admin/employers/{employer_id}/verification/registration",
            json={"status": "approved"},
            headers=self._auth(employer_id),
        )
        assert r.status_code == 403
        assert r.json()["code"] == "FORBIDDEN"

    def test_invalid_doc_type(self, client, make_employer):
        employer_id = make_employer(verified=False)
        r = client.put(
            "/api/v1/employers/me/verification/passport",
            json={"url": "https://files.example.com/p.pdf"},
            headers=self._auth(employer_id),
        )
        assert r.status_code == 400
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_jobseeker_cannot_submit(self, client, make_user):
        jobseeker_id = make_user()
        r = client.put(
            "/api/v1/employers/me/verification/registration",
            json={"url": "https://files.example.com/r.pdf"},
            headers=self._auth(jobseeker_id),
        )
        assert r.status_code == 403

    def test_unknown_user_is_401(self, client):
        r = client.get("/api/v1/employers/me/verification", headers=self._auth("nobody"))
        assert r.status_code == 401

    def test_missing_identity_header(self, client):
        r = client.get("/api/v1/employers/me/verification")
        assert r.status_code == 422

    def test_inactive_user_is_401(self, client, make_user):
        employer_id = make_user(EMPLOYER, is_active=False)
        r = client.get("/api/v1/employers/me/verification", headers=self._auth(employer_id))
        assert r.status_code == 401
