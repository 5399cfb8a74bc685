import pytest
from conftest import publishable_job

from app.models.job import Job
from app.models.notification import Notification
from app.services.application_service import can_transition


class TestTransitions:
    @pytest.mark.parametrize("old,new", [
        ("pending", "shortlisted"),
        ("pending", "accepted"),
        ("pending", "rejected"),
        ("shortlisted", "accepted"),
        ("shortlisted", "rejected"),
        ("pending", "pending"),
        ("shortlisted", "shortlisted"),
    ])
    def test_allowed(self, old, new):
        assert can_transition(old, new)

    @pytest.mark.parametrize("old,new", [
        ("shortlisted", "pending"),
        ("accepted", "rejected"),
        ("accepted", "pending"),
        ("accepted", "accepted"),
        ("rejected", "accepted"),
        ("rejected", "shortlisted"),
    ])
    def test_rejected(self, old, new):
        assert not can_transition(old, new)


class TestApplications:
    def _auth(self, user_id):
        return {"X-User-Id": user_id}

    def _post_job(self, client, employer_id, **overrides):
        r = client.post("/api/v1/jobs", json=publishable_job(**overrides), headers=self._auth(employer_id))
        return r.json()["id"]

    def _apply(self, client, jobseeker_id, job_id):
        return client.post(
            f"/api/v1/jobs/{job_id}/applications",
            json={"cover_letter": "I would love to join."},
            headers=self._auth(jobseeker_id),
        )

    def test_apply(self, client, make_employer, make_jobseeker, db):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        job_id = self._post_job(client, employer_id)

        r = self._apply(client, jobseeker_id, job_id)
        assert r.status_code == 201
        data = r.json()
        assert data["status"] == "pending"
        assert data["employer_id"] == employer_id
        assert data["job_title"] == "Graduate Frontend Developer"

        assert db.query(Job).filter(Job.id == job_id).one().application_count == 1

    def test_duplicate_application_conflicts(self, client, make_employer, make_jobseeker, db):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        job_id = self._post_job(client, employer_id)

        assert self._apply(client, jobseeker_id, job_id).status_code == 201
        r = self._apply(client, jobseeker_id, job_id)
        assert r.status_code == 409
        assert r.json()["code"] == "CONFLICT"
        assert r.json()["detail"] == "You have already applied for this job"
        assert db.query(Job).filter(Job.id == job_id).one().application_count == 1

    def test_resume_required(self, client, make_employer, make_jobseeker):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker(resume_url=None)
        job_id = self._post_job(client, employer_id)
        r = self._apply(client, jobseeker_id, job_id)
        assert r.status_code == 400
        assert r.json()["detail"] == "Please upload your resume before applying"

    def test_closed_job(self, client, make_employer, make_jobseeker):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        job_id = self._post_job(client, employer_id)
        client.patch(f"/api/v1/jobs/{job_id}/active", json={"is_active": False}, headers=self._auth(employer_id))
        r = self._apply(client, jobseeker_id, job_id)
        assert r.status_code == 409
        assert r.json()["detail"] == "This job is no longer accepting applications"

    def test_deadline_passed(self, client, make_employer, make_jobseeker, db):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        job_id = self._post_job(client, employer_id)
        db.query(Job).filter(Job.id == job_id).update({Job.application_deadline: "2020-01-01"})
        db.commit()

        r = self._apply(client, jobseeker_id, job_id)
        assert r.status_code == 409
        assert r.json()["detail"] == "Application deadline has passed"

    def test_employer_cannot_apply(self, client, make_employer):
        employer_id = make_employer()
        job_id = self._post_job(client, employer_id)
        r = self._apply(client, employer_id, job_id)
        assert r.status_code == 403

    def test_check_and_lists(self, client, make_employer, make_jobseeker):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        job_id = self._post_job(client, employer_id)

        r = client.get(f"/api/v1/jobs/{job_id}/applications/check", headers=self._auth(jobseeker_id))
        assert r.json()["has_applied"] is False

        self._apply(client, jobseeker_id, job_id)
        r = client.get(f"/api/v1/jobs/{job_id}/applications/check", headers=self._auth(jobseeker_id))
        assert r.json()["has_applied"] is True

        assert len(client.get("/api/v1/applications/mine", headers=self._auth(jobseeker_id)).json()) == 1
        assert len(client.get("/api/v1/applications/received", headers=self._auth(employer_id)).json()) == 1
        assert len(client.get(
            "/api/v1/applications/received?status=accepted", headers=self._auth(employer_id)
        ).json()) == 0
        assert len(client.get(f"/api/v1/jobs/{job_id}/applications", headers=self._auth(employer_id)).json()) == 1

    def test_application_visible_only_to_parties(self, client, make_employer, make_jobseeker):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        stranger_id = make_jobseeker()
        job_id = self._post_job(client, employer_id)
        application_id = self._apply(client, jobseeker_id, job_id).json()["id"]

        assert client.get(f"/api/v1/applications/{application_id}", headers=self._auth(employer_id)).status_code == 200
        assert client.get(f"/api/v1/applications/{application_id}", headers=self._auth(stranger_id)).status_code == 403


class TestStatusUpdates:
    def _auth(self, user_id):
        return {"X-User-Id": user_id}

    @pytest.fixture
    def application(self, client, make_employer, make_jobseeker):
        employer_id = make_employer()
        jobseeker_id = make_jobseeker()
        job_id = client.post("/api/v1/jobs", json=publishable_job(), headers=self._auth(employer_id)).json()["id"]
        r = client.post(f"/api/v1/jobs/{job_id}/applications", json={}, headers=self._auth(jobseeker_id))
        return {"id": r.json()["id"], "employer_id": employer_id, "jobseeker_id": jobseeker_id}

    def _set_status(self, client, application, status, **extra):
        return client.put(
            f"/api/v1/applications/{application['id']}/status",
            json={"status": status, **extra},
            headers=self._auth(application["employer_id"]),
        )

    def test_shortlist_then_accept(self, client, application):
        r = self._set_status(client, application, "shortlisted", notes="Strong portfolio")
        assert r.status_code == 200
        assert r.json()["status"] == "shortlisted"
        assert r.json()["notes"] == "Strong portfolio"
        assert r.json()["reviewed_at"] is not None

        r = self._set_status(client, application, "accepted")
        assert r.status_code == 200
        assert r.json()["status"] == "accepted"

    def test_terminal_status_is_final(self, client, application):
        self._set_status(client, application, "accepted")
        r = self._set_status(client, application, "rejected")
        assert r.status_code == 409
        assert r.json()["code"] == "INVALID_STATE"

    def test_no_return_to_pending(self, client, application):
        self._set_status(client, application, "shortlisted")
        r = self._set_status(client, application, "pending")
        assert r.status_code == 409

    def test_unknown_status(self, client, application):
        r = self._set_status(client, application, "hired")
        assert r.status_code == 400

    def test_jobseeker_cannot_review(self, client, application):
        r = client.put(
            f"/api/v1/applications/{application['id']}/status",
            json={"status": "accepted"},
            headers=self._auth(application["jobseeker_id"]),
        )
        assert r.status_code == 403

    def test_other_employer_cannot_review(self, client, application, make_employer):
        other_id = make_employer()
        r = client.put(
            f"/api/v1/applications/{application['id']}/status",
            json={"status": "accepted"},
            headers=self._auth(other_id),
        )
        assert r.status_code == 403

    def test_status_change_notifies_jobseeker(self, client, application, db):
        self._set_status(client, application, "shortlisted")
        notifications = db.query(Notification).filter(
            Notification.user_id == application["jobseeker_id"],
            Notification.type == "application_update",
        ).all()
        assert len(notifications) == 1
        n = notifications[0]
        assert n.message == 'Your application has been shortlisted! for "Graduate Frontend Developer" at Acme Ltd.'
        assert n.related_model == "Application"
        assert n.related_id == application["id"]
        assert n.metadata_["old_status"] == "pending"
        assert n.metadata_["new_status"] == "shortlisted"

    def test_restating_status_does_not_notify(self, client, application, db):
        self._set_status(client, application, "shortlisted")
        r = self._set_status(client, application, "shortlisted")
        assert r.status_code == 200
        count = db.query(Notification).filter(Notification.type == "application_update").count()
        assert count == 1

    def test_pending_to_pending_does_not_notify(self, client, application, db):
        r = self._set_status(client, application, "pending")
        assert r.status_code == 200
        assert r.json()["reviewed_at"] is not None
        assert db.query(Notification).filter(Notification.type == "application_update").count() == 0
