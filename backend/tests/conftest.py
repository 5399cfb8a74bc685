import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.database import get_db, get_engine, get_session_factory, init_db
from app.main import app
from app.models.user import EMPLOYER, JOBSEEKER, User
from app.models.verification import VerificationDocument
from app.services.verification_service import DOC_TYPES
from app.utils.timestamps import now_timestamp


@pytest.fixture
def tmp_data_dir(tmp_path):
    data_dir = tmp_path / "JobBoard"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def test_db(tmp_data_dir):
    db_path = tmp_data_dir / "jobboard.sqlite"
    init_db(db_path)
    engine = get_engine(db_path)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestSession
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def client(test_db):
    return TestClient(app)


@pytest.fixture
def make_user(test_db):
    """Insert a profile row the way the profile service would. Returns the user id."""
    def _make(role=JOBSEEKER, **fields):
        now = now_timestamp()
        user_id = fields.pop("id", None) or str(uuid.uuid4())
        fields.setdefault("email", f"{user_id}@example.com")
        fields.setdefault("full_name", "Test User")
        fields.setdefault("skills", [])
        fields.setdefault("is_active", True)
        session = test_db()
        session.add(User(id=user_id, role=role, created_at=now, updated_at=now, **fields))
        session.commit()
        session.close()
        return user_id
    return _make


@pytest.fixture
def make_jobseeker(make_user):
    def _make(skills=None, resume_url="https://files.example.com/cv.pdf", **fields):
        return make_user(JOBSEEKER, skills=skills or [], resume_url=resume_url, **fields)
    return _make


@pytest.fixture
def make_employer(make_user, test_db):
    def _make(verified=True, **fields):
        fields.setdefault("full_name", "Hiring Manager")
        fields.setdefault("company_name", "Acme Ltd")
        fields.setdefault("company_address", "Dublin")
        fields.setdefault("industry", "Software")
        employer_id = make_user(EMPLOYER, **fields)
        if verified:
            session = test_db()
            for doc_type in DOC_TYPES:
                session.add(VerificationDocument(
                    employer_id=employer_id,
                    doc_type=doc_type,
                    url=f"https://files.example.com/{doc_type}.pdf",
                    status="approved",
                    uploaded_at=now_timestamp(),
                    reviewed_at=now_timestamp(),
                ))
            session.query(User).filter(User.id == employer_id).update({User.verification_status: "verified"})
            session.commit()
            session.close()
        return employer_id
    return _make


def publishable_job(**overrides):
    data = {
        "title": "Graduate Frontend Developer",
        "description": "Build the job board UI.",
        "requirements": "A degree and some React.",
        "job_type": "Full-time",
        "work_mode": "Hybrid",
        "application_deadline": "2099-12-31",
        "vacancies": 2,
        "skills_required": ["React", "Node.js"],
        "experience_level": "Entry Level",
    }
    data.update(overrides)
    return data
