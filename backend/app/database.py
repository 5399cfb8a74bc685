import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """Session factory for work that outlives the request session (notification worker)."""
    return SessionLocal


SCHEMA_SQL = """\
-- ============================================================
-- USERS (profile/identity store, written by the profile service)
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id                  TEXT PRIMARY KEY,
    email               TEXT NOT NULL UNIQUE,
    full_name           TEXT NOT NULL,
    role                TEXT NOT NULL CHECK(role IN ('jobseeker','employer','admin')),
    is_active           INTEGER NOT NULL DEFAULT 1,
    skills              TEXT NOT NULL DEFAULT '[]',
    resume_url          TEXT,
    company_name        TEXT,
    company_logo        TEXT,
    company_address     TEXT,
    industry            TEXT,
    verification_status TEXT NOT NULL DEFAULT 'unverified'
                        CHECK(verification_status IN ('unverified','pending','verified','rejected')),
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_users_role_active ON users(role, is_active);

-- ============================================================
-- EMPLOYER VERIFICATION DOCUMENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS verification_documents (
    employer_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    doc_type    TEXT NOT NULL CHECK(doc_type IN ('registration','government_id','address_proof')),
    url         TEXT NOT NULL DEFAULT '',
    status      TEXT NOT NULL DEFAULT 'not_submitted'
                CHECK(status IN ('not_submitted','submitted','pending','approved','rejected')),
    uploaded_at TEXT,
    reviewed_at TEXT,
    remarks     TEXT,
    PRIMARY KEY (employer_id, doc_type)
);

-- ============================================================
-- JOBS
-- ============================================================
CREATE TABLE IF NOT EXISTS jobs (
    id                   TEXT PRIMARY KEY,
    employer_id          TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title                TEXT,
    description          TEXT,
    requirements         TEXT,
    job_type             TEXT CHECK(job_type IN ('Full-time','Part-time','Contract',
                                                 'Internship','Remote','Hybrid')),
    category             TEXT,
    location             TEXT,
    work_mode            TEXT CHECK(work_mode IN ('On-site','Remote','Hybrid')),
    salary_min           INTEGER CHECK(salary_min >= 0),
    salary_max           INTEGER CHECK(salary_max >= 0),
    salary_type          TEXT NOT NULL DEFAULT 'Monthly'
                         CHECK(salary_type IN ('Monthly','Yearly','Hourly','Project-based')),
    application_deadline TEXT,
    vacancies            INTEGER CHECK(vacancies >= 1),
    skills_required      TEXT NOT NULL DEFAULT '[]',
    experience_level     TEXT NOT NULL DEFAULT 'Entry Level'
                         CHECK(experience_level IN ('Internship','Entry Level','Junior')),
    company_name         TEXT NOT NULL,
    company_logo         TEXT NOT NULL DEFAULT '',
    status               TEXT NOT NULL DEFAULT 'draft' CHECK(status IN ('draft','published')),
    is_published         INTEGER NOT NULL DEFAULT 0,
    is_active            INTEGER NOT NULL DEFAULT 0,
    application_count    INTEGER NOT NULL DEFAULT 0,
    created_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_jobs_employer ON jobs(employer_id, created_at);
CREATE INDEX IF NOT EXISTS idx_jobs_listing ON jobs(is_active, is_published);

-- ============================================================
-- APPLICATIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS applications (
    id           TEXT PRIMARY KEY,
    job_id       TEXT REFERENCES jobs(id) ON DELETE SET NULL,
    jobseeker_id TEXT NOT NULL REFERENCES users(id),
    employer_id  TEXT NOT NULL REFERENCES users(id),
    status       TEXT NOT NULL DEFAULT 'pending'
                 CHECK(status IN ('pending','shortlisted','accepted','rejected')),
    cover_letter TEXT NOT NULL DEFAULT '',
    notes        TEXT,
    applied_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    reviewed_at  TEXT
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_applications_job_jobseeker
    ON applications(job_id, jobseeker_id);
CREATE INDEX IF NOT EXISTS idx_applications_employer ON applications(employer_id, status);
CREATE INDEX IF NOT EXISTS idx_applications_jobseeker ON applications(jobseeker_id, status);

-- ============================================================
-- MESSAGES
-- ============================================================
CREATE TABLE IF NOT EXISTS messages (
    id                 TEXT PRIMARY KEY,
    conversation_id    TEXT NOT NULL,
    sender_id          TEXT NOT NULL REFERENCES users(id),
    receiver_id        TEXT NOT NULL REFERENCES users(id),
    content            TEXT NOT NULL,
    message_type       TEXT NOT NULL DEFAULT 'text'
                       CHECK(message_type IN ('text','interview','followup',
                                              'instruction','notification','file')),
    interview_date     TEXT,
    interview_time     TEXT,
    interview_location TEXT,
    meeting_link       TEXT,
    interview_notes    TEXT,
    file_url           TEXT,
    file_name          TEXT,
    job_id             TEXT REFERENCES jobs(id) ON DELETE SET NULL,
    application_id     TEXT REFERENCES applications(id),
    is_read            INTEGER NOT NULL DEFAULT 0,
    read_at            TEXT,
    created_at         TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id, created_at);
CREATE INDEX IF NOT EXISTS idx_messages_receiver_unread ON messages(receiver_id, is_read);

-- ============================================================
-- NOTIFICATIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS notifications (
    id            TEXT PRIMARY KEY,
    user_id       TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    type          TEXT NOT NULL
                  CHECK(type IN ('job_match','application_update','new_message',
                                 'interview','system')),
    title         TEXT NOT NULL,
    message       TEXT NOT NULL,
    related_model TEXT CHECK(related_model IN ('Job','Application','Message','User')),
    related_id    TEXT,
    actor_id      TEXT,
    link          TEXT,
    is_read       INTEGER NOT NULL DEFAULT 0,
    is_archived   INTEGER NOT NULL DEFAULT 0,
    metadata      TEXT NOT NULL DEFAULT '{}',
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, is_read, created_at);
CREATE INDEX IF NOT EXISTS idx_notifications_dedup ON notifications(user_id, type, related_id, created_at);
CREATE INDEX IF NOT EXISTS idx_notifications_actor ON notifications(user_id, type, actor_id, created_at);
"""


MIGRATIONS: list[str] = []


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    # Run migrations idempotently (ALTER TABLE fails if the column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # already applied
    conn.close()
