from typing import Literal

from pydantic import BaseModel, Field

JobType = Literal["Full-time", "Part-time", "Contract", "Internship", "Remote", "Hybrid"]
WorkMode = Literal["On-site", "Remote", "Hybrid"]
SalaryType = Literal["Monthly", "Yearly", "Hourly", "Project-based"]


class JobCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    requirements: str | None = None
    job_type: JobType | None = None
    category: str | None = None
    work_mode: WorkMode | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    salary_type: SalaryType | None = None
    application_deadline: str | None = None
    vacancies: int | None = Field(default=None, ge=1)
    skills_required: list[str] | str | None = None
    experience_level: str | None = None
    status: str | None = None  # "draft" or "published"; defaults to published


class JobUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    requirements: str | None = None
    job_type: JobType | None = None
    category: str | None = None
    location: str | None = None
    work_mode: WorkMode | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    salary_type: SalaryType | None = None
    application_deadline: str | None = None
    vacancies: int | None = Field(default=None, ge=1)
    skills_required: list[str] | str | None = None
    experience_level: str | None = None
    status: str | None = None
    is_active: bool | None = None


class JobActiveUpdate(BaseModel):
    is_active: bool


class JobResponse(BaseModel):
    id: str
    employer_id: str
    title: str | None
    description: str | None
    requirements: str | None
    job_type: str | None
    category: str | None
    location: str | None
    work_mode: str | None
    salary_min: int | None
    salary_max: int | None
    salary_type: str
    application_deadline: str | None
    vacancies: int | None
    skills_required: list[str]
    experience_level: str
    company_name: str
    company_logo: str
    status: str
    is_published: bool
    is_active: bool
    application_count: int
    created_at: str
    updated_at: str


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    total: int
