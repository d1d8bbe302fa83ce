# app/models/job.py
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.base import ApiModel


class JobType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"
    REMOTE = "Remote"


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    REVIEWING = "reviewing"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class SalaryPeriod(str, Enum):
    HOURLY = "hourly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class JobSort(str, Enum):
    LATEST = "latest"
    SALARY = "salary"


class Salary(ApiModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"
    period: SalaryPeriod = SalaryPeriod.YEARLY
    is_visible: bool = True


class JobCreate(ApiModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    type: JobType
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    salary: Salary = Field(default_factory=Salary)
    skills: List[str] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    application_link: Optional[str] = None
    application_deadline: Optional[datetime] = None
    company_logo: Optional[str] = None


class JobUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    type: Optional[JobType] = None
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = Field(None, min_length=1)
    salary: Optional[Salary] = None
    skills: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    application_link: Optional[str] = None
    application_deadline: Optional[datetime] = None
    company_logo: Optional[str] = None
    is_active: Optional[bool] = None


class ApplyIn(ApiModel):
    resume: Optional[str] = None
    cover_letter: Optional[str] = None


class StatusUpdate(ApiModel):
    status: ApplicationStatus


class SavedListingIn(BaseModel):
    # externally sourced listing; any extra fields are kept as-is
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    application_url: str = Field(..., min_length=1)
    title: Optional[str] = None
