# app/models/user.py
from datetime import datetime
from typing import Annotated, List, Optional, Union
from pydantic import EmailStr, Field, StringConstraints, field_validator

from app.models.base import ApiModel

# passwords are kept verbatim, surrounding whitespace included
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=6)]
RawPassword = Annotated[str, StringConstraints(strip_whitespace=False)]


class RegisterIn(ApiModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: Password

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class LoginIn(ApiModel):
    email: EmailStr
    password: RawPassword

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class ForgotPasswordIn(ApiModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class ResetPasswordIn(ApiModel):
    password: Password


class SocialLinks(ApiModel):
    linkedin: str = ""
    github: str = ""
    twitter: str = ""
    website: str = ""


class ProfileUpdate(ApiModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[Union[List[str], str]] = None
    location: Optional[str] = None
    title: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    email: Optional[EmailStr] = None
    social_links: Optional[SocialLinks] = None

    @field_validator("skills")
    @classmethod
    def _split_skills(cls, v):
        # accepts ["a", "b"] or "a, b"
        if v is None:
            return v
        items = v.split(",") if isinstance(v, str) else v
        return [s.strip() for s in map(str, items) if s.strip()]

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v):
        return v.lower() if v else v


class ExperienceIn(ApiModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: Optional[str] = None
    from_date: Optional[datetime] = Field(None, alias="from")
    to: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


class EducationIn(ApiModel):
    school: str = Field(..., min_length=1)
    degree: str = Field(..., min_length=1)
    field_of_study: Optional[str] = None
    from_date: Optional[datetime] = Field(None, alias="from")
    to: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None
