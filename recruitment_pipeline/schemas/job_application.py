"""
Job application Pydantic schemas.
"""

from typing import Any, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class ApplicationRecord(BaseModel):
    """
    One candidate's engagement with one job requirement, as the pipeline
    engine sees it.
    
    Descriptive fields are carried through untouched. Only raw_status is
    interpreted, by the status canonicalizer.
    """
    
    id: str
    candidate_name: str
    company: str
    role_applied: str
    location: Optional[str] = None
    experience: Optional[str] = None
    raw_status: Optional[str] = None
    applied_on: datetime
    
    model_config = ConfigDict(from_attributes=True, frozen=True)
    
    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        # Database ids are UUIDs, remote ids are plain strings
        if value is None:
            return value
        return str(value)


class JobApplicationCreate(BaseModel):
    """Schema for creating a job application (ingestion, seeding)."""
    
    candidate_name: str
    company: str
    role_applied: str
    candidate_email: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    raw_status: str = "In Process"
    source: str = "job_board"
    applied_on: Optional[datetime] = None


class StatusChange(BaseModel):
    """A recorded status transition."""
    
    application_id: str
    previous_status: Optional[str] = None
    new_status: str
    action: str
    reason: Optional[str] = None
    actor: Optional[str] = None
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
    
    @field_validator("application_id", mode="before")
    @classmethod
    def coerce_application_id(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value)
