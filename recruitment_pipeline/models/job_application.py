"""
JobApplication model.

Represents one candidate's engagement with one job requirement.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from recruitment_pipeline.models.base_model import BaseModel


class JobApplication(BaseModel):
    """
    Job application table - one row per candidate per requirement.
    
    The raw status is whatever the recruiter or upstream system wrote; the
    pipeline stage is derived from it at read time, never stored.
    """
    
    __tablename__ = "job_application"
    
    candidate_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    candidate_email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    # Client company the requirement belongs to
    company: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    role_applied: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    experience: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    
    # Free-form status, e.g. "In Process", "Interview Scheduled", "Joined"
    raw_status: Mapped[str] = mapped_column(
        "status",
        Text,
        nullable=False,
        default="In Process",
        server_default="In Process",
    )
    
    # job_board, recruiter_tagged, inbound
    source: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="job_board",
        server_default="job_board",
    )
    
    applied_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
