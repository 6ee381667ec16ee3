"""
PipelineStatusChange model.

Audit trail of status transitions made through the pipeline endpoints.
"""

import uuid
from typing import Optional

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_pipeline.models.base_model import BaseModel


class PipelineStatusChange(BaseModel):
    """One row per successful advance/reject."""
    
    __tablename__ = "pipeline_status_change"
    
    application_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job_application.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    previous_status: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    new_status: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    
    # advance, reject
    action: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    
    # Rejection reason, free text
    reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    actor: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
