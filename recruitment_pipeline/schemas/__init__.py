"""
Schemas package.

Pydantic models for API request/response validation.
"""

from recruitment_pipeline.schemas.job_application import ApplicationRecord, JobApplicationCreate, StatusChange
from recruitment_pipeline.schemas.pipeline import (
    AdvanceRequest,
    PipelineRead,
    RejectRequest,
    StageBucketRead,
    StageCountsRead,
    StageRead,
    TransitionRead,
)

__all__ = [
    "ApplicationRecord",
    "JobApplicationCreate",
    "StatusChange",
    "AdvanceRequest",
    "PipelineRead",
    "RejectRequest",
    "StageBucketRead",
    "StageCountsRead",
    "StageRead",
    "TransitionRead",
]
