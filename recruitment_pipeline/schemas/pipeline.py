"""
Pipeline Pydantic schemas (API responses and transition requests).
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from recruitment_pipeline.core.stages import StageTier
from recruitment_pipeline.schemas.job_application import ApplicationRecord


class StageRead(BaseModel):
    """Registry entry for one pipeline stage."""
    
    stage: str
    label: str
    display_order: int
    tier: StageTier


class StageBucketRead(StageRead):
    """A stage with its candidates."""
    
    count: int
    applications: List[ApplicationRecord]


class PipelineRead(BaseModel):
    """Aggregated pipeline for a dashboard."""
    
    company: Optional[str] = None
    stages: List[StageBucketRead]
    counts: Dict[str, int]
    total: int
    excluded_count: int
    unmapped_count: int
    unmapped: List[ApplicationRecord]


class StageCountsRead(BaseModel):
    """Badge numbers only."""
    
    company: Optional[str] = None
    counts: Dict[str, int]
    total: int
    unmapped_count: int


class AdvanceRequest(BaseModel):
    """Request to advance a candidate to the selected status."""
    
    actor: Optional[str] = None


class RejectRequest(BaseModel):
    """Request to reject a candidate."""
    
    reason: Optional[str] = None
    actor: Optional[str] = None


class TransitionRead(BaseModel):
    """Result of a successful transition.
    
    stale=True tells the caller its pipeline view is out of date and should
    be re-fetched.
    """
    
    application_id: str
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    stale: bool
