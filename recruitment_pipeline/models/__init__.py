"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from recruitment_pipeline.models.job_application import JobApplication
from recruitment_pipeline.models.pipeline_status_change import PipelineStatusChange

# Export all models
__all__ = [
    "JobApplication",
    "PipelineStatusChange",
]
