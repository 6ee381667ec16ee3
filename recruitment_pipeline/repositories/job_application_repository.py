"""
JobApplication repository - database operations for JobApplication.
"""

from typing import List, Optional
from uuid import UUID
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from recruitment_pipeline.models.job_application import JobApplication
from recruitment_pipeline.models.pipeline_status_change import PipelineStatusChange
from recruitment_pipeline.schemas.job_application import JobApplicationCreate


class JobApplicationRepository:
    """Repository for JobApplication database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list(
        self,
        company: Optional[str] = None,
    ) -> List[JobApplication]:
        """List applications, oldest first, optionally for one company."""
        query = select(JobApplication)
        
        if company is not None:
            query = query.where(func.lower(JobApplication.company) == company.lower())
        
        query = query.order_by(JobApplication.applied_on.asc(), JobApplication.id.asc())
        
        result = await self.db.execute(query)
        return list(result.scalars().all())
    
    async def get_by_id(self, application_id: UUID) -> Optional[JobApplication]:
        """Get an application by ID."""
        result = await self.db.execute(
            select(JobApplication).where(JobApplication.id == application_id)
        )
        return result.scalar_one_or_none()
    
    async def create(self, data: JobApplicationCreate) -> JobApplication:
        """Create a new application."""
        application = JobApplication(
            id=uuid.uuid4(),
            **data.model_dump(exclude_none=True)
        )
        self.db.add(application)
        await self.db.flush()
        await self.db.refresh(application)
        return application
    
    async def compare_and_set_status(
        self,
        application_id: UUID,
        expected_status: Optional[str],
        new_status: str,
    ) -> Optional[JobApplication]:
        """
        Set the raw status only if it still equals expected_status.
        
        Returns the updated application, or None if no row matched.
        """
        result = await self.db.execute(
            update(JobApplication)
            .where(
                JobApplication.id == application_id,
                JobApplication.raw_status == expected_status,
            )
            .values(raw_status=new_status, updated_at=func.now())
            .returning(JobApplication)
            .execution_options(synchronize_session="fetch")
        )
        return result.scalar_one_or_none()
    
    async def add_status_change(
        self,
        application_id: UUID,
        previous_status: Optional[str],
        new_status: str,
        action: str,
        reason: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> PipelineStatusChange:
        """Record a status transition."""
        change = PipelineStatusChange(
            id=uuid.uuid4(),
            application_id=application_id,
            previous_status=previous_status,
            new_status=new_status,
            action=action,
            reason=reason,
            actor=actor,
        )
        self.db.add(change)
        await self.db.flush()
        await self.db.refresh(change)
        return change
    
    async def list_status_changes(self, application_id: UUID) -> List[PipelineStatusChange]:
        """Get the transition history for an application, oldest first."""
        result = await self.db.execute(
            select(PipelineStatusChange)
            .where(PipelineStatusChange.application_id == application_id)
            .order_by(PipelineStatusChange.created_at.asc())
        )
        return list(result.scalars().all())
