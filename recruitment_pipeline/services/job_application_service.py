"""
Job application business logic service.

Database-backed implementation of the pipeline's application store.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_pipeline.repositories.job_application_repository import JobApplicationRepository
from recruitment_pipeline.schemas.job_application import (
    ApplicationRecord,
    JobApplicationCreate,
    StatusChange,
)
from recruitment_pipeline.services.application_store import UpstreamStoreError


def _parse_id(application_id: str) -> Optional[UUID]:
    try:
        return UUID(str(application_id))
    except ValueError:
        return None


class JobApplicationService:
    """Service for job application reads and status writes."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = JobApplicationRepository(db)
    
    async def create_application(self, data: JobApplicationCreate) -> ApplicationRecord:
        """Create a new application."""
        application = await self.repository.create(data)
        return ApplicationRecord.model_validate(application)
    
    async def fetch_applications(self, company: Optional[str] = None) -> List[ApplicationRecord]:
        """List applications as pipeline records."""
        try:
            applications = await self.repository.list(company=company)
        except SQLAlchemyError as exc:
            raise UpstreamStoreError("Failed to load applications", {"error": str(exc)}) from exc
        return [ApplicationRecord.model_validate(application) for application in applications]
    
    async def get_application(self, application_id: str) -> Optional[ApplicationRecord]:
        """Get an application by ID."""
        parsed = _parse_id(application_id)
        if parsed is None:
            return None
        try:
            application = await self.repository.get_by_id(parsed)
        except SQLAlchemyError as exc:
            raise UpstreamStoreError("Failed to load application", {"error": str(exc)}) from exc
        if application is None:
            return None
        return ApplicationRecord.model_validate(application)
    
    async def update_status(
        self,
        application_id: str,
        new_status: str,
        *,
        expected_status: Optional[str],
        action: str,
        reason: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> Optional[ApplicationRecord]:
        """
        Compare-and-swap the raw status and write the audit row.
        
        Both writes are committed together before returning, so a returned
        record is what the database now holds.
        """
        parsed = _parse_id(application_id)
        if parsed is None:
            return None
        try:
            application = await self.repository.compare_and_set_status(parsed, expected_status, new_status)
            if application is None:
                await self.db.rollback()
                return None
            await self.repository.add_status_change(
                parsed,
                previous_status=expected_status,
                new_status=new_status,
                action=action,
                reason=reason,
                actor=actor,
            )
            record = ApplicationRecord.model_validate(application)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise UpstreamStoreError("Failed to update application status", {"error": str(exc)}) from exc
        return record
    
    async def status_history(self, application_id: str) -> List[StatusChange]:
        """Get the recorded transitions for an application."""
        parsed = _parse_id(application_id)
        if parsed is None:
            return []
        try:
            changes = await self.repository.list_status_changes(parsed)
        except SQLAlchemyError as exc:
            raise UpstreamStoreError("Failed to load status history", {"error": str(exc)}) from exc
        return [StatusChange.model_validate(change) for change in changes]
