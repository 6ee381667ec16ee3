"""
FastAPI dependency providers.

The pipeline endpoints depend on an application store and a transition
service; tests override get_application_store to swap in an in-memory store.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_pipeline.clients.remote_store import RemoteApplicationStore
from recruitment_pipeline.core.config import settings
from recruitment_pipeline.db.session import get_db
from recruitment_pipeline.services.application_store import ApplicationStore
from recruitment_pipeline.services.job_application_service import JobApplicationService
from recruitment_pipeline.services.transition_service import TransitionService


async def get_application_store(db: AsyncSession = Depends(get_db)) -> ApplicationStore:
    """Return the configured persistence collaborator."""
    if settings.PIPELINE_STORE_BACKEND == "remote":
        return RemoteApplicationStore()
    return JobApplicationService(db)


async def get_transition_service(
    store: ApplicationStore = Depends(get_application_store),
) -> TransitionService:
    return TransitionService(store)
