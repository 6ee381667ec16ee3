"""
Persistence collaborator for the pipeline engine.

Defines the store interface the transition service and pipeline endpoints
talk to, and a process-local implementation used by tests and demos.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from recruitment_pipeline.schemas.job_application import ApplicationRecord, StatusChange


class UpstreamStoreError(Exception):
    """Raised when the backing store or its transport fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ApplicationStore(Protocol):
    """Interface for job application persistence."""

    async def fetch_applications(self, company: Optional[str] = None) -> List[ApplicationRecord]:
        """Return all applications, optionally for one company (case-insensitive)."""
        ...

    async def get_application(self, application_id: str) -> Optional[ApplicationRecord]:
        ...

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
        Set an application's raw status if it still equals expected_status.

        Returns the updated record, or None when the application does not
        exist or its status changed since it was read.
        """
        ...

    async def status_history(self, application_id: str) -> List[StatusChange]:
        ...


class InMemoryApplicationStore:
    """Dict-backed store. Status updates are atomic under an asyncio lock."""

    def __init__(self, records: Optional[List[ApplicationRecord]] = None) -> None:
        self._records: Dict[str, ApplicationRecord] = {}
        self._history: Dict[str, List[StatusChange]] = {}
        self._lock = asyncio.Lock()
        for record in records or []:
            self._records[record.id] = record

    def remove(self, application_id: str) -> None:
        self._records.pop(application_id, None)

    async def fetch_applications(self, company: Optional[str] = None) -> List[ApplicationRecord]:
        records = list(self._records.values())
        if company is not None:
            wanted = company.lower()
            records = [record for record in records if record.company.lower() == wanted]
        return records

    async def get_application(self, application_id: str) -> Optional[ApplicationRecord]:
        return self._records.get(application_id)

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
        async with self._lock:
            current = self._records.get(application_id)
            if current is None or current.raw_status != expected_status:
                return None

            updated = current.model_copy(update={"raw_status": new_status})
            self._records[application_id] = updated
            self._history.setdefault(application_id, []).append(
                StatusChange(
                    application_id=application_id,
                    previous_status=expected_status,
                    new_status=new_status,
                    action=action,
                    reason=reason,
                    actor=actor,
                    created_at=datetime.now(timezone.utc),
                )
            )
            return updated

    async def status_history(self, application_id: str) -> List[StatusChange]:
        return list(self._history.get(application_id, []))
