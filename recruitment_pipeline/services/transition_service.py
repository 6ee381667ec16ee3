"""
Pipeline transition business logic.

Moves a candidate between pipeline stages by asking the store to rewrite the
application's raw status. The service keeps no cached pipeline state: after
a successful transition it reports the caller's view as stale, and the
caller re-fetches and re-aggregates.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from recruitment_pipeline.core.config import settings
from recruitment_pipeline.services.application_store import ApplicationStore, UpstreamStoreError

logger = logging.getLogger(__name__)


InvalidationListener = Callable[[str], None]


class TransitionErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"


@dataclass
class TransitionError:
    """Why a transition did not happen."""

    kind: TransitionErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransitionResult:
    """Outcome of advance/reject. Exactly one of ok or error is meaningful."""

    application_id: str
    error: Optional[TransitionError] = None
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class TransitionService:
    """Service for advance/reject transitions."""

    ADVANCE = "advance"
    REJECT = "reject"

    def __init__(
        self,
        store: ApplicationStore,
        advance_status: Optional[str] = None,
        reject_status: Optional[str] = None,
        listeners: Optional[List[InvalidationListener]] = None,
    ):
        self.store = store
        self.advance_status = advance_status or settings.PIPELINE_ADVANCE_STATUS
        self.reject_status = reject_status or settings.PIPELINE_REJECT_STATUS
        self.listeners: List[InvalidationListener] = list(listeners or [])

    def add_listener(self, listener: InvalidationListener) -> None:
        """Register a callback invoked with the application id after each successful transition."""
        self.listeners.append(listener)

    async def advance(self, application_id: str, actor: Optional[str] = None) -> TransitionResult:
        """Move a candidate to the selected status."""
        return await self._transition(application_id, self.advance_status, self.ADVANCE, None, actor)

    async def reject(
        self,
        application_id: str,
        reason: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> TransitionResult:
        """Move a candidate to the rejected status, recording reason for audit."""
        if reason is not None:
            reason = reason.strip() or None
        return await self._transition(application_id, self.reject_status, self.REJECT, reason, actor)

    async def _transition(
        self,
        application_id: str,
        new_status: str,
        action: str,
        reason: Optional[str],
        actor: Optional[str],
    ) -> TransitionResult:
        try:
            current = await self.store.get_application(application_id)
        except UpstreamStoreError as exc:
            return self._upstream_failure(application_id, action, exc)

        if current is None:
            logger.warning("Cannot %s application %s: not found", action, application_id)
            return TransitionResult(
                application_id=application_id,
                error=TransitionError(
                    kind=TransitionErrorKind.NOT_FOUND,
                    message=f"Application {application_id} not found",
                ),
            )

        previous_status = current.raw_status
        if previous_status == new_status:
            # Already there; nothing written, nothing to invalidate
            return TransitionResult(
                application_id=application_id,
                previous_status=previous_status,
                new_status=new_status,
            )

        try:
            updated = await self.store.update_status(
                application_id,
                new_status,
                expected_status=previous_status,
                action=action,
                reason=reason,
                actor=actor,
            )
        except UpstreamStoreError as exc:
            return self._upstream_failure(application_id, action, exc)

        if updated is None:
            logger.warning(
                "Cannot %s application %s: removed or modified concurrently (was %r)",
                action,
                application_id,
                previous_status,
            )
            return TransitionResult(
                application_id=application_id,
                error=TransitionError(
                    kind=TransitionErrorKind.NOT_FOUND,
                    message=f"Application {application_id} was removed or changed by someone else",
                    details={"expected_status": previous_status},
                ),
            )

        logger.info(
            "Application %s: %s %r -> %r",
            application_id,
            action,
            previous_status,
            new_status,
        )
        self._notify(application_id)

        return TransitionResult(
            application_id=application_id,
            previous_status=previous_status,
            new_status=new_status,
            stale=True,
        )

    def _notify(self, application_id: str) -> None:
        # Runs after the write is committed
        for listener in self.listeners:
            try:
                listener(application_id)
            except Exception:
                logger.exception("Invalidation listener failed for application %s", application_id)

    def _upstream_failure(self, application_id: str, action: str, exc: UpstreamStoreError) -> TransitionResult:
        logger.warning("Cannot %s application %s: store failure: %s", action, application_id, exc)
        return TransitionResult(
            application_id=application_id,
            error=TransitionError(
                kind=TransitionErrorKind.UPSTREAM,
                message=str(exc),
                details=exc.details,
            ),
        )
