"""
Pipeline router - stage buckets, counts and candidate transitions.

Both dashboards read from here: the admin view across all companies, the
client view scoped to one company.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from recruitment_pipeline.core.dependencies import get_application_store, get_transition_service
from recruitment_pipeline.core.stages import metadata, stages
from recruitment_pipeline.errors import AppError, raise_app_error
from recruitment_pipeline.schemas.job_application import StatusChange
from recruitment_pipeline.schemas.pipeline import (
    AdvanceRequest,
    PipelineRead,
    RejectRequest,
    StageBucketRead,
    StageCountsRead,
    StageRead,
    TransitionRead,
)
from recruitment_pipeline.services.application_store import ApplicationStore, UpstreamStoreError
from recruitment_pipeline.services.pipeline_aggregator import PipelineSnapshot, aggregate
from recruitment_pipeline.services.transition_service import (
    TransitionErrorKind,
    TransitionResult,
    TransitionService,
)

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


async def _load_snapshot(store: ApplicationStore, company: Optional[str]) -> PipelineSnapshot:
    try:
        records = await store.fetch_applications(company=company)
    except UpstreamStoreError as exc:
        raise AppError(
            status.HTTP_502_BAD_GATEWAY,
            "upstream_store_error",
            str(exc),
            exc.details,
        ) from exc
    return aggregate(records)


def _pipeline_read(snapshot: PipelineSnapshot, company: Optional[str]) -> PipelineRead:
    buckets = []
    for stage in stages():
        meta = metadata(stage)
        buckets.append(
            StageBucketRead(
                stage=stage.value,
                label=meta.label,
                display_order=meta.display_order,
                tier=meta.tier,
                count=snapshot.counts[stage],
                applications=snapshot.membership[stage],
            )
        )
    return PipelineRead(
        company=company,
        stages=buckets,
        counts={stage.value: count for stage, count in snapshot.counts.items()},
        total=snapshot.total,
        excluded_count=snapshot.excluded_count,
        unmapped_count=len(snapshot.unmapped),
        unmapped=snapshot.unmapped,
    )


def _transition_read(result: TransitionResult) -> TransitionRead:
    if result.error is not None:
        if result.error.kind is TransitionErrorKind.NOT_FOUND:
            raise_app_error(
                status.HTTP_404_NOT_FOUND,
                "application_not_found",
                result.error.message,
                result.error.details or None,
            )
        raise_app_error(
            status.HTTP_502_BAD_GATEWAY,
            "upstream_store_error",
            result.error.message,
            result.error.details or None,
        )
    return TransitionRead(
        application_id=result.application_id,
        previous_status=result.previous_status,
        new_status=result.new_status,
        stale=result.stale,
    )


@router.get("/stages", response_model=List[StageRead])
async def list_stages():
    """List pipeline stages in display order."""
    return [
        StageRead(
            stage=stage.value,
            label=metadata(stage).label,
            display_order=metadata(stage).display_order,
            tier=metadata(stage).tier,
        )
        for stage in stages()
    ]


@router.get("", response_model=PipelineRead)
async def get_pipeline(store: ApplicationStore = Depends(get_application_store)):
    """
    Admin pipeline: every application across all companies.

    Applications with a status the engine does not recognise are returned
    under `unmapped`, not in any stage.
    """
    snapshot = await _load_snapshot(store, None)
    return _pipeline_read(snapshot, None)


@router.get("/counts", response_model=StageCountsRead)
async def get_pipeline_counts(
    company: Optional[str] = Query(None, min_length=1),
    store: ApplicationStore = Depends(get_application_store),
):
    """Per-stage counts, optionally for one company."""
    snapshot = await _load_snapshot(store, company)
    return StageCountsRead(
        company=company,
        counts={stage.value: count for stage, count in snapshot.counts.items()},
        total=snapshot.total,
        unmapped_count=len(snapshot.unmapped),
    )


@router.get("/clients/{company}", response_model=PipelineRead)
async def get_client_pipeline(
    company: str,
    store: ApplicationStore = Depends(get_application_store),
):
    """Client pipeline: applications for one company (case-insensitive)."""
    snapshot = await _load_snapshot(store, company)
    return _pipeline_read(snapshot, company)


@router.post("/applications/{application_id}/advance", response_model=TransitionRead)
async def advance_application(
    application_id: str,
    request: Optional[AdvanceRequest] = None,
    service: TransitionService = Depends(get_transition_service),
):
    """Move a candidate to the selected status."""
    actor = request.actor if request else None
    result = await service.advance(application_id, actor=actor)
    return _transition_read(result)


@router.post("/applications/{application_id}/reject", response_model=TransitionRead)
async def reject_application(
    application_id: str,
    request: Optional[RejectRequest] = None,
    service: TransitionService = Depends(get_transition_service),
):
    """Reject a candidate, optionally with a reason kept in the audit trail."""
    request = request or RejectRequest()
    result = await service.reject(application_id, reason=request.reason, actor=request.actor)
    return _transition_read(result)


@router.get("/applications/{application_id}/history", response_model=List[StatusChange])
async def get_application_history(
    application_id: str,
    store: ApplicationStore = Depends(get_application_store),
):
    """Status transitions recorded for an application, oldest first."""
    try:
        return await store.status_history(application_id)
    except UpstreamStoreError as exc:
        raise AppError(
            status.HTTP_502_BAD_GATEWAY,
            "upstream_store_error",
            str(exc),
            exc.details,
        ) from exc
